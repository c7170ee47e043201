"""
Activity design prompt template.
Builds the nested UDL / inclusive-classroom activity plan, grounded in the
enrichment bundle gathered before the call.

Leaf step titles carry their duration as "(N นาที)" so the plan can be
checked against the available instructional minutes afterwards.
"""

ACTIVITY_SYSTEM_PROMPT = (
    "คุณคือผู้เชี่ยวชาญด้านการออกแบบกระบวนการจัดการเรียนรู้ UDL และ Inclusive Education "
    "ที่มีข้อมูลเชิงลึกจากการค้นคว้า ตอบเป็น JSON เท่านั้น"
)

ACTIVITY_DESIGN_PROMPT = """ออกแบบกระบวนการจัดการเรียนรู้แบบ UDL โดยคำนึงถึงความแตกต่างของนักเรียนแต่ละประเภทในห้อง (Inclusive Classroom)

**ข้อมูลพื้นฐาน:**
- เนื้อหา: {content}
- จำนวนชั่วโมงทั้งหมดในการสอน: ({study_period} ชั่วโมง)
- จำนวนนักเรียน: {num_students} คน
- ประเภทนักเรียน: {student_types}

**ข้อมูลเพิ่มเติมจากการค้นคว้า:**
1. ตัวอย่างกระบวนการการจัดกิจกรรมการสอน:
{teaching_process_examples}

2. รายละเอียดเชิงลึกของบทเรียน:
{lesson_details}

3. กลยุทธ์ UDL ที่เหมาะสม:
{udl_strategies}

4. กลยุทธ์ Inclusive Classroom:
{inclusive_strategies}

**คำแนะนำการออกแบบ:**
- นำตัวอย่างกระบวนการการสอนมาปรับใช้ให้เหมาะสม
- ผสมผสานกลยุทธ์ UDL และ Inclusive ในทุกขั้นตอน
- ทุกกิจกรรมต้องสอดคล้องกับสาระและตัวชี้วัด และมีเป้าหมายระดับวิเคราะห์ ประเมินค่า หรือสร้างสรรค์
- ระบุเวลาของทุกขั้นตอนย่อยในชื่อขั้นตอนเป็น "(X นาที)" และรวมกันให้ครบ {total_minutes} นาทีพอดี

**ตอบเป็น JSON object แบบซ้อนกันตามโครงสร้างนี้:**
{{
  "กิจกรรมการเรียนรู้": {{
    "8.1 ชื่อขั้นตอนหลักที่ 1": {{
      "1 ชื่อขั้นตอนย่อยที่ 1 (X นาที)": {{
        "รายละเอียดการดำเนินการ": "...",
        "สื่อ/อุปกรณ์การสอน": "...",
        "บทบาทผู้เรียน": "...",
        "บทบาทครู": "...",
        "แนวทางการปรับกิจกรรมสำหรับผู้เรียนที่หลากหลาย": {{
          "1 ประเภทนักเรียนที่ 1": "วิธีการปรับกิจกรรม"
        }}
      }}
    }}
  }},
  "สื่อและอุปกรณ์": {{
    "1": "รายการสื่อและอุปกรณ์ที่ใช้ในกิจกรรม",
    "2": "เทคโนโลยีและแอปพลิเคชันที่ใช้",
    "3": "วัสดุสำหรับการทดลองหรือกิจกรรมสร้างสรรค์"
  }},
  "การใช้ข้อมูลจากการค้นคว้า": {{
    "ตัวอย่างกระบวนการที่นำมาใช้": "...",
    "กลยุทธ์ UDL ที่ใช้": "...",
    "กลยุทธ์ Inclusive ที่ใช้": "..."
  }}
}}
"""
