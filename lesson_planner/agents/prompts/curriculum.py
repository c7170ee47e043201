"""
Curriculum lookup prompts.
Extracts standard, indicators and learning area from retrieved curriculum rows,
then derives learning content and key content from them.
"""

CURRICULUM_SYSTEM_PROMPT = (
    "คุณคือผู้เชี่ยวชาญหลักสูตรแกนกลางการศึกษาขั้นพื้นฐาน "
    "ใช้เฉพาะข้อมูลหลักสูตรที่ให้มาเท่านั้น ตอบเป็น JSON เท่านั้น"
)

CURRICULUM_QUERY_PROMPT = """จากข้อมูลหลักสูตรต่อไปนี้:

{context}

ค้นหามาตรฐานและตัวชี้วัดที่ตรงกับ:
- กลุ่มสาระ: {subject}
- เรื่อง: {lesson_topic}
- ระดับชั้น: {level}

**กติกา:**
- ใช้ข้อความจากข้อมูลหลักสูตรข้างต้นเท่านั้น ห้ามแต่งเพิ่ม
- ถ้าไม่พบข้อมูลที่ตรงกับเรื่องและระดับชั้น ให้ตอบ {{"found": false, "reason": "ไม่พบข้อมูลหลักสูตร"}}

**ตอบเป็น JSON object ตามโครงสร้างนี้:**
{{
  "found": true,
  "กลุ่มสาระการเรียนรู้": "ชื่อกลุ่มสาระ",
  "มาตรฐาน": "รหัสและข้อความมาตรฐาน",
  "ตัวชี้วัดระหว่างทาง": ["ตัวชี้วัด 1", "ตัวชี้วัด 2"],
  "ตัวชี้วัดปลายทาง": ["ตัวชี้วัด 1"]
}}
"""

CONTENT_SYSTEM_PROMPT = "คุณคือครูผู้เชี่ยวชาญการออกแบบเนื้อหาตามหลักสูตร ตอบเป็น JSON เท่านั้น"

CURRICULUM_CONTENT_PROMPT = """จากมาตรฐานและตัวชี้วัดต่อไปนี้:
- มาตรฐาน: {standard}
- ตัวชี้วัดระหว่างทาง: {interim_indicators}
- ตัวชี้วัดปลายทาง: {final_indicators}

สรุปสาระการเรียนรู้และสาระสำคัญของบทเรียน

**ตอบเป็น JSON object ตามโครงสร้างนี้:**
{{
  "สาระการเรียนรู้": ["หัวข้อเนื้อหา 1", "หัวข้อเนื้อหา 2"],
  "สาระสำคัญ": "ความเข้าใจที่คงทนของบทเรียนในหนึ่งย่อหน้า"
}}
"""
