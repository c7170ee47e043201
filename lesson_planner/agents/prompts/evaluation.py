"""
Evaluation rubric prompt template.
"""

EVALUATION_SYSTEM_PROMPT = "คุณคือผู้เชี่ยวชาญการวัดและประเมินผลการเรียนรู้ ตอบเป็น JSON เท่านั้น"

EVALUATION_DESIGN_PROMPT = """ออกแบบการวัดและประเมินผลสำหรับแผนการจัดการเรียนรู้ต่อไปนี้

**กิจกรรมการเรียนรู้:**
{lesson_plan}

**ตัวชี้วัดระหว่างทาง:**
{interim_indicators}

**ข้อกำหนด:**
- ทุกตัวชี้วัดต้องมีวิธีการวัด เครื่องมือ และเกณฑ์
- มีเกณฑ์การให้คะแนนแบบรูบริก 4 ระดับ (4 ดีมาก, 3 ดี, 2 พอใช้, 1 ปรับปรุง)
- รองรับผู้เรียนที่หลากหลายด้วยทางเลือกในการแสดงผลงาน

**ตอบเป็น JSON object:**
{{
  "การวัดและประเมินผล": [
    {{
      "ตัวชี้วัด": "...",
      "วิธีการวัด": "...",
      "เครื่องมือ": "...",
      "เกณฑ์การประเมิน": {{"4": "...", "3": "...", "2": "...", "1": "..."}}
    }}
  ],
  "เกณฑ์การผ่าน": "..."
}}
"""
