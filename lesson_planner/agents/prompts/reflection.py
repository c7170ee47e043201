"""
Post-lesson reflection prompts.
The teacher answers one of a fixed set of questions about the finished plan;
the follow-up prompt turns the answer into a concrete insight.
"""

REFLECTION_QUESTIONS: dict[int, str] = {
    1: "แผนการจัดการเรียนรู้นี้นำไปใช้ได้จริงในห้องเรียนของคุณมากน้อยเพียงใด",
    2: "คุณคาดว่าผลลัพธ์การเรียนรู้ของนักเรียนจะเป็นอย่างไรเมื่อใช้แผนนี้",
    3: "กิจกรรมสอดคล้องกับจุดประสงค์การเรียนรู้มากน้อยเพียงใด",
    4: "โครงสร้างและลำดับขั้นตอนของแผนเหมาะสมหรือไม่ อย่างไร",
    5: "จุดอ่อนหรือสิ่งที่ควรปรับปรุงของแผนนี้คืออะไร",
}

REFLECTION_SYSTEM_PROMPT = "คุณคือศึกษานิเทศก์ที่ช่วยครูสะท้อนคิดแผนการสอน ตอบเป็น JSON เท่านั้น"

REFLECTION_FOLLOWUP_PROMPT = """ครูได้ตอบคำถามสะท้อนคิดเกี่ยวกับแผนการจัดการเรียนรู้

**คำถาม:** {question}
**คำตอบของครู:** {answer}

**จุดประสงค์การเรียนรู้:**
{objectives}

**กิจกรรมการเรียนรู้:**
{lesson_plan}

วิเคราะห์คำตอบของครูและให้ข้อเสนอแนะที่นำไปปรับแผนได้ทันที

**ตอบเป็น JSON object:**
{{
  "insight": "ข้อสังเกตสำคัญจากคำตอบของครู",
  "suggestions": ["ข้อเสนอแนะ 1", "ข้อเสนอแนะ 2"]
}}
"""
