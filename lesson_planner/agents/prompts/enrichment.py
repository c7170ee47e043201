"""
Enrichment prompts.
Distill web search snippets into teaching-process examples, lesson details
and UDL / inclusive strategies. Each has a reasoning-only variant used when
there are no search results to ground it.
"""

TEACHING_PROCESS_SYSTEM_PROMPT = (
    "คุณคือผู้เชี่ยวชาญด้านวิธีการสอน วิเคราะห์ข้อมูลจากการค้นหาและสกัดตัวอย่างกระบวนการจัดกิจกรรมการสอนที่เหมาะสม"
)

TEACHING_PROCESS_PROMPT = """จากผลการค้นหา: {search_results}

วิเคราะห์และให้ตัวอย่างกระบวนการการจัดกิจกรรมการสอนที่เหมาะสมสำหรับ:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ระดับ: {level}

ให้ 4-5 ตัวอย่างกระบวนการที่หลากหลาย เช่น 5E Model, Problem-Based Learning, Active Learning, Inquiry-Based Learning

ตอบเป็น JSON array ของ string:
["กระบวนการที่1 พร้อมคำอธิบายสั้น", "กระบวนการที่2 พร้อมคำอธิบายสั้น"]
"""

TEACHING_PROCESS_REASONING_PROMPT = """ออกแบบตัวอย่างกระบวนการการจัดกิจกรรมการสอนสำหรับ:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ระดับ: {level}

ให้ 3 ตัวอย่างกระบวนการที่แตกต่างกัน เช่น 5E Model, Problem-Based Learning, หรือ Active Learning

ตอบเป็น JSON array: ["กระบวนการที่1", "กระบวนการที่2", "กระบวนการที่3"]
"""

STRATEGIES_SYSTEM_PROMPT = (
    "คุณคือผู้เชี่ยวชาญด้าน UDL และ Inclusive Education ให้กลยุทธ์ที่เหมาะสม เฉพาะเจาะจง และใช้ได้จริง"
)

STRATEGIES_PROMPT = """จากผลการค้นหา: {search_results}

วิเคราะห์และให้กลยุทธ์ UDL และ Inclusive Classroom สำหรับ:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ประเภทนักเรียน: {student_types}

ตอบเป็น JSON:
{{
  "udlStrategies": ["กลยุทธ์ UDL พร้อมตัวอย่างการใช้งาน (4 ข้อ)"],
  "inclusiveStrategies": ["กลยุทธ์ Inclusive พร้อมวิธีการปฏิบัติ (4 ข้อ)"]
}}
"""

STRATEGIES_REASONING_PROMPT = """ออกแบบกลยุทธ์ UDL และ Inclusive สำหรับ:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ประเภทนักเรียน: {student_types}

ตอบเป็น JSON:
{{
  "udlStrategies": ["กลยุทธ์ UDL เฉพาะเจาะจง 3 อย่าง"],
  "inclusiveStrategies": ["กลยุทธ์ Inclusive เฉพาะเจาะจง 3 อย่าง"]
}}
"""

LESSON_DETAILS_SYSTEM_PROMPT = "คุณคือครูผู้เชี่ยวชาญ ให้รายละเอียดเชิงลึกเกี่ยวกับเนื้อหาบทเรียน"

LESSON_DETAILS_PROMPT = """จากข้อมูลการค้นหา: {search_results}

ให้รายละเอียดเชิงลึกเกี่ยวกับบทเรียน:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ระดับ: {level}

รวมถึงแนวคิดหลัก จุดที่นักเรียนมักเข้าใจผิด ความเชื่อมโยงกับชีวิตประจำวัน และกิจกรรมที่เหมาะสมจากข้อมูลที่ค้นพบ

ตอบเป็นย่อหน้าเดียวที่ครอบคลุมแต่กระชับ
"""

LESSON_DETAILS_REASONING_PROMPT = """ให้รายละเอียดเชิงลึกเกี่ยวกับบทเรียน:
- วิชา: {subject}
- หัวข้อ: {lesson_topic}
- ระดับ: {level}

รวมถึงแนวคิดหลัก ความยากง่าย การเชื่อมโยงกับชีวิตจริง และจุดสำคัญที่ต้องเน้น ตอบเป็นย่อหน้าเดียว
"""
