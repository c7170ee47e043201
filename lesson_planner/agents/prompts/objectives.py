"""
Learning objectives prompt template.
"""

OBJECTIVES_SYSTEM_PROMPT = "คุณคือผู้เชี่ยวชาญการเขียนจุดประสงค์การเรียนรู้ตาม Bloom's Taxonomy ตอบเป็น JSON เท่านั้น"

OBJECTIVES_PROMPT = """เขียนจุดประสงค์การเรียนรู้สำหรับ:
- วิชา: {subject}
- ระดับชั้น: {level}
- สาระการเรียนรู้: {content}
- ตัวชี้วัดระหว่างทาง: {interim_indicators}
- ตัวชี้วัดปลายทาง: {final_indicators}

**ข้อกำหนด:**
- แยกด้านความรู้ (K) ทักษะกระบวนการ (P) และเจตคติ (A)
- ทุกข้อต้องวัดได้และสอดคล้องกับตัวชี้วัด

**ตอบเป็น JSON object:**
{{
  "จุดประสงค์การเรียนรู้": {{
    "K": ["..."],
    "P": ["..."],
    "A": ["..."]
  }}
}}
"""
