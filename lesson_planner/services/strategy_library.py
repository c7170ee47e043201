"""
Built-in pedagogical exemplars used when web search is unavailable,
plus the static defaults that guarantee a complete enrichment bundle.
"""

from lesson_planner.services.web_search import SearchResult

TEACHING_PROCESS_RESULTS = [
    SearchResult(
        "กระบวนการจัดการเรียนรู้แบบ 5E Model",
        "https://education.go.th/5e-model",
        "กระบวนการ 5E ประกอบด้วย Engage (จูงใจ), Explore (สำรวจ), Explain (อธิบาย), "
        "Elaborate (ขยายความรู้), Evaluate (ประเมิน) เน้นผู้เรียนเป็นสำคัญ",
        0.95,
    ),
    SearchResult(
        "Active Learning และการจัดกิจกรรมการเรียนรู้",
        "https://teachingmethods.org/active-learning",
        "Active Learning ให้ผู้เรียนมีส่วนร่วมผ่านการอภิปราย การทำงานกลุ่ม การแก้ปัญหา และการคิดวิเคราะห์",
        0.9,
    ),
    SearchResult(
        "Problem-Based Learning in Thai Education",
        "https://pbl-thailand.edu/methods",
        "การเรียนรู้จากปัญหาให้นักเรียนเรียนรู้ผ่านการแก้ปัญหาจริง พัฒนาทักษะการคิดและการประยุกต์ความรู้",
        0.85,
    ),
    SearchResult(
        "Inquiry-Based Learning Strategies",
        "https://inquiry-learning.edu/strategies",
        "การเรียนรู้แบบสืบเสาะหาความรู้ส่งเสริมให้ผู้เรียนตั้งคำถาม ค้นหาคำตอบ และสร้างความรู้ด้วยตนเอง",
        0.8,
    ),
]

UDL_RESULTS = [
    SearchResult(
        "UDL Guidelines and Implementation in Thailand",
        "https://udl-thailand.org/guidelines",
        "UDL มี 3 หลักการ: Multiple Means of Representation, Multiple Means of Engagement, "
        "Multiple Means of Action and Expression",
        0.95,
    ),
    SearchResult(
        "UDL in Thai Classroom Context",
        "https://thai-inclusive-ed.org/udl-classroom",
        "การใช้ UDL ในห้องเรียนไทยควรคำนึงถึงวัฒนธรรมการเรียนรู้ ภาษา และความหลากหลายของผู้เรียน",
        0.9,
    ),
    SearchResult(
        "Multiple Intelligence and UDL Integration",
        "https://multiple-intelligence.edu/udl",
        "การบูรณาการทฤษฎีพหุปัญญากับ UDL ช่วยออกแบบการเรียนรู้ที่ตอบสนองความแตกต่างของผู้เรียน",
        0.85,
    ),
]

INCLUSIVE_RESULTS = [
    SearchResult(
        "Inclusive Classroom Strategies for Thai Students",
        "https://inclusive-thailand.edu/strategies",
        "ห้องเรียนเปิดกว้างจัดสิ่งแวดล้อมที่รองรับความหลากหลาย ใช้กิจกรรมหลากหลาย และประเมินแบบหลายมิติ",
        0.9,
    ),
    SearchResult(
        "Differentiated Instruction in Practice",
        "https://differentiated-learning.org/practice",
        "Differentiated Instruction ปรับการสอนตามความสามารถ ความสนใจ และรูปแบบการเรียนรู้ของผู้เรียน",
        0.85,
    ),
    SearchResult(
        "Collaborative Learning for Diverse Classrooms",
        "https://collaborative-ed.org/diverse",
        "การเรียนรู้แบบร่วมมือช่วยให้ผู้เรียนเรียนรู้จากกัน เข้าใจความแตกต่าง และพัฒนาทักษะทางสังคม",
        0.8,
    ),
]

# (keywords, results); first match wins
_LIBRARY: list[tuple[tuple[str, ...], list[SearchResult]]] = [
    (("กระบวนการการจัดกิจกรรมการสอน", "teaching process", "teaching methodology"), TEACHING_PROCESS_RESULTS),
    (("UDL", "Universal Design"), UDL_RESULTS),
    (("inclusive classroom", "ห้องเรียนเปิดกว้าง", "ห้องเรียนแบบรวม"), INCLUSIVE_RESULTS),
]


def fallback_results(query: str) -> list[SearchResult]:
    """Return built-in exemplars whose keywords appear in the query, or an empty list."""
    for keywords, results in _LIBRARY:
        if any(keyword in query for keyword in keywords):
            return list(results)
    return []


DEFAULT_TEACHING_PROCESSES = [
    "5E Model: Engage (สร้างความสนใจ) → Explore (สำรวจ) → Explain (อธิบาย) → Elaborate (ขยายความรู้) → Evaluate (ประเมินผล)",
    "Problem-Based Learning: การเรียนรู้จากปัญหาจริง โดยให้นักเรียนระบุปัญหา วิเคราะห์ ค้นคว้า และแก้ไข",
    "Active Learning: การเรียนรู้เชิงรุกผ่านการอภิปราย กิจกรรมกลุ่ม และการทดลอง",
    "Inquiry-Based Learning: การเรียนรู้จากการตั้งคำถาม สืบเสาะหาคำตอบ และสรุปผล",
    "Collaborative Learning: การเรียนรู้แบบร่วมมือ เน้นการทำงานเป็นทีมและแลกเปลี่ยนความคิด",
]

DEFAULT_UDL_STRATEGIES = [
    "Multiple Means of Representation: ใช้สื่อที่หลากหลาย (ภาพ เสียง วิดีโอ แบบจำลอง) เพื่อนำเสนอเนื้อหา",
    "Multiple Means of Engagement: สร้างแรงจูงใจหลากหลาย เชื่อมโยงกับความสนใจและวัฒนธรรมของผู้เรียน",
    "Multiple Means of Action/Expression: เปิดทางเลือกให้ผู้เรียนแสดงความรู้ (เขียน พูด วาด สร้าง นำเสนอ)",
    "Flexible Learning Environment: จัดสิ่งแวดล้อมที่ยืดหยุ่น รองรับความต้องการของผู้เรียนที่หลากหลาย",
]

DEFAULT_INCLUSIVE_STRATEGIES = [
    "Differentiated Instruction: ปรับเนื้อหา กิจกรรม และการประเมินตามความสามารถของผู้เรียน",
    "Collaborative Learning Structures: จัดกลุ่มแบบผสมผสานเพื่อให้ทุกคนมีส่วนร่วมและเรียนรู้ซึ่งกันและกัน",
    "Peer Support Systems: ระบบเพื่อนช่วยเพื่อน และการเรียนรู้จากเพื่อน",
    "Multi-modal Assessment: การประเมินผลหลายรูปแบบที่เหมาะกับรูปแบบการเรียนรู้ของผู้เรียนแต่ละคน",
]


def default_lesson_details(subject: str, lesson_topic: str, level: str) -> str:
    return (
        f"เนื้อหา{subject} เรื่อง{lesson_topic} สำหรับผู้เรียนระดับ{level} "
        "ควรเน้นการเรียนรู้ที่เชื่อมโยงกับประสบการณ์จริง การคิดวิเคราะห์ และการประยุกต์ใช้ในชีวิตประจำวัน "
        "โดยคำนึงถึงความแตกต่างของผู้เรียนและการพัฒนาทักษะในศตวรรษที่ 21"
    )
