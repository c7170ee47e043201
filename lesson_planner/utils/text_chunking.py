import re
from typing import List

from lesson_planner.config import settings

# Thai block (ก-๙), Latin letters and digits
_THAI = "ก-๙"
_THAI_LATIN = re.compile(rf"([{_THAI}])([A-Za-z])")
_LATIN_THAI = re.compile(rf"([A-Za-z])([{_THAI}])")
_LETTER_DIGIT = re.compile(rf"([{_THAI}A-Za-z])(\d)")
_DIGIT_LETTER = re.compile(rf"(\d)([{_THAI}A-Za-z])")
_DELIMITERS = re.compile(r"[,;|]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """
    Make curriculum rows searchable.

    Inserts a space wherever Thai, Latin and digit runs touch, turns CSV
    delimiters into spaces and collapses whitespace.
    """
    text = _THAI_LATIN.sub(r"\1 \2", text)
    text = _LATIN_THAI.sub(r"\1 \2", text)
    text = _LETTER_DIGIT.sub(r"\1 \2", text)
    text = _DIGIT_LETTER.sub(r"\1 \2", text)
    text = _DELIMITERS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def chunk_text(
    content: str,
    *,
    chunk_size: int | None = None,
    chunk_overlap: int | None = None,
) -> List[str]:
    """
    Split text into overlapping fixed-size character windows.

    Every window except possibly the last is exactly chunk_size characters,
    and consecutive windows share chunk_overlap characters.
    """
    chunk_size = chunk_size or settings.chunk_size
    chunk_overlap = settings.chunk_overlap if chunk_overlap is None else chunk_overlap

    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be smaller than chunk_size")

    if not content:
        return []

    chunks: List[str] = []
    step = chunk_size - chunk_overlap
    start = 0

    while start < len(content):
        chunks.append(content[start:start + chunk_size])
        if start + chunk_size >= len(content):
            break
        start += step

    return chunks
