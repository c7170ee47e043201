"""
Utility functions for extracting JSON payloads from LLM responses.
Handles markdown code blocks and commentary before or after the JSON.
"""

import json
import logging
import re
from collections.abc import Iterable

from lesson_planner.core.exceptions import MalformedOutput

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()

# Backslashes that do not start a valid JSON escape sequence
_INVALID_ESCAPE = re.compile(r'\\(?![nrtbf"/\\u])')


def _candidates(text: str, expected_type: str | None) -> Iterable[int]:
    """Yield every index where a JSON object or array could start."""
    openers = {"object": "{", "array": "["}.get(expected_type or "", "{[")
    for idx, char in enumerate(text):
        if char in openers:
            yield idx


def _scan(text: str, expected_type: str | None) -> dict | list | None:
    for start in _candidates(text, expected_type):
        try:
            value, _end = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if isinstance(value, (dict, list)):
            return value
    return None


def extract_json(raw_text: str, expected_type: str | None = None) -> dict | list:
    """
    Return the first well-formed JSON object or array found anywhere in raw_text.

    Args:
        raw_text: Raw response text from the LLM
        expected_type: "object" or "array" to only accept that shape, None for either

    Returns:
        Parsed JSON (dict or list)

    Raises:
        MalformedOutput: If no JSON payload can be found. Carries the raw text.
    """
    if not raw_text or not raw_text.strip():
        raise MalformedOutput("Empty response text", raw_text=raw_text or "")

    value = _scan(raw_text, expected_type)
    if value is not None:
        return value

    # Models sometimes emit Windows paths or LaTeX with bare backslashes
    repaired = _INVALID_ESCAPE.sub(r"\\\\", raw_text)
    if repaired != raw_text:
        value = _scan(repaired, expected_type)
        if value is not None:
            logger.warning("⚠️  Parsed JSON after fixing escape sequences")
            return value

    logger.debug(f"   No JSON payload in response: {raw_text[:500]}")
    raise MalformedOutput("No valid JSON payload found in model output", raw_text=raw_text)


def extract_json_object(raw_text: str, required_keys: Iterable[str] = ()) -> dict:
    """
    Extract the first JSON object and check it carries every required key.

    Raises:
        MalformedOutput: If no object is found or required keys are absent.
    """
    value = extract_json(raw_text, expected_type="object")
    missing = [key for key in required_keys if key not in value]
    if missing:
        raise MalformedOutput(
            f"JSON object is missing required keys: {', '.join(missing)}",
            raw_text=raw_text,
        )
    return value
