"""
Tests for extracting JSON payloads from model output.
"""

import pytest

from lesson_planner.core.exceptions import MalformedOutput
from lesson_planner.utils.json_parser import extract_json, extract_json_object


class TestExtractJson:
    def test_plain_object(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_markdown_fenced_block(self):
        raw = 'นี่คือคำตอบ\n```json\n{"มาตรฐาน": "ว 1.2"}\n```\nขอบคุณครับ'
        assert extract_json(raw) == {"มาตรฐาน": "ว 1.2"}

    def test_commentary_with_braces_before_payload(self):
        raw = 'Note {not json here} then {"ok": true}'
        assert extract_json(raw) == {"ok": True}

    def test_nested_structures_survive(self):
        raw = 'prefix {"a": {"b": [1, 2, {"c": "}"}]}} suffix'
        assert extract_json(raw) == {"a": {"b": [1, 2, {"c": "}"}]}}

    def test_array_payload(self):
        assert extract_json('ตัวอย่าง: ["5E", "PBL"]') == ["5E", "PBL"]

    def test_expected_type_skips_other_shapes(self):
        raw = '["x"] and {"y": 1}'
        assert extract_json(raw, expected_type="object") == {"y": 1}
        assert extract_json(raw, expected_type="array") == ["x"]

    def test_invalid_escape_is_repaired(self):
        raw = r'{"path": "C:\data\ไฟล์"}'
        assert extract_json(raw) == {"path": "C:\\data\\ไฟล์"}

    def test_no_payload_raises_with_raw_text(self):
        with pytest.raises(MalformedOutput) as exc_info:
            extract_json("ขออภัย ไม่สามารถตอบได้")
        assert exc_info.value.raw_text == "ขออภัย ไม่สามารถตอบได้"

    def test_empty_text_raises(self):
        with pytest.raises(MalformedOutput, match="Empty"):
            extract_json("   ")


class TestExtractJsonObject:
    def test_required_keys_present(self):
        assert extract_json_object('{"a": 1, "b": 2}', ["a", "b"]) == {"a": 1, "b": 2}

    def test_missing_required_key(self):
        with pytest.raises(MalformedOutput, match="b"):
            extract_json_object('{"a": 1}', ["a", "b"])

    def test_array_only_is_malformed(self):
        with pytest.raises(MalformedOutput):
            extract_json_object('[1, 2, 3]')
