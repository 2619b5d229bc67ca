"""Tests for delta to Google Docs request translation."""

import json

import pytest

from letter_docs.delta import (
    InsertOp,
    InsertText,
    UnsupportedFormatError,
    UpdateTextStyle,
    build_requests,
    extract_ops,
    parse_operation,
    translate,
    utf16_len,
)


class TestTranslate:
    """Test translate() on delta operation lists."""

    def test_empty_ops(self):
        """Should produce no requests for an empty delta."""
        assert translate([]) == []

    def test_plain_inserts_use_cumulative_offsets(self):
        """Should place each insert after all previous text, starting at 1."""
        ops = [{"insert": "Dear "}, {"insert": "Bob"}, {"insert": ",\n"}]
        assert translate(ops) == [
            InsertText(location=1, text="Dear "),
            InsertText(location=6, text="Bob"),
            InsertText(location=9, text=",\n"),
        ]

    def test_bold_insert_emits_style_after_text(self):
        """Should follow the insert with a style request over the same range."""
        requests = translate([{"insert": "Bob", "attributes": {"bold": True}}])
        assert requests == [
            InsertText(location=1, text="Bob"),
            UpdateTextStyle(start=1, end=4, style={"bold": True}, fields=("bold",)),
        ]

    def test_end_to_end_example(self):
        """Should translate mixed plain and bold text."""
        ops = [{"insert": "Hi "}, {"insert": "Bob", "attributes": {"bold": True}}]
        assert [r.to_api() for r in translate(ops)] == [
            {"insertText": {"location": {"index": 1}, "text": "Hi "}},
            {"insertText": {"location": {"index": 4}, "text": "Bob"}},
            {
                "updateTextStyle": {
                    "range": {"startIndex": 4, "endIndex": 7},
                    "textStyle": {"bold": True},
                    "fields": "bold",
                }
            },
        ]

    def test_fields_order_is_fixed(self):
        """Should list fields as bold,italic,underline whatever the input order."""
        ops = [{"insert": "x", "attributes": {"underline": True, "italic": True, "bold": True}}]
        style_request = translate(ops)[1].to_api()["updateTextStyle"]
        assert style_request["fields"] == "bold,italic,underline"
        assert style_request["textStyle"] == {"bold": True, "italic": True, "underline": True}

    def test_false_attributes_are_not_applied(self):
        """Should ignore attributes set to false."""
        ops = [{"insert": "x", "attributes": {"bold": False, "italic": True}}]
        assert translate(ops)[1] == UpdateTextStyle(
            start=1, end=2, style={"italic": True}, fields=("italic",)
        )

    def test_unrecognized_attributes_emit_no_style(self):
        """Should emit only the insert when no recognized attribute is set."""
        ops = [{"insert": "red", "attributes": {"color": "red", "link": "https://x"}}]
        assert translate(ops) == [InsertText(location=1, text="red")]

    def test_unrecognized_attributes_are_dropped_from_style(self):
        """Should keep only recognized names in the style map."""
        ops = [{"insert": "x", "attributes": {"color": "red", "bold": True}}]
        assert translate(ops)[1].style == {"bold": True}

    def test_malformed_ops_are_skipped(self):
        """Should skip ops without text and leave the cursor unchanged."""
        ops = [
            {"insert": "A"},
            {"retain": 5},
            {"delete": 2},
            {"insert": ""},
            {"insert": {"image": "https://example.com/a.png"}},
            "not an op",
            None,
            {"insert": "B", "attributes": {"bold": True}},
        ]
        assert translate(ops) == [
            InsertText(location=1, text="A"),
            InsertText(location=2, text="B"),
            UpdateTextStyle(start=2, end=3, style={"bold": True}, fields=("bold",)),
        ]

    def test_non_mapping_attributes_are_ignored(self):
        """Should treat non-object attributes as absent."""
        assert translate([{"insert": "x", "attributes": ["bold"]}]) == [
            InsertText(location=1, text="x")
        ]

    def test_offsets_count_utf16_code_units(self):
        """Should advance by UTF-16 length so emoji shift later ranges by two."""
        ops = [{"insert": "😀 "}, {"insert": "café", "attributes": {"italic": True}}]
        assert translate(ops) == [
            InsertText(location=1, text="😀 "),
            InsertText(location=4, text="café"),
            UpdateTextStyle(start=4, end=8, style={"italic": True}, fields=("italic",)),
        ]

    def test_lone_surrogate_advances_cursor_by_one(self):
        """Should accept unpaired surrogates decoded from editor JSON."""
        ops = json.loads('[{"insert": "a\\ud83d"}, {"insert": "b", "attributes": {"bold": true}}]')
        assert translate(ops) == [
            InsertText(location=1, text="a\ud83d"),
            InsertText(location=3, text="b"),
            UpdateTextStyle(start=3, end=4, style={"bold": True}, fields=("bold",)),
        ]

    def test_translate_is_repeatable(self):
        """Should give identical output for repeated calls on the same input."""
        ops = [{"insert": "Hi "}, {"insert": "Bob", "attributes": {"bold": True}}]
        assert translate(ops) == translate(ops)

    def test_input_is_not_modified(self):
        """Should not mutate the operations it reads."""
        ops = [{"insert": "Bob", "attributes": {"bold": True, "color": "red"}}]
        snapshot = json.dumps(ops)
        translate(ops)
        assert json.dumps(ops) == snapshot


class TestParseOperation:
    """Test operation classification."""

    def test_insert_with_attributes(self):
        """Should parse text and attributes."""
        op = parse_operation({"insert": "Hi", "attributes": {"bold": True}})
        assert op == InsertOp(text="Hi", attributes={"bold": True})

    def test_missing_insert(self):
        """Should return None for ops without insert."""
        assert parse_operation({"attributes": {"bold": True}}) is None

    def test_utf16_len(self):
        """Should count surrogate pairs as two units."""
        assert utf16_len("abc") == 3
        assert utf16_len("😀") == 2
        assert utf16_len("") == 0
        assert utf16_len("\ud83d") == 1


class TestExtractOps:
    """Test top-level content validation."""

    def test_valid_content(self):
        """Should return the ops list."""
        ops = [{"insert": "Hi\n"}]
        assert extract_ops({"textValue": "Hi", "delta": {"ops": ops}}) is ops

    def test_json_string_content(self):
        """Should decode content sent as a JSON string."""
        content = json.dumps({"textValue": "Hi", "delta": {"ops": [{"insert": "Hi"}]}})
        assert extract_ops(content) == [{"insert": "Hi"}]

    @pytest.mark.parametrize(
        "content",
        [
            None,
            "not json",
            ["Hi"],
            {"delta": {"ops": []}},
            {"textValue": "", "delta": {"ops": []}},
            {"textValue": "Hi"},
            {"textValue": "Hi", "delta": None},
            {"textValue": "Hi", "delta": {}},
            {"textValue": "Hi", "delta": {"ops": "Hi"}},
        ],
    )
    def test_unsupported_content(self, content):
        """Should reject content without textValue and delta.ops."""
        with pytest.raises(UnsupportedFormatError, match="Unsupported content format"):
            extract_ops(content)

    def test_build_requests(self):
        """Should produce wire-format requests for valid content."""
        content = {"textValue": "Hi", "delta": {"ops": [{"insert": "Hi"}]}}
        assert build_requests(content) == [
            {"insertText": {"location": {"index": 1}, "text": "Hi"}}
        ]

    def test_build_requests_with_only_skipped_ops(self):
        """Should return an empty list when every op is skipped."""
        content = {"textValue": "x", "delta": {"ops": [{"retain": 1}]}}
        assert build_requests(content) == []
