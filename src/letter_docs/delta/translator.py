"""Translate editor deltas into Google Docs batchUpdate requests.

A delta is an ordered list of insert operations, each optionally carrying
character attributes::

    [{"insert": "Hi "}, {"insert": "Bob", "attributes": {"bold": True}}]

Each insert becomes an ``insertText`` request at the running cursor, followed
by an ``updateTextStyle`` request over the same range when the operation is
bold, italic or underlined. Google Docs reserves index 0 for the start of the
body, so the cursor starts at 1, and it measures indexes in UTF-16 code units.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from letter_docs.delta.exceptions import UnsupportedFormatError
from letter_docs.delta.requests import DocumentRequest, InsertText, UpdateTextStyle

logger = logging.getLogger(__name__)

# Index of the first writable position in a new document body
DOCUMENT_START_INDEX = 1

# Style names applied, in the order they appear in the ``fields`` mask
STYLE_ATTRIBUTES = ("bold", "italic", "underline")


@dataclass(frozen=True)
class InsertOp:
    """A recognized insert operation."""

    text: str
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def length(self) -> int:
        return utf16_len(self.text)


def utf16_len(text: str) -> int:
    """Length of ``text`` in UTF-16 code units.

    Lone surrogates (valid in editor strings decoded from JSON) count as one unit.
    """
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def parse_operation(raw: Any) -> InsertOp | None:
    """Classify a raw delta operation.

    Returns:
        InsertOp for a text insert, or None for anything this translator
        does not handle (missing or empty ``insert``, embeds, non-mappings).
    """
    if not isinstance(raw, Mapping):
        return None

    text = raw.get("insert")
    if not isinstance(text, str) or not text:
        return None

    attributes = raw.get("attributes")
    if not isinstance(attributes, Mapping):
        attributes = {}

    return InsertOp(text=text, attributes=dict(attributes))


def text_style_for(attributes: Mapping[str, Any]) -> tuple[dict[str, bool], tuple[str, ...]]:
    """Build the textStyle map and fields mask for an operation's attributes."""
    fields = tuple(name for name in STYLE_ATTRIBUTES if attributes.get(name))
    return {name: True for name in fields}, fields


def translate(operations: Iterable[Any]) -> list[DocumentRequest]:
    """Translate delta operations into ordered document requests.

    Args:
        operations: Delta ``ops`` sequence.

    Returns:
        InsertText / UpdateTextStyle requests in application order.
    """
    requests: list[DocumentRequest] = []
    cursor = DOCUMENT_START_INDEX

    for position, raw in enumerate(operations):
        op = parse_operation(raw)
        if op is None:
            logger.debug(f"Skipping unsupported delta operation at position {position}")
            continue

        requests.append(InsertText(location=cursor, text=op.text))

        style, fields = text_style_for(op.attributes)
        if fields:
            requests.append(
                UpdateTextStyle(
                    start=cursor,
                    end=cursor + op.length,
                    style=style,
                    fields=fields,
                )
            )

        cursor += op.length

    return requests


def extract_ops(content: Any) -> list[Any]:
    """Validate editor content and return its delta operations.

    Args:
        content: ``{"textValue": str, "delta": {"ops": [...]}}`` or its JSON string.

    Returns:
        The ``delta.ops`` list.

    Raises:
        UnsupportedFormatError: If the content does not have that shape.
    """
    if isinstance(content, str):
        try:
            content = json.loads(content)
        except json.JSONDecodeError as e:
            raise UnsupportedFormatError(f"content is not valid JSON ({e})") from e

    if not isinstance(content, Mapping):
        raise UnsupportedFormatError("content must be an object")

    text_value = content.get("textValue")
    if not isinstance(text_value, str) or not text_value:
        raise UnsupportedFormatError("missing textValue")

    delta = content.get("delta")
    if not isinstance(delta, Mapping):
        raise UnsupportedFormatError("missing delta")

    ops = delta.get("ops")
    if not isinstance(ops, list):
        raise UnsupportedFormatError("delta.ops must be a list")

    return ops


def build_requests(content: Any) -> list[dict[str, Any]]:
    """Translate editor content into a batchUpdate ``requests`` body.

    Raises:
        UnsupportedFormatError: If the content does not have the editor shape.
    """
    return [request.to_api() for request in translate(extract_ops(content))]
