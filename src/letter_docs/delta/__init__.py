"""Editor delta to Google Docs request translation.

Usage:
    from letter_docs.delta import build_requests, translate

    ops = [{"insert": "Hi "}, {"insert": "Bob", "attributes": {"bold": True}}]
    requests = translate(ops)

    # Validate editor content and produce the batchUpdate body
    body = {"requests": build_requests({"textValue": "Hi Bob", "delta": {"ops": ops}})}
"""

from __future__ import annotations

from letter_docs.delta.exceptions import UnsupportedFormatError
from letter_docs.delta.requests import DocumentRequest, InsertText, UpdateTextStyle
from letter_docs.delta.translator import (
    InsertOp,
    build_requests,
    extract_ops,
    parse_operation,
    translate,
    utf16_len,
)

__all__ = [
    "DocumentRequest",
    "InsertOp",
    "InsertText",
    "UnsupportedFormatError",
    "UpdateTextStyle",
    "build_requests",
    "extract_ops",
    "parse_operation",
    "translate",
    "utf16_len",
]
