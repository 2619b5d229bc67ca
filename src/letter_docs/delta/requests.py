"""Google Docs batchUpdate request values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InsertText:
    """Insert ``text`` at absolute document index ``location``."""

    location: int
    text: str

    def to_api(self) -> dict[str, Any]:
        """Serialize to the Docs API wire format."""
        return {
            "insertText": {
                "location": {"index": self.location},
                "text": self.text,
            }
        }


@dataclass(frozen=True)
class UpdateTextStyle:
    """Apply character style to the range ``[start, end)``."""

    start: int
    end: int
    style: dict[str, bool] = field(default_factory=dict)
    fields: tuple[str, ...] = ()

    def to_api(self) -> dict[str, Any]:
        """Serialize to the Docs API wire format."""
        return {
            "updateTextStyle": {
                "range": {
                    "startIndex": self.start,
                    "endIndex": self.end,
                },
                "textStyle": dict(self.style),
                "fields": ",".join(self.fields),
            }
        }


DocumentRequest = InsertText | UpdateTextStyle
