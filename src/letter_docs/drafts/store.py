"""JSON-file draft store."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class EmptyDraftError(ValueError):
    """Raised when saving a draft with no text."""

    def __init__(self):
        super().__init__("Cannot save an empty draft.")


def preview(draft: dict[str, Any], length: int = 10) -> str:
    """Short label for a draft: the start of its text, or "Empty"."""
    content = draft.get("content")
    text = content.get("textValue") if isinstance(content, dict) else None
    if isinstance(text, str) and text:
        return text[:length]
    return "Empty"


class DraftStore:
    """Flat list of draft records kept in a JSON file.

    Each record is ``{"id": int, "content": {...}, "timestamp": str}``. The
    content is stored as given; only its ``textValue`` is looked at. A file
    that does not hold a JSON list is treated as corrupt and reset.

    Usage:
        store = DraftStore("drafts.json")
        draft = store.save({"textValue": "Dear Bob", "delta": {"ops": [...]}})
        store.save(updated_content, draft_id=draft["id"])
        store.delete(draft["id"])
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list(self) -> list[dict[str, Any]]:
        """Return all drafts, resetting unreadable storage to an empty list."""
        if not self.path.exists():
            return []

        try:
            with open(self.path) as f:
                drafts = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading drafts from {self.path}: {e}")
            self._reset()
            return []

        if not isinstance(drafts, list):
            logger.warning(f"Drafts in {self.path} are invalid, resetting...")
            self._reset()
            return []

        return drafts

    def get(self, draft_id: int) -> dict[str, Any] | None:
        """Find a draft by id."""
        for draft in self.list():
            if isinstance(draft, dict) and draft.get("id") == draft_id:
                return draft
        return None

    def save(self, content: dict[str, Any], draft_id: int | None = None) -> dict[str, Any]:
        """Save new content, or replace the draft with ``draft_id``.

        Args:
            content: Editor content (``textValue`` + ``delta``).
            draft_id: Existing draft to overwrite. A new draft is appended
                when None or when no draft has that id.

        Returns:
            The stored draft record.

        Raises:
            EmptyDraftError: If ``textValue`` is missing or blank.
        """
        text = content.get("textValue") if isinstance(content, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise EmptyDraftError()

        drafts = self.list()
        draft = {
            "id": draft_id if draft_id is not None else self._new_id(drafts),
            "content": dict(content),
            "timestamp": datetime.now().strftime(TIMESTAMP_FORMAT),
        }

        for i, existing in enumerate(drafts):
            if isinstance(existing, dict) and existing.get("id") == draft["id"]:
                drafts[i] = draft
                logger.info(f"Draft {draft['id']} updated")
                break
        else:
            drafts.append(draft)
            logger.info(f"Draft {draft['id']} saved")

        self._write(drafts)
        return draft

    def delete(self, draft_id: int) -> bool:
        """Delete a draft.

        Returns:
            True if a draft was removed.
        """
        drafts = self.list()
        remaining = [d for d in drafts if not (isinstance(d, dict) and d.get("id") == draft_id)]
        if len(remaining) == len(drafts):
            return False

        self._write(remaining)
        logger.info(f"Draft {draft_id} deleted")
        return True

    def _new_id(self, drafts: list[Any]) -> int:
        """Millisecond timestamp, bumped past any id already taken."""
        taken = {d.get("id") for d in drafts if isinstance(d, dict)}
        draft_id = int(time.time() * 1000)
        while draft_id in taken:
            draft_id += 1
        return draft_id

    def _reset(self) -> None:
        self._write([])

    def _write(self, drafts: list[Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(drafts, f, indent=2)
