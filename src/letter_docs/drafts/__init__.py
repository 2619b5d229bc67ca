"""Locally saved letter drafts.

Usage:
    from letter_docs.drafts import DraftStore

    store = DraftStore("drafts.json")
    draft = store.save({"textValue": "Dear Bob", "delta": {"ops": [{"insert": "Dear Bob"}]}})
    for draft in store.list():
        print(draft["id"], draft["timestamp"])
"""

from __future__ import annotations

from letter_docs.drafts.store import DraftStore, EmptyDraftError, preview

__all__ = ["DraftStore", "EmptyDraftError", "preview"]
