"""Google Drive API client.

Usage:
    from letter_docs.drive import DriveClient

    client = DriveClient()

    # Give an exported document its final name
    client.rename_file(doc_id, "My Styled Letter", GOOGLE_DOC_MIME_TYPE)
"""

from __future__ import annotations

from letter_docs.drive.client import GOOGLE_DOC_MIME_TYPE, DriveClient, DriveFile

__all__ = ["DriveClient", "DriveFile", "GOOGLE_DOC_MIME_TYPE"]
