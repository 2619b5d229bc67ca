"""Export editor content as a formatted Google Doc."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from letter_docs.config import get_letter_title
from letter_docs.delta import build_requests
from letter_docs.drive import GOOGLE_DOC_MIME_TYPE

logger = logging.getLogger(__name__)


class SaveLetterError(Exception):
    """Raised when a remote step of a letter export fails."""

    def __init__(self, stage: str, document_id: str | None = None):
        self.stage = stage
        self.document_id = document_id
        super().__init__(f"Failed to save letter during {stage}")


@dataclass
class SavedLetter:
    """Result of a successful export."""

    document_id: str
    title: str
    request_count: int
    url: str


class LetterExporter:
    """Create a Google Doc from editor content.

    The export runs four strictly ordered steps: validate and translate the
    content, create an empty document, apply the requests as one batch, and
    give the document its final name. Invalid content fails before any remote
    call. If a step fails after the document exists, the document is deleted
    so no empty letter is left behind in Drive.

    Usage:
        exporter = LetterExporter(DocsClient(), DriveClient())
        saved = exporter.save({"textValue": "Hi", "delta": {"ops": [{"insert": "Hi"}]}})
        print(saved.document_id)
    """

    def __init__(
        self,
        docs_client: Any,
        drive_client: Any,
        title: str | None = None,
        cleanup_on_failure: bool = True,
    ) -> None:
        """Initialize exporter.

        Args:
            docs_client: DocsClient (or compatible) used to create and fill the document.
            drive_client: DriveClient (or compatible) used to rename and clean up.
            title: Name of exported documents. Defaults to LETTER_TITLE.
            cleanup_on_failure: Delete the created document when a later step fails.
        """
        self.docs = docs_client
        self.drive = drive_client
        self.title = title or get_letter_title()
        self.cleanup_on_failure = cleanup_on_failure

    def save(self, content: Any) -> SavedLetter:
        """Export editor content.

        Args:
            content: ``{"textValue": str, "delta": {"ops": [...]}}`` or its JSON string.

        Returns:
            SavedLetter describing the new document.

        Raises:
            UnsupportedFormatError: If the content is malformed (nothing is created).
            SaveLetterError: If a remote step fails.
        """
        requests = build_requests(content)

        try:
            document = self.docs.create_document(self.title)
        except Exception as e:
            logger.error(f"Could not create document: {e}")
            raise SaveLetterError("create") from e

        document_id = document.id

        try:
            if requests:
                self.docs.batch_update(document_id, requests)
        except Exception as e:
            logger.error(f"Could not apply {len(requests)} requests to {document_id}: {e}")
            self._discard(document_id)
            raise SaveLetterError("batch_update", document_id) from e

        try:
            self.drive.rename_file(document_id, self.title, GOOGLE_DOC_MIME_TYPE)
        except Exception as e:
            logger.error(f"Could not rename {document_id}: {e}")
            self._discard(document_id)
            raise SaveLetterError("rename", document_id) from e

        logger.info(f"Saved letter {document_id} ({len(requests)} requests)")
        return SavedLetter(
            document_id=document_id,
            title=self.title,
            request_count=len(requests),
            url=document.url,
        )

    def _discard(self, document_id: str) -> None:
        """Best-effort removal of a partially exported document."""
        if not self.cleanup_on_failure:
            logger.warning(f"Leaving partially exported document {document_id}")
            return
        try:
            deleted = self.drive.delete_file(document_id)
        except Exception as e:
            logger.warning(f"Cleanup of {document_id} raised: {e}")
            deleted = False
        if not deleted:
            logger.warning(f"Orphaned document {document_id} could not be deleted")
