"""Google Docs API client implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from letter_docs.google import GoogleOAuth
from letter_docs.google.exceptions import AuthorizationRequired

logger = logging.getLogger(__name__)


@dataclass
class Document:
    """Represents a Google Doc."""

    id: str
    title: str
    body_text: str = ""
    revision_id: str | None = None

    @property
    def url(self) -> str:
        """Browser URL of the document."""
        return f"https://docs.google.com/document/d/{self.id}/edit"


class DocsClient:
    """Google Docs API client.

    Creates letter documents and applies batches of editing requests.

    Usage:
        client = DocsClient()

        doc = client.create_document("My Styled Letter")
        client.batch_update(doc.id, [{"insertText": {...}}])

        # With a delegated bearer token instead of the stored OAuth token
        client = DocsClient(auth=AccessTokenAuth(token))

    Note:
        Without ``auth``, requires OAuth authorization.
        Run `letter-docs google login` to authorize.
    """

    def __init__(
        self,
        scopes: list[str] | None = None,
        auth: Any = None,
    ) -> None:
        """Initialize Docs client.

        Args:
            scopes: OAuth scopes. Defaults to ["docs", "drive_file"].
            auth: Object with ``is_authorized()``, ``get_authorization_url()``
                and ``build_service()``. Defaults to a stored-token GoogleOAuth.
        """
        # Need drive_file scope to rename the created documents
        self._scopes = scopes or ["docs", "drive_file"]
        self._auth = auth
        self._service: Any = None

    def _get_service(self) -> Any:
        """Get or create Docs API service."""
        if self._service is None:
            if self._auth is None:
                self._auth = GoogleOAuth(scopes=self._scopes)
            if not self._auth.is_authorized():
                raise AuthorizationRequired(
                    self._auth.get_authorization_url(),
                    "Docs API requires OAuth authorization. "
                    "Run 'letter-docs google login' to authorize.",
                )
            self._service = self._auth.build_service("docs", "v1")
        return self._service

    # =========================================================================
    # Documents
    # =========================================================================

    def create_document(self, title: str) -> Document:
        """Create a new, empty document.

        Args:
            title: Document title.

        Returns:
            Created Document.
        """
        service = self._get_service()
        result = service.documents().create(body={"title": title}).execute()
        document = self._parse_document(result)
        logger.info(f"Created Google Doc {document.id}")
        return document

    def batch_update(self, document_id: str, requests: list[dict[str, Any]]) -> list[dict]:
        """Apply editing requests to a document as one atomic batch.

        Args:
            document_id: Document ID.
            requests: Docs API requests, applied in order.

        Returns:
            The per-request replies.
        """
        service = self._get_service()
        result = (
            service.documents()
            .batchUpdate(documentId=document_id, body={"requests": requests})
            .execute()
        )
        logger.info(f"Applied {len(requests)} requests to {document_id}")
        return result.get("replies", [])

    def _parse_document(self, data: dict) -> Document:
        """Parse document from API response."""
        body_text = ""
        content = data.get("body", {}).get("content", [])

        for element in content:
            if "paragraph" in element:
                for para_element in element["paragraph"].get("elements", []):
                    if "textRun" in para_element:
                        body_text += para_element["textRun"].get("content", "")

        return Document(
            id=data["documentId"],
            title=data.get("title", ""),
            body_text=body_text,
            revision_id=data.get("revisionId"),
        )
