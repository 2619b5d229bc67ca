"""Google Drive API client implementation."""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from letter_docs.google import GoogleOAuth
from letter_docs.google.exceptions import AuthorizationRequired

logger = logging.getLogger(__name__)

GOOGLE_DOC_MIME_TYPE = "application/vnd.google-apps.document"

FILE_FIELDS = "id, name, mimeType, createdTime, modifiedTime, webViewLink"


@dataclass
class DriveFile:
    """Represents a Google Drive file."""

    id: str
    name: str
    mime_type: str
    created_time: datetime | None = None
    modified_time: datetime | None = None
    web_view_link: str | None = None


class DriveClient:
    """Google Drive API client.

    Names and removes the documents created by a letter export.

    Usage:
        client = DriveClient()

        file = client.rename_file(doc_id, "My Styled Letter", GOOGLE_DOC_MIME_TYPE)
        client.delete_file(doc_id)

    Note:
        Without ``auth``, requires OAuth authorization.
        Run `letter-docs google login` to authorize.
    """

    def __init__(
        self,
        scopes: list[str] | None = None,
        auth: Any = None,
    ) -> None:
        """Initialize Drive client.

        Args:
            scopes: OAuth scopes. Defaults to ["docs", "drive_file"].
            auth: Object with ``is_authorized()``, ``get_authorization_url()``
                and ``build_service()``. Defaults to a stored-token GoogleOAuth.
        """
        self._scopes = scopes or ["docs", "drive_file"]
        self._auth = auth
        self._service: Any = None

    def _get_service(self) -> Any:
        """Get or create Drive API service."""
        if self._service is None:
            if self._auth is None:
                self._auth = GoogleOAuth(scopes=self._scopes)
            if not self._auth.is_authorized():
                raise AuthorizationRequired(
                    self._auth.get_authorization_url(),
                    "Drive API requires OAuth authorization. "
                    "Run 'letter-docs google login' to authorize.",
                )
            self._service = self._auth.build_service("drive", "v3")
        return self._service

    # =========================================================================
    # Files
    # =========================================================================

    def rename_file(self, file_id: str, name: str, mime_type: str | None = None) -> DriveFile:
        """Rename a file, optionally setting its MIME type.

        Args:
            file_id: Drive file ID.
            name: New file name.
            mime_type: MIME type to record on the file.

        Returns:
            Updated DriveFile.
        """
        service = self._get_service()

        metadata: dict[str, Any] = {"name": name}
        if mime_type:
            metadata["mimeType"] = mime_type

        result = (
            service.files()
            .update(fileId=file_id, body=metadata, fields=FILE_FIELDS)
            .execute()
        )
        logger.info(f"Renamed {file_id} to {name!r}")
        return self._parse_file(result)

    def delete_file(self, file_id: str) -> bool:
        """Delete a file from Drive.

        Args:
            file_id: Drive file ID.

        Returns:
            True if deleted successfully.
        """
        service = self._get_service()
        try:
            service.files().delete(fileId=file_id).execute()
            logger.info(f"Deleted {file_id}")
            return True
        except Exception as e:
            logger.warning(f"Failed to delete {file_id}: {e}")
            return False

    def _parse_file(self, data: dict) -> DriveFile:
        """Parse file from API response."""
        created_time = None
        if data.get("createdTime"):
            with contextlib.suppress(ValueError):
                created_time = datetime.fromisoformat(data["createdTime"].replace("Z", "+00:00"))

        modified_time = None
        if data.get("modifiedTime"):
            with contextlib.suppress(ValueError):
                modified_time = datetime.fromisoformat(data["modifiedTime"].replace("Z", "+00:00"))

        return DriveFile(
            id=data["id"],
            name=data.get("name", ""),
            mime_type=data.get("mimeType", ""),
            created_time=created_time,
            modified_time=modified_time,
            web_view_link=data.get("webViewLink"),
        )
