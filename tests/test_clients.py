"""Tests for the Docs and Drive API clients."""

from unittest.mock import MagicMock

import pytest

from letter_docs.docs import DocsClient
from letter_docs.drive import GOOGLE_DOC_MIME_TYPE, DriveClient
from letter_docs.google import AuthorizationRequired


class FakeAuth:
    """Auth object handing out a mock service."""

    def __init__(self, service=None, authorized=True):
        self.service = service or MagicMock()
        self.authorized = authorized
        self.built = []

    def is_authorized(self):
        return self.authorized

    def get_authorization_url(self):
        return "https://accounts.google.com/o/oauth2/auth?client_id=test"

    def build_service(self, service_name, version):
        self.built.append((service_name, version))
        return self.service


class TestDocsClient:
    """Test document creation and batch updates."""

    def test_create_document(self):
        """Should create a titled document and parse the response."""
        auth = FakeAuth()
        auth.service.documents().create().execute.return_value = {
            "documentId": "doc-1",
            "title": "Letter",
            "revisionId": "rev-1",
        }
        client = DocsClient(auth=auth)

        doc = client.create_document("Letter")

        assert doc.id == "doc-1"
        assert doc.title == "Letter"
        assert doc.url == "https://docs.google.com/document/d/doc-1/edit"
        auth.service.documents().create.assert_called_with(body={"title": "Letter"})
        assert auth.built == [("docs", "v1")]

    def test_batch_update(self):
        """Should send requests in one batchUpdate call."""
        auth = FakeAuth()
        auth.service.documents().batchUpdate().execute.return_value = {"replies": [{}, {}]}
        client = DocsClient(auth=auth)
        requests = [{"insertText": {"location": {"index": 1}, "text": "Hi"}}]

        replies = client.batch_update("doc-1", requests)

        assert replies == [{}, {}]
        auth.service.documents().batchUpdate.assert_called_with(
            documentId="doc-1", body={"requests": requests}
        )

    def test_batch_update_errors_propagate(self):
        """Should not swallow API errors during batchUpdate."""
        auth = FakeAuth()
        auth.service.documents().batchUpdate().execute.side_effect = RuntimeError("400")
        with pytest.raises(RuntimeError):
            DocsClient(auth=auth).batch_update("doc-1", [])

    def test_create_document_body_text(self):
        """Should join text runs of paragraphs in the response."""
        auth = FakeAuth()
        auth.service.documents().create().execute.return_value = {
            "documentId": "doc-1",
            "title": "Letter",
            "body": {
                "content": [
                    {"sectionBreak": {}},
                    {
                        "paragraph": {
                            "elements": [
                                {"textRun": {"content": "Hi "}},
                                {"textRun": {"content": "Bob\n"}},
                            ]
                        }
                    },
                ]
            },
        }
        doc = DocsClient(auth=auth).create_document("Letter")
        assert doc.body_text == "Hi Bob\n"

    def test_unauthorized(self):
        """Should raise AuthorizationRequired with the consent URL."""
        client = DocsClient(auth=FakeAuth(authorized=False))
        with pytest.raises(AuthorizationRequired) as exc_info:
            client.create_document("Letter")
        assert "accounts.google.com" in exc_info.value.authorization_url


class TestDriveClient:
    """Test renaming and deleting files."""

    def test_rename_file(self):
        """Should update name and MIME type."""
        auth = FakeAuth()
        auth.service.files().update().execute.return_value = {
            "id": "doc-1",
            "name": "Letter",
            "mimeType": GOOGLE_DOC_MIME_TYPE,
            "createdTime": "2024-01-02T03:04:05.000Z",
        }
        client = DriveClient(auth=auth)

        file = client.rename_file("doc-1", "Letter", GOOGLE_DOC_MIME_TYPE)

        assert file.name == "Letter"
        assert file.created_time.year == 2024
        _, kwargs = auth.service.files().update.call_args
        assert kwargs["fileId"] == "doc-1"
        assert kwargs["body"] == {"name": "Letter", "mimeType": GOOGLE_DOC_MIME_TYPE}
        assert auth.built == [("drive", "v3")]

    def test_rename_without_mime_type(self):
        """Should only send the name when no MIME type is given."""
        auth = FakeAuth()
        auth.service.files().update().execute.return_value = {"id": "f", "name": "n"}
        DriveClient(auth=auth).rename_file("f", "n")
        _, kwargs = auth.service.files().update.call_args
        assert kwargs["body"] == {"name": "n"}

    def test_delete_file(self):
        """Should report success."""
        auth = FakeAuth()
        assert DriveClient(auth=auth).delete_file("doc-1") is True
        auth.service.files().delete.assert_called_with(fileId="doc-1")

    def test_delete_file_failure(self):
        """Should return False instead of raising."""
        auth = FakeAuth()
        auth.service.files().delete().execute.side_effect = RuntimeError("403")
        assert DriveClient(auth=auth).delete_file("doc-1") is False
