"""Tests for letter export orchestration."""

import os
from unittest.mock import MagicMock, patch

import pytest

from letter_docs.delta import UnsupportedFormatError
from letter_docs.docs import Document
from letter_docs.drive import GOOGLE_DOC_MIME_TYPE
from letter_docs.letters import LetterExporter, SaveLetterError

CONTENT = {
    "textValue": "Hi Bob\n",
    "delta": {"ops": [{"insert": "Hi "}, {"insert": "Bob", "attributes": {"bold": True}}]},
}


@pytest.fixture
def docs():
    client = MagicMock()
    client.create_document.return_value = Document(id="doc-123", title="Untitled")
    client.batch_update.return_value = []
    return client


@pytest.fixture
def drive():
    client = MagicMock()
    client.delete_file.return_value = True
    return client


class TestLetterExporter:
    """Test the create, update, rename sequence."""

    def test_save_runs_steps_in_order(self, docs, drive):
        """Should create, batch-update, then rename the document."""
        calls = MagicMock()
        calls.attach_mock(docs.create_document, "create")
        calls.attach_mock(docs.batch_update, "batch_update")
        calls.attach_mock(drive.rename_file, "rename")

        saved = LetterExporter(docs, drive, title="Letter").save(CONTENT)

        assert [c[0] for c in calls.mock_calls] == ["create", "batch_update", "rename"]
        assert saved.document_id == "doc-123"
        assert saved.title == "Letter"
        assert saved.request_count == 3
        assert saved.url == "https://docs.google.com/document/d/doc-123/edit"
        drive.rename_file.assert_called_once_with("doc-123", "Letter", GOOGLE_DOC_MIME_TYPE)

    def test_requests_sent_as_one_batch(self, docs, drive):
        """Should send all translated requests in a single batchUpdate."""
        LetterExporter(docs, drive).save(CONTENT)

        document_id, requests = docs.batch_update.call_args[0]
        assert document_id == "doc-123"
        assert requests[1] == {"insertText": {"location": {"index": 4}, "text": "Bob"}}
        assert requests[2]["updateTextStyle"]["range"] == {"startIndex": 4, "endIndex": 7}

    def test_default_title(self, docs, drive):
        """Should name documents "My Styled Letter" by default."""
        with patch.dict(os.environ, {"LETTER_TITLE": ""}):
            saved = LetterExporter(docs, drive).save(CONTENT)
        docs.create_document.assert_called_once_with("My Styled Letter")
        assert saved.title == "My Styled Letter"

    def test_no_batch_update_without_requests(self, docs, drive):
        """Should skip batchUpdate when nothing translates."""
        content = {"textValue": "x", "delta": {"ops": [{"retain": 1}]}}
        saved = LetterExporter(docs, drive).save(content)

        docs.batch_update.assert_not_called()
        drive.rename_file.assert_called_once()
        assert saved.request_count == 0

    def test_unsupported_content_makes_no_remote_calls(self, docs, drive):
        """Should reject malformed content before creating anything."""
        with pytest.raises(UnsupportedFormatError):
            LetterExporter(docs, drive).save({"textValue": "Hi"})

        docs.create_document.assert_not_called()
        docs.batch_update.assert_not_called()
        drive.rename_file.assert_not_called()

    def test_create_failure(self, docs, drive):
        """Should wrap a create failure and have nothing to clean up."""
        docs.create_document.side_effect = RuntimeError("quota")

        with pytest.raises(SaveLetterError) as exc_info:
            LetterExporter(docs, drive).save(CONTENT)

        assert exc_info.value.stage == "create"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        drive.delete_file.assert_not_called()

    def test_batch_update_failure_deletes_document(self, docs, drive):
        """Should delete the empty document when formatting fails."""
        docs.batch_update.side_effect = RuntimeError("bad request")

        with pytest.raises(SaveLetterError) as exc_info:
            LetterExporter(docs, drive).save(CONTENT)

        assert exc_info.value.stage == "batch_update"
        assert exc_info.value.document_id == "doc-123"
        drive.delete_file.assert_called_once_with("doc-123")
        drive.rename_file.assert_not_called()

    def test_rename_failure_deletes_document(self, docs, drive):
        """Should delete the document when renaming fails."""
        drive.rename_file.side_effect = RuntimeError("forbidden")

        with pytest.raises(SaveLetterError) as exc_info:
            LetterExporter(docs, drive).save(CONTENT)

        assert exc_info.value.stage == "rename"
        drive.delete_file.assert_called_once_with("doc-123")

    def test_cleanup_failure_keeps_original_error(self, docs, drive):
        """Should raise the step failure even when cleanup also fails."""
        docs.batch_update.side_effect = RuntimeError("bad request")
        drive.delete_file.side_effect = RuntimeError("network down")

        with pytest.raises(SaveLetterError) as exc_info:
            LetterExporter(docs, drive).save(CONTENT)

        assert str(exc_info.value.__cause__) == "bad request"

    def test_cleanup_disabled(self, docs, drive):
        """Should leave the document in place when cleanup is off."""
        docs.batch_update.side_effect = RuntimeError("bad request")

        with pytest.raises(SaveLetterError):
            LetterExporter(docs, drive, cleanup_on_failure=False).save(CONTENT)

        drive.delete_file.assert_not_called()
