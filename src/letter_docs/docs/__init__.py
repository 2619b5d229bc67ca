"""Google Docs API client.

Usage:
    from letter_docs.docs import DocsClient

    client = DocsClient()

    # Create a document
    doc = client.create_document("My Styled Letter")

    # Apply formatted content
    client.batch_update(doc.id, requests)

OAuth Setup:
    1. Download OAuth credentials from Google Cloud Console
    2. Import: letter-docs google import ~/Downloads/credentials.json
    3. Authorize: letter-docs google login
"""

from __future__ import annotations

from letter_docs.docs.client import DocsClient, Document

__all__ = ["DocsClient", "Document"]
