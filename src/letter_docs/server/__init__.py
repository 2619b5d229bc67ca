"""HTTP service for the letter editor."""

from __future__ import annotations

from letter_docs.server.app import create_app, google_clients

__all__ = ["create_app", "google_clients"]
