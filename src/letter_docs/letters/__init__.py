"""Letter export to Google Docs."""

from __future__ import annotations

from letter_docs.letters.exporter import LetterExporter, SavedLetter, SaveLetterError

__all__ = ["LetterExporter", "SavedLetter", "SaveLetterError"]
