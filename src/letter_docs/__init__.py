"""Export rich-text letters to formatted Google Docs."""

__version__ = "0.1.0"
