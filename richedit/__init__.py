"""Richedit - selection persistence and image normalization for rich-text editors."""

__version__ = "0.1.0"
