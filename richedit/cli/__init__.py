"""Command-line interface for Richedit."""
