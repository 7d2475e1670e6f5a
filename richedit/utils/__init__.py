"""Utility modules for Richedit."""
