"""Embedded default document."""
