"""File-level persistence helpers."""
