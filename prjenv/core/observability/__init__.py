"""Process-level observability: logging setup."""
