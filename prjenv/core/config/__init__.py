"""Manifest reading, root location and process-wide metadata cache."""
