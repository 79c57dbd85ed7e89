"""Scaffolding and workspace manifest editing."""
