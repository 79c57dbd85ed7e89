"""Core library: discovery, manifests, models and services."""
