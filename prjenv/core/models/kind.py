"""
Kind — how much discovery the environment performs.

    WORKSPACE   → multi-package workspace; root manifest has [workspace].
    STANDALONE  → single package; discovery runs, no workspace table expected.
    LIBRARY     → imported as a dependency; no filesystem discovery at all.
"""

from __future__ import annotations

import os
from enum import StrEnum


class Kind(StrEnum):
    """Environment operation mode."""

    WORKSPACE = "workspace"
    STANDALONE = "standalone"
    LIBRARY = "library"

    @classmethod
    def detect(cls) -> Kind:
        """Derive the kind from build-provided environment variables.

        ``CARGO_WORKSPACE_DIR`` → WORKSPACE, else ``CARGO_MANIFEST_DIR`` →
        STANDALONE, else LIBRARY.
        """
        if "CARGO_WORKSPACE_DIR" in os.environ:
            return cls.WORKSPACE
        if "CARGO_MANIFEST_DIR" in os.environ:
            return cls.STANDALONE
        return cls.LIBRARY

    @classmethod
    def parse(cls, text: str) -> Kind | None:
        """Case-insensitive lookup with a few aliases; None when unknown."""
        return _ALIASES.get(text.strip().lower())

    @property
    def is_workspace(self) -> bool:
        return self is Kind.WORKSPACE

    @property
    def is_standalone(self) -> bool:
        return self is Kind.STANDALONE

    @property
    def is_library(self) -> bool:
        return self is Kind.LIBRARY

    @property
    def should_discover_workspace(self) -> bool:
        """True unless in library mode (no filesystem access)."""
        return self is not Kind.LIBRARY


_ALIASES: dict[str, Kind] = {
    "workspace": Kind.WORKSPACE,
    "standalone": Kind.STANDALONE,
    "binary": Kind.STANDALONE,
    "bin": Kind.STANDALONE,
    "library": Kind.LIBRARY,
    "lib": Kind.LIBRARY,
}
