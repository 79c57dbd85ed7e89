"""
Metadata — name, version and description of a workspace or package.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Metadata(BaseModel):
    """Identity triple shared by Workspace and Package.

    All three fields are always strings; a missing manifest field is
    the empty string, never None.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    version: str = ""
    description: str = ""

    @classmethod
    def from_parts(cls, name: str, version: str, description: str) -> Metadata:
        return cls(name=name, version=version, description=description)

    # ── Builders ────────────────────────────────────────────────

    def with_name(self, name: str) -> Metadata:
        return self.model_copy(update={"name": str(name)})

    def with_version(self, version: str) -> Metadata:
        return self.model_copy(update={"version": str(version)})

    def with_description(self, description: str) -> Metadata:
        return self.model_copy(update={"description": str(description)})

    # ── Queries ─────────────────────────────────────────────────

    def is_empty(self) -> bool:
        return not (self.name or self.version or self.description)

    def has_name(self) -> bool:
        return bool(self.name)

    def display_name(self) -> str:
        """``"name vX"``, or just the name when there is no version."""
        if not self.version:
            return self.name
        return f"{self.name} v{self.version}"

    def __str__(self) -> str:
        return self.display_name()
