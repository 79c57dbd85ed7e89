"""
Package — one crate, detached or registered in a Workspace.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from prjenv.core.models.metadata import Metadata


class Package(BaseModel):
    """A unit of source code with its own ``[package]`` table.

    Identity is ``metadata.name``.  ``path`` is the package directory
    when the package was read from disk, None otherwise.
    """

    model_config = ConfigDict(frozen=True)

    metadata: Metadata = Field(default_factory=Metadata)
    path: Path | None = None

    @property
    def name(self) -> str:
        return self.metadata.name

    def with_name(self, name: str) -> Package:
        return self.with_metadata(self.metadata.with_name(name))

    def with_version(self, version: str) -> Package:
        return self.with_metadata(self.metadata.with_version(version))

    def with_description(self, description: str) -> Package:
        return self.with_metadata(self.metadata.with_description(description))

    def with_metadata(self, metadata: Metadata) -> Package:
        return self.model_copy(update={"metadata": metadata})

    def with_path(self, path: Path | str | None) -> Package:
        return self.model_copy(update={"path": Path(path) if path is not None else None})

    def __str__(self) -> str:
        return self.metadata.display_name()
