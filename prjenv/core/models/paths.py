"""
Paths — standard directory layout derived from the workspace root.

    {project}/
    ├── Cargo.toml
    └── assets/
        └── db/

Pure derivation: nothing here touches the filesystem.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator

ASSETS_DIR = "assets"
DATABASE_DIR = "db"


class Paths(BaseModel):
    """Project, package, assets and database directories.

    Fields left unset are derived: ``package = project``,
    ``assets = project / "assets"``, ``database = assets / "db"``.
    """

    model_config = ConfigDict(frozen=True)

    project: Path = Path(".")
    package: Path | None = None
    assets: Path | None = None
    database: Path | None = None

    @model_validator(mode="after")
    def _derive(self) -> Paths:
        # Frozen model: fill derived fields through object.__setattr__.
        if self.package is None:
            object.__setattr__(self, "package", self.project)
        if self.assets is None:
            object.__setattr__(self, "assets", self.project / ASSETS_DIR)
        if self.database is None:
            object.__setattr__(self, "database", self.assets / DATABASE_DIR)
        return self

    @classmethod
    def from_root(cls, root: Path | str, package: Path | str | None = None) -> Paths:
        """Standard layout under ``root``; ``package`` defaults to the root."""
        return cls(project=Path(root), package=Path(package) if package else None)

    # ── Builders ────────────────────────────────────────────────

    def with_project(self, project: Path | str) -> Paths:
        """Re-derive the whole layout from a new root (package follows)."""
        return Paths(project=Path(project))

    def with_package(self, package: Path | str) -> Paths:
        return self.model_copy(update={"package": Path(package)})

    def with_assets(self, assets: Path | str) -> Paths:
        return self.model_copy(update={"assets": Path(assets)})

    def with_database(self, database: Path | str) -> Paths:
        return self.model_copy(update={"database": Path(database)})
