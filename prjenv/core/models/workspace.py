"""
Workspace — metadata plus the ordered set of member packages.

Package order is insertion order, which for a workspace read from disk
is the enumeration order of ``workspace.members``.
"""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from prjenv.core.config.manifest import (
    MANIFEST_FILE,
    extract_metadata,
    read_metadata,
    workspace_members,
)
from prjenv.core.errors import EnvError
from prjenv.core.models.metadata import Metadata
from prjenv.core.models.package import Package

logger = logging.getLogger(__name__)

_GLOB_CHARS = set("*?[")


class Workspace(BaseModel):
    """Workspace domain model: identity and registered packages.

    Carries no paths or runtime configuration; those live on the
    Environment next to it.
    """

    model_config = ConfigDict(frozen=True)

    metadata: Metadata = Field(default_factory=Metadata)
    packages: tuple[Package, ...] = ()

    @classmethod
    def from_manifest(cls, root: Path, tree: dict[str, Any]) -> Workspace:
        """Build a workspace from a parsed root manifest.

        Metadata comes from ``[workspace.package]`` (or ``[package]``).
        Each ``workspace.members`` entry becomes a Package read from its
        own Cargo.toml; glob entries are expanded relative to ``root``.
        A member whose manifest cannot be read is still listed, named
        after its directory.
        """
        root = Path(root)
        packages = [_member_package(path) for path in _expand_members(root, tree)]
        return cls(metadata=extract_metadata(tree), packages=tuple(packages))

    # ── Metadata builders ───────────────────────────────────────

    def with_name(self, name: str) -> Workspace:
        return self.with_metadata(self.metadata.with_name(name))

    def with_version(self, version: str) -> Workspace:
        return self.with_metadata(self.metadata.with_version(version))

    def with_description(self, description: str) -> Workspace:
        return self.with_metadata(self.metadata.with_description(description))

    def with_metadata(self, metadata: Metadata) -> Workspace:
        return self.model_copy(update={"metadata": metadata})

    # ── Package builders ────────────────────────────────────────

    def with_packages(self, packages: Iterable[Package]) -> Workspace:
        """Replace all packages."""
        return self.model_copy(update={"packages": tuple(packages)})

    def with_package(self, package: Package) -> Workspace:
        return self.model_copy(update={"packages": (*self.packages, package)})

    def with_package_name(self, name: str) -> Workspace:
        return self.with_package(Package().with_name(name))

    # ── Queries ─────────────────────────────────────────────────

    def find_package(self, name: str) -> Package | None:
        """First package whose name equals ``name``."""
        for package in self.packages:
            if package.metadata.name == name:
                return package
        return None

    def get_package(self, name: str) -> Package:
        """Strict lookup.

        Raises:
            EnvError: PACKAGE_NOT_FOUND when no package, or more than one
                package, carries ``name``.
        """
        matches = [p for p in self.packages if p.metadata.name == name]
        if len(matches) != 1:
            raise EnvError.package_not_found(name, self.package_names())
        return matches[0]

    def has_package(self, name: str) -> bool:
        return self.find_package(name) is not None

    def package_count(self) -> int:
        return len(self.packages)

    def package_names(self) -> list[str]:
        return [p.metadata.name for p in self.packages]

    def __iter__(self) -> Iterator[Package]:  # type: ignore[override]
        return iter(self.packages)

    def __len__(self) -> int:
        return len(self.packages)

    def __str__(self) -> str:
        return f"{self.metadata.display_name()} ({self.package_count()} packages)"


def _expand_members(root: Path, tree: dict[str, Any]) -> list[Path]:
    """Member directories in manifest order, globs expanded, excludes dropped."""
    workspace = tree.get("workspace")
    excluded: set[Path] = set()
    if isinstance(workspace, dict) and isinstance(workspace.get("exclude"), list):
        excluded = {root / e for e in workspace["exclude"] if isinstance(e, str)}

    seen: set[Path] = set()
    result: list[Path] = []
    for member in workspace_members(tree):
        if _GLOB_CHARS & set(member):
            matches = sorted(
                Path(p) for p in glob.glob(str(root / member))
                if (Path(p) / MANIFEST_FILE).is_file()
            )
        else:
            matches = [root / member]
        for path in matches:
            if path in seen or path in excluded:
                continue
            seen.add(path)
            result.append(path)
    return result


def _member_package(directory: Path) -> Package:
    metadata = read_metadata(directory / MANIFEST_FILE)
    if metadata is None:
        logger.debug("Member %s has no readable manifest", directory)
        metadata = Metadata(name=directory.name)
    return Package(metadata=metadata, path=directory)
