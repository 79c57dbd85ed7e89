"""
Environment — kind, workspace, package, configuration and paths in one value.

``Environment.new()`` composes everything from disk and environment
variables, in this order:

    1. Kind      detected from CARGO_* variables (or forced by caller)
    2. Workspace and Paths from the located root (skipped for LIBRARY)
    3. Package   cloned from the workspace metadata
    4. Configuration from env vars; empty DATABASE_URL → paths.database

Plain ``Environment()`` does no I/O and is all defaults, which is
what tests and library callers usually want.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from prjenv.core.config.locator import MANIFEST_DIR_VAR, find_cargo_root
from prjenv.core.config.metadata_store import get_manifest_tree
from prjenv.core.models.configuration import Configuration
from prjenv.core.models.kind import Kind
from prjenv.core.models.metadata import Metadata
from prjenv.core.models.package import Package
from prjenv.core.models.paths import Paths
from prjenv.core.models.workspace import Workspace

logger = logging.getLogger(__name__)


class Environment(BaseModel):
    """Top-level application environment container."""

    model_config = ConfigDict(frozen=True)

    kind: Kind = Kind.LIBRARY

    # ── Domain ──────────────────────────────────────────────────
    workspace: Workspace = Field(default_factory=Workspace)
    package: Package = Field(default_factory=Package)

    # ── Infrastructure ──────────────────────────────────────────
    config: Configuration = Field(default_factory=Configuration)
    paths: Paths = Field(default_factory=Paths)

    @classmethod
    def new(cls, kind: Kind | None = None) -> Environment:
        """Compose the environment from disk and environment variables.

        Args:
            kind: Force a kind instead of detecting it.

        Raises:
            EnvError: INVALID_PORT if PORT is malformed.  Every other
                shortfall degrades to empty metadata and default paths.
        """
        kind = kind or Kind.detect()

        package_dir = os.environ.get(MANIFEST_DIR_VAR) or None
        if kind.should_discover_workspace:
            root = find_cargo_root()
            workspace = Workspace.from_manifest(root, get_manifest_tree())
            paths = Paths.from_root(root, package=package_dir)
        else:
            workspace = Workspace()
            paths = Paths.from_root(".", package=package_dir)

        package = Package(metadata=workspace.metadata, path=paths.package)

        config = Configuration.from_env()
        if not config.db:
            config = config.with_db(str(paths.database))

        env = cls(kind=kind, workspace=workspace, package=package, config=config, paths=paths)
        logger.debug("Environment composed: %s", env.summary())
        return env

    @classmethod
    def as_workspace(cls) -> Environment:
        return cls.new(Kind.WORKSPACE)

    @classmethod
    def as_standalone(cls) -> Environment:
        return cls.new(Kind.STANDALONE)

    @classmethod
    def as_library(cls) -> Environment:
        """Library mode: no filesystem discovery."""
        return cls.new(Kind.LIBRARY)

    # ── Package shortcuts ───────────────────────────────────────

    def with_name(self, name: str) -> Environment:
        return self.with_package(self.package.with_name(name))

    def with_version(self, version: str) -> Environment:
        return self.with_package(self.package.with_version(version))

    def with_description(self, description: str) -> Environment:
        return self.with_package(self.package.with_description(description))

    with_pkg_name = with_name
    with_pkg_version = with_version
    with_pkg_description = with_description

    # ── Workspace delegation ────────────────────────────────────

    def with_workspace_name(self, name: str) -> Environment:
        return self.with_workspace(self.workspace.with_name(name))

    def with_workspace_version(self, version: str) -> Environment:
        return self.with_workspace(self.workspace.with_version(version))

    def with_workspace_description(self, description: str) -> Environment:
        return self.with_workspace(self.workspace.with_description(description))

    def with_workspace_package(self, package: Package) -> Environment:
        return self.with_workspace(self.workspace.with_package(package))

    def with_workspace_package_name(self, name: str) -> Environment:
        return self.with_workspace(self.workspace.with_package_name(name))

    def with_workspace_packages(self, packages: Iterable[Package]) -> Environment:
        return self.with_workspace(self.workspace.with_packages(packages))

    # ── Infrastructure builders ─────────────────────────────────

    def with_db(self, database_url: str) -> Environment:
        return self.with_config(self.config.with_db(database_url))

    def with_ip(self, ip: str) -> Environment:
        return self.with_config(self.config.with_ip(ip))

    def with_port(self, port: int) -> Environment:
        """Override the port; non-integers and values outside 0-65535 raise."""
        return self.with_config(self.config.with_port(port))

    def with_rust_log(self, rust_log: str) -> Environment:
        return self.with_config(self.config.with_rust_log(rust_log))

    # ── Whole-part replacement ──────────────────────────────────

    def with_kind(self, kind: Kind) -> Environment:
        return self.model_copy(update={"kind": Kind(kind)})

    def with_workspace(self, workspace: Workspace) -> Environment:
        return self.model_copy(update={"workspace": workspace})

    def with_package(self, package: Package) -> Environment:
        return self.model_copy(update={"package": package})

    def with_package_metadata(self, metadata: Metadata) -> Environment:
        return self.with_package(self.package.with_metadata(metadata))

    def with_config(self, config: Configuration) -> Environment:
        return self.model_copy(update={"config": config})

    def with_paths(self, paths: Paths) -> Environment:
        return self.model_copy(update={"paths": paths})

    def with_root(self, root: Path | str) -> Environment:
        """Re-derive paths from ``root``."""
        return self.with_paths(Paths.from_root(root))

    # ── Rendering ───────────────────────────────────────────────

    def summary(self) -> str:
        """One-line description whose shape depends on the kind."""
        pkg = self.package.metadata.display_name()
        if self.kind is Kind.WORKSPACE:
            return (
                f"{self.workspace.metadata.display_name()} "
                f"({self.workspace.package_count()} packages, running {pkg})"
            )
        if self.kind is Kind.STANDALONE:
            return pkg
        return f"Library: {pkg}"

    def __str__(self) -> str:
        return self.summary()
