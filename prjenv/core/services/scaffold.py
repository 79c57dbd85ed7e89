"""
Scaffold — generate a new package directory.

    Scaffold(name="demo").binary().with_description("x").create("crates")

produces::

    crates/demo/
    ├── Cargo.toml      [package] name/version/edition/description
    └── src/main.rs     (src/lib.rs for libraries)

A Scaffold is a frozen value: every builder returns a new one, so a
partially configured scaffold can be shared as a template.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from prjenv.core.config.manifest import MANIFEST_FILE, NodeTable, write_table
from prjenv.core.errors import EnvError
from prjenv.core.persistence.manifest_file import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_VERSION = "0.1.0"
DEFAULT_EDITION = "2024"

_BINARY_STUB = '//! {description}\n\nfn main() {{\n    println!("Hello from {name}!");\n}}\n'

_LIBRARY_STUB = (
    "//! {description}\n"
    "\n"
    "#[cfg(test)]\n"
    "mod tests {{\n"
    "    #[test]\n"
    "    fn it_works() {{\n"
    "        assert_eq!(2 + 2, 4);\n"
    "    }}\n"
    "}}\n"
)


class Scaffold(BaseModel):
    """Description of a package to be generated (not a package itself)."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = DEFAULT_VERSION
    description: str = ""
    edition: str = DEFAULT_EDITION
    authors: tuple[str, ...] = ()
    dependencies: tuple[tuple[str, str], ...] = ()
    is_binary: bool = False

    # ── Builders ────────────────────────────────────────────────

    def with_version(self, version: str) -> Scaffold:
        return self.model_copy(update={"version": version})

    def with_description(self, description: str) -> Scaffold:
        return self.model_copy(update={"description": description})

    def with_edition(self, edition: str) -> Scaffold:
        return self.model_copy(update={"edition": edition})

    def with_author(self, author: str) -> Scaffold:
        """Append an author (order is kept)."""
        return self.model_copy(update={"authors": (*self.authors, author)})

    def with_dependency(self, name: str, version: str) -> Scaffold:
        """Append a ``name = "version"`` dependency."""
        return self.model_copy(update={"dependencies": (*self.dependencies, (name, version))})

    def binary(self) -> Scaffold:
        return self.model_copy(update={"is_binary": True})

    def library(self) -> Scaffold:
        return self.model_copy(update={"is_binary": False})

    # ── Rendering ───────────────────────────────────────────────

    @property
    def source_file(self) -> str:
        return "main.rs" if self.is_binary else "lib.rs"

    def to_table(self) -> NodeTable:
        """Manifest node tree: ``[package]`` plus ``[dependencies]`` when any."""
        package: NodeTable = {
            "name": self.name,
            "version": self.version,
            "edition": self.edition,
        }
        if self.description:
            package["description"] = self.description
        if self.authors:
            package["authors"] = list(self.authors)

        table: NodeTable = {"package": package}
        if self.dependencies:
            # Later entries for the same name win.
            table["dependencies"] = {name: version for name, version in self.dependencies}
        return table

    def render_source(self) -> str:
        """The initial ``main.rs`` / ``lib.rs`` text."""
        stub = _BINARY_STUB if self.is_binary else _LIBRARY_STUB
        return stub.format(description=self.description, name=self.name)

    # ── Filesystem ──────────────────────────────────────────────

    def write_manifest(self, path: Path | str) -> None:
        """Serialize ``to_table()`` to ``path``.

        Raises:
            EnvError: IO if the file cannot be written.
        """
        write_table(Path(path), self.to_table())

    def create(self, base_dir: Path | str) -> Path:
        """Create ``base_dir/<name>/`` with its manifest and source stub.

        Returns:
            The new package directory.

        Raises:
            EnvError: INVALID_METADATA for an empty or path-like name
                (checked before touching disk); IO on filesystem errors.
        """
        self._check_name()
        package_dir = Path(base_dir) / self.name
        src_dir = package_dir / "src"

        try:
            src_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EnvError.io(src_dir, e) from e

        self.write_manifest(package_dir / MANIFEST_FILE)

        source = src_dir / self.source_file
        try:
            atomic_write_text(source, self.render_source())
        except OSError as e:
            raise EnvError.io(source, e) from e

        logger.info("Scaffolded %s package %s", "binary" if self.is_binary else "library", package_dir)
        return package_dir

    def _check_name(self) -> None:
        if not self.name.strip():
            raise EnvError.invalid_metadata(
                "name", "package name is empty", "Pass a non-empty package name"
            )
        if self.name in (".", "..") or "/" in self.name or "\\" in self.name:
            raise EnvError.invalid_metadata(
                "name",
                f"'{self.name}' is a path, not a package name",
                "Use --dir to choose where the package is created",
            )
