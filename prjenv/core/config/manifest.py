"""
Manifest reader — Cargo.toml into a node tree, and back.

A manifest parses to plain Python values (the *node tree*): tables
are dicts, arrays are lists, scalars are str/int/float/bool.  This
module classifies manifests (workspace root or package root), pulls
the identity triple out of them, and writes trees back atomically.

Two error disciplines coexist here:

    - ``read_manifest`` / ``read_cargo_metadata`` / ``write_table``
      are explicit API calls and raise ``EnvError``.
    - ``is_workspace_toml`` / ``read_metadata`` are used while probing
      candidate directories and never raise.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from prjenv.core.config import toml_writer
from prjenv.core.errors import EnvError
from prjenv.core.persistence.manifest_file import atomic_write_text

if TYPE_CHECKING:
    from prjenv.core.models.metadata import Metadata

logger = logging.getLogger(__name__)

ManifestNode = str | int | float | bool | list[Any] | dict[str, Any]
NodeTable = dict[str, Any]

# Default manifest filename
MANIFEST_FILE = "Cargo.toml"

# Smaller files cannot plausibly declare a workspace
_MIN_WORKSPACE_BYTES = 50


def is_workspace_toml(path: Path) -> bool:
    """Check whether a manifest declares a workspace.

    A token scan, not a parse: the text must contain ``[workspace]`` and
    at least one of ``members`` / ``resolver``.  Files under 50 bytes,
    missing files and unreadable files are never workspaces.
    """
    path = Path(path)
    try:
        if path.stat().st_size < _MIN_WORKSPACE_BYTES:
            return False
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return False

    if "[workspace]" not in text:
        return False
    return "members" in text or "resolver" in text


def read_manifest(path: Path) -> NodeTable:
    """Parse a whole manifest.

    Raises:
        EnvError: CONFIG_NOT_FOUND if the file is missing, IO if it
            cannot be read, INVALID_MANIFEST if the TOML is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise EnvError.config_not_found(
            path,
            "Run `cargo init` to create a manifest, or set PROJECT_ROOT",
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EnvError.io(path, e) from e
    except UnicodeDecodeError as e:
        raise EnvError.invalid_manifest(path, e) from e

    try:
        tree = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise EnvError.invalid_manifest(path, e) from e

    logger.debug("Parsed manifest %s (%d top-level keys)", path, len(tree))
    return tree


def _table(tree: NodeTable, *keys: str) -> NodeTable | None:
    """Walk nested tables; None if any step is missing or not a table."""
    node: Any = tree
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None


def _string(table: NodeTable | None, key: str) -> str:
    if table is None:
        return ""
    value = table.get(key)
    return value if isinstance(value, str) else ""


def metadata_section(tree: NodeTable) -> NodeTable | None:
    """The table holding name/version/description.

    ``[workspace.package]`` when the manifest has one, ``[package]``
    otherwise.
    """
    section = _table(tree, "workspace", "package")
    if section is not None:
        return section
    return _table(tree, "package")


def extract_metadata(tree: NodeTable) -> Metadata:
    """Build Metadata from a parsed tree; missing fields become ``""``."""
    from prjenv.core.models.metadata import Metadata

    section = metadata_section(tree)
    return Metadata(
        name=_string(section, "name"),
        version=_string(section, "version"),
        description=_string(section, "description"),
    )


def read_metadata(path: Path) -> Metadata | None:
    """Read a manifest's identity triple; None if it cannot be read or parsed."""
    try:
        tree = read_manifest(path)
    except EnvError as e:
        logger.debug("No metadata from %s: %s", path, e)
        return None
    return extract_metadata(tree)


def read_cargo_metadata(path: Path) -> NodeTable | None:
    """Return the metadata section of a manifest.

    For a manifest with a ``workspace`` table this is
    ``[workspace.package]``; otherwise ``[package]``.  None when that
    section does not exist.

    Raises:
        EnvError: On missing, unreadable or malformed manifests.
    """
    tree = read_manifest(path)
    if isinstance(tree.get("workspace"), dict):
        return _table(tree, "workspace", "package")
    return _table(tree, "package")


def workspace_members(tree: NodeTable) -> list[str]:
    """String entries of ``workspace.members`` (empty if absent)."""
    workspace = _table(tree, "workspace")
    if workspace is None:
        return []
    members = workspace.get("members")
    if not isinstance(members, list):
        return []
    return [m for m in members if isinstance(m, str)]


def write_table(path: Path, table: NodeTable) -> None:
    """Serialize a tree to TOML and write it atomically.

    Raises:
        EnvError: IO if the file cannot be written.
    """
    path = Path(path)
    content = toml_writer.dumps(table)
    try:
        atomic_write_text(path, content)
    except OSError as e:
        raise EnvError.io(path, e) from e
    logger.info("Wrote manifest %s", path)
