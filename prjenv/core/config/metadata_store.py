"""
Metadata store — the root manifest, parsed once per process.

The cell caches the parsed node tree of ``<root>/Cargo.toml`` rather
than the extracted Metadata, so callers can derive whatever they need
(identity, members, resolver) from one parse.

Discovery must not fail: a missing or malformed root manifest caches
an empty tree and every field falls back to the empty string.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prjenv.core.config.locator import find_cargo_root
from prjenv.core.config.manifest import MANIFEST_FILE, NodeTable, extract_metadata, read_manifest
from prjenv.core.context import OnceCell
from prjenv.core.errors import EnvError

if TYPE_CHECKING:
    from prjenv.core.models.metadata import Metadata

logger = logging.getLogger(__name__)

_TREE: OnceCell[NodeTable] = OnceCell("manifest tree")


def _load_tree() -> NodeTable:
    try:
        root = find_cargo_root()
    except EnvError as e:
        logger.debug("Cannot locate workspace root: %s, using empty manifest", e)
        return {}

    path = root / MANIFEST_FILE
    try:
        return read_manifest(path)
    except EnvError as e:
        logger.debug("Cannot read %s: %s, using empty manifest", path, e.message)
        return {}


def get_manifest_tree() -> NodeTable:
    """Return the cached root manifest tree, loading it on first call."""
    return _TREE.get_or_init(_load_tree)


def set_manifest_tree(tree: NodeTable) -> NodeTable:
    """Seed the cache before any reader touches it.

    Returns:
        ``tree`` if the cache was empty, otherwise the cached tree.
    """
    return _TREE.set(tree)


def try_get_manifest_tree() -> NodeTable | None:
    """Return the cached tree without loading it."""
    return _TREE.get()


def workspace_metadata() -> Metadata:
    """Identity triple of the root manifest (empty strings when absent)."""
    return extract_metadata(get_manifest_tree())
