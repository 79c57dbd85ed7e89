"""
Root locator — find the workspace root directory.

Strategies are tried in order, cheapest first; the first one that
returns a directory wins:

    1. Override variables     PROJECT_ROOT, WORKSPACE_ROOT, CARGO_WORKSPACE_DIR
    2. Walk up from CARGO_MANIFEST_DIR looking for a workspace manifest
    3. Walk up from the current directory (workspace manifest, or a
       Cargo.toml next to a ``crates/`` directory)
    4. ``cargo metadata`` probe (slow; opt-in via PRJENV_METADATA_PROBE)
    5. CARGO_MANIFEST_DIR, else the current directory

Each strategy returns a Path or None and never raises: an unreadable
sibling in the search path must not break discovery.  Walks visit at
most ``MAX_WALK_DEPTH`` directories so a misconfigured environment
cannot drive unbounded ascent.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from prjenv.core.config.manifest import MANIFEST_FILE, is_workspace_toml
from prjenv.core.errors import EnvError

logger = logging.getLogger(__name__)

OVERRIDE_VARS = ("PROJECT_ROOT", "WORKSPACE_ROOT", "CARGO_WORKSPACE_DIR")
MANIFEST_DIR_VAR = "CARGO_MANIFEST_DIR"
PROBE_VAR = "PRJENV_METADATA_PROBE"

MAX_WALK_DEPTH = 10

_TRUTHY = {"1", "true", "yes", "on"}


def is_workspace_dir(directory: Path) -> bool:
    """True if ``directory/Cargo.toml`` declares a workspace."""
    return is_workspace_toml(Path(directory) / MANIFEST_FILE)


def walk_up(start: Path, limit: int = MAX_WALK_DEPTH):
    """Yield ``start`` and its parents, at most ``limit`` directories."""
    current = Path(start)
    for _ in range(limit):
        yield current
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent


# ── Strategies ──────────────────────────────────────────────────


def from_override_vars() -> Path | None:
    """Strategy 1: an explicit override variable naming an existing path."""
    for var in OVERRIDE_VARS:
        value = os.environ.get(var)
        if not value:
            continue
        path = Path(value)
        try:
            if path.exists():
                return path
        except OSError:
            continue
        logger.debug("%s=%s does not exist, ignoring", var, value)
    return None


def from_manifest_dir() -> Path | None:
    """Strategy 2: walk up from CARGO_MANIFEST_DIR to a workspace manifest."""
    manifest_dir = os.environ.get(MANIFEST_DIR_VAR)
    if not manifest_dir:
        return None
    for directory in walk_up(Path(manifest_dir)):
        if is_workspace_dir(directory):
            return directory
    return None


def from_current_dir() -> Path | None:
    """Strategy 3: walk up from the cwd looking for workspace markers."""
    try:
        start = Path.cwd()
    except OSError:
        return None
    for directory in walk_up(start):
        manifest = directory / MANIFEST_FILE
        try:
            if not manifest.is_file():
                continue
            if is_workspace_toml(manifest) or (directory / "crates").is_dir():
                return directory
        except OSError:
            continue
    return None


def from_cargo_metadata() -> Path | None:
    """Strategy 4: ask ``cargo metadata`` (50-100 ms, opt-in).

    Runs only when PRJENV_METADATA_PROBE is truthy and cargo is on PATH.
    """
    if os.environ.get(PROBE_VAR, "").strip().lower() not in _TRUTHY:
        return None
    cargo = shutil.which("cargo")
    if cargo is None:
        logger.debug("Metadata probe enabled but cargo is not on PATH")
        return None

    try:
        result = subprocess.run(
            [cargo, "metadata", "--no-deps", "--format-version", "1"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug("cargo metadata failed to start: %s", e)
        return None

    if result.returncode != 0:
        logger.debug("cargo metadata exited %d: %s", result.returncode, result.stderr.strip())
        return None

    try:
        root = json.loads(result.stdout).get("workspace_root")
    except (json.JSONDecodeError, AttributeError):
        return None
    return Path(root) if isinstance(root, str) and root else None


def fallback() -> Path | None:
    """Strategy 5: CARGO_MANIFEST_DIR, else the current directory."""
    manifest_dir = os.environ.get(MANIFEST_DIR_VAR)
    if manifest_dir:
        return Path(manifest_dir)
    try:
        return Path.cwd()
    except OSError:
        return None


STRATEGIES: tuple[tuple[str, Callable[[], Path | None]], ...] = (
    ("override", from_override_vars),
    ("manifest_dir", from_manifest_dir),
    ("current_dir", from_current_dir),
    ("cargo_metadata", from_cargo_metadata),
    ("fallback", fallback),
)


def find_cargo_root() -> Path:
    """Locate the workspace root directory.

    Returns:
        The first directory produced by the strategy chain.

    Raises:
        EnvError: WORKSPACE_NOT_FOUND only if even the fallback cannot
            name a directory (the current directory no longer exists).
    """
    for name, strategy in STRATEGIES:
        root = strategy()
        if root is not None:
            logger.debug("Workspace root via %s: %s", name, root)
            return root
    raise EnvError.workspace_not_found()
