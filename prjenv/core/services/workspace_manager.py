"""
Workspace manager — create a workspace and edit its member list.

Every edit is read-modify-write of ``<root>/Cargo.toml`` through the
manifest reader and the atomic writer.  There is no locking: callers
must not run concurrent add/remove against the same manifest.
"""

from __future__ import annotations

import logging
from pathlib import Path

from prjenv.core.config.manifest import (
    MANIFEST_FILE,
    NodeTable,
    read_manifest,
    workspace_members,
    write_table,
)
from prjenv.core.errors import EnvError

logger = logging.getLogger(__name__)

DEFAULT_RESOLVER = "2"


class WorkspaceManager:
    """Member-list editor for the workspace rooted at ``root``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    @property
    def manifest_path(self) -> Path:
        return self.root / MANIFEST_FILE

    @staticmethod
    def create(name: str, parent_dir: Path | str) -> Path:
        """Create ``parent_dir/<name>/Cargo.toml`` with an empty workspace.

        Returns:
            The new workspace directory.

        Raises:
            EnvError: INVALID_WORKSPACE if a manifest already exists
                there; IO on filesystem errors.
        """
        workspace_dir = Path(parent_dir) / name
        manifest = workspace_dir / MANIFEST_FILE
        if manifest.exists():
            raise EnvError.invalid_workspace(manifest, "manifest already exists")

        try:
            workspace_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EnvError.io(workspace_dir, e) from e

        write_table(manifest, {"workspace": {"members": [], "resolver": DEFAULT_RESOLVER}})
        logger.info("Created workspace %s", workspace_dir)
        return workspace_dir

    def members(self) -> list[str]:
        """Current ``workspace.members`` entries, in manifest order."""
        return workspace_members(read_manifest(self.manifest_path))

    def add_member(self, relative_path: str) -> None:
        """Append ``relative_path`` to ``workspace.members`` unless present.

        Creates the ``workspace`` table and ``members`` array when missing.

        Raises:
            EnvError: INVALID_WORKSPACE if ``workspace`` is not a table or
                ``members`` is not an array; manifest read/write errors.
        """
        tree = read_manifest(self.manifest_path)
        members = self._ensure_members_array(tree)
        if relative_path in members:
            logger.debug("Member %s already registered", relative_path)
            return
        members.append(relative_path)
        write_table(self.manifest_path, tree)
        logger.info("Added member %s", relative_path)

    def remove_member(self, relative_path: str) -> None:
        """Drop every ``relative_path`` entry; silent no-op when absent.

        The manifest is rewritten only when something was removed.

        Raises:
            EnvError: INVALID_WORKSPACE if ``workspace`` or ``members`` has
                the wrong type; manifest read/write errors.
        """
        tree = read_manifest(self.manifest_path)
        members = self._existing_members_array(tree)
        if not members or relative_path not in members:
            logger.debug("Member %s not registered, nothing to remove", relative_path)
            return
        members[:] = [m for m in members if m != relative_path]
        write_table(self.manifest_path, tree)
        logger.info("Removed member %s", relative_path)

    def _existing_members_array(self, tree: NodeTable) -> list | None:
        """``workspace.members`` if both levels exist, else None."""
        workspace = tree.get("workspace")
        if workspace is None:
            return None
        self._check_table(workspace)
        members = workspace.get("members")
        if members is not None:
            self._check_array(members)
        return members

    def _ensure_members_array(self, tree: NodeTable) -> list:
        """``workspace.members``, creating the table and array when missing."""
        workspace = tree.setdefault("workspace", {})
        self._check_table(workspace)
        members = workspace.setdefault("members", [])
        self._check_array(members)
        return members

    def _check_table(self, workspace: object) -> None:
        if not isinstance(workspace, dict):
            raise EnvError.invalid_workspace(self.manifest_path, "'workspace' is not a table")

    def _check_array(self, members: object) -> None:
        if not isinstance(members, list):
            raise EnvError.invalid_workspace(
                self.manifest_path, "'workspace.members' is not an array"
            )

    def __repr__(self) -> str:
        return f"WorkspaceManager({str(self.root)!r})"
