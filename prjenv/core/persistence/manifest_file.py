"""
Manifest file persistence — atomic text writes.

Manifests are rewritten in place by the scaffolder and the workspace
manager.  Writes are atomic (write to a temp file in the same directory,
then rename) so a crash mid-write never leaves a truncated Cargo.toml.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` atomically.

    Creates the parent directory if needed.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Wrote %s (%d bytes)", path, len(content))
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
