"""
.env loading — seed os.environ from a project-local file.

Applied once, before the first Environment is built, so PORT, IP,
DATABASE_URL and friends can live next to the workspace instead of
in the shell.  Variables already set in the process always win.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DOTENV_FILE = ".env"

_EXPORT_PREFIX = "export "
_QUOTES = ('"', "'")


def parse_line(line: str) -> tuple[str, str] | None:
    """One ``[export ]KEY=value`` assignment, or None for anything else.

    A value wrapped in matching single or double quotes is unwrapped;
    no escapes or interpolation are applied.
    """
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    line = line.removeprefix(_EXPORT_PREFIX).lstrip()
    key, sep, value = line.partition("=")
    key, value = key.strip(), value.strip()
    if not sep or not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTES:
        value = value[1:-1]
    return key, value


def parse_env_file(path: Path) -> dict[str, str]:
    """Assignments from a .env file; later duplicates win.

    A missing or unreadable file yields an empty dict.
    """
    path = Path(path)
    if not path.is_file():
        return {}

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return {}

    pairs: dict[str, str] = {}
    for lineno, line in enumerate(content.splitlines(), start=1):
        assignment = parse_line(line)
        if assignment is None:
            if line.strip() and not line.lstrip().startswith("#"):
                logger.debug("%s:%d: not an assignment, skipped", path, lineno)
            continue
        key, value = assignment
        pairs[key] = value
    return pairs


def load_dotenv(path: Path | None = None, *, override: bool = False) -> dict[str, str]:
    """Apply a .env file to ``os.environ``.

    Args:
        path: File to read (default: ``<cwd>/.env``).
        override: Replace variables that are already set.

    Returns:
        The variables that were actually applied.
    """
    if path is None:
        try:
            path = Path.cwd() / DOTENV_FILE
        except OSError:
            return {}

    applied: dict[str, str] = {}
    for key, value in parse_env_file(path).items():
        if not override and key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value

    if applied:
        logger.debug("Loaded %d variable(s) from %s", len(applied), path)
    return applied
