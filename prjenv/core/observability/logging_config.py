"""
Logging configuration — process-wide setup for the CLI.

The library itself never configures logging; it only declares
``logger = logging.getLogger(__name__)`` per module.  Entrypoints call
``setup_logging`` once.

Level precedence:
    CLI flag  >  PRJENV_LOG_LEVEL  >  WARNING

The chosen level applies to the ``prjenv`` logger tree.  Every other
logger stays at WARNING unless the threshold is DEBUG, so ``-v``
shows discovery decisions without pulling in library chatter.

File output is opt-in through PRJENV_LOG_FILE, with its own threshold
in PRJENV_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import os
import sys

PACKAGE_LOGGER = "prjenv"

LEVEL_VAR = "PRJENV_LOG_LEVEL"
FILE_VAR = "PRJENV_LOG_FILE"
FILE_LEVEL_VAR = "PRJENV_LOG_FILE_LEVEL"

# ── Format strings ──────────────────────────────────────────────

_FMT_MINIMAL = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"

_DATEFMT_CLOCK = "%H:%M:%S"
_DATEFMT_FULL = "%Y-%m-%d %H:%M:%S"


def resolve_level(flag_level: str | None = None) -> str:
    """Pick the console level: explicit flag, else env var, else WARNING."""
    if flag_level:
        return flag_level
    return os.environ.get(LEVEL_VAR) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    package_only: bool = True,
) -> None:
    """Install console (and optional file) handlers on the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Unknown names fall back to WARNING.
        log_file: Optional log file path; defaults to PRJENV_LOG_FILE.
        log_file_level: Level for the file handler; defaults to
            PRJENV_LOG_FILE_LEVEL, then to ``level``.
        package_only: Lower only the ``prjenv`` tree below WARNING.
            Has no effect when the threshold is DEBUG.
    """
    console_level = _parse_level(level)
    log_file = log_file or os.environ.get(FILE_VAR) or None
    log_file_level = log_file_level or os.environ.get(FILE_LEVEL_VAR) or None

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level))

    threshold = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root.addHandler(_file_handler(log_file, file_level))
        threshold = min(threshold, file_level)

    package = logging.getLogger(PACKAGE_LOGGER)
    if package_only and threshold > logging.DEBUG:
        root.setLevel(max(threshold, logging.WARNING))
        package.setLevel(threshold)
    else:
        root.setLevel(threshold)
        package.setLevel(logging.NOTSET)

    # Logging failures never propagate into commands
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    if level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_CLOCK)
    elif level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_CLOCK)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_FULL))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to numeric constant; WARNING when unknown or empty."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
