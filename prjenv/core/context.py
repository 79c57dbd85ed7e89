"""
Environment context — the single source of truth for "where am I running."

This module IS the infrastructure.  The Environment is sealed ONCE per
process, by whichever comes first:

    - get()       → constructs Environment.new() from disk and env vars
    - set(env)    → stores a caller-built Environment
    - setenv()    → set() seeded with the caller's package identity

After that every call returns the same object until the process exits.

Design notes:
    - Module-level cell (not a class hierarchy).  ``OnceCell`` is a
      lock-guarded write-once slot; the fast path after sealing is a
      plain attribute read.
    - Racing first callers are serialised by the cell lock, so exactly
      one Environment is constructed and stored.  A losing ``set(x)``
      gets the winner back; ``x`` is dropped untouched.
    - Sealed values are frozen pydantic models, safe to share across
      threads without further locking.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from prjenv.core.models.environment import Environment

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FALSY = {"0", "false", "no", "off"}


class OnceCell(Generic[T]):
    """A thread-safe cell that can be written at most once."""

    __slots__ = ("_value", "_set", "_lock", "name")

    def __init__(self, name: str = "cell") -> None:
        self.name = name
        self._value: T | None = None
        self._set = False
        self._lock = threading.Lock()

    def get(self) -> T | None:
        """Return the stored value, or None if the cell is empty."""
        return self._value if self._set else None

    def is_set(self) -> bool:
        return self._set

    def get_or_init(self, factory: Callable[[], T]) -> T:
        """Return the stored value, running ``factory`` first if empty.

        ``factory`` runs at most once per cell, under the cell lock.
        If it raises, the cell stays empty and the error propagates.
        """
        if self._set:
            return self._value  # type: ignore[return-value]
        with self._lock:
            if not self._set:
                value = factory()
                self._value = value
                self._set = True
                logger.debug("Sealed %s", self.name)
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> T:
        """Store ``value`` if empty; return whatever the cell holds."""
        return self.get_or_init(lambda: value)

    def __repr__(self) -> str:
        state = "set" if self._set else "empty"
        return f"OnceCell({self.name!r}, {state})"


_ENV: OnceCell[Environment] = OnceCell("environment")
_DOTENV_LOADED: OnceCell[bool] = OnceCell("dotenv")


def _load_dotenv_once() -> None:
    """Apply ``<cwd>/.env`` once per process unless PRJENV_DOTENV is falsy."""

    def _load() -> bool:
        if os.environ.get("PRJENV_DOTENV", "").strip().lower() in _FALSY:
            return False
        from prjenv.core.config.dotenv import load_dotenv

        return bool(load_dotenv())

    _DOTENV_LOADED.get_or_init(_load)


def get() -> Environment:
    """Return the process Environment, constructing it on first call.

    Raises:
        EnvError: INVALID_PORT if PORT is malformed.  The cell stays
            empty so a corrected environment can retry.
    """
    env = _ENV.get()
    if env is not None:
        return env

    from prjenv.core.models.environment import Environment

    def _build() -> Environment:
        _load_dotenv_once()
        return Environment.new()

    return _ENV.get_or_init(_build)


def set(env: Environment) -> Environment:  # noqa: A001 - public API name
    """Seal ``env`` as the process Environment (first writer wins).

    Returns:
        ``env`` if the cell was empty, otherwise the Environment that
        was already stored (``env`` is discarded).
    """
    return _ENV.set(env)


def try_get() -> Environment | None:
    """Return the sealed Environment without constructing one."""
    return _ENV.get()
