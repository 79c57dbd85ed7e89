"""
Accessors — short names for sealing and reading the process Environment.

    setenv(name="api", version="1.2.0")   # seal once, at startup
    getenv("port")                         # → 3000
    getenv()                               # → the Environment itself

``setenv`` without arguments takes the package identity from the
build-provided CARGO_PKG_NAME / CARGO_PKG_VERSION / CARGO_PKG_DESCRIPTION
variables, so a binary launched by cargo identifies itself.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from prjenv.core import context
from prjenv.core.errors import EnvError
from prjenv.core.models.environment import Environment

_FIELD_GETTERS: dict[str, Callable[[Environment], Any]] = {
    "ws_name": lambda env: env.workspace.metadata.name,
    "ws_version": lambda env: env.workspace.metadata.version,
    "ws_desc": lambda env: env.workspace.metadata.description,
    "pkg_name": lambda env: env.package.metadata.name,
    "pkg_version": lambda env: env.package.metadata.version,
    "pkg_desc": lambda env: env.package.metadata.description,
    "db": lambda env: env.config.db,
    "ip": lambda env: env.config.ip,
    "port": lambda env: env.config.port,
    "rust_log": lambda env: env.config.rust_log,
    "prj_path": lambda env: env.paths.project,
    "pkg_path": lambda env: env.paths.package,
    "assets_path": lambda env: env.paths.assets,
    "db_path": lambda env: env.paths.database,
    "workspace": lambda env: env.workspace,
    "package": lambda env: env.package,
}

FIELDS: tuple[str, ...] = tuple(_FIELD_GETTERS)


def setenv(
    env: Environment | None = None,
    *,
    name: str | None = None,
    version: str | None = None,
    description: str | None = None,
) -> Environment:
    """Seal the process Environment and return whatever ended up stored.

    With ``env`` the value is sealed as given.  Otherwise a fresh
    ``Environment.new()`` gets its package identity from the keyword
    arguments, falling back to CARGO_PKG_* variables for omitted ones.

    If another caller sealed first, that Environment is returned and
    this one is dropped.
    """
    if env is None:
        env = Environment.new()
        env = env.with_package(
            env.package.with_name(_pick(name, "CARGO_PKG_NAME", env.package.metadata.name))
            .with_version(_pick(version, "CARGO_PKG_VERSION", env.package.metadata.version))
            .with_description(
                _pick(description, "CARGO_PKG_DESCRIPTION", env.package.metadata.description)
            )
        )
    return context.set(env)


def getenv(field: str | None = None) -> Any:
    """Read the sealed Environment, or one field of it.

    Raises:
        EnvError: CUSTOM for an unrecognised field name.
    """
    env = context.get()
    if field is None:
        return env
    getter = _FIELD_GETTERS.get(field)
    if getter is None:
        raise EnvError.custom(
            f"Unknown environment field '{field}'. Valid fields: {', '.join(FIELDS)}"
        )
    return getter(env)


def _pick(explicit: str | None, var: str, current: str) -> str:
    if explicit is not None:
        return explicit
    return os.environ.get(var, current)
