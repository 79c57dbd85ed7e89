"""
Errors — one tagged exception type for the whole library.

Every failure the library reports is an ``EnvError`` whose ``kind`` tag
says what went wrong.  The tag value doubles as a stable machine-readable
code (``prjenv::invalid_port``) so diagnostic tools can match on it
without parsing messages.

    try:
        read_manifest(path)
    except EnvError as err:
        if err.kind is ErrorKind.CONFIG_NOT_FOUND:
            ...

Construct errors through the factory classmethods, never by hand:
each factory fills in the message, the help line and the structured
fields for its kind.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Any


class ErrorKind(StrEnum):
    """Error tags.  Values are the stable codes printed by tools."""

    CONFIG_NOT_FOUND = "prjenv::config_not_found"
    INVALID_PORT = "prjenv::invalid_port"
    INVALID_MANIFEST = "prjenv::invalid_manifest"
    WORKSPACE_NOT_FOUND = "prjenv::workspace_not_found"
    INVALID_WORKSPACE = "prjenv::invalid_workspace"
    PACKAGE_NOT_FOUND = "prjenv::package_not_found"
    METADATA_NOT_FOUND = "prjenv::metadata_not_found"
    INVALID_METADATA = "prjenv::invalid_metadata"
    ENV_VAR = "prjenv::env_var_error"
    CUSTOM = "prjenv::custom"
    IO = "prjenv::io_error"

    @property
    def code(self) -> str:
        return self.value


class EnvError(Exception):
    """Raised for every discovery, manifest, configuration and scaffolding failure.

    Attributes:
        kind: The error tag.
        message: Human-readable one-line message (also ``str(err)``).
        help: Suggestion in the form a CLI would print, or None.
        fields: Structured data for the kind (path, value, name, ...).
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        help: str | None = None,
        **fields: Any,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.help = help
        self.fields = fields

    def __getattr__(self, name: str) -> Any:
        # Expose structured fields as attributes: err.path, err.value, ...
        fields = self.__dict__.get("fields", {})
        if name in fields:
            return fields[name]
        raise AttributeError(name)

    @property
    def code(self) -> str:
        return self.kind.code

    def to_dict(self) -> dict[str, Any]:
        """Serialize for diagnostic output (JSON-safe)."""
        data: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "help": self.help,
        }
        for key, value in self.fields.items():
            data[key] = str(value) if isinstance(value, Path) else value
        if self.__cause__ is not None:
            data["cause"] = str(self.__cause__)
        return data

    def __repr__(self) -> str:
        return f"EnvError({self.kind.name}, {self.message!r})"

    # ── Factories ───────────────────────────────────────────────

    @classmethod
    def config_not_found(cls, path: Path, suggestion: str) -> EnvError:
        return cls(
            ErrorKind.CONFIG_NOT_FOUND,
            f"Configuration file not found: {path}",
            help=suggestion,
            path=Path(path),
            suggestion=suggestion,
        )

    @classmethod
    def invalid_port(cls, value: str) -> EnvError:
        return cls(
            ErrorKind.INVALID_PORT,
            f"Invalid port: {value}",
            help="Port must be a number between 0 and 65535",
            value=value,
        )

    @classmethod
    def invalid_manifest(cls, path: Path, error: Exception) -> EnvError:
        err = cls(
            ErrorKind.INVALID_MANIFEST,
            f"Failed to parse TOML file: {path}: {error}",
            help=f"Check TOML syntax at {path}",
            path=Path(path),
        )
        err.__cause__ = error
        return err

    @classmethod
    def workspace_not_found(cls) -> EnvError:
        return cls(
            ErrorKind.WORKSPACE_NOT_FOUND,
            "Workspace root not found",
            help=(
                "Run this command from within a Cargo workspace, "
                "or set the WORKSPACE_ROOT environment variable"
            ),
        )

    @classmethod
    def invalid_workspace(cls, path: Path, reason: str) -> EnvError:
        return cls(
            ErrorKind.INVALID_WORKSPACE,
            f"Invalid workspace structure in {path}: {reason}",
            help="Ensure Cargo.toml has a [workspace] section with 'members' or 'resolver' fields",
            path=Path(path),
            reason=reason,
        )

    @classmethod
    def package_not_found(cls, name: str, available: list[str]) -> EnvError:
        listing = ", ".join(available) if available else "(none)"
        return cls(
            ErrorKind.PACKAGE_NOT_FOUND,
            f"Package '{name}' not found in workspace",
            help=f"Available packages: {listing}",
            name=name,
            available=list(available),
        )

    @classmethod
    def metadata_not_found(cls, field: str) -> EnvError:
        return cls(
            ErrorKind.METADATA_NOT_FOUND,
            f"Required metadata field '{field}' not found",
            help=f"Add '{field}' to the [package] section in Cargo.toml",
            field=field,
        )

    @classmethod
    def invalid_metadata(cls, field: str, reason: str, suggestion: str) -> EnvError:
        return cls(
            ErrorKind.INVALID_METADATA,
            f"Invalid metadata: {field} ({reason})",
            help=suggestion,
            field=field,
            reason=reason,
            suggestion=suggestion,
        )

    @classmethod
    def env_var(cls, var: str, reason: str, suggestion: str) -> EnvError:
        return cls(
            ErrorKind.ENV_VAR,
            f"Environment variable error: {var} ({reason})",
            help=suggestion,
            var=var,
            reason=reason,
            suggestion=suggestion,
        )

    @classmethod
    def custom(cls, message: str) -> EnvError:
        return cls(ErrorKind.CUSTOM, message)

    @classmethod
    def io(cls, path: Path, error: OSError) -> EnvError:
        err = cls(
            ErrorKind.IO,
            f"I/O error at {path}: {error.strerror or error}",
            help="Check file permissions and paths",
            path=Path(path),
        )
        err.__cause__ = error
        return err
