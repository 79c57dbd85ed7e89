"""
Configuration — runtime settings read from environment variables.

| Variable       | Default       | Validation                          |
|----------------|---------------|-------------------------------------|
| RUST_LOG       | ""            | none (opaque log filter)            |
| DATABASE_URL   | ""            | none (empty → Environment fallback) |
| IP             | "localhost"   | none                                |
| PORT           | "3000"        | integer 0-65535, else INVALID_PORT  |

Port is the only field validated at startup: a bad port is cheaper to
catch here than at first bind.  The other fields are opaque strings
whose failure modes belong to whoever connects with them.
"""

from __future__ import annotations

import operator
import os
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from prjenv.core.errors import EnvError

DEFAULT_IP = "localhost"
DEFAULT_PORT = "3000"
MAX_PORT = 65535

_PORT_RE = re.compile(r"\+?[0-9]+")


def parse_port(text: str) -> int:
    """Parse a port string the way an unsigned 16-bit parse would.

    Raises:
        EnvError: INVALID_PORT carrying ``text`` when it is not all
            digits (optional leading ``+``) or exceeds 65535.
    """
    # More than five significant digits cannot fit in 16 bits
    if not _PORT_RE.fullmatch(text) or len(text.lstrip("+").lstrip("0")) > 5:
        raise EnvError.invalid_port(text)
    value = int(text)
    if value > MAX_PORT:
        raise EnvError.invalid_port(text)
    return value


def _checked_port(port: Any) -> int:
    """Bounded integer conversion; never truncates."""
    if isinstance(port, bool):
        raise TypeError("port must be an integer, not bool")
    try:
        value = operator.index(port)
    except TypeError:
        raise TypeError(f"port must be an integer, got {type(port).__name__}") from None
    if not 0 <= value <= MAX_PORT:
        raise ValueError(f"port must be 0-{MAX_PORT}, got {value}")
    return value


class Configuration(BaseModel):
    """Database URL, bind address and log filter for the running app."""

    model_config = ConfigDict(frozen=True)

    db: str = ""
    ip: str = DEFAULT_IP
    port: int = Field(default=int(DEFAULT_PORT), ge=0, le=MAX_PORT)
    rust_log: str = ""

    @classmethod
    def from_env(cls) -> Configuration:
        """Read RUST_LOG, DATABASE_URL, IP and PORT with their defaults.

        Raises:
            EnvError: INVALID_PORT if PORT is set but malformed.
        """
        return cls(
            rust_log=os.environ.get("RUST_LOG", ""),
            db=os.environ.get("DATABASE_URL", ""),
            ip=os.environ.get("IP", DEFAULT_IP),
            port=parse_port(os.environ.get("PORT", DEFAULT_PORT)),
        )

    @property
    def bind_address(self) -> str:
        return f"{self.ip}:{self.port}"

    # ── Builders ────────────────────────────────────────────────

    def with_db(self, database_url: str) -> Configuration:
        return self.model_copy(update={"db": str(database_url)})

    def with_ip(self, ip: str) -> Configuration:
        return self.model_copy(update={"ip": str(ip)})

    def with_port(self, port: int) -> Configuration:
        """Override the port.

        Raises:
            TypeError: ``port`` is not an integer.
            ValueError: ``port`` is outside 0-65535.
        """
        return self.model_copy(update={"port": _checked_port(port)})

    def with_rust_log(self, rust_log: str) -> Configuration:
        return self.model_copy(update={"rust_log": str(rust_log)})
