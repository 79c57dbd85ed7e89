"""
TOML writer — serialize a manifest node tree back to text.

Reading goes through the stdlib ``tomllib``; it has no writer, so the
inverse lives here.  Only what manifests need is supported: scalars,
arrays, inline tables inside arrays, and nested tables rendered as
``[a.b]`` sections.  Whatever ``dumps`` produces, ``tomllib.loads``
reads back to an equal tree.
"""

from __future__ import annotations

import datetime as _dt
import math
import re
from typing import Any

_BARE_KEY_RE = re.compile(r"^[A-Za-z0-9_-]+$")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _quote_string(value: str) -> str:
    out: list[str] = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def format_key(key: str) -> str:
    """Format a TOML key, quoting it only when required."""
    if not isinstance(key, str):
        raise TypeError(f"Unsupported TOML key type: {type(key).__name__}")
    if _BARE_KEY_RE.match(key):
        return key
    return _quote_string(key)


def format_value(value: Any) -> str:
    """Render one value in inline form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, (_dt.datetime, _dt.date, _dt.time)):
        return value.isoformat()
    if isinstance(value, str):
        return _quote_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(v) for v in value) + "]"
    if isinstance(value, dict):
        if not value:
            return "{}"
        inner = ", ".join(f"{format_key(k)} = {format_value(v)}" for k, v in value.items())
        return "{ " + inner + " }"
    raise TypeError(f"Unsupported TOML value type: {type(value).__name__}")


def _emit_table(table: dict[str, Any], path: list[str], lines: list[str]) -> None:
    scalars = [(k, v) for k, v in table.items() if not isinstance(v, dict)]
    tables = [(k, v) for k, v in table.items() if isinstance(v, dict)]

    # A header is needed when the table holds values, or is empty and
    # would otherwise vanish. Pure containers are implied by their children.
    if path and (scalars or not tables):
        if lines:
            lines.append("")
        lines.append("[" + ".".join(format_key(p) for p in path) + "]")

    for key, value in scalars:
        lines.append(f"{format_key(key)} = {format_value(value)}")

    for key, value in tables:
        _emit_table(value, [*path, key], lines)


def dumps(table: dict[str, Any]) -> str:
    """Serialize a table to TOML text (trailing newline included)."""
    if not isinstance(table, dict):
        raise TypeError(f"Expected a table at the TOML root, got {type(table).__name__}")
    lines: list[str] = []
    _emit_table(table, [], lines)
    return "\n".join(lines) + "\n" if lines else ""
