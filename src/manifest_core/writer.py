"""Serialize a Value tree back to manifest text."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from .values import Value, VArray, VBool, VDateTime, VFloat, VInteger, VString, VTable


_BARE_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")

_ESCAPES = {
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
    '"': '\\"',
    "\\": "\\\\",
}


# ---------------------------------------------------------------------------
# Keys and scalars
# ---------------------------------------------------------------------------

def format_key(key: str) -> str:
    if _BARE_KEY_RE.fullmatch(key):
        return key
    return format_string(key)


def format_key_path(path: Iterable[str]) -> str:
    """``("target", "cfg(unix)")`` → ``target."cfg(unix)"``"""
    return ".".join(format_key(k) for k in path)


def format_string(s: str) -> str:
    out = []
    for ch in s:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch < " " or ch == "\x7f":
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def format_value(value: Value) -> str:
    """Render *value* as a single-line literal (tables become inline)."""
    if isinstance(value, VString):
        return format_string(value.value)
    if isinstance(value, VBool):
        return "true" if value.value else "false"
    if isinstance(value, VInteger):
        return str(value.value)
    if isinstance(value, VFloat):
        return _format_float(value.value)
    if isinstance(value, VDateTime):
        return value.value
    if isinstance(value, VArray):
        return "[" + ", ".join(format_value(v) for v in value.items) + "]"
    if isinstance(value, VTable):
        if not value.entries:
            return "{}"
        pairs = ", ".join(f"{format_key(k)} = {format_value(v)}" for k, v in value.items())
        return "{ " + pairs + " }"
    raise TypeError(f"not a manifest value: {value!r}")


def _format_float(f: float) -> str:
    if math.isnan(f):
        return "nan"
    if math.isinf(f):
        return "inf" if f > 0 else "-inf"
    return repr(f)


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

def dumps(doc) -> str:
    """Serialize a Document (or a root VTable) to manifest text.

    Plain keys come first, followed by ``[table]`` and ``[[array]]``
    sections.  A table that precedes a plain key in insertion order is
    written inline instead, so reading the text back gives the same key
    order.
    """
    root = doc if isinstance(doc, VTable) else doc.root
    lines: list[str] = []
    _write_table(root, (), lines)
    return "\n".join(lines) + "\n" if lines else ""


def _is_section(value: Value) -> bool:
    return isinstance(value, VTable) or _is_array_of_tables(value)


def _is_array_of_tables(value: Value) -> bool:
    return (
        isinstance(value, VArray)
        and len(value.items) > 0
        and all(isinstance(v, VTable) for v in value.items)
    )


def _write_table(table: VTable, path: tuple[str, ...], lines: list[str]) -> None:
    keys = list(table.keys())
    # Everything up to the last plain value is written as key = value.
    split = 0
    for i, key in enumerate(keys):
        if not _is_section(table[key]):
            split = i + 1

    for key in keys[:split]:
        lines.append(f"{format_key(key)} = {format_value(table[key])}")

    for key in keys[split:]:
        value = table[key]
        sub_path = path + (key,)
        if isinstance(value, VTable):
            if lines:
                lines.append("")
            lines.append(f"[{format_key_path(sub_path)}]")
            _write_table(value, sub_path, lines)
        else:
            for item in value.items:
                if lines:
                    lines.append("")
                lines.append(f"[[{format_key_path(sub_path)}]]")
                _write_table(item, sub_path, lines)
