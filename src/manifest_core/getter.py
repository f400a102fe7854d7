"""Key-path lookup into a Value tree."""

from __future__ import annotations

from collections.abc import Iterable

from .errors import KeyPathError, ParseError
from .scanner import Scanner
from .values import Value, VArray, VTable
from .writer import format_key_path


def parse_key_path(text: str) -> tuple[str, ...]:
    """Split ``package.keywords.2`` or ``target."cfg(unix)".dependencies``.

    Uses the same key grammar as the manifest itself, so quoted segments
    may contain dots.
    """
    sc = Scanner(text.strip())
    try:
        path = sc.read_key()
    except ParseError as exc:
        raise KeyPathError(text, exc.message) from exc
    if not sc.at_end():
        raise KeyPathError(text, f"unexpected {sc.peek()!r} at column {sc.pos + 1}")
    return path


def apply_getter(value: Value, accessor: str | int, seen: tuple[str, ...] = ()) -> Value:
    """Resolve a single accessor on *value*.

    - VTable: key lookup (integers are used as their decimal text)
    - VArray: 0-based integer index
    - anything else: error
    """
    where = format_key_path(seen) if seen else "<root>"
    if isinstance(value, VTable):
        key = str(accessor)
        if key not in value:
            raise KeyPathError(where, f"no key {key!r}")
        return value[key]

    if isinstance(value, VArray):
        try:
            idx = int(accessor)
        except ValueError:
            raise KeyPathError(where, f"array index must be an integer, got {accessor!r}") from None
        if not 0 <= idx < len(value.items):
            raise KeyPathError(where, f"index {idx} out of range for array of length {len(value.items)}")
        return value.items[idx]

    raise KeyPathError(where, f"cannot index into {value.kind} with {accessor!r}")


def lookup(value: Value, path: Iterable[str | int] | str) -> Value:
    """Follow *path* from *value*; a string path is parsed first."""
    if isinstance(path, str):
        path = parse_key_path(path)
    seen: tuple[str, ...] = ()
    for accessor in path:
        value = apply_getter(value, accessor, seen)
        seen = seen + (str(accessor),)
    return value
