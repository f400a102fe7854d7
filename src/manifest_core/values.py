"""Value types for the manifest value tree."""

from __future__ import annotations

import datetime as _dt
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar, Union


@dataclass(frozen=True, slots=True)
class VString:
    kind: ClassVar[str] = "string"
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VInteger:
    kind: ClassVar[str] = "integer"
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class VFloat:
    kind: ClassVar[str] = "float"
    value: float

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class VBool:
    kind: ClassVar[str] = "boolean"
    value: bool

    def __str__(self) -> str:
        return str(self.value).lower()


@dataclass(frozen=True, slots=True)
class VDateTime:
    """Offset/local datetime, local date or local time, kept as written."""

    kind: ClassVar[str] = "datetime"
    value: str  # RFC 3339 text

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class VArray:
    kind: ClassVar[str] = "array"
    items: tuple["Value", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Value"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Value":
        return self.items[index]

    def __str__(self) -> str:
        return "[" + ", ".join(str(v) for v in self.items) + "]"


@dataclass(frozen=True, slots=True, eq=False)
class VTable:
    """Read-only, insertion-ordered mapping of keys to values.

    Equality compares entries *in order*, so two tables holding the same
    keys in a different order are not equal.
    """

    kind: ClassVar[str] = "table"
    entries: Mapping[str, "Value"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VTable):
            return NotImplemented
        return list(self.entries.items()) == list(other.entries.items())

    def __hash__(self) -> int:
        return hash(tuple(self.entries.items()))

    def __repr__(self) -> str:
        return f"VTable({dict(self.entries)!r})"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> "Value":
        return self.entries[key]

    def get(self, key: str, default: "Value | None" = None) -> "Value | None":
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()


Value = Union[VString, VInteger, VFloat, VBool, VDateTime, VArray, VTable]

_DATETIME_TYPES = (_dt.datetime, _dt.date, _dt.time)


# ---------------------------------------------------------------------------
# Conversion to / from plain Python data
# ---------------------------------------------------------------------------

def to_python(value: Value) -> Any:
    """Convert a Value tree to plain, JSON-serializable Python data."""
    if isinstance(value, VTable):
        return {k: to_python(v) for k, v in value.items()}
    if isinstance(value, VArray):
        return [to_python(v) for v in value.items]
    if isinstance(value, (VString, VInteger, VFloat, VBool, VDateTime)):
        return value.value
    raise TypeError(f"not a manifest value: {value!r}")


def from_python(obj: Any) -> Value:
    """Build a Value tree from plain Python data.

    ``bool`` is checked before ``int``; ``datetime``/``date``/``time``
    objects become :class:`VDateTime` in ISO format.
    """
    if isinstance(obj, (VString, VInteger, VFloat, VBool, VDateTime, VArray, VTable)):
        return obj
    if isinstance(obj, bool):
        return VBool(obj)
    if isinstance(obj, int):
        return VInteger(obj)
    if isinstance(obj, float):
        return VFloat(obj)
    if isinstance(obj, str):
        return VString(obj)
    if isinstance(obj, _DATETIME_TYPES):
        return VDateTime(obj.isoformat())
    if isinstance(obj, Mapping):
        return VTable({str(k): from_python(v) for k, v in obj.items()})
    if isinstance(obj, (list, tuple)):
        return VArray(tuple(from_python(v) for v in obj))
    raise TypeError(f"cannot convert {type(obj).__name__} to a manifest value")
