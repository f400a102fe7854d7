"""Document — the result of parsing one manifest."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from .getter import lookup
from .values import Value, VTable, to_python


@dataclass(frozen=True)
class Document:
    """Immutable root table of a parsed manifest."""

    root: VTable

    # -- Convenience accessors ------------------------------------------

    def __getitem__(self, key: str) -> Value:
        return self.root[key]

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def __iter__(self) -> Iterator[str]:
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self.root.get(key, default)

    def lookup(self, path: Iterable[str | int] | str) -> Value:
        """Resolve a key path such as ``"package.keywords.2"``."""
        return lookup(self.root, path)

    def to_python(self) -> dict[str, Any]:
        return to_python(self.root)
