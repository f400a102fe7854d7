"""Mutable table tree used while a document is being read.

Tables are open while the reader works through the text and frozen into
:class:`~manifest_core.values.VTable` values once it is done.  Each open
table remembers how it came into existence, which decides whether a later
header or dotted key may add to it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union

from .errors import ParseErrorKind
from .scanner import Scanner
from .values import Value, VArray, VTable
from .writer import format_key_path


class Origin(Enum):
    IMPLICIT = auto()   # intermediate table of a [a.b.c] header path
    HEADER = auto()     # defined by its own [header] or [[header]]
    DOTTED = auto()     # created by a dotted key
    INLINE = auto()     # being filled from an inline { ... } literal


@dataclass
class TableNode:
    origin: Origin
    entries: dict[str, "Node"] = field(default_factory=dict)


@dataclass
class ArrayOfTables:
    tables: list[TableNode]


Node = Union[TableNode, ArrayOfTables, Value]


def node_kind(node: Node) -> str:
    if isinstance(node, TableNode):
        return "table"
    if isinstance(node, ArrayOfTables):
        return "array of tables"
    return node.kind


def _is_table(node: Node) -> bool:
    return isinstance(node, (TableNode, VTable))


def _dotted(path: tuple[str, ...]) -> str:
    return format_key_path(path)


def freeze(node: Node) -> Value:
    """Convert an open node (recursively) into an immutable Value."""
    if isinstance(node, TableNode):
        return VTable({k: freeze(v) for k, v in node.entries.items()})
    if isinstance(node, ArrayOfTables):
        return VArray(tuple(freeze(t) for t in node.tables))
    return node


class TableBuilder:
    """Applies headers and key/value pairs to the open root table."""

    def __init__(self, scanner: Scanner) -> None:
        self.scanner = scanner
        self.root = TableNode(Origin.HEADER)

    # -- Headers ----------------------------------------------------------

    def open_table(self, path: tuple[str, ...], at: int) -> TableNode:
        """``[path]``: return the table that subsequent keys go into."""
        parent = self._walk_header(path, at)
        key = path[-1]
        node = parent.entries.get(key)
        if node is None:
            node = TableNode(Origin.HEADER)
            parent.entries[key] = node
            return node
        if isinstance(node, TableNode) and node.origin is Origin.IMPLICIT:
            node.origin = Origin.HEADER
            return node
        if _is_table(node):
            raise self.scanner.error(
                ParseErrorKind.DUPLICATE_KEY,
                f"table '{_dotted(path)}' is defined more than once",
                at,
            )
        raise self.scanner.error(
            ParseErrorKind.TYPE_CONFLICT,
            f"cannot define table '{_dotted(path)}': key already holds {node_kind(node)}",
            at,
        )

    def open_array_table(self, path: tuple[str, ...], at: int) -> TableNode:
        """``[[path]]``: append a new table to the array under *path*."""
        parent = self._walk_header(path, at)
        key = path[-1]
        node = parent.entries.get(key)
        table = TableNode(Origin.HEADER)
        if node is None:
            parent.entries[key] = ArrayOfTables([table])
        elif isinstance(node, ArrayOfTables):
            node.tables.append(table)
        else:
            raise self.scanner.error(
                ParseErrorKind.TYPE_CONFLICT,
                f"cannot append to '{_dotted(path)}': key already holds {node_kind(node)}",
                at,
            )
        return table

    def _walk_header(self, path: tuple[str, ...], at: int) -> TableNode:
        table = self.root
        for i, key in enumerate(path[:-1]):
            node = table.entries.get(key)
            if node is None:
                node = TableNode(Origin.IMPLICIT)
                table.entries[key] = node
            elif isinstance(node, ArrayOfTables):
                node = node.tables[-1]
            elif not isinstance(node, TableNode):
                raise self.scanner.error(
                    ParseErrorKind.TYPE_CONFLICT,
                    f"'{_dotted(path[:i + 1])}' holds {node_kind(node)} and cannot be extended",
                    at,
                )
            table = node
        return table

    # -- Key / value pairs ------------------------------------------------

    def assign(
        self,
        table: TableNode,
        prefix: tuple[str, ...],
        key: tuple[str, ...],
        value: Value,
        at: int,
    ) -> None:
        """Set ``key = value`` in *table*; *prefix* is the table's own path."""
        for i, part in enumerate(key[:-1]):
            node = table.entries.get(part)
            if node is None:
                node = TableNode(Origin.DOTTED)
                table.entries[part] = node
            elif isinstance(node, TableNode):
                if node.origin is Origin.HEADER:
                    raise self.scanner.error(
                        ParseErrorKind.DUPLICATE_KEY,
                        f"table '{_dotted(prefix + key[:i + 1])}' is already defined by a header",
                        at,
                    )
                if node.origin is Origin.IMPLICIT:
                    node.origin = Origin.DOTTED
            else:
                raise self.scanner.error(
                    ParseErrorKind.TYPE_CONFLICT,
                    f"'{_dotted(prefix + key[:i + 1])}' holds {node_kind(node)} and cannot be extended",
                    at,
                )
            table = node

        last = key[-1]
        existing = table.entries.get(last)
        if existing is not None:
            if _is_table(existing) != isinstance(value, VTable):
                raise self.scanner.error(
                    ParseErrorKind.TYPE_CONFLICT,
                    f"'{_dotted(prefix + key)}' already holds {node_kind(existing)}, "
                    f"cannot redefine it as {value.kind}",
                    at,
                )
            raise self.scanner.error(
                ParseErrorKind.DUPLICATE_KEY,
                f"duplicate key '{_dotted(prefix + key)}'",
                at,
            )
        table.entries[last] = value

    def freeze(self) -> VTable:
        return freeze(self.root)
