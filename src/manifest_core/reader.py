"""Reader layer: manifest text to a Document value tree."""

from __future__ import annotations

from .document import Document
from .errors import ParseErrorKind
from .scanner import Scanner
from .tables import Origin, TableBuilder, TableNode, freeze
from .values import Value, VArray, VString, VTable

# Nesting limit for arrays and inline tables, well inside the recursion limit.
MAX_NESTING = 100


def parse(text: str) -> Document:
    """Parse manifest *text* and return its Document.

    Raises :class:`~manifest_core.errors.ParseError` on the first problem;
    nothing is returned for a partially read document.
    """
    return Reader(text).read()


class Reader:
    """Grammar layer on top of :class:`Scanner` and :class:`TableBuilder`."""

    def __init__(self, text: str) -> None:
        self.scanner = Scanner(text)
        self.builder = TableBuilder(self.scanner)
        self.depth = 0

    def read(self) -> Document:
        sc = self.scanner
        current: TableNode = self.builder.root
        path: tuple[str, ...] = ()

        while True:
            sc.skip_blank()
            if sc.at_end():
                break
            start = sc.pos
            if sc.startswith("[["):
                path = self._read_header("[[", "]]")
                current = self.builder.open_array_table(path, start)
            elif sc.peek() == "[":
                path = self._read_header("[", "]")
                current = self.builder.open_table(path, start)
            else:
                key, value = self._read_key_value()
                self.builder.assign(current, path, key, value, start)
            sc.expect_line_end()

        return Document(self.builder.freeze())

    # -- Statements -------------------------------------------------------

    def _read_header(self, open_: str, close: str) -> tuple[str, ...]:
        sc = self.scanner
        sc.advance(len(open_))
        sc.skip_ws()
        path = sc.read_key()
        sc.expect(close, f"'{close}' to close the table header")
        return path

    def _read_key_value(self) -> tuple[tuple[str, ...], Value]:
        sc = self.scanner
        key = sc.read_key()
        sc.expect("=", "'=' after key")
        sc.skip_ws()
        return key, self._read_value()

    # -- Values -----------------------------------------------------------

    def _read_value(self) -> Value:
        sc = self.scanner
        ch = sc.peek()
        if ch in ('"', "'"):
            return VString(sc.read_string())
        if ch in ("[", "{"):
            if self.depth >= MAX_NESTING:
                raise sc.error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"arrays and inline tables nested deeper than {MAX_NESTING} levels",
                )
            self.depth += 1
            try:
                return self._read_array() if ch == "[" else self._read_inline_table()
            finally:
                self.depth -= 1
        if not ch or ch in "\r\n#,]}":
            raise sc.unexpected("a value")
        return sc.read_scalar()

    def _read_array(self) -> VArray:
        sc = self.scanner
        sc.advance()
        items: list[Value] = []
        while True:
            sc.skip_blank()
            if sc.peek() == "]":
                sc.advance()
                return VArray(tuple(items))
            items.append(self._read_value())
            sc.skip_blank()
            ch = sc.peek()
            if ch == ",":
                sc.advance()
            elif ch == "]":
                sc.advance()
                return VArray(tuple(items))
            else:
                raise sc.unexpected("',' or ']' in array")

    def _read_inline_table(self) -> VTable:
        sc = self.scanner
        sc.advance()
        node = TableNode(Origin.INLINE)
        sc.skip_ws()
        if sc.peek() == "}":
            sc.advance()
            return freeze(node)
        while True:
            sc.skip_ws()
            start = sc.pos
            key, value = self._read_key_value()
            self.builder.assign(node, (), key, value, start)
            sc.skip_ws()
            ch = sc.peek()
            if ch == ",":
                sc.advance()
            elif ch == "}":
                sc.advance()
                return freeze(node)
            elif sc.at_newline():
                raise sc.error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    "inline tables must be written on a single line",
                )
            else:
                raise sc.unexpected("',' or '}' in inline table")
