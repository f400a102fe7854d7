"""Lexical layer: character cursor plus key, string and scalar scanners.

The scanner works directly on the manifest text and keeps a single
position.  Every error it raises carries the offset where the offending
token starts, translated to a 1-based line and column.
"""

from __future__ import annotations

import datetime as _dt
import re

from .errors import ParseError, ParseErrorKind
from .values import Value, VBool, VDateTime, VFloat, VInteger


_BARE_KEY_RE = re.compile(r"[A-Za-z0-9_-]+")

# Runs of characters that need no special handling inside strings.
_BASIC_RUN_RE = re.compile(r'[^"\\\x00-\x08\x0a-\x1f\x7f]+')
_LITERAL_RUN_RE = re.compile(r"[^'\x00-\x08\x0a-\x1f\x7f]+")
_ML_BASIC_RUN_RE = re.compile(r'[^"\\\r\x00-\x08\x0b-\x1f\x7f]+')
_ML_LITERAL_RUN_RE = re.compile(r"[^'\r\x00-\x08\x0b-\x1f\x7f]+")

_ESCAPES = {
    "b": "\b",
    "t": "\t",
    "n": "\n",
    "f": "\f",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

# Characters a number / boolean / special-float token may be built from.
_WORD_RE = re.compile(r"[0-9A-Za-z_+\-.]+")

_DEC_INT_RE = re.compile(r"[+-]?(?:0|[1-9](?:_?[0-9])*)")
_HEX_INT_RE = re.compile(r"0x[0-9A-Fa-f](?:_?[0-9A-Fa-f])*")
_OCT_INT_RE = re.compile(r"0o[0-7](?:_?[0-7])*")
_BIN_INT_RE = re.compile(r"0b[01](?:_?[01])*")
_FLOAT_RE = re.compile(
    r"[+-]?(?:0|[1-9](?:_?[0-9])*)"
    r"(?:\.[0-9](?:_?[0-9])*)?"
    r"(?:[eE][+-]?[0-9](?:_?[0-9])*)?"
)
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf|nan)")

_DATE_START_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIME_START_RE = re.compile(r"[0-9]{2}:")
_DATETIME_RE = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"(?:[Tt ](?P<time>"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})(?:\.[0-9]+)?"
    r"(?P<offset>[Zz]|[+-](?P<off_hour>[0-9]{2}):(?P<off_minute>[0-9]{2}))?"
    r"))?"
)
_LOCAL_TIME_RE = re.compile(
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})(?:\.[0-9]+)?"
)


class Scanner:
    """Cursor over manifest text."""

    def __init__(self, text: str) -> None:
        self.text = text
        # A leading byte order mark is skipped but still counts in offsets.
        self.start = 1 if text.startswith("\ufeff") else 0
        self.pos = self.start

    # -- Position ---------------------------------------------------------

    def location(self, pos: int | None = None) -> tuple[int, int]:
        """Return the 1-based (line, column) of *pos*."""
        if pos is None:
            pos = self.pos
        line = self.text.count("\n", 0, pos) + 1
        line_start = max(self.text.rfind("\n", 0, pos) + 1, self.start)
        return line, pos - line_start + 1

    def error(self, kind: ParseErrorKind, message: str, pos: int | None = None) -> ParseError:
        if pos is None:
            pos = self.pos
        line, column = self.location(pos)
        return ParseError(kind, message, offset=pos, line=line, column=column)

    def unexpected(self, expected: str) -> ParseError:
        ch = self.peek()
        found = "end of input" if not ch else repr(ch)
        return self.error(ParseErrorKind.UNEXPECTED_TOKEN, f"expected {expected}, found {found}")

    # -- Cursor -----------------------------------------------------------

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self, ahead: int = 0) -> str:
        i = self.pos + ahead
        return self.text[i] if i < len(self.text) else ""

    def startswith(self, s: str) -> bool:
        return self.text.startswith(s, self.pos)

    def advance(self, n: int = 1) -> None:
        self.pos += n

    def expect(self, s: str, expected: str | None = None) -> None:
        if not self.startswith(s):
            raise self.unexpected(expected or repr(s))
        self.pos += len(s)

    # -- Trivia -----------------------------------------------------------

    def at_newline(self) -> bool:
        return self.peek() == "\n" or self.startswith("\r\n")

    def skip_ws(self) -> None:
        while self.peek() in (" ", "\t"):
            self.pos += 1

    def skip_comment(self) -> None:
        if self.peek() != "#":
            return
        start = self.pos
        end = self.text.find("\n", start)
        if end == -1:
            end = len(self.text)
        if end > start and self.text[end - 1] == "\r":
            end -= 1
        for i in range(start, end):
            if _is_control(self.text[i]):
                raise self.error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    "control character in comment",
                    i,
                )
        self.pos = end

    def skip_newline(self) -> bool:
        if self.peek() == "\n":
            self.pos += 1
            return True
        if self.startswith("\r\n"):
            self.pos += 2
            return True
        return False

    def skip_blank(self) -> None:
        """Skip whitespace, comments and newlines."""
        while True:
            self.skip_ws()
            self.skip_comment()
            if not self.skip_newline():
                return

    def expect_line_end(self) -> None:
        self.skip_ws()
        self.skip_comment()
        if self.at_end() or self.skip_newline():
            return
        raise self.unexpected("end of line")

    # -- Keys -------------------------------------------------------------

    def read_key(self) -> tuple[str, ...]:
        """Read a (possibly dotted) key and the whitespace after it."""
        parts = [self.read_simple_key()]
        self.skip_ws()
        while self.peek() == ".":
            self.pos += 1
            self.skip_ws()
            parts.append(self.read_simple_key())
            self.skip_ws()
        return tuple(parts)

    def read_simple_key(self) -> str:
        ch = self.peek()
        if ch == '"':
            if self.startswith('"""'):
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "multi-line strings cannot be keys")
            return self.read_basic_string()
        if ch == "'":
            if self.startswith("'''"):
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "multi-line strings cannot be keys")
            return self.read_literal_string()
        m = _BARE_KEY_RE.match(self.text, self.pos)
        if not m:
            raise self.unexpected("a key")
        self.pos = m.end()
        return m.group()

    # -- Strings ----------------------------------------------------------

    def read_string(self) -> str:
        if self.startswith('"""'):
            return self.read_multiline_basic_string()
        if self.startswith("'''"):
            return self.read_multiline_literal_string()
        if self.peek() == '"':
            return self.read_basic_string()
        return self.read_literal_string()

    def read_basic_string(self) -> str:
        start = self.pos
        self.pos += 1
        chunks: list[str] = []
        while True:
            m = _BASIC_RUN_RE.match(self.text, self.pos)
            if m:
                chunks.append(m.group())
                self.pos = m.end()
            ch = self.peek()
            if ch == '"':
                self.pos += 1
                return "".join(chunks)
            if ch == "\\":
                chunks.append(self._read_escape())
            elif ch == "" or ch == "\n" or self.startswith("\r\n"):
                raise self.error(ParseErrorKind.UNTERMINATED_STRING, "unterminated string", start)
            else:
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "control character in string")

    def read_literal_string(self) -> str:
        start = self.pos
        self.pos += 1
        m = _LITERAL_RUN_RE.match(self.text, self.pos)
        if m:
            self.pos = m.end()
        ch = self.peek()
        if ch == "'":
            self.pos += 1
            return self.text[start + 1:self.pos - 1]
        if ch == "" or ch == "\n" or self.startswith("\r\n"):
            raise self.error(ParseErrorKind.UNTERMINATED_STRING, "unterminated string", start)
        raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "control character in string")

    def read_multiline_basic_string(self) -> str:
        start = self.pos
        self.pos += 3
        self.skip_newline()
        chunks: list[str] = []
        while True:
            m = _ML_BASIC_RUN_RE.match(self.text, self.pos)
            if m:
                chunks.append(m.group())
                self.pos = m.end()
            if self.startswith('"""'):
                chunks.append(self._closing_quotes('"'))
                return "".join(chunks)
            ch = self.peek()
            if ch == '"':
                chunks.append(ch)
                self.pos += 1
            elif ch == "\\":
                if not self._skip_line_ending_backslash():
                    chunks.append(self._read_escape())
            elif self.startswith("\r\n"):
                chunks.append("\n")
                self.pos += 2
            elif ch == "":
                raise self.error(ParseErrorKind.UNTERMINATED_STRING, "unterminated string", start)
            else:
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "control character in string")

    def read_multiline_literal_string(self) -> str:
        start = self.pos
        self.pos += 3
        self.skip_newline()
        chunks: list[str] = []
        while True:
            m = _ML_LITERAL_RUN_RE.match(self.text, self.pos)
            if m:
                chunks.append(m.group())
                self.pos = m.end()
            if self.startswith("'''"):
                chunks.append(self._closing_quotes("'"))
                return "".join(chunks)
            ch = self.peek()
            if ch == "'":
                chunks.append(ch)
                self.pos += 1
            elif self.startswith("\r\n"):
                chunks.append("\n")
                self.pos += 2
            elif ch == "":
                raise self.error(ParseErrorKind.UNTERMINATED_STRING, "unterminated string", start)
            else:
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, "control character in string")

    def _closing_quotes(self, quote: str) -> str:
        """Consume a closing delimiter; up to two quotes before it are content."""
        extra = 0
        while extra < 2 and self.peek(3 + extra) == quote:
            extra += 1
        self.pos += 3 + extra
        return quote * extra

    def _skip_line_ending_backslash(self) -> bool:
        i = self.pos + 1
        while i < len(self.text) and self.text[i] in " \t":
            i += 1
        if not self.text.startswith(("\n", "\r\n"), i):
            return False
        while i < len(self.text) and self.text[i] in " \t\r\n":
            i += 1
        self.pos = i
        return True

    def _read_escape(self) -> str:
        start = self.pos
        ch = self.peek(1)
        if ch in _ESCAPES:
            self.pos += 2
            return _ESCAPES[ch]
        if ch in ("u", "U"):
            width = 4 if ch == "u" else 8
            digits = self.text[self.pos + 2:self.pos + 2 + width]
            if len(digits) != width or not all(c in "0123456789abcdefABCDEF" for c in digits):
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, f"invalid unicode escape '\\{ch}{digits}'", start)
            code = int(digits, 16)
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, f"invalid unicode scalar value '\\{ch}{digits}'", start)
            self.pos += 2 + width
            return chr(code)
        raise self.error(ParseErrorKind.UNEXPECTED_TOKEN, f"invalid escape sequence '\\{ch}'", start)

    # -- Scalars ----------------------------------------------------------

    def read_scalar(self) -> Value:
        """Read a number, boolean or datetime."""
        if _DATE_START_RE.match(self.text, self.pos) or _TIME_START_RE.match(self.text, self.pos):
            return self._read_datetime()

        start = self.pos
        m = _WORD_RE.match(self.text, self.pos)
        if not m:
            raise self.unexpected("a value")
        word = m.group()

        if word in ("true", "false"):
            self.pos = m.end()
            return VBool(word == "true")
        if not (word[0].isdigit() or word[0] in "+-" or word in ("inf", "nan")):
            raise self.unexpected("a value")

        self.pos = m.end()
        if _SPECIAL_FLOAT_RE.fullmatch(word):
            return VFloat(float(word))
        for regex, base in ((_DEC_INT_RE, 10), (_HEX_INT_RE, 16), (_OCT_INT_RE, 8), (_BIN_INT_RE, 2)):
            if regex.fullmatch(word):
                digits = word.replace("_", "")
                if base != 10:
                    digits = digits[2:]
                return VInteger(int(digits, base))
        if _FLOAT_RE.fullmatch(word):
            return VFloat(float(word.replace("_", "")))
        raise self.error(ParseErrorKind.INVALID_NUMBER, f"invalid number '{word}'", start)

    def _read_datetime(self) -> VDateTime:
        start = self.pos
        m = _DATETIME_RE.match(self.text, self.pos)
        if m:
            try:
                _dt.date(int(m["year"]), int(m["month"]), int(m["day"]))
                if m["time"]:
                    _check_time(m["hour"], m["minute"], m["second"])
                if m["off_hour"]:
                    _check_time(m["off_hour"], m["off_minute"], "00")
            except ValueError as exc:
                raise self.error(ParseErrorKind.INVALID_DATETIME, f"invalid datetime '{m.group()}': {exc}", start) from None
        else:
            m = _LOCAL_TIME_RE.match(self.text, self.pos)
            if not m:
                raise self.error(ParseErrorKind.INVALID_DATETIME, "invalid time", start)
            try:
                _check_time(m["hour"], m["minute"], m["second"])
            except ValueError as exc:
                raise self.error(ParseErrorKind.INVALID_DATETIME, f"invalid time '{m.group()}': {exc}", start) from None

        end = m.end()
        if _WORD_RE.match(self.text, end) or self.text.startswith(":", end):
            bad = self.text[start:_token_end(self.text, end)]
            raise self.error(ParseErrorKind.INVALID_DATETIME, f"invalid datetime '{bad}'", start)
        self.pos = end
        return VDateTime(m.group())


def _check_time(hour: str, minute: str, second: str) -> None:
    _dt.time(int(hour), int(minute), int(second))


def _token_end(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] not in " \t\r\n,]}#":
        pos += 1
    return pos


def _is_control(ch: str) -> bool:
    return (ch < " " and ch != "\t") or ch == "\x7f"
