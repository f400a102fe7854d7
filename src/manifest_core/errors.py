"""Error hierarchy for manifest_core."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ManifestCoreError(Exception):
    """Base class for every error raised by manifest_core."""


# ---------------------------------------------------------------------------
# File access
# ---------------------------------------------------------------------------

class ManifestIOError(ManifestCoreError):
    """The manifest file could not be read."""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class ManifestNotFound(ManifestIOError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, f"manifest not found: {path}")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class ParseErrorKind(Enum):
    UNEXPECTED_TOKEN = "unexpected token"
    UNTERMINATED_STRING = "unterminated string"
    DUPLICATE_KEY = "duplicate key"
    INVALID_NUMBER = "invalid number"
    INVALID_DATETIME = "invalid datetime"
    TYPE_CONFLICT = "type conflict"


class ParseError(ManifestCoreError):
    """Malformed manifest text.

    ``offset`` is the character offset into the parsed text, ``line`` and
    ``column`` are 1-based.
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        *,
        offset: int,
        line: int,
        column: int,
    ) -> None:
        super().__init__(f"{message} (line {line}, column {column})")
        self.kind = kind
        self.message = message
        self.offset = offset
        self.line = line
        self.column = column


# ---------------------------------------------------------------------------
# Schema mapping
# ---------------------------------------------------------------------------

class ExtractError(ManifestCoreError):
    """The document does not match the manifest schema."""


class MissingRequiredField(ExtractError):
    def __init__(self, name: str, path: str) -> None:
        super().__init__(f"missing required field '{path}'")
        self.name = name
        self.path = path


class WrongType(ExtractError):
    def __init__(self, path: str, expected: str, found: str) -> None:
        super().__init__(f"'{path}' must be {expected}, found {found}")
        self.path = path
        self.expected = expected
        self.found = found


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

class KeyPathError(ManifestCoreError, LookupError):
    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
