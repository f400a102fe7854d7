"""manifest_core — Cargo.toml parser and metadata extraction engine."""

from .document import Document
from .errors import (
    ExtractError,
    KeyPathError,
    ManifestCoreError,
    ManifestIOError,
    ManifestNotFound,
    MissingRequiredField,
    ParseError,
    ParseErrorKind,
    WrongType,
)
from .getter import lookup, parse_key_path
from .loader import load_document, load_manifest, manifest_path, read_manifest_text
from .mapper import extract
from .reader import parse
from .snapshot import load_snapshot, render_json, render_module, write_snapshot
from .values import (
    Value,
    VArray,
    VBool,
    VDateTime,
    VFloat,
    VInteger,
    VString,
    VTable,
    from_python,
    to_python,
)
from .view import ManifestView
from .writer import dumps

__all__ = [
    "parse",
    "extract",
    "dumps",
    "lookup",
    "parse_key_path",
    "Document",
    "ManifestView",
    "Value",
    "VArray",
    "VBool",
    "VDateTime",
    "VFloat",
    "VInteger",
    "VString",
    "VTable",
    "from_python",
    "to_python",
    "load_document",
    "load_manifest",
    "manifest_path",
    "read_manifest_text",
    "load_snapshot",
    "render_json",
    "render_module",
    "write_snapshot",
    "ManifestCoreError",
    "ManifestIOError",
    "ManifestNotFound",
    "ParseError",
    "ParseErrorKind",
    "ExtractError",
    "MissingRequiredField",
    "WrongType",
    "KeyPathError",
]
