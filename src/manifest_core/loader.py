"""File access: read a manifest from an explicit path and run it through the core."""

from __future__ import annotations

import logging
from pathlib import Path

from .document import Document
from .errors import ExtractError, ManifestIOError, ManifestNotFound, ParseError
from .mapper import extract
from .reader import parse
from .view import ManifestView

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "Cargo.toml"


def manifest_path(project_root: str | Path) -> Path:
    """Path of the manifest inside *project_root*."""
    return Path(project_root) / MANIFEST_FILE_NAME


def read_manifest_text(path: str | Path) -> str:
    """Return the manifest text at *path*.

    Raises :class:`ManifestNotFound` when the file is missing and
    :class:`ManifestIOError` when it cannot be read or is not UTF-8.
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ManifestNotFound(path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestIOError(path, f"cannot read manifest {path}: {exc}") from exc


def load_document(path: str | Path) -> Document:
    path = Path(path)
    text = read_manifest_text(path)
    logger.debug("Parsing manifest %s (%d characters)", path, len(text))
    try:
        return parse(text)
    except ParseError as exc:
        logger.debug("Failed to parse %s: %s", path, exc)
        raise


def load_manifest(path: str | Path) -> ManifestView:
    """Read, parse and extract the manifest at *path*."""
    path = Path(path)
    doc = load_document(path)
    try:
        view = extract(doc)
    except ExtractError as exc:
        logger.debug("Invalid manifest %s: %s", path, exc)
        raise
    logger.debug("Extracted %s %s from %s", view.name, view.version, path)
    return view
