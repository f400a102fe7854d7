"""Snapshot generation: the build-time half of the two-stage pipeline.

An extraction step renders a :class:`ManifestView` once, ahead of the
build, either as a JSON document or as a Python module of constants.
The program then imports or loads that file like any other; nothing is
parsed at run time.

Usage::

    view = load_manifest(manifest_path("."))
    write_snapshot(view, "src/mypkg/_manifest.py", fmt="python")

    from mypkg._manifest import NAME, VERSION
"""

from __future__ import annotations

import json
import logging
import math
import pprint
from pathlib import Path
from typing import Any

from .errors import ManifestIOError, ManifestNotFound
from .view import ManifestView

logger = logging.getLogger(__name__)

FORMATS = ("json", "python")

_MODULE_HEADER = '"""Package metadata generated from {source}. Do not edit."""\n'


def render_json(view: ManifestView) -> str:
    return json.dumps(view.to_dict(), indent=2, ensure_ascii=False) + "\n"


def render_module(view: ManifestView, source: str = "Cargo.toml") -> str:
    """Render *view* as Python source defining one constant per field.

    ``NAME`` and ``VERSION`` are always defined; optional fields are
    ``None`` when absent, lists become tuples.  ``MANIFEST`` holds the
    full :meth:`ManifestView.to_dict` mapping.
    """
    data = view.to_dict()
    _check_finite(data, "")
    package = data["package"]
    lines = [_MODULE_HEADER.format(source=source), ""]
    lines.append(f"NAME = {view.name!r}")
    lines.append(f"VERSION = {view.version!r}")
    for key in _OPTIONAL_CONSTANTS:
        value = package.get(key)
        if isinstance(value, list):
            value = tuple(value)
        lines.append(f"{_constant_name(key)} = {value!r}")
    lines.append("")
    lines.append("MANIFEST = " + pprint.pformat(data, indent=4, sort_dicts=False))
    return "\n".join(lines) + "\n"


_OPTIONAL_CONSTANTS = (
    "authors",
    "description",
    "license",
    "homepage",
    "repository",
    "documentation",
    "edition",
    "rust-version",
    "keywords",
    "categories",
)


def _constant_name(key: str) -> str:
    return key.upper().replace("-", "_")


def _check_finite(obj: Any, where: str) -> None:
    if isinstance(obj, float) and not math.isfinite(obj):
        raise ValueError(f"{where or 'value'} is {obj!r}, which has no Python literal")
    if isinstance(obj, dict):
        for key, value in obj.items():
            _check_finite(value, f"{where}.{key}" if where else key)
    elif isinstance(obj, list):
        for i, value in enumerate(obj):
            _check_finite(value, f"{where}[{i}]")


def render(view: ManifestView, fmt: str = "json", source: str = "Cargo.toml") -> str:
    if fmt == "json":
        return render_json(view)
    if fmt == "python":
        return render_module(view, source)
    raise ValueError(f"unknown snapshot format {fmt!r}; expected one of {FORMATS}")


def write_snapshot(
    view: ManifestView,
    path: str | Path,
    fmt: str = "json",
    source: str = "Cargo.toml",
) -> Path:
    path = Path(path)
    text = render(view, fmt, source)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise ManifestIOError(path, f"cannot write snapshot {path}: {exc}") from exc
    logger.info("Wrote %s snapshot of %s %s to %s", fmt, view.name, view.version, path)
    return path


def load_snapshot(path: str | Path) -> dict[str, Any]:
    """Load a JSON snapshot written by :func:`write_snapshot`."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise ManifestNotFound(path) from exc
    except (OSError, ValueError) as exc:
        raise ManifestIOError(path, f"cannot load snapshot {path}: {exc}") from exc
