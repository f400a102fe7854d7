"""``manifest-snapshot`` command line entry point.

Reads a manifest, extracts its metadata and writes a snapshot (JSON or a
Python constants module) for the build to pick up.  ``--get`` prints a
single value from the raw document instead.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .errors import ManifestCoreError
from .loader import load_document, manifest_path
from .mapper import extract
from .snapshot import FORMATS, render, write_snapshot
from .values import VArray, VTable, to_python

PARSER_DESCRIPTION = (
    "Extract package metadata from a Cargo.toml manifest and print it as a "
    "snapshot for the build."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="manifest-snapshot", description=PARSER_DESCRIPTION)
    where = parser.add_mutually_exclusive_group()
    where.add_argument(
        "--manifest-path",
        help="Path to the manifest file.",
    )
    where.add_argument(
        "--project-root",
        help=(
            "Directory containing Cargo.toml. Defaults to the CARGO_MANIFEST_DIR "
            "environment variable when set, otherwise the current directory."
        ),
    )
    parser.add_argument("--format", choices=FORMATS, default="json", help="Snapshot format.")
    parser.add_argument("-o", "--output", help="Write the snapshot to this file instead of stdout.")
    parser.add_argument("--get", metavar="KEY.PATH", help="Print one value, e.g. package.keywords.2")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def resolve_manifest_path(args: argparse.Namespace) -> Path:
    if args.manifest_path:
        return Path(args.manifest_path)
    root = args.project_root or os.environ.get("CARGO_MANIFEST_DIR") or "."
    return manifest_path(root)


def format_value(value) -> str:
    """Scalars print as text, arrays and tables as JSON."""
    if isinstance(value, (VArray, VTable)):
        return json.dumps(to_python(value), ensure_ascii=False)
    return str(value)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = resolve_manifest_path(args)
    try:
        doc = load_document(path)
        if args.get:
            print(format_value(doc.lookup(args.get)))
            return 0
        view = extract(doc)
        if args.output:
            write_snapshot(view, args.output, args.format, source=path.name)
        else:
            sys.stdout.write(render(view, args.format, source=path.name))
    except (ManifestCoreError, ValueError) as exc:
        print(f"error: {path}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
