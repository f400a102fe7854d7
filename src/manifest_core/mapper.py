"""Schema mapper: Document value tree → ManifestView."""

from __future__ import annotations

from .document import Document
from .errors import MissingRequiredField, WrongType
from .values import Value, VArray, VString, VTable
from .view import ManifestView
from .writer import format_key_path


PACKAGE_TABLE = "package"
DEPENDENCY_TABLES = {
    "dependencies": "dependencies",
    "dev-dependencies": "dev_dependencies",
    "build-dependencies": "build_dependencies",
}
FEATURES_TABLE = "features"

REQUIRED_FIELDS = ("name", "version")
STRING_FIELDS = {
    "description": "description",
    "license": "license",
    "homepage": "homepage",
    "repository": "repository",
    "documentation": "documentation",
    "edition": "edition",
    "rust-version": "rust_version",
}
STRING_LIST_FIELDS = {
    "authors": "authors",
    "keywords": "keywords",
    "categories": "categories",
}

_CLAIMED_PACKAGE_KEYS = frozenset(REQUIRED_FIELDS).union(STRING_FIELDS, STRING_LIST_FIELDS)


def extract(doc: Document) -> ManifestView:
    """Project *doc* onto a :class:`ManifestView`.

    Absent optional fields are fine; a field of the wrong type raises
    :class:`WrongType`.  ``name`` and ``version`` must be present strings.
    """
    root = doc.root
    package = _optional_table(root, (PACKAGE_TABLE,))
    if package is None:
        raise MissingRequiredField("name", format_key_path((PACKAGE_TABLE, "name")))

    fields: dict = {}
    for key in REQUIRED_FIELDS:
        path = (PACKAGE_TABLE, key)
        if key not in package:
            raise MissingRequiredField(key, format_key_path(path))
        fields[key] = _require_string(package[key], path)

    for key, attr in STRING_FIELDS.items():
        if key in package:
            fields[attr] = _require_string(package[key], (PACKAGE_TABLE, key))

    for key, attr in STRING_LIST_FIELDS.items():
        if key in package:
            fields[attr] = _require_string_list(package[key], (PACKAGE_TABLE, key))

    for key, attr in DEPENDENCY_TABLES.items():
        table = _optional_table(root, (key,))
        if table is not None:
            fields[attr] = dict(table.items())

    features = _optional_table(root, (FEATURES_TABLE,))
    if features is not None:
        fields["features"] = {
            name: _require_string_list(value, (FEATURES_TABLE, name))
            for name, value in features.items()
        }

    fields["extra"] = _collect_extra(root, package)
    return ManifestView(**fields)


# ---------------------------------------------------------------------------
# Catch-all collection
# ---------------------------------------------------------------------------

def _collect_extra(root: VTable, package: VTable) -> dict[str, Value]:
    extra: dict[str, Value] = {}
    for key, value in root.items():
        if key == PACKAGE_TABLE:
            for pkg_key, pkg_value in package.items():
                if pkg_key not in _CLAIMED_PACKAGE_KEYS:
                    extra[format_key_path((PACKAGE_TABLE, pkg_key))] = pkg_value
        elif key not in DEPENDENCY_TABLES and key != FEATURES_TABLE:
            extra[format_key_path((key,))] = value
    return extra


# ---------------------------------------------------------------------------
# Type checks
# ---------------------------------------------------------------------------

def _optional_table(parent: VTable, path: tuple[str, ...]) -> VTable | None:
    value = parent.get(path[-1])
    if value is None:
        return None
    if not isinstance(value, VTable):
        raise WrongType(format_key_path(path), "table", value.kind)
    return value


def _require_string(value: Value, path: tuple[str, ...]) -> str:
    if not isinstance(value, VString):
        raise WrongType(format_key_path(path), "string", value.kind)
    return value.value


def _require_string_list(value: Value, path: tuple[str, ...]) -> tuple[str, ...]:
    dotted = format_key_path(path)
    if not isinstance(value, VArray):
        raise WrongType(dotted, "array of strings", value.kind)
    items = []
    for i, item in enumerate(value.items):
        if not isinstance(item, VString):
            raise WrongType(f"{dotted}[{i}]", "string", item.kind)
        items.append(item.value)
    return tuple(items)
