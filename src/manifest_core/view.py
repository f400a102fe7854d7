"""ManifestView — typed projection of a parsed manifest."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .values import Value, to_python


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class ManifestView:
    """Package identity, dependency sections, features and everything else.

    ``extra`` holds every key the schema does not claim, keyed by its full
    dotted path (``package.edition``, ``lib``, ``target."cfg(unix)"``).
    """

    name: str
    version: str
    authors: tuple[str, ...] | None = None
    description: str | None = None
    license: str | None = None
    homepage: str | None = None
    repository: str | None = None
    documentation: str | None = None
    edition: str | None = None
    rust_version: str | None = None
    keywords: tuple[str, ...] | None = None
    categories: tuple[str, ...] | None = None
    dependencies: Mapping[str, Value] = field(default_factory=dict)
    dev_dependencies: Mapping[str, Value] = field(default_factory=dict)
    build_dependencies: Mapping[str, Value] = field(default_factory=dict)
    features: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    extra: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("dependencies", "dev_dependencies", "build_dependencies", "features", "extra"):
            object.__setattr__(self, name, _frozen(getattr(self, name)))

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-serializable form; absent optional fields are omitted."""
        package: dict[str, Any] = {"name": self.name, "version": self.version}
        for attr, key in _PACKAGE_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            package[key] = list(value) if isinstance(value, tuple) else value

        return {
            "package": package,
            "dependencies": {k: to_python(v) for k, v in self.dependencies.items()},
            "dev-dependencies": {k: to_python(v) for k, v in self.dev_dependencies.items()},
            "build-dependencies": {k: to_python(v) for k, v in self.build_dependencies.items()},
            "features": {k: list(v) for k, v in self.features.items()},
            "extra": {k: to_python(v) for k, v in self.extra.items()},
        }


# (attribute, manifest key) for the optional [package] fields.
_PACKAGE_FIELDS = (
    ("authors", "authors"),
    ("description", "description"),
    ("license", "license"),
    ("homepage", "homepage"),
    ("repository", "repository"),
    ("documentation", "documentation"),
    ("edition", "edition"),
    ("rust_version", "rust-version"),
    ("keywords", "keywords"),
    ("categories", "categories"),
)
