"""Tests for the schema mapper."""

import dataclasses

import pytest

from manifest_core import (
    ExtractError,
    MissingRequiredField,
    WrongType,
    extract,
    parse,
)
from manifest_core.values import VArray, VInteger, VString, VTable


def extract_text(text: str):
    return extract(parse(text))


# ---------------------------------------------------------------------------
# Package identity
# ---------------------------------------------------------------------------

def test_minimal_package():
    view = extract_text('[package]\nname = "demo"\nversion = "0.1.0"\nauthors = ["a@example.com"]\n')
    assert view.name == "demo"
    assert view.version == "0.1.0"
    assert view.authors == ("a@example.com",)
    assert view.description is None

def test_optional_fields():
    view = extract_text(
        "[package]\n"
        'name = "demo"\n'
        'version = "1.2.3"\n'
        'description = "A demo"\n'
        'license = "MIT"\n'
        'edition = "2021"\n'
        'rust-version = "1.70"\n'
        'keywords = ["a", "b"]\n'
        "categories = []\n"
    )
    assert view.description == "A demo"
    assert view.license == "MIT"
    assert view.edition == "2021"
    assert view.rust_version == "1.70"
    assert view.keywords == ("a", "b")
    assert view.categories == ()
    assert view.repository is None

def test_version_not_validated_beyond_string():
    assert extract_text('[package]\nname = "x"\nversion = "not semver"').version == "not semver"

def test_missing_version():
    with pytest.raises(MissingRequiredField) as info:
        extract_text('[package]\nname = "demo"')
    assert info.value.name == "version"
    assert info.value.path == "package.version"

def test_missing_name():
    with pytest.raises(MissingRequiredField) as info:
        extract_text('[package]\nversion = "1.0"')
    assert info.value.name == "name"

def test_missing_package_table():
    with pytest.raises(MissingRequiredField) as info:
        extract_text('[dependencies]\nfoo = "1"')
    assert info.value.name == "name"

def test_integer_version():
    with pytest.raises(WrongType) as info:
        extract_text('[package]\nname = "demo"\nversion = 1')
    assert info.value.path == "package.version"
    assert info.value.expected == "string"
    assert info.value.found == "integer"

def test_workspace_inherited_version_is_wrong_type():
    with pytest.raises(WrongType) as info:
        extract_text('[package]\nname = "demo"\nversion = { workspace = true }')
    assert info.value.found == "table"

def test_package_not_a_table():
    with pytest.raises(WrongType) as info:
        extract_text('package = "demo"')
    assert info.value.path == "package"

def test_authors_with_non_string_element():
    with pytest.raises(WrongType) as info:
        extract_text('[package]\nname = "d"\nversion = "1"\nauthors = ["a", 2]')
    assert info.value.path == "package.authors[1]"
    assert info.value.found == "integer"

def test_authors_not_an_array():
    with pytest.raises(WrongType) as info:
        extract_text('[package]\nname = "d"\nversion = "1"\nauthors = "a"')
    assert info.value.expected == "array of strings"

def test_description_wrong_type():
    with pytest.raises(ExtractError):
        extract_text('[package]\nname = "d"\nversion = "1"\ndescription = true')


# ---------------------------------------------------------------------------
# Dependencies and features
# ---------------------------------------------------------------------------

PACKAGE = '[package]\nname = "demo"\nversion = "0.1.0"\n'

def test_dependencies_kept_raw():
    view = extract_text(PACKAGE + '[dependencies]\nfoo = "1.0"\nbar = { version = "2.0", features = ["x"] }\n')
    assert view.dependencies["foo"] == VString("1.0")
    assert view.dependencies["bar"] == VTable({
        "version": VString("2.0"),
        "features": VArray((VString("x"),)),
    })

def test_dev_and_build_dependencies():
    view = extract_text(
        PACKAGE
        + '[dev-dependencies]\npytest = "7"\n'
        + '[build-dependencies.cc]\nversion = "1"\n'
    )
    assert list(view.dev_dependencies) == ["pytest"]
    assert view.build_dependencies["cc"] == VTable({"version": VString("1")})
    assert view.dependencies == {}

def test_dependencies_not_a_table():
    with pytest.raises(WrongType) as info:
        extract_text(PACKAGE + 'dependencies = ["foo"]\n')
    assert info.value.path == "dependencies"

def test_features():
    view = extract_text(PACKAGE + '[features]\ndefault = ["std"]\nstd = []\n')
    assert view.features == {"default": ("std",), "std": ()}

def test_feature_with_wrong_type():
    with pytest.raises(WrongType) as info:
        extract_text(PACKAGE + "[features]\ndefault = true\n")
    assert info.value.path == "features.default"


# ---------------------------------------------------------------------------
# Catch-all
# ---------------------------------------------------------------------------

def test_unclaimed_keys_kept_by_dotted_path():
    view = extract_text(
        PACKAGE
        + 'edition = "2021"\n'
        + "[package.metadata.deb]\nrevision = 4\n"
        + "[lib]\nproc-macro = true\n"
        + "[target.'cfg(unix)'.dependencies]\nlibc = \"0.2\"\n"
    )
    assert set(view.extra) == {"package.metadata", "lib", "target"}
    assert view.extra["package.metadata"] == VTable({"deb": VTable({"revision": VInteger(4)})})
    assert view.extra["target"]["cfg(unix)"]["dependencies"]["libc"] == VString("0.2")

def test_edition_is_claimed_not_extra():
    view = extract_text(PACKAGE + 'edition = "2021"\npublish = false\n')
    assert "package.edition" not in view.extra
    assert "package.publish" in view.extra

def test_unusual_keys_are_quoted():
    view = extract_text(PACKAGE + '"odd key" = 1\n[other]\n')
    assert "package.\"odd key\"" in view.extra

def test_catch_all_is_complete():
    doc = parse(
        PACKAGE
        + 'readme = "README.md"\nbuild = "build.rs"\n'
        + "[[bin]]\nname = \"x\"\n"
        + "[profile.release]\nlto = true\n"
        + "[dependencies]\nfoo = \"1\"\n"
        + "[workspace]\nmembers = [\"a\"]\n"
    )
    view = extract(doc)
    for key, value in doc.root.items():
        if key == "package":
            for pkg_key in ("readme", "build"):
                assert view.extra[f"package.{pkg_key}"] == value[pkg_key]
        elif key != "dependencies":
            assert view.extra[key] == value


# ---------------------------------------------------------------------------
# Immutability / serialization
# ---------------------------------------------------------------------------

def test_view_is_immutable():
    view = extract_text(PACKAGE + '[dependencies]\nfoo = "1"\n')
    with pytest.raises(dataclasses.FrozenInstanceError):
        view.name = "other"
    with pytest.raises(TypeError):
        view.dependencies["bar"] = VString("2")

def test_to_dict():
    view = extract_text(
        '[package]\nname = "demo"\nversion = "0.1.0"\nauthors = ["a@example.com"]\n'
        '[dependencies]\nbar = { version = "2.0", features = ["x"] }\n'
        '[features]\ndefault = []\n'
        '[lib]\npath = "src/lib.rs"\n'
    )
    assert view.to_dict() == {
        "package": {"name": "demo", "version": "0.1.0", "authors": ["a@example.com"]},
        "dependencies": {"bar": {"version": "2.0", "features": ["x"]}},
        "dev-dependencies": {},
        "build-dependencies": {},
        "features": {"default": []},
        "extra": {"lib": {"path": "src/lib.rs"}},
    }
