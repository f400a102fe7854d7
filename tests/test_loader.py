"""Tests for manifest file access."""

import logging

import pytest

from manifest_core import (
    ManifestIOError,
    ManifestNotFound,
    MissingRequiredField,
    ParseError,
    load_document,
    load_manifest,
    manifest_path,
    read_manifest_text,
)
from manifest_core.values import VString


def write_manifest(root, text):
    path = manifest_path(root)
    path.write_text(text, encoding="utf-8")
    return path


def test_manifest_path(tmp_path):
    assert manifest_path(tmp_path) == tmp_path / "Cargo.toml"

def test_read_manifest_text(tmp_path):
    path = write_manifest(tmp_path, "a = 1\n")
    assert read_manifest_text(path) == "a = 1\n"

def test_missing_file(tmp_path):
    with pytest.raises(ManifestNotFound) as info:
        read_manifest_text(tmp_path / "Cargo.toml")
    assert info.value.path == tmp_path / "Cargo.toml"

def test_missing_file_is_not_a_parse_error(tmp_path):
    with pytest.raises(ManifestIOError):
        load_manifest(tmp_path / "Cargo.toml")

def test_directory_is_io_error(tmp_path):
    with pytest.raises(ManifestIOError) as info:
        read_manifest_text(tmp_path)
    assert not isinstance(info.value, ManifestNotFound)

def test_invalid_utf8(tmp_path):
    path = tmp_path / "Cargo.toml"
    path.write_bytes(b'name = "\xff"\n')
    with pytest.raises(ManifestIOError):
        read_manifest_text(path)

def test_load_document(tmp_path):
    path = write_manifest(tmp_path, '[package]\nname = "demo"\n')
    assert load_document(path).lookup("package.name") == VString("demo")

def test_load_manifest(tmp_path):
    path = write_manifest(tmp_path, '[package]\nname = "demo"\nversion = "0.1.0"\n')
    view = load_manifest(path)
    assert (view.name, view.version) == ("demo", "0.1.0")

def test_parse_error_propagates_and_is_logged(tmp_path, caplog):
    path = write_manifest(tmp_path, "[package\n")
    with caplog.at_level(logging.DEBUG, logger="manifest_core.loader"):
        with pytest.raises(ParseError):
            load_document(path)
    assert str(path) in caplog.text
    # The caller reports the failure; the loader only leaves a debug trace.
    assert all(r.levelno == logging.DEBUG for r in caplog.records)

def test_extract_error_propagates(tmp_path, caplog):
    path = write_manifest(tmp_path, '[package]\nname = "demo"\n')
    with caplog.at_level(logging.DEBUG, logger="manifest_core.loader"):
        with pytest.raises(MissingRequiredField):
            load_manifest(path)
    assert all(r.levelno == logging.DEBUG for r in caplog.records)
