"""Tests for the manifest-snapshot command line."""

import json

import pytest

from manifest_core.cli import format_value, main
from manifest_core.values import VArray, VInteger, VString


MANIFEST = '[package]\nname = "demo"\nversion = "0.1.0"\nkeywords = ["a", "b"]\n'


@pytest.fixture
def project(tmp_path):
    (tmp_path / "Cargo.toml").write_text(MANIFEST, encoding="utf-8")
    return tmp_path


# ---------------------------------------------------------------------------
# format_value
# ---------------------------------------------------------------------------

def test_format_value_scalar():
    assert format_value(VString("demo")) == "demo"
    assert format_value(VInteger(4)) == "4"

def test_format_value_array():
    assert format_value(VArray((VString("a"),))) == '["a"]'


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

def test_json_to_stdout(project, capsys):
    assert main(["--project-root", str(project)]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["package"]["version"] == "0.1.0"

def test_manifest_path_option(project, capsys):
    assert main(["--manifest-path", str(project / "Cargo.toml"), "--format", "python"]) == 0
    assert "NAME = 'demo'" in capsys.readouterr().out

def test_cargo_manifest_dir_default(project, capsys, monkeypatch):
    monkeypatch.setenv("CARGO_MANIFEST_DIR", str(project))
    assert main(["--get", "package.name"]) == 0
    assert capsys.readouterr().out == "demo\n"

def test_get_array_element(project, capsys):
    assert main(["--project-root", str(project), "--get", "package.keywords.1"]) == 0
    assert capsys.readouterr().out == "b\n"

def test_output_file(project, tmp_path):
    out = tmp_path / "snapshot.json"
    assert main(["--project-root", str(project), "-o", str(out)]) == 0
    assert json.loads(out.read_text(encoding="utf-8"))["package"]["name"] == "demo"

def test_missing_manifest(tmp_path, capsys):
    assert main(["--project-root", str(tmp_path)]) == 1
    err = capsys.readouterr().err
    assert err.startswith("error: ")
    assert "Cargo.toml" in err

def test_parse_error_reports_path_and_position(tmp_path, capsys):
    path = tmp_path / "Cargo.toml"
    path.write_text('[package]\nname = "a"\nname = "b"\n', encoding="utf-8")
    assert main(["--manifest-path", str(path)]) == 1
    err = capsys.readouterr().err
    assert str(path) in err
    assert "line 3, column 1" in err
    assert len(err.splitlines()) == 1

def test_extract_error(tmp_path, capsys):
    path = tmp_path / "Cargo.toml"
    path.write_text('[package]\nname = "demo"\n', encoding="utf-8")
    assert main(["--manifest-path", str(path)]) == 1
    assert "package.version" in capsys.readouterr().err

def test_bad_key_path(project, capsys):
    assert main(["--project-root", str(project), "--get", "package.nope"]) == 1
    assert "nope" in capsys.readouterr().err
