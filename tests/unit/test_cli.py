"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from convertible import __version__
from convertible.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def test_project(tmp_path: Path, declaration_file: Path, monkeypatch: pytest.MonkeyPatch):
    """A project whose convertible.toml points at the declaration file."""
    (tmp_path / "convertible.toml").write_text(
        """
[project]
name = "storage"

[sources]
paths = ["."]

[output]
dir = "generated"
"""
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    path = tmp_path / "broken.cvt"
    path.write_text("enum Broken {\n    (A { code: int }),\n}\n")
    return path


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)


class TestGenerate:
    def test_prints_to_stdout(self, cli_runner: CliRunner, declaration_file: Path):
        result = cli_runner.invoke(app, ["generate", str(declaration_file)])

        assert result.exit_code == 0
        assert "class StorageError:" in result.stdout
        assert "def into_storage_error(value: object) -> StorageError:" in result.stdout

    def test_writes_output_dir(self, cli_runner: CliRunner, declaration_file: Path, tmp_path: Path):
        out = tmp_path / "out"
        result = cli_runner.invoke(app, ["generate", str(declaration_file), "-o", str(out)])

        assert result.exit_code == 0
        assert (out / "storage_errors.py").exists()
        assert "Generated 1 enum(s) in 1 module(s)" in result.stdout

    def test_dry_run(self, cli_runner: CliRunner, declaration_file: Path, tmp_path: Path):
        out = tmp_path / "out"
        result = cli_runner.invoke(
            app, ["generate", str(declaration_file), "-o", str(out), "--dry-run"]
        )

        assert result.exit_code == 0
        assert "No files were written" in result.stdout
        assert not out.exists()

    def test_uses_configured_sources(self, cli_runner: CliRunner, test_project: Path):
        result = cli_runner.invoke(app, ["generate"])

        assert result.exit_code == 0
        assert (test_project / "generated" / "storage_errors.py").exists()

    def test_explicit_config(self, cli_runner: CliRunner, declaration_file: Path, tmp_path: Path):
        config = tmp_path / "custom.toml"
        config.write_text('[emit]\nbase_class = "Exception"\n')

        result = cli_runner.invoke(
            app, ["generate", str(declaration_file), "--config", str(config)]
        )

        assert result.exit_code == 0
        assert "class StorageError(Exception):" in result.stdout

    def test_parse_error(self, cli_runner: CliRunner, broken_file: Path):
        result = cli_runner.invoke(app, ["generate", str(broken_file)])

        assert result.exit_code == 1
        assert "Parse error:" in result.output
        assert "broken.cvt:2:" in result.output

    def test_no_sources(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["generate"])

        assert result.exit_code == 1
        assert "No declaration files" in result.output


class TestCheck:
    def test_reports_enums(self, cli_runner: CliRunner, declaration_file: Path):
        result = cli_runner.invoke(app, ["check", str(declaration_file)])

        assert result.exit_code == 0
        assert "OK: StorageError (3 variants, 3 conversions)" in result.stdout

    def test_conflict(self, cli_runner: CliRunner, tmp_path: Path):
        path = tmp_path / "conflict.cvt"
        path.write_text(
            "enum E {\n    (A(KeyError), [KeyError]),\n    (B(KeyError), [KeyError]),\n}"
        )

        result = cli_runner.invoke(app, ["check", str(path)])

        assert result.exit_code == 1
        assert "Conflict:" in result.output
        assert "variant 'A' and variant 'B'" in result.output

    def test_invalid_config(self, cli_runner: CliRunner, declaration_file: Path, tmp_path: Path):
        config = tmp_path / "bad.toml"
        config.write_text('[emit]\nfrozen = "no"\n')

        result = cli_runner.invoke(app, ["check", str(declaration_file), "-c", str(config)])

        assert result.exit_code == 1
        assert "Config error:" in result.output


class TestInspect:
    def test_json(self, cli_runner: CliRunner, declaration_file: Path):
        result = cli_runner.invoke(app, ["inspect", str(declaration_file), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        enum = data["enums"][0]
        assert enum["name"] == "StorageError"
        assert enum["visibility"] == "pub"
        assert [v["name"] for v in enum["variants"]] == ["Decode", "Missing", "Unknown"]
        assert enum["variants"][0]["conversions"][0]["converter"] == {
            "kind": "implicit",
            "variant": "Decode",
        }

    def test_text(self, cli_runner: CliRunner, declaration_file: Path):
        result = cli_runner.invoke(app, ["inspect", str(declaration_file)])

        assert result.exit_code == 0
        assert "StorageError (pub)" in result.stdout

    def test_unknown_format(self, cli_runner: CliRunner, declaration_file: Path):
        result = cli_runner.invoke(app, ["inspect", str(declaration_file), "-f", "yaml"])

        assert result.exit_code == 1
        assert "Unknown format: yaml" in result.output


class TestVersion:
    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"convertible {__version__}" in result.stdout
