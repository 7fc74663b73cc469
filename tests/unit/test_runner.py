"""Tests for the generation runner."""

from pathlib import Path

import pytest

from convertible.core.errors import BackendError, ParseError
from convertible.core.manifest import OutputConfig, ProjectManifest
from convertible.emit.runner import GenerationRunner, output_name, write_atomic


class TestOutputName:
    def test_hyphens_become_underscores(self):
        assert output_name(Path("errors/storage-errors.cvt")) == "storage_errors.py"


class TestGenerationRunner:
    def test_writes_modules(self, declaration_file: Path, tmp_path: Path):
        out = tmp_path / "generated"
        run = GenerationRunner(output_dir=out).run([declaration_file])

        target = out / "storage_errors.py"
        assert run.result.files_created == [target]
        assert target.read_text() == run.modules[0].source
        assert "class StorageError:" in target.read_text()
        assert run.enum_count == 1

    def test_output_dir_from_manifest(self, declaration_file: Path, tmp_path: Path):
        manifest = ProjectManifest(project_root=tmp_path, output=OutputConfig(dir="gen"))
        GenerationRunner(manifest).run([declaration_file])

        assert (tmp_path / "gen" / "storage_errors.py").exists()

    def test_header_from_manifest(self, declaration_file: Path):
        manifest = ProjectManifest(output=OutputConfig(header="Owned by storage"))
        run = GenerationRunner(manifest).run([declaration_file])

        assert "# Owned by storage\n" in run.modules[0].source

    def test_dry_run_writes_nothing(self, declaration_file: Path, tmp_path: Path):
        out = tmp_path / "generated"
        run = GenerationRunner(output_dir=out).run([declaration_file], dry_run=True)

        assert not out.exists()
        assert run.modules[0].target == out / "storage_errors.py"
        assert run.result.files_created == []

    def test_no_output_dir_renders_only(self, declaration_file: Path):
        run = GenerationRunner().run([declaration_file])

        assert run.modules[0].target is None
        assert run.result.files_created == []

    def test_error_in_any_file_writes_nothing(self, declaration_file: Path, tmp_path: Path):
        broken = tmp_path / "broken.cvt"
        broken.write_text("enum Broken { A }")
        out = tmp_path / "generated"

        with pytest.raises(ParseError):
            GenerationRunner(output_dir=out).run([declaration_file, broken])
        assert not out.exists()

    def test_output_path_is_a_file(self, declaration_file: Path, tmp_path: Path):
        out = tmp_path / "generated"
        out.write_text("")

        with pytest.raises(BackendError, match="not a directory"):
            GenerationRunner(output_dir=out).run([declaration_file])

    def test_colliding_outputs(self, declaration_file: Path, tmp_path: Path):
        other = tmp_path / "other"
        other.mkdir()
        twin = other / declaration_file.name
        twin.write_text(declaration_file.read_text())

        with pytest.raises(BackendError, match="same output module"):
            GenerationRunner(output_dir=tmp_path / "generated").run([declaration_file, twin])

    def test_file_without_enums_warns(self, tmp_path: Path):
        empty = tmp_path / "empty.cvt"
        empty.write_text("import json\n")

        run = GenerationRunner().run([empty])
        assert run.result.warnings == [f"{empty}: no enum declarations"]


class TestWriteAtomic:
    def test_replaces_content(self, tmp_path: Path):
        target = tmp_path / "out" / "module.py"
        write_atomic(target, "first\n")
        write_atomic(target, "second\n")

        assert target.read_text() == "second\n"
        assert [p.name for p in target.parent.iterdir()] == ["module.py"]
