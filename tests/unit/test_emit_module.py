"""Tests for whole-module rendering."""

from pathlib import Path

from convertible import __version__
from convertible.core.manifest import EmitConfig
from convertible.core.parser import parse_declarations
from convertible.emit.conversions import emit_conversions
from convertible.emit.module import ExportsGenerator, ModuleGenerator, render_module


class TestRenderModule:
    def test_header_and_imports(self):
        declarations = parse_declarations(
            "from json import JSONDecodeError\nenum E { (A(JSONDecodeError), [JSONDecodeError]) }",
            Path("errors.cvt"),
        )
        source = render_module(declarations)

        assert source.startswith(
            f"# Generated by convertible {__version__} from errors.cvt. DO NOT EDIT.\n"
            "from __future__ import annotations\n"
            "\n"
            "import dataclasses\n"
            "import functools\n"
            "\n"
            "from json import JSONDecodeError\n"
        )
        assert source.endswith("\n")
        assert not source.endswith("\n\n")

    def test_extra_header_lines(self, my_error_text: str):
        declarations = parse_declarations(my_error_text)
        source = render_module(declarations, header="Owner: storage\nEdit errors.cvt")
        assert "DO NOT EDIT.\n# Owner: storage\n# Edit errors.cvt\n" in source

    def test_section_order(self, my_error_text: str):
        source = render_module(parse_declarations(my_error_text))

        positions = [
            source.index("class MyError:"),
            source.index("class _MyError_SerializationError"),
            source.index("class _MyError_Unknown"),
            source.index("def my_error_from_json_error"),
            source.index("def my_error_from_other_error"),
            source.index("def into_my_error"),
            source.index("__all__ = ["),
        ]
        assert positions == sorted(positions)

    def test_exports_public_enums_only(self):
        source = render_module(parse_declarations("pub enum A { (X) } enum B { (Y) }"))
        assert '__all__ = [\n    "A",\n    "into_a",\n]' in source

    def test_no_public_enums(self):
        source = render_module(parse_declarations("enum B { (Y) }"))
        assert source.endswith("__all__: list[str] = []\n")

    def test_deterministic(self, my_error_text: str):
        first = render_module(parse_declarations(my_error_text))
        second = render_module(parse_declarations(my_error_text))
        assert first == second

    def test_config_applies_to_all_parts(self, my_error_text: str):
        config = EmitConfig(frozen=False, base_class="Exception", dispatcher_prefix="to_")
        source = render_module(parse_declarations(my_error_text), config)

        assert "class MyError(Exception):" in source
        assert "frozen=True" not in source
        assert "def to_my_error(" in source
        assert '    "to_my_error",' in source


class TestModuleGenerator:
    def test_artifacts(self, my_error_text: str):
        result = ModuleGenerator(parse_declarations(my_error_text)).generate()

        assert result.artifacts["dispatcher:MyError"] == "into_my_error"
        assert [r.function_name for r in result.artifacts["routines:MyError"]] == [
            "my_error_from_json_error",
            "my_error_from_other_error",
        ]
        assert set(result.artifacts) == {"routines:MyError", "dispatcher:MyError"}
        assert result.warnings == []

    def test_exports_follow_conversion_artifacts(self, my_error_text: str):
        declarations = parse_declarations(my_error_text)
        routines = {"MyError": emit_conversions(declarations.enums[0])}
        result = ExportsGenerator(
            declarations, routines=routines, dispatchers={"MyError": "as_my_error"}
        ).generate()

        assert result.sections == [
            "__all__ = [\n"
            '    "MyError",\n'
            '    "as_my_error",\n'
            '    "my_error_from_json_error",\n'
            '    "my_error_from_other_error",\n'
            "]"
        ]
