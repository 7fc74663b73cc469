"""
Whole-module emission.

A generated module holds, in order: a header comment and imports, then for
each enum its type definition followed by its conversions, then ``__all__``.
"""

from __future__ import annotations

import logging

from convertible._version import __version__
from convertible.core import ir
from convertible.core.manifest import EmitConfig

from .conversions import ConversionGenerator, ConversionRoutine, dispatcher_name
from .generator import CompositeGenerator, Generator, GeneratorResult
from .types import TypeGenerator

logger = logging.getLogger(__name__)

RUNTIME_IMPORTS = ["import dataclasses", "import functools"]


class HeaderGenerator(Generator):
    """Module comment, ``__future__`` import, runtime and pass-through imports."""

    def __init__(
        self,
        declarations: ir.DeclarationFile,
        config: EmitConfig | None = None,
        header: str | None = None,
    ):
        super().__init__(declarations, config)
        self.header = header

    def generate(self) -> GeneratorResult:
        source = self.declarations.file.name if self.declarations.file else "<string>"
        lines = [f"# Generated by convertible {__version__} from {source}. DO NOT EDIT."]
        if self.header:
            lines.extend(f"# {line}".rstrip() for line in self.header.splitlines())
        lines.append("from __future__ import annotations")
        lines.append("")
        lines.extend(RUNTIME_IMPORTS)
        if self.declarations.imports:
            lines.append("")
            lines.extend(self.declarations.imports)

        result = GeneratorResult()
        result.add_section("\n".join(lines))
        return result


class ExportsGenerator(Generator):
    """``__all__`` listing public enums with their dispatchers and routines."""

    def __init__(
        self,
        declarations: ir.DeclarationFile,
        config: EmitConfig | None = None,
        routines: dict[str, list[ConversionRoutine]] | None = None,
        dispatchers: dict[str, str] | None = None,
    ):
        super().__init__(declarations, config)
        self.routines = routines or {}
        self.dispatchers = dispatchers or {}

    def generate(self) -> GeneratorResult:
        names: list[str] = []
        for enum in self.declarations.enums:
            if not enum.is_public:
                continue
            names.append(enum.name)
            names.append(self.dispatchers.get(enum.name) or dispatcher_name(enum, self.config))
            names.extend(r.function_name for r in self.routines.get(enum.name, []))

        result = GeneratorResult()
        if names:
            body = "".join(f'    "{name}",\n' for name in names)
            result.add_section(f"__all__ = [\n{body}]")
        else:
            result.add_section("__all__: list[str] = []")
        return result


class ModuleGenerator(CompositeGenerator):
    """Renders a complete module for one declaration file."""

    def __init__(
        self,
        declarations: ir.DeclarationFile,
        config: EmitConfig | None = None,
        header: str | None = None,
    ):
        super().__init__(declarations, config)
        self.header = header

    def get_generators(self) -> list[Generator]:
        generators: list[Generator] = [
            HeaderGenerator(self.declarations, self.config, self.header)
        ]
        for enum in self.declarations.enums:
            generators.append(TypeGenerator(self.declarations, enum, self.config))
            generators.append(ConversionGenerator(self.declarations, enum, self.config))
        return generators

    def generate(self) -> GeneratorResult:
        result = super().generate()

        routines = {
            enum.name: result.artifacts.get(f"routines:{enum.name}", [])
            for enum in self.declarations.enums
        }
        dispatchers = {
            enum.name: result.artifacts[f"dispatcher:{enum.name}"]
            for enum in self.declarations.enums
            if f"dispatcher:{enum.name}" in result.artifacts
        }
        exports = ExportsGenerator(self.declarations, self.config, routines, dispatchers)
        result.merge(exports.generate())

        logger.debug(
            "Rendered %d enum(s) from %s",
            len(self.declarations.enums),
            self.declarations.file or "<string>",
        )
        return result


def render_module(
    declarations: ir.DeclarationFile,
    config: EmitConfig | None = None,
    header: str | None = None,
) -> str:
    """
    Render a declaration file as Python module source.

    Output is deterministic: identical input yields byte-identical text.
    """
    return ModuleGenerator(declarations, config, header).generate().source
