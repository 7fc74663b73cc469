"""
Sum-type emission.

Renders an EnumSpec as a base class plus one dataclass per variant:

    # pub enum MyError
    class MyError:
        __variants__ = ("SerializationError", "Unknown")


    @dataclasses.dataclass(frozen=True)
    class _MyError_SerializationError(MyError):
        __qualname__ = "MyError.SerializationError"
        _0: JsonError


    MyError.SerializationError = _MyError_SerializationError

Unit variants are bound as singleton instances (``MyError.Unknown``); tuple
variants are bound as classes (``MyError.SerializationError(err)``).
"""

from __future__ import annotations

from convertible.core import ir
from convertible.core.manifest import EmitConfig

from .generator import SECTION_SEPARATOR, Generator, GeneratorResult
from .utils import docstring


def variant_class_name(spec: ir.EnumSpec, variant: ir.VariantSpec) -> str:
    """Module-level name of the class backing a variant."""
    return f"_{spec.name}_{variant.name}"


def declaration_comment(spec: ir.EnumSpec) -> str:
    """``# pub(crate) enum MyError`` style header preserving visibility."""
    visibility = spec.visibility_text
    return f"# {visibility} enum {spec.name}" if visibility else f"# enum {spec.name}"


def _emit_base(spec: ir.EnumSpec, config: EmitConfig) -> str:
    lines = [declaration_comment(spec)]
    lines.extend(f"@{attribute}" for attribute in spec.attributes)

    base = f"({config.base_class})" if config.base_class else ""
    lines.append(f"class {spec.name}{base}:")
    lines.extend(docstring(spec.doc))
    if spec.doc:
        lines.append("")

    names = ", ".join(f'"{v.name}"' for v in spec.variants)
    trailing = "," if len(spec.variants) == 1 else ""
    lines.append(f"    __variants__ = ({names}{trailing})")
    return "\n".join(lines)


def _emit_variant(spec: ir.EnumSpec, variant: ir.VariantSpec, config: EmitConfig) -> str:
    class_name = variant_class_name(spec, variant)

    lines = [f"@{attribute}" for attribute in variant.attributes]
    lines.append(f"@dataclasses.dataclass(frozen={config.frozen})")
    lines.append(f"class {class_name}({spec.name}):")
    lines.extend(docstring(variant.doc))
    lines.append(f'    __qualname__ = "{spec.name}.{variant.name}"')

    for index, field_type in enumerate(variant.fields or []):
        lines.append(f"    _{index}: {field_type}")

    if variant.is_unit:
        lines.append("")
        lines.append("    def __repr__(self) -> str:")
        lines.append(f'        return "{spec.name}.{variant.name}"')

    binding = f"{class_name}()" if variant.is_unit else class_name
    return "\n".join(lines) + f"\n\n\n{spec.name}.{variant.name} = {binding}"


def emit_type(spec: ir.EnumSpec, config: EmitConfig | None = None) -> str:
    """
    Render the sum-type definition for ``spec``.

    Visibility, attributes, docs, variant order and field types are
    reproduced verbatim; conversion lists are not part of the type.
    """
    config = config or EmitConfig()
    blocks = [_emit_base(spec, config)]
    blocks.extend(_emit_variant(spec, variant, config) for variant in spec.variants)
    return SECTION_SEPARATOR.join(blocks)


class TypeGenerator(Generator):
    """Renders the type definition of one enum."""

    def __init__(
        self,
        declarations: ir.DeclarationFile,
        enum: ir.EnumSpec,
        config: EmitConfig | None = None,
    ):
        super().__init__(declarations, config)
        self.enum = enum

    def generate(self) -> GeneratorResult:
        result = GeneratorResult()
        result.add_section(emit_type(self.enum, self.config))
        return result
