"""
Conversion routine emission.

Every conversion rule becomes one function from the foreign type to the enum,
and every enum gets a ``functools.singledispatch`` dispatcher with those
functions registered by foreign type:

    def my_error_from_json_error(value: JsonError) -> MyError:
        return MyError.SerializationError(value)


    @functools.singledispatch
    def into_my_error(value: object) -> MyError:
        ...


    into_my_error.register(JsonError, my_error_from_json_error)
    MyError.convert = staticmethod(into_my_error)
"""

from __future__ import annotations

from dataclasses import dataclass

from convertible.core import ir
from convertible.core.manifest import EmitConfig

from .generator import Generator, GeneratorResult
from .utils import snake_case, type_slug

CONVERT_ATTRIBUTE = "convert"


@dataclass(frozen=True)
class ConversionRoutine:
    """
    One rendered conversion routine.

    Attributes:
        foreign_type: Type the routine converts from (its dispatch key)
        variant: Variant the declaring rule belongs to
        function_name: Name of the generated function
        source: Function source text
    """

    foreign_type: str
    variant: str
    function_name: str
    source: str


def dispatcher_name(spec: ir.EnumSpec, config: EmitConfig | None = None) -> str:
    prefix = (config or EmitConfig()).dispatcher_prefix
    return f"{prefix}{snake_case(spec.name)}"


def _routine_body(spec: ir.EnumSpec, rule: ir.ConversionRule) -> str:
    converter = rule.converter
    if isinstance(converter, ir.ImplicitConstruct):
        return f"return {spec.name}.{converter.variant}(value)"
    return f"return ({converter.expr})(value)"


def emit_conversions(spec: ir.EnumSpec) -> list[ConversionRoutine]:
    """
    Render one routine per conversion rule, in declaration order.

    Function names are derived from the foreign type; when two types map to
    the same name the later one gets a numeric suffix.
    """
    routines: list[ConversionRoutine] = []
    used: set[str] = set()
    prefix = snake_case(spec.name)

    for variant, rule in spec.iter_conversions():
        base = f"{prefix}_from_{type_slug(rule.foreign_type)}"
        name = base
        suffix = 2
        while name in used:
            name = f"{base}_{suffix}"
            suffix += 1
        used.add(name)

        source = "\n".join(
            [
                f"def {name}(value: {rule.foreign_type}) -> {spec.name}:",
                f"    {_routine_body(spec, rule)}",
            ]
        )
        routines.append(
            ConversionRoutine(
                foreign_type=rule.foreign_type,
                variant=variant.name,
                function_name=name,
                source=source,
            )
        )

    return routines


def emit_dispatcher(
    spec: ir.EnumSpec,
    routines: list[ConversionRoutine],
    config: EmitConfig | None = None,
) -> str:
    """Render the singledispatch dispatcher and its registrations."""
    name = dispatcher_name(spec, config)
    lines = [
        "@functools.singledispatch",
        f"def {name}(value: object) -> {spec.name}:",
        f'    """Convert ``value`` into {spec.name} by the conversion registered for its type."""',
        "    raise TypeError(",
        f'        f"no conversion from {{type(value).__qualname__!r}} into {spec.name}"',
        "    )",
    ]

    registrations = [
        f"{name}.register({routine.foreign_type}, {routine.function_name})" for routine in routines
    ]
    if spec.get_variant(CONVERT_ATTRIBUTE) is None:
        registrations.append(f"{spec.name}.{CONVERT_ATTRIBUTE} = staticmethod({name})")

    if registrations:
        return "\n".join(lines) + "\n\n\n" + "\n".join(registrations)
    return "\n".join(lines)


class ConversionGenerator(Generator):
    """Renders the conversion routines and dispatcher of one enum."""

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
        routines = emit_conversions(self.enum)
        for routine in routines:
            result.add_section(routine.source)
        result.add_section(emit_dispatcher(self.enum, routines, self.config))

        result.add_artifact(f"routines:{self.enum.name}", routines)
        result.add_artifact(f"dispatcher:{self.enum.name}", dispatcher_name(self.enum, self.config))
        return result
