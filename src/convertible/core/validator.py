"""
Structural validation for parsed enums.

Runs at the end of parsing, on each completed EnumSpec and then on the whole
file, and checks what the generated module needs to be correct:

- enum and variant names are usable as Python identifiers
- variant names are unique
- every implicit conversion targets an existing single-field variant
- foreign types are plain classes the dispatcher can register
- no foreign type is claimed twice across the enum (the generated dispatcher
  would otherwise keep only the last registration)
- enums of one file do not share a name or generated function names
"""

import keyword
import logging
from dataclasses import dataclass, field
from pathlib import Path

from . import ir
from .errors import ParseError, UnsupportedShapeError, make_conflict_error, make_parse_error
from .naming import snake_case

logger = logging.getLogger(__name__)


def normalize_type(type_ref: str) -> str:
    """Canonical form of a type reference for equality checks."""
    return "".join(type_ref.split())


@dataclass
class ConversionTable:
    """
    Foreign types claimed by the variants of one enum.

    Tracks which variant claimed each foreign type so conflicts can name both.
    """

    enum_name: str
    claims: dict[str, ir.VariantSpec] = field(default_factory=dict)

    def add(self, variant: ir.VariantSpec, rule: ir.ConversionRule, file: Path | None) -> None:
        """Record a claim, checking for duplicates."""
        key = normalize_type(rule.foreign_type)
        if key in self.claims:
            existing = self.claims[key]
            raise make_conflict_error(
                f"Foreign type '{rule.foreign_type}' is converted into enum "
                f"'{self.enum_name}' by both variant '{existing.name}' "
                f"and variant '{variant.name}'",
                file,
                rule.line or variant.line,
                1,
            )
        self.claims[key] = variant


def _check_implicit_target(
    spec: ir.EnumSpec,
    variant: ir.VariantSpec,
    rule: ir.ConversionRule,
    file: Path | None,
) -> None:
    if not isinstance(rule.converter, ir.ImplicitConstruct):
        return

    line = rule.line or variant.line or 1
    target = spec.get_variant(rule.converter.variant)
    if target is None:
        raise make_parse_error(
            f"Conversion from '{rule.foreign_type}' refers to unknown variant "
            f"'{rule.converter.variant}' of enum '{spec.name}'",
            file or Path("<string>"),
            line,
            1,
            error_cls=ParseError,
        )
    if target.arity != 1 or target.is_unit:
        shape = "no fields" if target.is_unit else f"{target.arity} fields"
        raise make_parse_error(
            f"Variant '{target.name}' has {shape}; implicit conversion from "
            f"'{rule.foreign_type}' requires exactly one field",
            file or Path("<string>"),
            line,
            1,
            error_cls=UnsupportedShapeError,
        )


def _check_foreign_type(
    variant: ir.VariantSpec,
    rule: ir.ConversionRule,
    file: Path | None,
) -> None:
    # The dispatcher registers on the class itself
    if "[" in rule.foreign_type:
        raise make_parse_error(
            f"Foreign type '{rule.foreign_type}' is a parameterized generic; "
            "conversions dispatch on runtime classes only",
            file or Path("<string>"),
            rule.line or variant.line or 1,
            1,
            error_cls=UnsupportedShapeError,
        )


def _check_name(name: str, what: str, line: int, file: Path | None) -> None:
    if keyword.iskeyword(name):
        raise make_parse_error(
            f"{what} name '{name}' is a Python keyword",
            file or Path("<string>"),
            line or 1,
            1,
        )


def validate_enum(spec: ir.EnumSpec, file: Path | None = None) -> None:
    """
    Validate a parsed enum.

    Raises:
        ConflictError: On duplicate variant names or foreign types
        UnsupportedShapeError: On implicit conversion into a variant
            without exactly one field, or a parameterized foreign type
        ParseError: On keyword names or implicit conversion into an
            unknown variant
    """
    _check_name(spec.name, "Enum", spec.line, file)

    seen: dict[str, ir.VariantSpec] = {}
    for variant in spec.variants:
        _check_name(variant.name, "Variant", variant.line, file)
        if variant.name in seen:
            raise make_conflict_error(
                f"Duplicate variant '{variant.name}' in enum '{spec.name}'",
                file,
                variant.line,
                1,
            )
        seen[variant.name] = variant

    table = ConversionTable(enum_name=spec.name)
    for variant, rule in spec.iter_conversions():
        _check_foreign_type(variant, rule, file)
        _check_implicit_target(spec, variant, rule, file)
        table.add(variant, rule, file)

    logger.debug(
        "Validated enum %s: %d variants, %d conversions",
        spec.name,
        len(spec.variants),
        spec.conversion_count,
    )


def validate_declarations(declarations: ir.DeclarationFile) -> None:
    """
    Validate the enums of one declaration file against each other.

    All enums of a file share one generated module, so two enums must not
    share a name or derive the same snake_case stem (``HTTPError`` and
    ``HttpError`` would both own ``into_http_error``).

    Raises:
        ConflictError: On duplicate enum names or colliding generated names
    """
    file = declarations.file
    by_name: dict[str, ir.EnumSpec] = {}
    by_stem: dict[str, ir.EnumSpec] = {}

    for spec in declarations.enums:
        if spec.name in by_name:
            raise make_conflict_error(
                f"Duplicate enum '{spec.name}' "
                f"(first defined on line {by_name[spec.name].line})",
                file,
                spec.line,
                1,
            )
        by_name[spec.name] = spec

        stem = snake_case(spec.name)
        if stem in by_stem:
            raise make_conflict_error(
                f"Enums '{by_stem[stem].name}' and '{spec.name}' generate the same "
                f"function names ('{stem}')",
                file,
                spec.line,
                1,
            )
        by_stem[stem] = spec
