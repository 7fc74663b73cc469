"""
Sum type definitions for convertible IR.

Declaration syntax:

    /// Errors surfaced by the storage layer.
    pub enum StorageError {
        (Serialization(JsonError), [(JsonError, Self.Serialization)]),
        (Unknown, [(OtherError, |_| Self.Unknown)]),
    }
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .conversions import ConversionRule


class Visibility(str, Enum):
    """Visibility of a generated enum."""

    PRIVATE = "private"
    PUBLIC = "pub"
    RESTRICTED = "restricted"  # pub(crate), pub(super), pub(in path)


class VariantSpec(BaseModel):
    """
    A single variant of an enum.

    Attributes:
        name: Variant identifier, unique within the enum
        fields: Positional field types; None for a unit variant
        conversions: Foreign types convertible into this variant, in order
        attributes: Decorator expressions applied to the variant class
        doc: Doc comment lines
        line: Source line (1-indexed, 0 when unknown)
    """

    name: str
    fields: list[str] | None = None
    conversions: list[ConversionRule] = Field(default_factory=list)
    attributes: list[str] = Field(default_factory=list)
    doc: list[str] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_unit(self) -> bool:
        """Check if the variant carries no fields at all."""
        return self.fields is None

    @property
    def arity(self) -> int:
        return len(self.fields) if self.fields is not None else 0


class EnumSpec(BaseModel):
    """
    A sum type definition.

    Attributes:
        name: Enum identifier (e.g. StorageError)
        visibility: Declared visibility
        visibility_scope: Scope of a restricted visibility ("crate", "in a.b")
        attributes: Decorator expressions applied to the enum class
        doc: Doc comment lines
        variants: Ordered variants, in declaration order
        line: Source line (1-indexed, 0 when unknown)
    """

    name: str
    visibility: Visibility = Visibility.PRIVATE
    visibility_scope: str | None = None
    attributes: list[str] = Field(default_factory=list)
    doc: list[str] = Field(default_factory=list)
    variants: list[VariantSpec] = Field(default_factory=list)
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    @property
    def visibility_text(self) -> str:
        """Visibility as written in the declaration ("" when private)."""
        if self.visibility == Visibility.PUBLIC:
            return "pub"
        if self.visibility == Visibility.RESTRICTED:
            return f"pub({self.visibility_scope})"
        return ""

    def get_variant(self, name: str) -> VariantSpec | None:
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    def iter_conversions(self) -> Iterator[tuple[VariantSpec, ConversionRule]]:
        """Yield (variant, rule) pairs in declaration order."""
        for variant in self.variants:
            for rule in variant.conversions:
                yield variant, rule

    @property
    def conversion_count(self) -> int:
        return sum(len(v.conversions) for v in self.variants)


class DeclarationFile(BaseModel):
    """
    Everything parsed from one declaration source.

    Attributes:
        file: Source path (for error reporting and output naming)
        imports: Pass-through Python import statements, in order
        enums: Enum declarations, in order
    """

    file: Path | None = None
    imports: list[str] = Field(default_factory=list)
    enums: list[EnumSpec] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
