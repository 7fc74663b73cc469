"""
Conversion rule types for convertible IR.

A conversion rule maps one foreign type into one variant of the enclosing
enum. How the foreign value becomes a variant is described by the converter:

    (JsonError, Self.SerializationError)   -> ImplicitConstruct
    (OtherError, |_| Self.Unknown)         -> CallableConverter
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ImplicitConstruct(BaseModel):
    """
    Pass the foreign value directly as the sole field of a variant.

    Attributes:
        variant: Name of the variant to construct (usually the declaring one)
    """

    kind: Literal["implicit"] = "implicit"
    variant: str

    model_config = ConfigDict(frozen=True)


class CallableConverter(BaseModel):
    """
    Apply a single-argument callable to the foreign value.

    Attributes:
        expr: Python expression evaluating to the callable, with closure
            syntax already rewritten to ``lambda`` and ``Self`` resolved
    """

    kind: Literal["callable"] = "callable"
    expr: str

    model_config = ConfigDict(frozen=True)


ConverterKind = Annotated[
    ImplicitConstruct | CallableConverter,
    Field(discriminator="kind"),
]


class ConversionRule(BaseModel):
    """
    One foreign type -> variant mapping.

    Attributes:
        foreign_type: Foreign type reference in Python path syntax
        converter: How the foreign value is turned into the variant
        line: Source line of the rule (1-indexed, 0 when unknown)
    """

    foreign_type: str
    converter: ConverterKind
    line: int = 0

    model_config = ConfigDict(frozen=True)

    @property
    def is_implicit(self) -> bool:
        return isinstance(self.converter, ImplicitConstruct)
