"""
convertible Intermediate Representation (IR) types.

Types are organized into submodules; all of them are re-exported here.
"""

from .conversions import (
    CallableConverter,
    ConversionRule,
    ConverterKind,
    ImplicitConstruct,
)
from .enums import (
    DeclarationFile,
    EnumSpec,
    VariantSpec,
    Visibility,
)

__all__ = [
    # Conversions
    "CallableConverter",
    "ConversionRule",
    "ConverterKind",
    "ImplicitConstruct",
    # Enums
    "DeclarationFile",
    "EnumSpec",
    "VariantSpec",
    "Visibility",
]
