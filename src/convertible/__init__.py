"""
convertible - code generator for convertible error enums.

A declaration names a sum type and, per variant, the foreign types that
convert into it. convertible parses the declaration and emits the type plus
one conversion routine per foreign type.

Usage:
    from convertible import parse, emit_type, emit_conversions, load_module

    spec = parse(text)
    source = emit_type(spec)
    routines = emit_conversions(spec)

    module = load_module(text, namespace=globals())
"""

from convertible._version import __version__
from convertible.core import ir
from convertible.core.errors import (
    BackendError,
    ConfigError,
    ConflictError,
    ConvertibleError,
    ParseError,
    UnsupportedShapeError,
)
from convertible.core.parser import parse, parse_declarations, parse_files
from convertible.emit.conversions import ConversionRoutine, emit_conversions
from convertible.emit.module import render_module
from convertible.emit.types import emit_type
from convertible.runtime import define, load_module

__all__ = [
    "__version__",
    "ir",
    # Parsing
    "parse",
    "parse_declarations",
    "parse_files",
    # Emission
    "ConversionRoutine",
    "emit_conversions",
    "emit_type",
    "render_module",
    # Runtime
    "define",
    "load_module",
    # Errors
    "BackendError",
    "ConfigError",
    "ConflictError",
    "ConvertibleError",
    "ParseError",
    "UnsupportedShapeError",
]
