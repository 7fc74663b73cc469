"""
convertible core: lexer, parser, IR, validation, and configuration.
"""

from .errors import (
    BackendError,
    ConfigError,
    ConflictError,
    ConvertibleError,
    ParseError,
    UnsupportedShapeError,
)
from .parser import parse, parse_declarations, parse_files

__all__ = [
    "BackendError",
    "ConfigError",
    "ConflictError",
    "ConvertibleError",
    "ParseError",
    "UnsupportedShapeError",
    "parse",
    "parse_declarations",
    "parse_files",
]
