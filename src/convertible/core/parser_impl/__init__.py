"""
convertible declaration parser package.

The parser is built from mixins, one per construct:

- TypeParserMixin: types, decorators, raw expressions
- ConversionParserMixin: conversion lists and converters
- EnumParserMixin: enum declarations and variant entries
- ModuleParserMixin: imports and file structure

Usage:
    from convertible.core.parser_impl import parse_dsl

    declarations = parse_dsl(text, file)
"""

from pathlib import Path

from .. import ir
from ..lexer import tokenize
from .base import BaseParser
from .conversions import ConversionParserMixin
from .enum import EnumParserMixin
from .module import ModuleParserMixin
from .types import TypeParserMixin


class Parser(
    BaseParser,
    TypeParserMixin,
    ConversionParserMixin,
    EnumParserMixin,
    ModuleParserMixin,
):
    """
    Complete convertible declaration parser.

    Composes the parser mixins into a recursive descent parser over the
    token stream produced by the lexer.
    """

    pass


def parse_dsl(text: str, file: Path) -> ir.DeclarationFile:
    """
    Parse declaration text.

    Args:
        text: Declaration source
        file: Source file path (for error reporting)

    Returns:
        DeclarationFile with imports and validated enums
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, text)
    return parser.parse_file()


__all__ = ["Parser", "parse_dsl"]
