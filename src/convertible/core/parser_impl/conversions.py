"""
Conversion list parser mixin for convertible declarations.

Parses the optional second member of a variant entry:

    [(JsonError, Self.Serialization), (OtherError, |_| Self.Unknown), IoError]

A bare variant path converter (``Self.Variant``) and a bare foreign type both
become ImplicitConstruct; every other converter expression is kept as a
callable. Closures written as ``|x| body`` are rewritten to ``lambda x: body``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from .types import SELF_NAME


class ConversionParserMixin:
    """Parser mixin for conversion lists."""

    if TYPE_CHECKING:
        tokens: Any
        expect: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        capture_balanced: Any
        render_tokens: Any
        parse_type: Any

    def parse_conversion_list(self, enum_name: str, variant_name: str) -> list[ir.ConversionRule]:
        """
        Parse a conversion list.

        Grammar:
            "[" item ("," item)* ","? "]"
            item ::= "(" ForeignType "," converterExpr ")" | ForeignType
        """
        self.expect(TokenType.LBRACKET)
        if self.match(TokenType.RBRACKET):
            raise self.error(f"Conversion list of variant '{variant_name}' is empty")

        rules: list[ir.ConversionRule] = []
        while True:
            rules.append(self.parse_conversion_item(enum_name, variant_name))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
            if self.match(TokenType.RBRACKET):
                break

        self.expect(TokenType.RBRACKET)
        return rules

    def parse_conversion_item(self, enum_name: str, variant_name: str) -> ir.ConversionRule:
        start_token = self.current_token()

        if self.match(TokenType.LPAREN):
            self.advance()
            foreign_type = self.parse_type(enum_name)
            self.expect(TokenType.COMMA)
            converter = self.parse_converter(enum_name)
            if self.match(TokenType.COMMA):
                raise self.error(
                    "A conversion pair holds exactly a foreign type and a converter"
                )
            self.expect(TokenType.RPAREN)
        else:
            # Type-to-type form: the foreign value becomes the variant's field
            foreign_type = self.parse_type(enum_name)
            converter = ir.ImplicitConstruct(variant=variant_name)

        return ir.ConversionRule(
            foreign_type=foreign_type,
            converter=converter,
            line=start_token.line,
        )

    def parse_converter(self, enum_name: str) -> ir.ImplicitConstruct | ir.CallableConverter:
        if self.match(TokenType.PIPE):
            return self._parse_closure(enum_name)

        start, end = self.capture_balanced(
            (TokenType.COMMA, TokenType.RPAREN), "converter expression"
        )
        variant = self._variant_path(start, end, enum_name)
        if variant is not None:
            return ir.ImplicitConstruct(variant=variant)
        return ir.CallableConverter(expr=self.render_tokens(start, end, enum_name))

    def _variant_path(self, start: int, end: int, enum_name: str) -> str | None:
        """Return the variant name if the run is exactly ``Self.Variant``."""
        run = self.tokens[start:end]
        if (
            len(run) == 3
            and run[0].type == TokenType.IDENTIFIER
            and run[0].value in (SELF_NAME, enum_name)
            and run[1].type in (TokenType.DOT, TokenType.DOUBLE_COLON)
            and run[2].type == TokenType.IDENTIFIER
        ):
            return str(run[2].value)
        return None

    def _parse_closure(self, enum_name: str) -> ir.CallableConverter:
        """
        Parse ``|param| body`` (parameter type annotations are dropped).
        """
        opener = self.expect(TokenType.PIPE)
        params: list[str] = []

        while not self.match(TokenType.PIPE):
            params.append(self.expect_identifier_or_keyword().value)
            if self.match(TokenType.COLON):
                self.advance()
                self.capture_balanced((TokenType.COMMA, TokenType.PIPE), "closure parameter type")
            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.PIPE):
                raise self.error("Expected ',' or '|' in closure parameters")

        self.expect(TokenType.PIPE)
        if len(params) != 1:
            raise self.error(
                f"Converter closures take exactly one argument, got {len(params)}", opener
            )
        if self.match(TokenType.LBRACE):
            raise self.error("Closure body must be a single expression, not a block")

        start, end = self.capture_balanced((TokenType.COMMA, TokenType.RPAREN), "closure body")
        body = self.render_tokens(start, end, enum_name)
        return ir.CallableConverter(expr=f"lambda {params[0]}: {body}")
