"""
Enum parser mixin for convertible declarations.

Declaration syntax:

    @errors.register
    /// Errors surfaced by the storage layer.
    pub enum StorageError {
        (Serialization(JsonError), [(JsonError, Self.Serialization)]),
        /// Anything we could not classify.
        (Unknown, [(OtherError, |_| Self.Unknown)]),
    }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import UnsupportedShapeError
from ..lexer import TokenType
from ..validator import validate_enum

RESTRICTED_SCOPES = ("crate", "super", "self")


class EnumParserMixin:
    """Parser mixin for enum declarations."""

    if TYPE_CHECKING:
        file: Any
        expect: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any
        peek_token: Any
        expect_identifier_or_keyword: Any
        parse_decorator: Any
        parse_type: Any
        parse_conversion_list: Any

    def parse_attributes(self) -> tuple[list[str], list[str]]:
        """
        Parse leading decorators and doc comments.

        Returns:
            Tuple of (decorator expressions, doc comment lines)
        """
        attributes: list[str] = []
        doc: list[str] = []
        while self.match(TokenType.AT, TokenType.DOC_COMMENT):
            if self.match(TokenType.DOC_COMMENT):
                doc.append(self.advance().value)
            else:
                self.advance()
                attributes.append(self.parse_decorator())
        return attributes, doc

    def parse_visibility(self) -> tuple[ir.Visibility, str | None]:
        """
        Parse an optional visibility.

        Grammar:
            "pub" ( "(" ( "crate" | "super" | "self" | "in" path ) ")" )?
        """
        if not self.match(TokenType.PUB):
            return ir.Visibility.PRIVATE, None
        self.advance()

        if not self.match(TokenType.LPAREN):
            return ir.Visibility.PUBLIC, None
        self.advance()

        token = self.expect_identifier_or_keyword()
        if token.value in RESTRICTED_SCOPES:
            scope = token.value
        elif token.value == "in":
            parts = [self.expect_identifier_or_keyword().value]
            while self.match(TokenType.DOT, TokenType.DOUBLE_COLON):
                self.advance()
                parts.append(self.expect_identifier_or_keyword().value)
            scope = "in " + ".".join(parts)
        else:
            raise self.error(
                f"Unknown visibility scope {token.value!r} "
                f"(expected one of: crate, super, self, in <path>)",
                token,
            )

        self.expect(TokenType.RPAREN)
        return ir.Visibility.RESTRICTED, scope

    def parse_enum(self) -> ir.EnumSpec:
        """
        Parse an enum declaration.

        Grammar:
            attr* visibility? "enum" NAME "{" variantEntry ("," variantEntry)* ","? "}"

        Returns:
            Validated EnumSpec

        Raises:
            ParseError: On grammar mismatch
            UnsupportedShapeError: On record variants or named fields
            ConflictError: On duplicate variants or foreign types
        """
        attributes, doc = self.parse_attributes()
        visibility, scope = self.parse_visibility()

        if not self.match(TokenType.ENUM):
            token = self.current_token()
            found = "end of input" if token.type == TokenType.EOF else repr(token.value)
            raise self.error(f"Expected 'enum', got {found}", token)
        enum_token = self.advance()
        name = self.expect_identifier_or_keyword().value

        self.expect(TokenType.LBRACE)
        if self.match(TokenType.RBRACE):
            raise self.error(f"Enum '{name}' must declare at least one variant")

        variants: list[ir.VariantSpec] = []
        while True:
            variants.append(self.parse_variant_entry(name))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
            if self.match(TokenType.RBRACE):
                break

        self.expect(TokenType.RBRACE)

        spec = ir.EnumSpec(
            name=name,
            visibility=visibility,
            visibility_scope=scope,
            attributes=attributes,
            doc=doc,
            variants=variants,
            line=enum_token.line,
        )
        validate_enum(spec, self.file)
        return spec

    def parse_variant_entry(self, enum_name: str) -> ir.VariantSpec:
        """
        Parse one parenthesized variant entry.

        Grammar:
            attr* "(" attr* VARIANT tupleFields? ("," conversionList)? ")"
        """
        outer_attributes, outer_doc = self.parse_attributes()

        if self.match(TokenType.IDENTIFIER):
            token = self.current_token()
            raise self.error(
                f"Variant entries must be wrapped in parentheses: ({token.value}, [...])",
                token,
            )
        self.expect(TokenType.LPAREN)

        inner_attributes, inner_doc = self.parse_attributes()
        name_token = self.expect_identifier_or_keyword()
        name = name_token.value

        fields: list[str] | None = None
        if self.match(TokenType.LPAREN):
            fields = self.parse_tuple_fields(enum_name, name)
        elif self.match(TokenType.LBRACE):
            raise self.error(
                f"Variant '{name}' uses named fields; "
                f"only unit and tuple variants are supported",
                error_cls=UnsupportedShapeError,
            )

        conversions: list[ir.ConversionRule] = []
        if self.match(TokenType.COMMA):
            self.advance()
            conversions = self.parse_conversion_list(enum_name, name)

        self.expect(TokenType.RPAREN)

        return ir.VariantSpec(
            name=name,
            fields=fields,
            conversions=conversions,
            attributes=outer_attributes + inner_attributes,
            doc=outer_doc + inner_doc,
            line=name_token.line,
        )

    def parse_tuple_fields(self, enum_name: str, variant_name: str) -> list[str]:
        """Parse ``(Type, Type, ...)``; an empty list is a zero-field tuple variant."""
        self.expect(TokenType.LPAREN)

        fields: list[str] = []
        while not self.match(TokenType.RPAREN):
            if self.match(TokenType.IDENTIFIER) and self.peek_token().type == TokenType.COLON:
                raise self.error(
                    f"Variant '{variant_name}' declares named field "
                    f"'{self.current_token().value}'; only positional fields are supported",
                    error_cls=UnsupportedShapeError,
                )

            fields.append(self.parse_type(enum_name))

            if self.match(TokenType.COMMA):
                self.advance()
            elif not self.match(TokenType.RPAREN):
                raise self.error(f"Expected ',' or ')' in fields of variant '{variant_name}'")

        self.expect(TokenType.RPAREN)
        return fields
