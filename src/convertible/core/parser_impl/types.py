"""
Type and expression parser mixin for convertible declarations.

Types and callable expressions are not interpreted: they are captured as
balanced token runs and rendered back to source text, with ``::`` paths
rewritten to ``.`` and ``Self`` resolved to the enclosing enum name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..lexer import TokenType

OPENERS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}
CLOSERS = set(OPENERS.values())

SELF_NAME = "Self"


class TypeParserMixin:
    """Parser mixin for types, decorators, and raw expressions."""

    if TYPE_CHECKING:
        tokens: Any
        text: Any
        pos: Any
        expect: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any
        parse_dotted_name: Any

    def capture_balanced(self, stops: tuple[TokenType, ...], what: str) -> tuple[int, int]:
        """
        Consume tokens up to (not including) a stop token at bracket depth 0.

        Returns:
            Half-open token index range of the captured run

        Raises:
            ParseError: On an empty run, unbalanced brackets, or end of input
        """
        start = self.pos
        stack: list[TokenType] = []

        while True:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error(f"Unexpected end of input while reading {what}", token)
            if not stack and token.type in stops:
                break
            if token.type in OPENERS:
                stack.append(OPENERS[token.type])
            elif token.type in CLOSERS:
                if not stack or stack[-1] != token.type:
                    raise self.error(f"Unbalanced '{token.value}' in {what}", token)
                stack.pop()
            self.advance()

        if self.pos == start:
            raise self.error(f"Expected {what}, got {self.current_token().value!r}")
        return start, self.pos

    def render_tokens(self, start: int, end: int, enum_name: str | None = None) -> str:
        """Render a token run back to source text."""
        parts: list[str] = []
        prev = None
        for token in self.tokens[start:end]:
            if prev is not None:
                gap = self.text[prev.end : token.offset]
                joins_path = {prev.type, token.type} & {TokenType.DOT, TokenType.DOUBLE_COLON}
                if gap and not joins_path:
                    parts.append(" ")

            if token.type == TokenType.DOUBLE_COLON:
                parts.append(".")
            elif token.type == TokenType.IDENTIFIER and token.value == SELF_NAME and enum_name:
                parts.append(enum_name)
            else:
                parts.append(self.text[token.offset : token.end])
            prev = token
        return "".join(parts)

    def parse_type(self, enum_name: str | None = None) -> str:
        """
        Parse a type reference such as ``int``, ``json.JSONDecodeError``,
        ``dict[str, list[int]]`` or ``serde_json::Error``.
        """
        token = self.current_token()
        if token.type not in (TokenType.IDENTIFIER, TokenType.ENUM, TokenType.PUB):
            found = "end of input" if token.type == TokenType.EOF else repr(token.value)
            raise self.error(f"Expected type, got {found}", token)

        start, end = self.capture_balanced(
            (TokenType.COMMA, TokenType.RPAREN, TokenType.RBRACKET), "type"
        )
        return self.render_tokens(start, end, enum_name)

    def parse_decorator(self) -> str:
        """
        Parse a decorator attribute after its ``@``.

        Grammar:
            dotted_name ( "(" balanced ")" )?

        Call arguments must follow the name without whitespace, so that
        ``@deprecated (Legacy)`` decorates the variant entry ``(Legacy)``.
        """
        start = self.pos
        self.parse_dotted_name()
        name_end = self.tokens[self.pos - 1].end
        if self.match(TokenType.LPAREN) and self.current_token().offset == name_end:
            self.advance()
            if not self.match(TokenType.RPAREN):
                self.capture_balanced((TokenType.RPAREN,), "decorator arguments")
            self.expect(TokenType.RPAREN)
        return self.render_tokens(start, self.pos)
