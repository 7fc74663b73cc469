"""
Base parser class for convertible declarations.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from pathlib import Path

from ..errors import ParseError, extract_snippet, make_parse_error
from ..lexer import Token, TokenType

# Keywords that are also valid Python identifiers
KEYWORD_AS_IDENTIFIER_TYPES = (
    TokenType.ENUM,
    TokenType.PUB,
)


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: Path, text: str = ""):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            text: Source text the tokens were read from
        """
        self.tokens = tokens
        self.file = file
        self.text = text
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def error(
        self,
        message: str,
        token: Token | None = None,
        error_cls: type[ParseError] = ParseError,
    ) -> ParseError:
        """Build an error located at ``token`` (default: the current token)."""
        token = token or self.current_token()
        snippet = extract_snippet(self.text, token.line) if self.text else None
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            snippet,
            error_cls=error_cls,
        )

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            found = "end of input" if token.type == TokenType.EOF else repr(token.value)
            raise self.error(f"Expected '{token_type.value}', got {found}", token)
        return self.advance()

    def expect_identifier_or_keyword(self) -> Token:
        """Expect an identifier, accepting keywords that are valid Python names."""
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES:
            return self.advance()
        found = "end of input" if token.type == TokenType.EOF else repr(token.value)
        raise self.error(f"Expected identifier, got {found}", token)

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def parse_dotted_name(self) -> str:
        """Parse dotted name (e.g., foo.bar.baz)."""
        parts = [self.expect_identifier_or_keyword().value]

        while self.match(TokenType.DOT):
            self.advance()
            parts.append(self.expect_identifier_or_keyword().value)

        return ".".join(parts)
