"""
Lexer/Tokenizer for convertible declarations.

Converts raw declaration text into a stream of tokens with source location
tracking. Declarations are brace-delimited, so whitespace and newlines carry
no meaning and are skipped.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import extract_snippet, make_parse_error


class TokenType(Enum):
    """Token types in the declaration language."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    DOC_COMMENT = "DOC_COMMENT"

    # Keywords
    ENUM = "enum"
    PUB = "pub"
    IMPORT = "import"
    FROM = "from"
    AS = "as"

    # Punctuation
    COLON = ":"
    DOUBLE_COLON = "::"
    COMMA = ","
    DOT = "."
    AT = "@"
    PIPE = "|"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"

    # Any other operator character, kept for callable expressions
    OPERATOR = "OPERATOR"

    EOF = "EOF"


KEYWORDS = {
    "enum",
    "pub",
    "import",
    "from",
    "as",
}

SINGLE_CHAR_TOKENS = {
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "@": TokenType.AT,
    "|": TokenType.PIPE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

OPERATOR_CHARS = set("+-*/%<>=!&^~")


@dataclass
class Token:
    """
    A single token in a declaration.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Start offset into the source text
        end: End offset (exclusive) into the source text
    """

    type: TokenType
    value: str
    line: int
    column: int
    offset: int = 0
    end: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for convertible declarations.

    Converts source text into a flat stream of tokens.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while self.current_char() in (" ", "\t", "\r", "\n"):
            self.advance()

    def skip_comment(self) -> None:
        """Skip comment (from # to end of line)."""
        if self.current_char() == "#":
            while self.current_char() and self.current_char() != "\n":
                self.advance()

    def read_doc_comment(self) -> str:
        """Read a ``///`` doc comment, returning its text without the marker."""
        for _ in range(3):
            self.advance()
        if self.current_char() == " ":
            self.advance()

        chars = []
        while self.current_char() and self.current_char() != "\n":
            chars.append(self.current_char())
            self.advance()
        return "".join(chars).rstrip()

    def read_string(self) -> str:
        """Read a quoted string."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()  # " or '
        self.advance()

        chars = []
        while True:
            current = self.current_char()
            if not current or current == quote or current == "\n":
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != quote:
            raise make_parse_error(
                "Unterminated string literal",
                self.file,
                start_line,
                start_col,
                extract_snippet(self.text, start_line),
            )

        self.advance()
        return "".join(chars)

    def read_number(self) -> str:
        """Read a numeric literal (int, float, hex, exponent, underscores)."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current in "._"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def _emit(self, token_type: TokenType, value: str, line: int, column: int, start: int) -> None:
        self.tokens.append(Token(token_type, value, line, column, start, self.pos))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens terminated by EOF

        Raises:
            ParseError: If an unexpected character is encountered
        """
        while True:
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column
            start = self.pos

            if ch == "#":
                if self.peek_char() == "[" or (
                    self.peek_char() == "!" and self.peek_char(2) == "["
                ):
                    raise make_parse_error(
                        "'#[...]' attributes are not supported; "
                        "write a decorator such as '@dataclasses.dataclass' instead",
                        self.file,
                        token_line,
                        token_col,
                        extract_snippet(self.text, token_line),
                    )
                self.skip_comment()

            elif ch == "/" and self.peek_char() == "/" and self.peek_char(2) == "/":
                value = self.read_doc_comment()
                self._emit(TokenType.DOC_COMMENT, value, token_line, token_col, start)

            elif ch in ('"', "'"):
                value = self.read_string()
                self._emit(TokenType.STRING, value, token_line, token_col, start)

            elif ch.isdigit():
                value = self.read_number()
                self._emit(TokenType.NUMBER, value, token_line, token_col, start)

            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                token_type = TokenType(value) if value in KEYWORDS else TokenType.IDENTIFIER
                self._emit(token_type, value, token_line, token_col, start)

            elif ch == ":":
                self.advance()
                if self.current_char() == ":":
                    self.advance()
                    self._emit(TokenType.DOUBLE_COLON, "::", token_line, token_col, start)
                else:
                    self._emit(TokenType.COLON, ":", token_line, token_col, start)

            elif ch in SINGLE_CHAR_TOKENS:
                self.advance()
                self._emit(SINGLE_CHAR_TOKENS[ch], ch, token_line, token_col, start)

            elif ch in OPERATOR_CHARS:
                self.advance()
                self._emit(TokenType.OPERATOR, ch, token_line, token_col, start)

            else:
                raise make_parse_error(
                    f"Unexpected character: {ch!r}",
                    self.file,
                    token_line,
                    token_col,
                    extract_snippet(self.text, token_line),
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, self.pos, self.pos))
        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize declaration text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
