"""
Error types for convertible declaration parsing, validation, and generation.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ConvertibleError(Exception):
    """Base exception for all convertible errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(ConvertibleError):
    """
    Raised when a declaration does not match the grammar.

    Examples:
    - Missing parentheses or braces
    - Malformed conversion lists
    - Unexpected tokens
    """

    pass


class UnsupportedShapeError(ParseError):
    """
    Raised when a variant uses a shape other than unit or positional tuple.

    Examples:
    - Record variants: ``(Variant { code: int })``
    - Named tuple fields: ``(Variant(code: int))``
    - Implicit construction into a variant without exactly one field
    """

    pass


class ConflictError(ConvertibleError):
    """
    Raised when two declarations claim the same name.

    Examples:
    - Two variants converting from the same foreign type
    - Two variants with the same identifier
    """

    pass


class ConfigError(ConvertibleError):
    """Raised when convertible.toml cannot be interpreted."""

    pass


class BackendError(ConvertibleError):
    """
    Raised when generated output cannot be written.

    Examples:
    - Output path exists and is not a directory
    - Permission errors while writing
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines around the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "errors.cvt:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        formatted = []
        # Snippet starts up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(self.snippet.split("\n")):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def extract_snippet(text: str, line: int, radius: int = 2) -> str:
    """Return the lines of ``text`` within ``radius`` of ``line`` (1-indexed)."""
    lines = text.split("\n")
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    return "\n".join(lines[start - 1 : end])


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    snippet: str | None = None,
    error_cls: type[ParseError] = ParseError,
) -> ParseError:
    """
    Helper to create a ParseError (or subclass) with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet
        error_cls: ParseError subclass to instantiate

    Returns:
        Error with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return error_cls(message, context)


def make_conflict_error(
    message: str,
    file: Path | None = None,
    line: int | None = None,
    column: int | None = None,
) -> ConflictError:
    """
    Helper to create a ConflictError with optional context.

    Returns:
        ConflictError with context if location provided
    """
    if file and line and column:
        context = ErrorContext(file=file, line=line, column=column)
        return ConflictError(message, context)
    return ConflictError(message)
