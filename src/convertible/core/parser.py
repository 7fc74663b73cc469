"""
Public parsing entry points.

``parse`` is the single-declaration form; ``parse_declarations`` accepts a
whole file of imports and enums; ``parse_files`` reads sources from disk.
"""

import logging
from pathlib import Path

from . import ir
from .errors import ParseError, make_parse_error
from .parser_impl import parse_dsl

logger = logging.getLogger(__name__)

STRING_SOURCE = Path("<string>")


def parse_declarations(text: str, file: Path | None = None) -> ir.DeclarationFile:
    """
    Parse any number of imports and enum declarations.

    Raises:
        ParseError: On grammar mismatch
        UnsupportedShapeError: On record variants or named fields
        ConflictError: On duplicate variants, foreign types or enum names
    """
    return parse_dsl(text, file or STRING_SOURCE)


def parse(text: str, file: Path | None = None) -> ir.EnumSpec:
    """
    Parse exactly one enum declaration.

    Raises:
        ParseError: If the text holds no enum, more than one, or imports
    """
    declarations = parse_declarations(text, file)
    if len(declarations.enums) != 1 or declarations.imports:
        raise make_parse_error(
            f"Expected exactly one enum declaration, found {len(declarations.enums)}"
            + (" and import statements" if declarations.imports else ""),
            file or STRING_SOURCE,
            1,
            1,
        )
    return declarations.enums[0]


def parse_files(files: list[Path]) -> list[ir.DeclarationFile]:
    """
    Parse declaration files.

    Every file is parsed before anything is returned, so a failure in any
    file aborts the whole batch.

    Args:
        files: List of declaration file paths

    Returns:
        One DeclarationFile per input path, in order
    """
    parsed: list[ir.DeclarationFile] = []
    for f in files:
        try:
            text = f.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Cannot read {f}: {e}") from e

        declarations = parse_dsl(text, f)
        logger.debug("Parsed %s: %d enum(s)", f, len(declarations.enums))
        parsed.append(declarations)
    return parsed
