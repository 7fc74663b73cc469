"""
Module-level parser mixin for convertible declaration files.

A declaration file is a sequence of Python import statements and enum
declarations. Imports are passed through to the generated module so the
foreign types referenced by the enums resolve there:

    from json import JSONDecodeError
    import sqlite3 as db

    pub enum StoreError { ... }
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from ..validator import validate_declarations


class ModuleParserMixin:
    """Parser mixin for file-level structure."""

    if TYPE_CHECKING:
        file: Any
        expect: Any
        advance: Any
        match: Any
        error: Any
        current_token: Any
        expect_identifier_or_keyword: Any
        parse_dotted_name: Any
        parse_enum: Any

    def parse_file(self) -> ir.DeclarationFile:
        """
        Parse a whole declaration file.

        Grammar:
            (importStmt | enumDecl)* EOF
        """
        imports: list[str] = []
        enums: list[ir.EnumSpec] = []

        while not self.match(TokenType.EOF):
            if self.match(TokenType.IMPORT, TokenType.FROM):
                imports.append(self.parse_import())
            else:
                enums.append(self.parse_enum())

        declarations = ir.DeclarationFile(file=self.file, imports=imports, enums=enums)
        validate_declarations(declarations)
        return declarations

    def _parse_alias(self) -> str:
        name = self.parse_dotted_name()
        if self.match(TokenType.AS):
            self.advance()
            name += f" as {self.expect_identifier_or_keyword().value}"
        return name

    def parse_import(self) -> str:
        """
        Parse an import statement into canonical source text.

        Grammar:
            "import" dotted ("as" NAME)? ("," dotted ("as" NAME)?)*
            "from" "."* dotted? "import" ( "*" | "(" names ")" | names )
        """
        if self.match(TokenType.IMPORT):
            self.advance()
            names = [self._parse_alias()]
            while self.match(TokenType.COMMA):
                self.advance()
                names.append(self._parse_alias())
            return "import " + ", ".join(names)

        self.expect(TokenType.FROM)
        dots = ""
        while self.match(TokenType.DOT):
            self.advance()
            dots += "."
        module = dots
        if not self.match(TokenType.IMPORT):
            module += self.parse_dotted_name()
        if not module:
            raise self.error("Expected module name after 'from'")
        self.expect(TokenType.IMPORT)

        token = self.current_token()
        if token.type == TokenType.OPERATOR and token.value == "*":
            self.advance()
            return f"from {module} import *"

        parenthesized = self.match(TokenType.LPAREN)
        if parenthesized:
            self.advance()

        names = [self._parse_alias_name()]
        while self.match(TokenType.COMMA):
            self.advance()
            if parenthesized and self.match(TokenType.RPAREN):
                break
            names.append(self._parse_alias_name())

        if parenthesized:
            self.expect(TokenType.RPAREN)
        return f"from {module} import " + ", ".join(names)

    def _parse_alias_name(self) -> str:
        name = self.expect_identifier_or_keyword().value
        if self.match(TokenType.AS):
            self.advance()
            name += f" as {self.expect_identifier_or_keyword().value}"
        return name
