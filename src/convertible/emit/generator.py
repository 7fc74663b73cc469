"""
Base generator classes for Python code emission.

Generators are responsible for one part of a generated module:
- HeaderGenerator: module comment and imports
- TypeGenerator: the sum-type definition
- ConversionGenerator: conversion routines and the dispatcher
- ExportsGenerator: ``__all__``

Each generator focuses on one aspect, making them easier to:
- Understand
- Test
- Modify
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from convertible.core import ir
from convertible.core.manifest import EmitConfig

SECTION_SEPARATOR = "\n\n\n"


@dataclass
class GeneratorResult:
    """
    Result from a generator execution.

    Attributes:
        sections: Source sections, in output order
        files_created: List of file paths that were created/modified
        artifacts: Data to share with other generators
        warnings: Any warnings to display to user
    """

    sections: list[str] = field(default_factory=list)
    files_created: list[Path] = field(default_factory=list)
    artifacts: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    @property
    def source(self) -> str:
        """All sections joined into module text."""
        return SECTION_SEPARATOR.join(s.rstrip("\n") for s in self.sections if s) + "\n"

    def add_section(self, text: str) -> None:
        self.sections.append(text)

    def add_file(self, path: Path) -> None:
        """Record a file that was written."""
        self.files_created.append(path)

    def add_artifact(self, key: str, value: Any) -> None:
        """Add an artifact for other generators."""
        self.artifacts[key] = value

    def add_warning(self, warning: str) -> None:
        """Record a warning."""
        self.warnings.append(warning)

    def merge(self, other: "GeneratorResult") -> None:
        """Merge another result into this one."""
        self.sections.extend(other.sections)
        self.files_created.extend(other.files_created)
        self.artifacts.update(other.artifacts)
        self.warnings.extend(other.warnings)


class Generator(ABC):
    """
    Base class for all generators.

    A generator renders one part of a module from a parsed declaration file.

    Example:
        class ExportsGenerator(Generator):
            def generate(self) -> GeneratorResult:
                result = GeneratorResult()
                names = [e.name for e in self.declarations.enums if e.is_public]
                result.add_section(f"__all__ = {names!r}")
                return result
    """

    def __init__(self, declarations: ir.DeclarationFile, config: EmitConfig | None = None):
        """
        Initialize generator.

        Args:
            declarations: Parsed declaration file
            config: Emission options
        """
        self.declarations = declarations
        self.config = config or EmitConfig()

    @abstractmethod
    def generate(self) -> GeneratorResult:
        """
        Render source.

        Returns:
            GeneratorResult with rendered sections and artifacts
        """
        pass


class CompositeGenerator(Generator):
    """
    Generator that runs multiple sub-generators and concatenates their output.
    """

    @abstractmethod
    def get_generators(self) -> list[Generator]:
        """
        Get the list of sub-generators to run, in output order.
        """
        pass

    def generate(self) -> GeneratorResult:
        combined = GeneratorResult()
        for generator in self.get_generators():
            combined.merge(generator.generate())
        return combined
