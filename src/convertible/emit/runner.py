"""
Generation runner - writes generated modules for declaration files.

The runner parses and renders every input before it writes anything, so a
declaration error in any file leaves the output directory untouched.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from convertible.core import ir
from convertible.core.errors import BackendError
from convertible.core.manifest import ProjectManifest
from convertible.core.parser import parse_files

from .generator import GeneratorResult
from .module import render_module

logger = logging.getLogger(__name__)


def output_name(source: Path) -> str:
    """``storage-errors.cvt`` -> ``storage_errors.py``"""
    stem = source.stem.replace("-", "_").replace(".", "_")
    return f"{stem}.py"


def write_atomic(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` through a temporary file and rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


@dataclass
class RenderedModule:
    """A declaration file and its rendered source."""

    declarations: ir.DeclarationFile
    source: str
    target: Path | None = None


@dataclass
class GenerationRun:
    """Everything one run produced."""

    modules: list[RenderedModule] = field(default_factory=list)
    result: GeneratorResult = field(default_factory=GeneratorResult)

    @property
    def enum_count(self) -> int:
        return sum(len(m.declarations.enums) for m in self.modules)


class GenerationRunner:
    """
    Orchestrates generation for a set of declaration files.
    """

    def __init__(self, manifest: ProjectManifest | None = None, output_dir: Path | None = None):
        """
        Initialize the runner.

        Args:
            manifest: Project configuration (defaults apply when None)
            output_dir: Destination directory; overrides the manifest
        """
        self.manifest = manifest or ProjectManifest()
        self.output_dir = output_dir or self.manifest.output_dir

    def render(self, files: list[Path]) -> GenerationRun:
        """Parse and render all files without writing anything."""
        run = GenerationRun()
        for declarations in parse_files(files):
            source = render_module(
                declarations,
                self.manifest.emit,
                header=self.manifest.output.header,
            )
            target = None
            if self.output_dir is not None and declarations.file is not None:
                target = self.output_dir / output_name(declarations.file)
            run.modules.append(RenderedModule(declarations, source, target))

            if not declarations.enums:
                run.result.add_warning(f"{declarations.file}: no enum declarations")
        return run

    def run(self, files: list[Path], dry_run: bool = False) -> GenerationRun:
        """
        Render all files, then write them unless ``dry_run``.

        Raises:
            ParseError, UnsupportedShapeError, ConflictError: Before any write
            BackendError: If the output directory cannot be written
        """
        run = self.render(files)
        if dry_run or self.output_dir is None:
            return run

        if self.output_dir.exists() and not self.output_dir.is_dir():
            raise BackendError(f"Output path {self.output_dir} exists and is not a directory")

        targets = [m.target for m in run.modules if m.target is not None]
        if len(set(targets)) != len(targets):
            raise BackendError("Two declaration files map to the same output module")

        for module in run.modules:
            if module.target is None:
                continue
            try:
                write_atomic(module.target, module.source)
            except OSError as e:
                raise BackendError(f"Cannot write {module.target}: {e}") from e
            run.result.add_file(module.target)
            logger.info("Wrote %s", module.target)

        return run
