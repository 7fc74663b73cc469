import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError

MANIFEST_NAME = "convertible.toml"
PYPROJECT_NAME = "pyproject.toml"


@dataclass
class EmitConfig:
    """Shape of the generated Python code."""

    frozen: bool = True  # variant dataclasses are frozen
    base_class: str | None = None  # e.g. "Exception"; None means a plain class
    dispatcher_prefix: str = "into_"  # into_my_error(value)


@dataclass
class OutputConfig:
    """Where generated modules are written."""

    dir: str | None = None  # None: print to stdout
    header: str | None = None  # extra comment lines at the top of each module


@dataclass
class ProjectManifest:
    """
    Project configuration.

    Examples in convertible.toml:

        [project]
        name = "storage"

        [sources]
        paths = ["errors/"]

        [output]
        dir = "storage/generated"

        [emit]
        base_class = "Exception"
        frozen = false

    The same tables may live under [tool.convertible] in pyproject.toml.
    """

    name: str = ""
    project_root: Path = field(default_factory=Path.cwd)
    source_paths: list[str] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    emit: EmitConfig = field(default_factory=EmitConfig)

    @property
    def output_dir(self) -> Path | None:
        if self.output.dir is None:
            return None
        return self.project_root / self.output.dir


def _get(
    table: dict[str, Any],
    key: str,
    expected: type | tuple[type, ...],
    default: Any,
    where: str,
) -> Any:
    value = table.get(key, default)
    if value is default:
        return value
    if not isinstance(value, expected):
        names = (
            " or ".join(t.__name__ for t in expected)
            if isinstance(expected, tuple)
            else expected.__name__
        )
        raise ConfigError(f"[{where}] {key} must be {names}, got {type(value).__name__}")
    return value


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{key}] must be a table")
    return value


def manifest_from_dict(data: dict[str, Any], project_root: Path) -> ProjectManifest:
    project = _table(data, "project")
    sources = _table(data, "sources")
    output = _table(data, "output")
    emit = _table(data, "emit")

    paths = _get(sources, "paths", list, [], "sources")
    if not all(isinstance(p, str) for p in paths):
        raise ConfigError("[sources] paths must be a list of strings")

    base_class = _get(emit, "base_class", str, None, "emit")

    return ProjectManifest(
        name=_get(project, "name", str, "", "project"),
        project_root=project_root,
        source_paths=paths,
        output=OutputConfig(
            dir=_get(output, "dir", str, None, "output"),
            header=_get(output, "header", str, None, "output"),
        ),
        emit=EmitConfig(
            frozen=_get(emit, "frozen", bool, True, "emit"),
            base_class=base_class or None,
            dispatcher_prefix=_get(emit, "dispatcher_prefix", str, "into_", "emit"),
        ),
    )


def load_manifest(path: Path) -> ProjectManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot load {path}: {e}") from e

    if path.name == PYPROJECT_NAME:
        data = data.get("tool", {}).get("convertible", {})

    return manifest_from_dict(data, path.resolve().parent)


def find_manifest(start: Path) -> Path | None:
    """
    Find convertible.toml, or a pyproject.toml with [tool.convertible],
    in ``start`` or any parent directory.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.exists():
            return candidate

        pyproject = directory / PYPROJECT_NAME
        if pyproject.exists():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
            except (OSError, tomllib.TOMLDecodeError):
                continue
            if "convertible" in data.get("tool", {}):
                return pyproject
    return None
