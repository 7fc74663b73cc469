"""
In-process expansion of declarations.

``load_module`` renders a declaration into Python source and executes it in
a fresh module, so the generated enum and its dispatcher can be used without
writing a file. ``define`` additionally binds the generated names into a
caller namespace, the way a macro expands in place:

    from json import JSONDecodeError

    define(
        '''
        pub enum ConfigError {
            (Syntax(JSONDecodeError), [(JSONDecodeError, Self.Syntax)]),
        }
        ''',
        globals(),
    )

    ConfigError.convert(err)  # ConfigError.Syntax(err)
"""

from __future__ import annotations

import importlib.abc
import importlib.util
import logging
import sys
import types
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .core import ir
from .core.manifest import EmitConfig
from .core.naming import snake_case
from .core.parser import parse_declarations
from .emit.conversions import dispatcher_name, emit_conversions
from .emit.module import render_module

logger = logging.getLogger(__name__)

GENERATED_MODULE_PREFIX = "convertible_generated"


def _module_name(declarations: ir.DeclarationFile) -> str:
    if declarations.enums:
        return f"{GENERATED_MODULE_PREFIX}.{snake_case(declarations.enums[0].name)}"
    return GENERATED_MODULE_PREFIX


class GeneratedSourceLoader(importlib.abc.InspectLoader):
    """Loader for a module whose source is held in memory."""

    def __init__(self, source: str, origin: str):
        self.source = source
        self.origin = origin

    def get_source(self, fullname: str) -> str:
        return self.source

    def get_code(self, fullname: str) -> types.CodeType:
        return compile(self.source, self.origin, "exec")

    def is_package(self, fullname: str) -> bool:
        return False


def build_module(
    declarations: ir.DeclarationFile,
    namespace: Mapping[str, Any] | None = None,
    module_name: str | None = None,
    config: EmitConfig | None = None,
) -> types.ModuleType:
    """
    Execute the rendered source of ``declarations`` in a new module.

    Args:
        declarations: Parsed declaration file
        namespace: Names visible to the generated code (foreign types,
            converter helpers); dunder names are not copied
        module_name: ``__name__`` of the new module
        config: Emission options

    Returns:
        The populated module
    """
    name = module_name or _module_name(declarations)
    source = render_module(declarations, config)

    loader = GeneratedSourceLoader(source, f"<{name}>")
    spec = importlib.util.spec_from_loader(name, loader, origin=loader.origin)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot create a module spec for {name}")

    module = importlib.util.module_from_spec(spec)
    if namespace:
        module.__dict__.update(
            {key: value for key, value in namespace.items() if not key.startswith("__")}
        )
    module.__dict__["__source__"] = source

    # dataclasses resolves string annotations through sys.modules[cls.__module__]
    previous = sys.modules.get(name)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        if previous is None:
            sys.modules.pop(name, None)
        else:
            sys.modules[name] = previous

    logger.debug("Loaded generated module %s", name)
    return module


def load_module(
    text: str,
    namespace: Mapping[str, Any] | None = None,
    module_name: str | None = None,
    config: EmitConfig | None = None,
    file: Path | None = None,
) -> types.ModuleType:
    """
    Parse, render and execute declaration text.

    Raises:
        ParseError, UnsupportedShapeError, ConflictError: Before any code runs
    """
    declarations = parse_declarations(text, file)
    return build_module(declarations, namespace, module_name, config)


def generated_names(
    declarations: ir.DeclarationFile, config: EmitConfig | None = None
) -> list[str]:
    """Names a declaration file defines: enums, dispatchers, and routines."""
    names: list[str] = []
    for enum in declarations.enums:
        names.append(enum.name)
        names.append(dispatcher_name(enum, config))
        names.extend(routine.function_name for routine in emit_conversions(enum))
    return names


def define(
    text: str,
    namespace: dict[str, Any],
    config: EmitConfig | None = None,
) -> types.ModuleType:
    """
    Expand declaration text into ``namespace``.

    The generated code sees ``namespace`` (so foreign types resolve there) and
    every enum, dispatcher and conversion routine it defines is bound back
    into it.
    """
    declarations = parse_declarations(text)
    module = build_module(
        declarations,
        namespace,
        module_name=namespace.get("__name__"),
        config=config,
    )
    for name in generated_names(declarations, config):
        namespace[name] = module.__dict__[name]
    return module
