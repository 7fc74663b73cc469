"""
Python code emission for parsed declarations.

Modules:
- types: the sum-type definition
- conversions: conversion routines and the dispatcher
- module: whole generated modules
- runner: writing generated modules to disk
"""

from .conversions import ConversionRoutine, emit_conversions, emit_dispatcher
from .generator import CompositeGenerator, Generator, GeneratorResult
from .module import ModuleGenerator, render_module
from .runner import GenerationRunner
from .types import emit_type

__all__ = [
    "CompositeGenerator",
    "ConversionRoutine",
    "GenerationRunner",
    "Generator",
    "GeneratorResult",
    "ModuleGenerator",
    "emit_conversions",
    "emit_dispatcher",
    "emit_type",
    "render_module",
]
