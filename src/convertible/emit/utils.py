"""
Utility functions for Python code emission.

Contains naming conversions and source formatting helpers.
"""

from __future__ import annotations

import re

from convertible.core.naming import snake_case

_NON_IDENTIFIER = re.compile(r"[^0-9a-zA-Z_]+")

__all__ = ["docstring", "snake_case", "type_slug"]


def type_slug(type_ref: str) -> str:
    """
    Turn a type reference into an identifier fragment.

    ``json.JSONDecodeError`` -> ``json_json_decode_error``
    ``dict[str, int]`` -> ``dict_str_int``
    """
    parts = [snake_case(p) for p in _NON_IDENTIFIER.split(type_ref) if p]
    slug = "_".join(parts).strip("_")
    return re.sub("_+", "_", slug) or "value"


def docstring(lines: list[str], indent: str = "    ") -> list[str]:
    """
    Render doc comment lines as a docstring.

    Returns:
        Source lines (already indented), empty when there is no doc
    """
    if not lines:
        return []

    escaped = [line.replace("\\", "\\\\").replace('"""', '\\"\\"\\"') for line in lines]
    if len(escaped) == 1:
        text = escaped[0]
        if text.endswith('"'):
            text = text[:-1] + '\\"'
        return [f'{indent}"""{text}"""']

    out = [f'{indent}"""{escaped[0]}']
    for line in escaped[1:]:
        out.append(f"{indent}{line}" if line else "")
    out.append(f'{indent}"""')
    return out
