"""Name derivation shared by validation and code emission."""

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(name: str) -> str:
    """Convert PascalCase to snake_case (``JSONDecodeError`` -> ``json_decode_error``)."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()
