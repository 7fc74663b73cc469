"""Shared fixtures for convertible tests."""

from pathlib import Path

import pytest


class JsonError(Exception):
    """Stand-in for a serialization library's error type."""


class OtherError(Exception):
    """Stand-in for an unrelated upstream error type."""


MY_ERROR = """
pub enum MyError {
    (SerializationError(JsonError), [(JsonError, Self.SerializationError)]),
    (Unknown, [(OtherError, |_| Self.Unknown)]),
}
"""


@pytest.fixture
def my_error_text() -> str:
    """Declaration with one implicit and one callable conversion."""
    return MY_ERROR


@pytest.fixture
def foreign_namespace() -> dict:
    """Namespace in which the foreign types of MY_ERROR resolve."""
    return {"JsonError": JsonError, "OtherError": OtherError}


@pytest.fixture
def declaration_file(tmp_path: Path) -> Path:
    """A declaration file importing its foreign types."""
    path = tmp_path / "storage-errors.cvt"
    path.write_text(
        """
from json import JSONDecodeError

/// Errors surfaced by the storage layer.
pub enum StorageError {
    (Decode(JSONDecodeError), [(JSONDecodeError, Self.Decode)]),
    (Missing(str), [(KeyError, |e| Self.Missing(str(e)))]),
    (Unknown, [(RuntimeError, |_| Self.Unknown)]),
}
"""
    )
    return path
