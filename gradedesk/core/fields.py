"""
Helpers for reading raw field values from models or plain mappings.
"""

from collections.abc import Mapping
from typing import Any


def is_blank(value: Any) -> bool:
    """True for missing, non-string or whitespace-only values."""
    return not isinstance(value, str) or not value.strip()


def read_field(data: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an attribute-bearing object."""
    if isinstance(data, Mapping):
        return data.get(name)
    return getattr(data, name, None)
