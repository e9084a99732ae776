"""Helpers for safely reading untyped YAML structures.

Config files and descriptors are parsed with ``yaml.safe_load`` and may hold
any shape. These helpers validate at the boundary so the rest of the code
works with plain typed values.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]


class FieldTypeError(ValueError):
    """A mapping value has the wrong type."""

    def __init__(self, key: str, expected: str, value: object) -> None:
        super().__init__(f"'{key}' must be {expected}, got {type(value).__name__}")
        self.key = key


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, or None when missing.

    Raises:
        FieldTypeError: The value is present but not a string.
    """
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldTypeError(key, "a string", value)
    return value


def get_scalar_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string or integer value as a string.

    Script ids and version numbers are often written unquoted in YAML and
    come back as ``int`` (or ``float`` for ``1.05``).
    """
    value = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise FieldTypeError(key, "a string or number", value)
    if isinstance(value, (str, int, float)):
        return str(value)
    raise FieldTypeError(key, "a string or number", value)


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise FieldTypeError(key, "a boolean", value)
    return value


def get_float(table: Mapping[str, object], key: str) -> float | None:
    value = table.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldTypeError(key, "a number", value)
    return float(value)
