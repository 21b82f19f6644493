# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers for validating values pulled out of definition documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .errors import DefinitionError
from .types import YAMLValue


def expect_string(value: YAMLValue | None, *, key: str, context: str) -> str:
    """Return ``value`` as ``str`` or raise a definition error.

    Args:
        value: Raw value extracted from the document.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        str: The validated string.

    Raises:
        DefinitionError: If ``value`` is not a string.
    """
    if not isinstance(value, str):
        raise DefinitionError(f"{context}: expected '{key}' to be a string")
    return value


def optional_string(value: YAMLValue | None, *, key: str, context: str, default: str = "") -> str:
    """Return ``value`` as a string, falling back to ``default`` when absent.

    Raises:
        DefinitionError: If ``value`` is present but not a string.
    """
    if value is None:
        return default
    if not isinstance(value, str):
        raise DefinitionError(f"{context}: expected '{key}' to be a string if present")
    return value


def optional_bool(value: YAMLValue | None, *, key: str, context: str, default: bool) -> bool:
    """Return ``value`` as ``bool`` with a ``default`` for missing entries.

    Raises:
        DefinitionError: If ``value`` is present but not a boolean.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    raise DefinitionError(f"{context}: expected '{key}' to be a boolean")


def string_array(value: YAMLValue | None, *, key: str, context: str) -> list[str]:
    """Return ``value`` as a list of strings with validation.

    Args:
        value: Raw value extracted from the document.
        key: Attribute name used in error messages.
        context: Human-friendly prefix describing the validation context.

    Returns:
        list[str]: All entries from ``value``; empty when ``value`` is ``None``.

    Raises:
        DefinitionError: If ``value`` is not a sequence of strings.
    """
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes, bytearray)):
        raise DefinitionError(f"{context}: expected '{key}' to be a list of strings")
    result: list[str] = []
    for index, item in enumerate(value):
        if not isinstance(item, str):
            raise DefinitionError(f"{context}: expected '{key}[{index}]' to be a string")
        result.append(item)
    return result


def expect_mapping(value: YAMLValue | None, *, key: str, context: str) -> Mapping[str, YAMLValue]:
    """Return ``value`` as a mapping or raise a definition error."""
    if not isinstance(value, Mapping):
        raise DefinitionError(f"{context}: expected '{key}' to be a mapping")
    return value


def string_mapping(value: YAMLValue | None, *, key: str, context: str) -> dict[str, str]:
    """Return ``value`` as a mapping of strings.

    Scalars are stringified so that ``PORT: 8080`` in an ``env`` block behaves
    like ``PORT: "8080"``.

    Raises:
        DefinitionError: If ``value`` is not a mapping of scalars.
    """
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DefinitionError(f"{context}: expected '{key}' to be a mapping")
    result: dict[str, str] = {}
    for item_key, item_value in value.items():
        if not isinstance(item_key, str):
            raise DefinitionError(f"{context}: expected '{key}' keys to be strings")
        if isinstance(item_value, bool) or not isinstance(item_value, (str, int, float)):
            raise DefinitionError(f"{context}: expected '{key}.{item_key}' to be a string")
        result[item_key] = str(item_value)
    return result


def reject_unknown_keys(data: Mapping[str, YAMLValue], allowed: frozenset[str], *, context: str) -> None:
    """Raise when ``data`` carries keys outside ``allowed``."""
    unknown = sorted(str(key) for key in data if key not in allowed)
    if unknown:
        raise DefinitionError(f"{context}: unknown key(s): {', '.join(unknown)}")


__all__ = [
    "expect_mapping",
    "expect_string",
    "optional_bool",
    "optional_string",
    "reject_unknown_keys",
    "string_array",
    "string_mapping",
]
