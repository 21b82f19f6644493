# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typed flag and argument definitions for programs."""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Final

from ..errors import DefinitionError, TypeMismatchError
from ..types import YAMLValue
from ..utils import expect_string, optional_bool, optional_string, reject_unknown_keys, string_array

_TRUE_STRINGS: Final[frozenset[str]] = frozenset({"true", "yes", "on", "1"})
_FALSE_STRINGS: Final[frozenset[str]] = frozenset({"false", "no", "off", "0"})
LIST_SEPARATOR: Final[str] = ","


class ParameterType(str, Enum):
    """Enumerate the semantic types a flag or argument may declare."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOL = "bool"
    CHOICE = "choice"
    STRING_LIST = "stringList"
    INTEGER_LIST = "integerList"
    FLOAT_LIST = "floatList"
    KEY_VALUE = "keyValue"

    @property
    def is_list(self) -> bool:
        """Return ``True`` for the list-valued types."""

        return self in _LIST_ITEM_TYPES

    @classmethod
    def from_raw(cls, raw: YAMLValue | None, *, context: str) -> ParameterType:
        """Return the canonical type for a raw ``type`` entry.

        Args:
            raw: Value of the ``type`` key, ``None`` meaning ``string``.
            context: Human-readable context used in error messages.

        Returns:
            ParameterType: Canonical parameter type.

        Raises:
            DefinitionError: If ``raw`` names no known type.
        """

        if raw is None:
            return cls.STRING
        name = expect_string(raw, key="type", context=context)
        resolved = _TYPE_ALIASES.get(name) or _TYPE_ALIASES.get(name.lower())
        if resolved is None:
            raise DefinitionError(f"{context}: unknown parameter type '{name}'")
        return resolved


_TYPE_ALIASES: Final[dict[str, ParameterType]] = {
    "string": ParameterType.STRING,
    "str": ParameterType.STRING,
    "integer": ParameterType.INTEGER,
    "int": ParameterType.INTEGER,
    "float": ParameterType.FLOAT,
    "number": ParameterType.FLOAT,
    "bool": ParameterType.BOOL,
    "boolean": ParameterType.BOOL,
    "choice": ParameterType.CHOICE,
    "stringList": ParameterType.STRING_LIST,
    "stringlist": ParameterType.STRING_LIST,
    "list": ParameterType.STRING_LIST,
    "integerList": ParameterType.INTEGER_LIST,
    "integerlist": ParameterType.INTEGER_LIST,
    "floatList": ParameterType.FLOAT_LIST,
    "floatlist": ParameterType.FLOAT_LIST,
    "keyValue": ParameterType.KEY_VALUE,
    "keyvalue": ParameterType.KEY_VALUE,
    "map": ParameterType.KEY_VALUE,
}

_LIST_ITEM_TYPES: Final[dict[ParameterType, ParameterType]] = {
    ParameterType.STRING_LIST: ParameterType.STRING,
    ParameterType.INTEGER_LIST: ParameterType.INTEGER,
    ParameterType.FLOAT_LIST: ParameterType.FLOAT,
}


def _coerce_scalar(name: str, parameter_type: ParameterType, value: object) -> object:
    if parameter_type in (ParameterType.STRING, ParameterType.CHOICE):
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise TypeMismatchError(name, parameter_type.value, value)
    if parameter_type is ParameterType.INTEGER:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError as exc:
                raise TypeMismatchError(name, parameter_type.value, value) from exc
        raise TypeMismatchError(name, parameter_type.value, value)
    if parameter_type is ParameterType.FLOAT:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value.strip())
            except ValueError as exc:
                raise TypeMismatchError(name, parameter_type.value, value) from exc
        raise TypeMismatchError(name, parameter_type.value, value)
    if parameter_type is ParameterType.BOOL:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
        raise TypeMismatchError(name, parameter_type.value, value)
    raise TypeMismatchError(name, parameter_type.value, value)


def _coerce_key_value(name: str, value: object) -> dict[str, str]:
    if isinstance(value, str):
        pairs: dict[str, str] = {}
        for item in filter(None, (part.strip() for part in value.split(LIST_SEPARATOR))):
            key, sep, entry = item.partition("=")
            if not sep:
                raise TypeMismatchError(name, ParameterType.KEY_VALUE.value, value)
            pairs[key] = entry
        return pairs
    if isinstance(value, Mapping):
        result: dict[str, str] = {}
        for key, entry in value.items():
            if not isinstance(key, str) or isinstance(entry, (Mapping, list, tuple)):
                raise TypeMismatchError(name, ParameterType.KEY_VALUE.value, value)
            result[key] = "" if entry is None else str(entry)
        return result
    raise TypeMismatchError(name, ParameterType.KEY_VALUE.value, value)


def coerce_value(name: str, parameter_type: ParameterType, value: object, *, choices: Sequence[str] = ()) -> object:
    """Coerce ``value`` to ``parameter_type``.

    Args:
        name: Parameter name used in error messages.
        parameter_type: Declared type of the parameter.
        value: Candidate value supplied by a document, template or caller.
        choices: Allowed values for ``choice`` parameters.

    Returns:
        object: Value normalised to the declared type (lists become ``list``,
        key-value maps become ``dict[str, str]``).

    Raises:
        TypeMismatchError: If ``value`` cannot be represented as the declared type.
    """

    if parameter_type is ParameterType.KEY_VALUE:
        return _coerce_key_value(name, value)
    item_type = _LIST_ITEM_TYPES.get(parameter_type)
    if item_type is not None:
        if isinstance(value, str):
            items: Sequence[object] = [part for part in value.split(LIST_SEPARATOR) if part]
        elif isinstance(value, (list, tuple)):
            items = value
        else:
            raise TypeMismatchError(name, parameter_type.value, value)
        return [_coerce_scalar(name, item_type, item) for item in items]
    coerced = _coerce_scalar(name, parameter_type, value)
    if parameter_type is ParameterType.CHOICE and choices and coerced not in choices:
        raise TypeMismatchError(name, f"one of {', '.join(choices)}", value)
    return coerced


def _format_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


_FLAG_KEYS: Final[frozenset[str]] = frozenset({"name", "type", "default", "help", "required", "choices", "flag"})
_ARG_KEYS: Final[frozenset[str]] = frozenset({"name", "type", "default", "help", "required", "choices"})


@dataclass(slots=True)
class ParameterDefinition:
    """A declared flag or positional argument with its current value.

    Attributes:
        name: Parameter name, unique within its flag or argument collection.
        parameter_type: Semantic type tag.
        default: Declared default, ``None`` when absent.
        help: Free-text description.
        required: Whether a missing value fails argument computation.
        choices: Allowed values for ``choice`` parameters.
        flag: Literal flag token emitted for flags; ``None`` for arguments.
        value: Typed value set through :meth:`set_value`.
        raw: Pre-formatted override set through :meth:`set_raw`.
    """

    name: str
    parameter_type: ParameterType = ParameterType.STRING
    default: object = None
    help: str = ""
    required: bool = False
    choices: tuple[str, ...] = ()
    flag: str | None = None
    value: object = None
    raw: str | None = None
    _has_value: bool = field(default=False, repr=False)

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, YAMLValue],
        *,
        context: str,
        name: str | None = None,
        is_flag: bool,
    ) -> ParameterDefinition:
        """Build a parameter from its document entry.

        Args:
            data: Mapping describing the parameter.
            context: Human-readable context used in error messages.
            name: Name supplied by the enclosing mapping key, if any.
            is_flag: ``True`` for flags, ``False`` for positional arguments.

        Returns:
            ParameterDefinition: Validated parameter definition.

        Raises:
            DefinitionError: If the entry is malformed or its default has the wrong type.
        """

        reject_unknown_keys(data, _FLAG_KEYS if is_flag else _ARG_KEYS, context=context)
        resolved_name = name if name is not None else expect_string(data.get("name"), key="name", context=context)
        if not resolved_name:
            raise DefinitionError(f"{context}: parameter name must not be empty")
        parameter_type = ParameterType.from_raw(data.get("type"), context=context)
        choices = tuple(string_array(data.get("choices"), key="choices", context=context))
        default: object = None
        raw_default = data.get("default")
        if raw_default is not None:
            try:
                default = coerce_value(resolved_name, parameter_type, raw_default, choices=choices)
            except TypeMismatchError as exc:
                raise DefinitionError(f"{context}: invalid default: {exc}") from exc
        flag: str | None = None
        if is_flag:
            flag = optional_string(data.get("flag"), key="flag", context=context, default=f"--{resolved_name}")
        return cls(
            name=resolved_name,
            parameter_type=parameter_type,
            default=default,
            help=optional_string(data.get("help"), key="help", context=context),
            required=optional_bool(data.get("required"), key="required", context=context, default=not is_flag),
            choices=choices,
            flag=flag,
        )

    def set_value(self, value: object) -> None:
        """Set a typed value, clearing any raw override.

        Raises:
            TypeMismatchError: If ``value`` does not fit the declared type.
        """

        self.value = coerce_value(self.name, self.parameter_type, value, choices=self.choices)
        self._has_value = True
        self.raw = None

    def set_raw(self, raw: str) -> None:
        """Set a pre-formatted override that bypasses type checking."""

        self.raw = raw

    def resolve(self, overrides: Mapping[str, object]) -> object:
        """Return the effective typed value, or ``None`` when nothing applies.

        Precedence is override mapping, then the current value, then the default.

        Raises:
            TypeMismatchError: If the override cannot be coerced.
        """

        if self.name in overrides:
            return coerce_value(self.name, self.parameter_type, overrides[self.name], choices=self.choices)
        if self._has_value:
            return self.value
        return self.default

    def flag_tokens(self, value: object) -> list[str]:
        """Render ``value`` as flag tokens, empty when the flag is omitted."""

        flag = self.flag or f"--{self.name}"
        if self.parameter_type is ParameterType.BOOL:
            return [flag] if value else []
        if self.parameter_type is ParameterType.KEY_VALUE:
            tokens: list[str] = []
            for key, entry in dict(value).items():  # type: ignore[call-overload]
                tokens.extend((flag, f"{key}={entry}"))
            return tokens
        if self.parameter_type.is_list:
            items = list(value)  # type: ignore[call-overload]
            if not items:
                return []
            return [flag, LIST_SEPARATOR.join(_format_scalar(item) for item in items)]
        return [flag, _format_scalar(value)]

    def argument_tokens(self, value: object) -> list[str]:
        """Render ``value`` as positional argument tokens."""

        if self.parameter_type is ParameterType.KEY_VALUE:
            return [f"{key}={entry}" for key, entry in dict(value).items()]  # type: ignore[call-overload]
        if self.parameter_type.is_list:
            return [_format_scalar(item) for item in value]  # type: ignore[attr-defined]
        return [_format_scalar(value)]

    def clone(self) -> ParameterDefinition:
        """Return an independent copy, including nested list and map values."""

        return ParameterDefinition(
            name=self.name,
            parameter_type=self.parameter_type,
            default=copy.deepcopy(self.default),
            help=self.help,
            required=self.required,
            choices=self.choices,
            flag=self.flag,
            value=copy.deepcopy(self.value),
            raw=self.raw,
            _has_value=self._has_value,
        )


__all__ = ["LIST_SEPARATOR", "ParameterDefinition", "ParameterType", "coerce_value"]
