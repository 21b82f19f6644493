# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Deferred, composable program mutations used as template options."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..errors import InvalidOptionError
from .model import Program


class ProgramMutation(ABC):
    """A single field change applied to a (cloned) program."""

    __slots__ = ()

    @abstractmethod
    def apply(self, program: Program) -> None:
        """Apply the change to ``program`` in place."""


@dataclass(frozen=True, slots=True)
class SetPath(ProgramMutation):
    """Replace the executable path."""

    path: str

    def apply(self, program: Program) -> None:
        program.path = self.path


@dataclass(frozen=True, slots=True)
class SetVerbs(ProgramMutation):
    """Replace the verb list."""

    verbs: tuple[str, ...]

    def apply(self, program: Program) -> None:
        program.verbs = list(self.verbs)


@dataclass(frozen=True, slots=True)
class SetStdin(ProgramMutation):
    """Replace the standard input payload."""

    stdin: str

    def apply(self, program: Program) -> None:
        program.stdin = self.stdin


@dataclass(frozen=True, slots=True)
class SetEnv(ProgramMutation):
    """Replace the declared environment."""

    env: tuple[tuple[str, str], ...]

    @classmethod
    def from_mapping(cls, env: Mapping[str, object]) -> SetEnv:
        """Build the mutation from a plain mapping, stringifying values."""

        return cls(tuple((str(key), str(value)) for key, value in env.items()))

    def apply(self, program: Program) -> None:
        program.env = dict(self.env)


@dataclass(frozen=True, slots=True)
class AddRawFlags(ProgramMutation):
    """Append literal flag tokens."""

    values: tuple[str, ...]

    def apply(self, program: Program) -> None:
        program.add_raw_flag(*self.values)


@dataclass(frozen=True, slots=True)
class SetRawFlags(ProgramMutation):
    """Replace the literal flag tokens."""

    values: tuple[str, ...]

    def apply(self, program: Program) -> None:
        program.raw_flags = list(self.values)


@dataclass(frozen=True, slots=True)
class SetFlagValue(ProgramMutation):
    """Set the typed value of a declared flag."""

    name: str
    value: object

    def apply(self, program: Program) -> None:
        program.set_flag_value(self.name, self.value)


@dataclass(frozen=True, slots=True)
class SetFlagRaw(ProgramMutation):
    """Set the raw value of a declared flag."""

    name: str
    raw: str

    def apply(self, program: Program) -> None:
        program.set_flag_raw(self.name, self.raw)


@dataclass(frozen=True, slots=True)
class SetArgValue(ProgramMutation):
    """Set the typed value of a declared argument."""

    name: str
    value: object

    def apply(self, program: Program) -> None:
        program.set_arg_value(self.name, self.value)


@dataclass(frozen=True, slots=True)
class SetArgRaw(ProgramMutation):
    """Set the raw value of a declared argument."""

    name: str
    raw: str

    def apply(self, program: Program) -> None:
        program.set_arg_raw(self.name, self.raw)


def as_mutation(option: object) -> ProgramMutation:
    """Return the mutation represented by a template option.

    Plain strings are treated as raw flags to append.

    Raises:
        InvalidOptionError: If ``option`` is neither a mutation nor a string.
    """

    if isinstance(option, ProgramMutation):
        return option
    if isinstance(option, str):
        return AddRawFlags((option,))
    raise InvalidOptionError(f"invalid program option of type {type(option).__name__}: {option!r}")


def apply_options(program: Program, options: Iterable[object]) -> Program:
    """Apply ``options`` to ``program`` in order and return it."""

    for option in options:
        as_mutation(option).apply(program)
    return program


__all__ = [
    "AddRawFlags",
    "ProgramMutation",
    "SetArgRaw",
    "SetArgValue",
    "SetEnv",
    "SetFlagRaw",
    "SetFlagValue",
    "SetPath",
    "SetRawFlags",
    "SetStdin",
    "SetVerbs",
    "apply_options",
    "as_mutation",
]
