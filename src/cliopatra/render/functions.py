# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Template functions producing deferred program mutations.

Each function returns a :class:`~cliopatra.program.ProgramMutation` that is
applied later, in call order, by ``program(...)`` or ``run(...)``::

    {{ run("git", verbs("log"), flag("max-count", 3), "--oneline") }}
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Final

from ..program import (
    AddRawFlags,
    ProgramMutation,
    SetArgRaw,
    SetArgValue,
    SetEnv,
    SetFlagRaw,
    SetFlagValue,
    SetPath,
    SetRawFlags,
    SetStdin,
    SetVerbs,
)


def path(value: str) -> ProgramMutation:
    return SetPath(value)


def verbs(*values: str) -> ProgramMutation:
    return SetVerbs(tuple(values))


def stdin(value: str) -> ProgramMutation:
    return SetStdin(value)


def env(values: Mapping[str, object]) -> ProgramMutation:
    return SetEnv.from_mapping(values)


def add_raw_flag(*values: str) -> ProgramMutation:
    return AddRawFlags(tuple(values))


def raw_flags(*values: str) -> ProgramMutation:
    return SetRawFlags(tuple(values))


def flag(name: str, value: object) -> ProgramMutation:
    return SetFlagValue(name, value)


def flag_raw(name: str, raw: str) -> ProgramMutation:
    return SetFlagRaw(name, raw)


def arg(name: str, value: object) -> ProgramMutation:
    return SetArgValue(name, value)


def arg_raw(name: str, raw: str) -> ProgramMutation:
    return SetArgRaw(name, raw)


MUTATION_FUNCTIONS: Final[Mapping[str, Callable[..., ProgramMutation]]] = {
    "path": path,
    "verbs": verbs,
    "stdin": stdin,
    "env": env,
    "add_raw_flag": add_raw_flag,
    "raw_flags": raw_flags,
    "flag": flag,
    "flag_raw": flag_raw,
    "arg": arg,
    "arg_raw": arg_raw,
}

__all__ = ["MUTATION_FUNCTIONS"]
