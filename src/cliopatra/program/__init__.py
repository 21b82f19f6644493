# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Program model, typed parameters and deferred mutations."""

from __future__ import annotations

from .model import Program
from .mutations import (
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
    apply_options,
    as_mutation,
)
from .parameters import ParameterDefinition, ParameterType, coerce_value

__all__ = (
    "AddRawFlags",
    "ParameterDefinition",
    "ParameterType",
    "Program",
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
    "coerce_value",
)
