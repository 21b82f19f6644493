# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for program definitions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

YAMLPrimitive: TypeAlias = str | int | float | bool | None
YAMLValue: TypeAlias = YAMLPrimitive | Sequence["YAMLValue"] | Mapping[str, "YAMLValue"]

DEFINITION_SUFFIXES: Final[tuple[str, ...]] = (".yaml", ".yml")
DEFINITION_MASKS: Final[tuple[str, ...]] = ("**/*.yaml", "**/*.yml")
STDIO_SENTINEL: Final[str] = "-"

__all__ = [
    "DEFINITION_MASKS",
    "DEFINITION_SUFFIXES",
    "STDIO_SENTINEL",
    "YAMLPrimitive",
    "YAMLValue",
]
