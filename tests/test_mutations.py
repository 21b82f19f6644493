# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for deferred program mutations."""

from __future__ import annotations

import dataclasses

import pytest

from cliopatra.errors import InvalidOptionError, UnknownParameterError
from cliopatra.program import (
    AddRawFlags,
    Program,
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

DOCUMENT = """
name: tool
path: tool
flags:
  level:
    type: int
args:
  - name: target
    required: false
"""


def _program() -> Program:
    return Program.from_yaml(DOCUMENT)


def test_mutations_apply_in_order() -> None:
    program = apply_options(
        _program(),
        [
            SetPath("/usr/bin/tool"),
            SetVerbs(("build", "all")),
            SetStdin("payload"),
            SetEnv.from_mapping({"DEBUG": 1}),
            SetFlagValue("level", 2),
            SetFlagValue("level", 3),
            AddRawFlags(("-v",)),
            "--quiet",
            SetArgValue("target", "x"),
        ],
    )

    assert program.path == "/usr/bin/tool"
    assert program.stdin == "payload"
    assert program.env == {"DEBUG": "1"}
    assert program.compute_args() == ["build", "all", "--level", "3", "-v", "--quiet", "x"]


def test_set_raw_flags_replaces_previous_raw_flags() -> None:
    program = apply_options(_program(), ["-a", SetRawFlags(("-b",))])

    assert program.raw_flags == ["-b"]


def test_raw_mutations_bypass_type_checks() -> None:
    program = apply_options(_program(), [SetFlagRaw("level", "high"), SetArgRaw("target", "a b")])

    assert program.compute_args() == ["--level", "high", "a b"]


def test_string_option_becomes_raw_flag() -> None:
    assert as_mutation("--force") == AddRawFlags(("--force",))


@pytest.mark.parametrize("option", [42, None, ["--x"], {"flag": 1}])
def test_unsupported_option_types_are_rejected(option: object) -> None:
    with pytest.raises(InvalidOptionError):
        as_mutation(option)


def test_unknown_parameter_fails_when_applied() -> None:
    mutation = SetFlagValue("missing", 1)

    with pytest.raises(UnknownParameterError):
        mutation.apply(_program())


def test_mutations_are_immutable() -> None:
    mutation = SetPath("/bin/true")

    with pytest.raises(dataclasses.FrozenInstanceError):
        mutation.path = "/bin/false"  # type: ignore[misc]
