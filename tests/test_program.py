# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for program parsing, argument computation and cloning."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from cliopatra.errors import (
    DefinitionError,
    MissingValueError,
    TypeMismatchError,
    UnknownParameterError,
)
from cliopatra.program import ParameterType, Program


def _parse(document: str, *, source: str | None = None) -> Program:
    return Program.from_yaml(textwrap.dedent(document), source=source)


GIT_LOG = """
name: git-log
description: Show history
path: git
verbs: [log]
flags:
  max-count:
    type: int
    default: 5
  oneline:
    type: bool
    default: true
  author:
    type: string
  paths:
    type: stringList
  define:
    type: keyValue
    flag: -D
rawFlags: ["--no-color"]
args:
  - name: revision
    default: HEAD
"""


def test_from_yaml_reads_every_field() -> None:
    program = _parse(GIT_LOG, source="git-log.yaml")

    assert program.name == "git-log"
    assert program.description == "Show history"
    assert program.path == "git"
    assert program.verbs == ["log"]
    assert list(program.flags) == ["max-count", "oneline", "author", "paths", "define"]
    assert program.flags["max-count"].parameter_type is ParameterType.INTEGER
    assert program.flags["max-count"].default == 5
    assert program.flags["define"].flag == "-D"
    assert program.flags["author"].flag == "--author"
    assert program.raw_flags == ["--no-color"]
    assert [arg.name for arg in program.args] == ["revision"]


def test_compute_args_orders_verbs_flags_raw_flags_then_args() -> None:
    program = _parse(GIT_LOG)

    assert program.compute_args() == ["log", "--max-count", "5", "--oneline", "--no-color", "HEAD"]


def test_compute_args_is_deterministic() -> None:
    program = _parse(GIT_LOG)

    assert program.compute_args() == program.compute_args()


def test_bool_flag_false_is_omitted() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("oneline", False)

    assert "--oneline" not in program.compute_args()


def test_list_flag_is_comma_joined_once() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("paths", ["src", "tests"])

    args = program.compute_args()
    assert args.count("--paths") == 1
    assert args[args.index("--paths") + 1] == "src,tests"


def test_empty_list_flag_is_omitted() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("paths", [])

    assert "--paths" not in program.compute_args()


def test_key_value_flag_repeats_per_pair() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("define", {"a": 1, "b": "two"})

    args = program.compute_args()
    assert args[args.index("-D") : args.index("-D") + 4] == ["-D", "a=1", "-D", "b=two"]


def test_raw_value_wins_over_typed_value_and_overrides() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("max-count", 10)
    program.set_flag_raw("max-count", "not-a-number")

    args = program.compute_args({"max-count": 20})
    assert args[1:3] == ["--max-count", "not-a-number"]


def test_setting_value_clears_raw() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_raw("max-count", "x")
    program.set_flag_value("max-count", 7)

    assert program.compute_args()[1:3] == ["--max-count", "7"]


def test_overrides_win_over_values_and_defaults() -> None:
    program = _parse(GIT_LOG)
    program.set_flag_value("max-count", 10)

    args = program.compute_args({"max-count": "3", "revision": "main", "unknown": "ignored"})
    assert args[1:3] == ["--max-count", "3"]
    assert args[-1] == "main"


def test_override_with_wrong_type_fails() -> None:
    program = _parse(GIT_LOG)

    with pytest.raises(TypeMismatchError):
        program.compute_args({"max-count": "many"})


def test_set_value_with_wrong_type_fails() -> None:
    program = _parse(GIT_LOG)

    with pytest.raises(TypeMismatchError):
        program.set_flag_value("max-count", "many")


def test_required_argument_without_value_fails() -> None:
    program = _parse(
        """
        name: greeter
        path: /bin/echo
        args:
          - name: who
        """,
    )

    with pytest.raises(MissingValueError, match="who"):
        program.compute_args()


def test_required_argument_with_default_succeeds() -> None:
    program = _parse(
        """
        name: greeter
        path: /bin/echo
        args:
          - name: who
            default: world
        """,
    )

    assert program.compute_args() == ["world"]


def test_optional_argument_without_value_is_omitted() -> None:
    program = _parse(
        """
        name: greeter
        path: /bin/echo
        args:
          - name: who
            required: false
        """,
    )

    assert program.compute_args() == []


def test_required_flag_without_value_fails() -> None:
    program = _parse(
        """
        name: deploy
        path: deploy
        flags:
          target:
            required: true
        """,
    )

    with pytest.raises(MissingValueError, match="target"):
        program.compute_args()


def test_positional_list_expands_to_one_token_per_item() -> None:
    program = _parse(
        """
        name: ls
        path: ls
        args:
          - name: paths
            type: stringList
        """,
    )
    program.set_arg_value("paths", ["a", "b"])

    assert program.compute_args() == ["a", "b"]


def test_raw_argument_is_one_token() -> None:
    program = _parse(
        """
        name: ls
        path: ls
        args:
          - name: paths
            type: stringList
        """,
    )
    program.set_arg_raw("paths", "a b")

    assert program.compute_args() == ["a b"]


def test_flags_accept_list_form() -> None:
    program = _parse(
        """
        name: curl
        path: curl
        flags:
          - name: header
            flag: -H
          - name: silent
            type: bool
            default: true
        """,
    )

    program.set_flag_value("header", "Accept: text/plain")
    assert program.compute_args() == ["-H", "Accept: text/plain", "--silent"]


def test_choice_outside_choices_fails() -> None:
    program = _parse(
        """
        name: fmt
        path: fmt
        flags:
          style:
            type: choice
            choices: [short, long]
        """,
    )

    program.set_flag_value("style", "long")
    with pytest.raises(TypeMismatchError):
        program.set_flag_value("style", "medium")


def test_unknown_flag_name_fails() -> None:
    program = _parse(GIT_LOG)

    with pytest.raises(UnknownParameterError, match="nope"):
        program.set_flag_value("nope", 1)
    with pytest.raises(UnknownParameterError):
        program.set_arg_raw("nope", "x")


@pytest.mark.parametrize(
    "document",
    [
        "- just a list",
        "name: x\nbogus: 1\n",
        "description: missing name\n",
        "name: x\nflags:\n  n:\n    type: int\n    default: many\n",
        "name: x\nflags:\n  n:\n    type: decimal\n",
        "name: x\nrawFlags: [a]\nraw_flags: [b]\n",
        "name: x\nargs:\n  - name: a\n  - name: a\n",
        "name: [unclosed\n",
    ],
)
def test_malformed_documents_are_rejected(document: str) -> None:
    with pytest.raises(DefinitionError):
        _parse(document, source="broken.yaml")


def test_definition_error_names_the_source() -> None:
    with pytest.raises(DefinitionError) as excinfo:
        _parse("name: x\nbogus: 1\n", source="broken.yaml")

    assert "broken.yaml" in str(excinfo.value)


def test_clone_is_independent() -> None:
    original = _parse(GIT_LOG)
    original.set_flag_value("paths", ["src"])

    copy = original.clone()
    copy.set_flag_value("max-count", 1)
    copy.add_raw_flag("--stat")
    copy.verbs.append("extra")
    copy.env["X"] = "1"
    copy.flags["paths"].value.append("docs")  # type: ignore[union-attr]

    assert original.compute_args() == [
        "log",
        "--max-count",
        "5",
        "--oneline",
        "--paths",
        "src",
        "--no-color",
        "HEAD",
    ]
    assert original.env == {}


def test_from_file_stringifies_env_values(tmp_path: Path) -> None:
    target = tmp_path / "echo.yaml"
    target.write_text("name: echo\npath: /bin/echo\nenv:\n  COUNT: 3\n", encoding="utf-8")

    program = Program.from_file(target)
    assert program.env == {"COUNT": "3"}
