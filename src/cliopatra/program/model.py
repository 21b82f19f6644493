# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Program definitions: parsing, argument computation, cloning and execution."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Final

from ..cancellation import CancellationToken
from ..errors import DefinitionError, MissingValueError, UnknownParameterError
from ..io import load_document, parse_document
from ..process import ProcessRequest, TextWriter, merge_environment, run_process
from ..types import YAMLValue
from ..utils import (
    expect_mapping,
    expect_string,
    optional_string,
    reject_unknown_keys,
    string_array,
    string_mapping,
)
from .parameters import ParameterDefinition

_DOCUMENT_KEYS: Final[frozenset[str]] = frozenset(
    {"name", "description", "path", "verbs", "flags", "args", "rawFlags", "raw_flags", "env", "stdin"},
)
FLAG_KIND: Final[str] = "flag"
ARG_KIND: Final[str] = "argument"


def _parse_flags(value: YAMLValue | None, *, context: str) -> dict[str, ParameterDefinition]:
    flags: dict[str, ParameterDefinition] = {}
    if value is None:
        return flags
    if isinstance(value, Mapping):
        for name, entry in value.items():
            entry_context = f"{context}.flags.{name}"
            definition = {} if entry is None else expect_mapping(entry, key=f"flags.{name}", context=context)
            flags[str(name)] = ParameterDefinition.from_mapping(
                definition,
                context=entry_context,
                name=str(name),
                is_flag=True,
            )
        return flags
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        for index, entry in enumerate(value):
            definition = expect_mapping(entry, key=f"flags[{index}]", context=context)
            flag = ParameterDefinition.from_mapping(definition, context=f"{context}.flags[{index}]", is_flag=True)
            if flag.name in flags:
                raise DefinitionError(f"{context}: duplicate flag '{flag.name}'")
            flags[flag.name] = flag
        return flags
    raise DefinitionError(f"{context}: expected 'flags' to be a mapping or a list")


def _parse_args(value: YAMLValue | None, *, context: str) -> list[ParameterDefinition]:
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise DefinitionError(f"{context}: expected 'args' to be a list")
    args: list[ParameterDefinition] = []
    seen: set[str] = set()
    for index, entry in enumerate(value):
        definition = expect_mapping(entry, key=f"args[{index}]", context=context)
        arg = ParameterDefinition.from_mapping(definition, context=f"{context}.args[{index}]", is_flag=False)
        if arg.name in seen:
            raise DefinitionError(f"{context}: duplicate argument '{arg.name}'")
        seen.add(arg.name)
        args.append(arg)
    return args


@dataclass(slots=True)
class Program:
    """One external command invocation described declaratively.

    Programs handed out by a repository are shared; call :meth:`clone` before
    mutating one.

    Attributes:
        name: Unique program name.
        description: Free-text description.
        path: Executable to spawn.
        verbs: Sub-command words inserted before the flags.
        flags: Declared flags keyed by name, in declared order.
        args: Declared positional arguments, in declared order.
        raw_flags: Literal tokens appended verbatim after the typed flags.
        env: Environment variables layered over the inherited environment.
        stdin: Text piped to the child's standard input, empty for none.
    """

    name: str
    description: str = ""
    path: str = ""
    verbs: list[str] = field(default_factory=list)
    flags: dict[str, ParameterDefinition] = field(default_factory=dict)
    args: list[ParameterDefinition] = field(default_factory=list)
    raw_flags: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    stdin: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, YAMLValue], *, source: Path | str | None = None) -> Program:
        """Build a program from a parsed definition document.

        Args:
            data: Top-level mapping of the definition document.
            source: Path or label of the document, used in error messages.

        Returns:
            Program: Validated program definition.

        Raises:
            DefinitionError: If the document is malformed.
        """

        context = str(source) if source is not None else "<program>"
        reject_unknown_keys(data, _DOCUMENT_KEYS, context=context)
        name = expect_string(data.get("name"), key="name", context=context)
        if not name:
            raise DefinitionError(f"{context}: 'name' must not be empty")
        if "rawFlags" in data and "raw_flags" in data:
            raise DefinitionError(f"{context}: use either 'rawFlags' or 'raw_flags', not both")
        raw_flags_value = data.get("rawFlags", data.get("raw_flags"))
        return cls(
            name=name,
            description=optional_string(data.get("description"), key="description", context=context),
            path=optional_string(data.get("path"), key="path", context=context),
            verbs=string_array(data.get("verbs"), key="verbs", context=context),
            flags=_parse_flags(data.get("flags"), context=context),
            args=_parse_args(data.get("args"), context=context),
            raw_flags=string_array(raw_flags_value, key="rawFlags", context=context),
            env=string_mapping(data.get("env"), key="env", context=context),
            stdin=optional_string(data.get("stdin"), key="stdin", context=context),
        )

    @classmethod
    def from_yaml(cls, stream: IO[str] | str, *, source: Path | str | None = None) -> Program:
        """Parse a program from YAML text or an open stream."""

        context = str(source) if source is not None else "<program>"
        return cls.from_mapping(parse_document(stream, context=context), source=source)

    @classmethod
    def from_file(cls, path: Path) -> Program:
        """Load a program from a definition file on disk."""

        return cls.from_mapping(load_document(path), source=path)

    # Mutation --------------------------------------------------------------------

    def _flag(self, name: str) -> ParameterDefinition:
        try:
            return self.flags[name]
        except KeyError:
            raise UnknownParameterError(self.name, FLAG_KIND, name) from None

    def _arg(self, name: str) -> ParameterDefinition:
        for arg in self.args:
            if arg.name == name:
                return arg
        raise UnknownParameterError(self.name, ARG_KIND, name)

    def set_flag_value(self, name: str, value: object) -> None:
        """Set the typed value of flag ``name``.

        Raises:
            UnknownParameterError: If the flag is not declared.
            TypeMismatchError: If ``value`` does not fit the flag type.
        """

        self._flag(name).set_value(value)

    def set_flag_raw(self, name: str, raw: str) -> None:
        """Set a raw, unchecked value for flag ``name``."""

        self._flag(name).set_raw(raw)

    def set_arg_value(self, name: str, value: object) -> None:
        """Set the typed value of argument ``name``.

        Raises:
            UnknownParameterError: If the argument is not declared.
            TypeMismatchError: If ``value`` does not fit the argument type.
        """

        self._arg(name).set_value(value)

    def set_arg_raw(self, name: str, raw: str) -> None:
        """Set a raw, unchecked value for argument ``name``."""

        self._arg(name).set_raw(raw)

    def add_raw_flag(self, *values: str) -> None:
        """Append literal flag tokens in call order."""

        self.raw_flags.extend(values)

    def clone(self) -> Program:
        """Return a deep, independent copy of this program."""

        return Program(
            name=self.name,
            description=self.description,
            path=self.path,
            verbs=list(self.verbs),
            flags={name: flag.clone() for name, flag in self.flags.items()},
            args=[arg.clone() for arg in self.args],
            raw_flags=list(self.raw_flags),
            env=dict(self.env),
            stdin=self.stdin,
        )

    # Execution -------------------------------------------------------------------

    def compute_args(self, overrides: Mapping[str, object] | None = None) -> list[str]:
        """Return the argument vector, excluding :attr:`path`.

        Verbs come first, then typed flags in declared order, then raw flags,
        then positional arguments. For each parameter a raw override wins over
        ``overrides``, which wins over the current value, which wins over the
        default; parameters resolving to nothing are omitted.

        Args:
            overrides: Ad-hoc values keyed by parameter name. Keys matching both
                a flag and an argument apply to both; unknown keys are ignored.

        Returns:
            list[str]: The computed argument vector.

        Raises:
            MissingValueError: If a required flag or argument has no value.
            TypeMismatchError: If an override cannot be coerced to its declared type.
        """

        overrides = overrides or {}
        tokens: list[str] = list(self.verbs)
        for flag in self.flags.values():
            if flag.raw is not None:
                tokens.extend((flag.flag or f"--{flag.name}", flag.raw))
                continue
            value = flag.resolve(overrides)
            if value is None:
                if flag.required:
                    raise MissingValueError(self.name, FLAG_KIND, flag.name)
                continue
            tokens.extend(flag.flag_tokens(value))
        tokens.extend(self.raw_flags)
        for arg in self.args:
            if arg.raw is not None:
                tokens.append(arg.raw)
                continue
            value = arg.resolve(overrides)
            if value is None:
                if arg.required:
                    raise MissingValueError(self.name, ARG_KIND, arg.name)
                continue
            tokens.extend(arg.argument_tokens(value))
        return tokens

    def run_into_writer(
        self,
        writer: TextWriter,
        *,
        token: CancellationToken | None = None,
        parameters: Mapping[str, object] | None = None,
    ) -> None:
        """Execute the program, streaming its standard output into ``writer``.

        Args:
            writer: Destination for the child's standard output.
            token: Optional cancellation token terminating the child when fired.
            parameters: Ambient parameter values used as :meth:`compute_args` overrides.

        Raises:
            MissingValueError: If a required value is missing.
            TypeMismatchError: If a parameter value cannot be coerced.
            ExecutionError: If spawning fails or the process exits non-zero.
            OperationCancelledError: If ``token`` fires first.
        """

        request = ProcessRequest(
            path=self.path,
            args=self.compute_args(parameters),
            env=merge_environment(self.env),
            stdin=self.stdin,
        )
        run_process(request, writer, token=token)


__all__ = ["Program"]
