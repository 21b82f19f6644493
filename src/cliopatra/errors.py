# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Exceptions raised while loading, resolving and running programs."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class CliopatraError(RuntimeError):
    """Base class for every recoverable cliopatra failure."""


class DefinitionError(CliopatraError):
    """Raised when a program definition document is malformed."""

    def __init__(self, message: str, *, source: Path | str | None = None) -> None:
        """Initialise the error with an optional definition ``source``.

        Args:
            message: Human-readable description of the problem.
            source: Path of the definition document that failed to load.
        """

        prefix = f"{source}: " if source is not None else ""
        super().__init__(f"{prefix}{message}")
        self.source = source


class DuplicateProgramError(DefinitionError):
    """Raised when two definition files declare the same program name."""

    def __init__(self, name: str, *, source: Path | str, existing: Path | str) -> None:
        super().__init__(f"program '{name}' already defined in {existing}", source=source)
        self.name = name
        self.existing = existing


class UnknownParameterError(DefinitionError):
    """Raised when a flag or argument name is not declared on a program."""

    def __init__(self, program: str, kind: str, name: str) -> None:
        super().__init__(f"program '{program}' has no {kind} named '{name}'")
        self.program = program
        self.kind = kind
        self.name = name


class ResolutionError(CliopatraError):
    """Raised when a template cannot resolve the program it refers to."""


class ProgramNotFoundError(ResolutionError):
    """Raised when a program name matches no configured source."""

    def __init__(self, name: str) -> None:
        super().__init__(f"program '{name}' not found")
        self.name = name


class ProgramCreationDisabledError(ResolutionError):
    """Raised when a template creates a program without permission."""

    def __init__(self, name: str) -> None:
        super().__init__(f"program creation is not allowed (requested '{name}')")
        self.name = name


class ProgramExecutionError(CliopatraError):
    """Base class for failures while computing arguments or running a program."""


class MissingValueError(ProgramExecutionError):
    """Raised when a required flag or argument resolves to no value."""

    def __init__(self, program: str, kind: str, name: str) -> None:
        super().__init__(f"program '{program}': missing required value for {kind} '{name}'")
        self.program = program
        self.kind = kind
        self.name = name


class TypeMismatchError(ProgramExecutionError):
    """Raised when a value cannot be coerced to the declared parameter type."""

    def __init__(self, name: str, expected: str, value: object) -> None:
        super().__init__(f"parameter '{name}': expected {expected}, got {value!r}")
        self.name = name
        self.expected = expected
        self.value = value


class ExecutionError(ProgramExecutionError):
    """Raised when a child process cannot be spawned or exits unsuccessfully."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        """Initialise the error with captured process metadata.

        Args:
            message: Human-readable description of the failure.
            command: Full command line that was executed.
            returncode: Exit status when the process ran, ``None`` on spawn failure.
            stderr: Captured standard error output, if any.
        """

        detail = f" stderr: {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"{message}{detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


class InvalidOptionError(CliopatraError):
    """Raised when a template passes an unsupported option or delimiter setup."""


class RepositoryError(CliopatraError):
    """Raised when a repository root or definition file cannot be read."""


class TemplateRenderError(CliopatraError):
    """Raised when a template cannot be parsed or evaluated."""


class ConfigError(CliopatraError):
    """Raised when configuration input is invalid."""


class OperationCancelledError(Exception):
    """Raised when a cancellation token fires during a long-running operation.

    Not a :class:`CliopatraError`: cancellation is an outcome, not a failure.
    """


__all__ = [
    "CliopatraError",
    "ConfigError",
    "DefinitionError",
    "DuplicateProgramError",
    "ExecutionError",
    "InvalidOptionError",
    "MissingValueError",
    "OperationCancelledError",
    "ProgramCreationDisabledError",
    "ProgramExecutionError",
    "ProgramNotFoundError",
    "RepositoryError",
    "ResolutionError",
    "TemplateRenderError",
    "TypeMismatchError",
    "UnknownParameterError",
]
