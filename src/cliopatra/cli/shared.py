# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (errors, settings, repositories)."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import typer

from ..config import CliopatraConfig
from ..errors import CliopatraError, OperationCancelledError
from ..logging import fail
from ..repository import ProgramRepository


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@contextmanager
def cli_errors() -> Iterator[None]:
    """Translate library failures into user-facing messages and exit codes.

    :class:`CliopatraError`, :class:`CLIError` and :class:`OSError` print a
    failure line and exit with a non-zero status; cancellation exits cleanly.
    """

    try:
        yield
    except OperationCancelledError:
        raise typer.Exit(code=0) from None
    except CLIError as exc:
        fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except (CliopatraError, OSError) as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc


def settings_from(ctx: typer.Context) -> CliopatraConfig:
    """Return the configuration loaded by the root callback."""

    settings = ctx.find_object(CliopatraConfig)
    return settings if settings is not None else CliopatraConfig()


def repository_directories(settings: CliopatraConfig, extra: Sequence[Path] | None) -> list[Path]:
    """Return configured repositories followed by ``extra`` ones, without duplicates."""

    return list(dict.fromkeys([*settings.repositories, *(extra or ())]))


def load_repository(directories: Sequence[Path], *, settings: CliopatraConfig) -> ProgramRepository:
    """Create and load a repository over ``directories``.

    Raises:
        RepositoryError: If a directory cannot be read.
        DefinitionError: If a definition is invalid or duplicated.
    """

    repository = ProgramRepository(directories, interval=settings.watch_interval)
    repository.load()
    return repository


def parse_assignments(values: Sequence[str] | None, *, option: str) -> dict[str, str]:
    """Parse ``NAME=VALUE`` pairs given through ``option``.

    Raises:
        CLIError: If an entry has no ``=`` or an empty name.
    """

    parsed: dict[str, str] = {}
    for entry in values or ():
        name, sep, value = entry.partition("=")
        if not sep or not name:
            raise CLIError(f"{option} expects NAME=VALUE, got '{entry}'", exit_code=2)
        parsed[name] = value
    return parsed


__all__ = [
    "CLIError",
    "cli_errors",
    "load_repository",
    "parse_assignments",
    "repository_directories",
    "settings_from",
]
