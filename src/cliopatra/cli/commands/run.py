# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run a single program from a definition file or a repository."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Annotated

import typer

from ...cancellation import CancellationToken
from ...config import CliopatraConfig
from ...errors import ProgramNotFoundError
from ...logging import warn
from ...program import Program
from ..shared import (
    CLIError,
    cli_errors,
    load_repository,
    parse_assignments,
    repository_directories,
    settings_from,
)
from ..typer_ext import SOURCES_PANEL


def resolve_target(
    target: str | None,
    file: Path | None,
    program: str | None,
    repository: list[Path] | None,
    *,
    settings: CliopatraConfig,
) -> Program:
    """Return the program selected by exactly one of the three sources.

    A positional ``target`` naming an existing file is treated as a
    definition file, otherwise as a program name.

    Raises:
        CLIError: If zero or several sources are given, the file is unreadable,
            or no repository is available.
        ProgramNotFoundError: If the named program is not in any repository.
    """

    sources = [value for value in (target, file, program) if value is not None]
    if len(sources) > 1:
        raise CLIError("cannot specify more than one of NAME_OR_FILE, --file and --program", exit_code=2)
    if not sources:
        raise CLIError("either a file or a program must be specified", exit_code=2)
    if target is not None:
        if Path(target).is_file():
            file = Path(target)
        else:
            program = target
    if file is not None:
        try:
            return Program.from_file(file)
        except OSError as exc:
            raise CLIError(f"could not read {file}: {exc}") from exc
    assert program is not None  # nosec B101
    directories = repository_directories(settings, repository)
    if not directories:
        raise CLIError(f"no repository given to look up '{program}'", exit_code=2)
    found = load_repository(directories, settings=settings).get_program(program)
    if found is None:
        raise ProgramNotFoundError(program)
    return found


def run_command(
    ctx: typer.Context,
    target: Annotated[
        str | None,
        typer.Argument(metavar="NAME_OR_FILE", help="Definition file or program name."),
    ] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Definition file to run.", rich_help_panel=SOURCES_PANEL),
    ] = None,
    program: Annotated[
        str | None,
        typer.Option("--program", "-p", help="Repository program to run.", rich_help_panel=SOURCES_PANEL),
    ] = None,
    repository: Annotated[
        list[Path] | None,
        typer.Option(
            "--repository",
            "-r",
            help="Repository directory to search (repeatable).",
            rich_help_panel=SOURCES_PANEL,
        ),
    ] = None,
    set_values: Annotated[
        list[str] | None,
        typer.Option("--set", "-s", metavar="NAME=VALUE", help="Parameter override (repeatable)."),
    ] = None,
) -> None:
    """Run a program and print its standard output."""

    settings = settings_from(ctx)
    token = CancellationToken()
    buffer = io.StringIO()
    with cli_errors():
        overrides = parse_assignments(set_values, option="--set")
        selected = resolve_target(target, file, program, repository, settings=settings)
        try:
            selected.clone().run_into_writer(buffer, token=token, parameters=overrides)
        except KeyboardInterrupt:
            token.cancel()
            warn("interrupted")
            raise typer.Exit(code=130) from None
    output = buffer.getvalue()
    typer.echo(output, nl=not output.endswith("\n"))


def register(app: typer.Typer) -> None:
    """Register the ``run`` command on ``app``."""

    app.command("run")(run_command)


__all__ = ["register", "resolve_target"]
