# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""List the programs known to one or more repositories."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from ...errors import ProgramExecutionError
from ...program import Program
from ..shared import CLIError, cli_errors, load_repository, repository_directories, settings_from
from ..typer_ext import OUTPUT_PANEL, SOURCES_PANEL


def describe_arguments(program: Program) -> str:
    """Return the default argument vector of ``program`` as one line.

    Programs whose defaults cannot produce a vector show the reason instead.
    """

    try:
        return " ".join(program.compute_args())
    except ProgramExecutionError as exc:
        return f"<{exc}>"


def ls_command(
    ctx: typer.Context,
    repository: Annotated[
        list[Path] | None,
        typer.Option(
            "--repository",
            "-r",
            help="Repository directory to scan (repeatable).",
            rich_help_panel=SOURCES_PANEL,
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Emit JSON instead of a table.", rich_help_panel=OUTPUT_PANEL),
    ] = False,
) -> None:
    """List programs with their description and default arguments."""

    settings = settings_from(ctx)
    with cli_errors():
        directories = repository_directories(settings, repository)
        if not directories:
            raise CLIError("no repository given; pass --repository or configure one", exit_code=2)
        programs = load_repository(directories, settings=settings).get_programs()
        rows = [
            {
                "name": name,
                "description": programs[name].description,
                "args": describe_arguments(programs[name]),
            }
            for name in sorted(programs)
        ]

    if as_json:
        typer.echo(json.dumps(rows, indent=2))
        return
    table = Table(title="Programs")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Arguments")
    for row in rows:
        table.add_row(row["name"], row["description"], row["args"])
    Console(soft_wrap=True).print(table)


def register(app: typer.Typer) -> None:
    """Register the ``ls`` command on ``app``."""

    app.command("ls")(ls_command)


__all__ = ["describe_arguments", "register"]
