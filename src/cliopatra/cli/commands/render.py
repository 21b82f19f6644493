# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Render templates once, or keep re-rendering them while sources change."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from ...cancellation import CancellationToken
from ...coordinator import WatchTask, run_concurrently
from ...logging import info, ok
from ...render import Renderer, RenderOptions, TemplateWatch, compute_base_directory
from ...types import STDIO_SENTINEL
from ..shared import CLIError, cli_errors, load_repository, repository_directories, settings_from
from ..typer_ext import INPUTS_PANEL, OUTPUT_PANEL, SOURCES_PANEL, TEMPLATING_PANEL


def parse_renames(values: list[str] | None) -> dict[str, str]:
    """Parse ``FROM:TO`` suffix substitutions.

    Raises:
        CLIError: If an entry lacks the ``:`` separator or a source suffix.
    """

    renames: dict[str, str] = {}
    for entry in values or ():
        source, sep, target = entry.partition(":")
        if not sep or not source:
            raise CLIError(f"--rename-ext expects FROM:TO, got '{entry}'", exit_code=2)
        renames[source] = target
    return renames


def _input_roots(inputs: list[str]) -> list[str]:
    roots: list[str] = []
    for entry in inputs:
        if entry != STDIO_SENTINEL and os.path.isdir(entry) and not entry.endswith(os.sep):
            entry += os.sep
        roots.append(entry)
    return roots


def render_inputs(
    renderer: Renderer,
    inputs: list[str],
    *,
    output_directory: str | None,
    output_file: str | None,
    base_directory: str | None,
) -> None:
    """Render every input once.

    Files land in ``output_file``, under ``output_directory`` relative to
    their base directory, or on standard output. Directories require an
    output directory.

    Raises:
        CLIError: If a directory is given without an output directory.
    """

    roots = _input_roots(inputs)
    for entry in inputs:
        if entry == STDIO_SENTINEL:
            renderer.render_file(STDIO_SENTINEL, STDIO_SENTINEL)
        elif os.path.isdir(entry):
            if output_directory is None:
                raise CLIError(f"rendering directory {entry} requires --output-directory", exit_code=2)
            renderer.render_directory(entry, output_directory)
        else:
            if output_file is not None:
                destination = output_file
            elif output_directory is not None:
                base = compute_base_directory(entry, roots, base_directory)
                destination = os.path.join(output_directory, os.path.relpath(entry, base))
            else:
                destination = STDIO_SENTINEL
            if destination != STDIO_SENTINEL:
                os.makedirs(os.path.dirname(destination) or ".", exist_ok=True)
            renderer.render_file(entry, destination)


def render_command(
    ctx: typer.Context,
    inputs: Annotated[list[str], typer.Argument(metavar="INPUT...", help="Template files, directories or '-'.")],
    output_directory: Annotated[
        str | None,
        typer.Option(
            "--output-directory",
            "-o",
            help="Directory receiving rendered files.",
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    output_file: Annotated[
        str | None,
        typer.Option(
            "--output-file",
            help="Single file receiving the rendered input.",
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    watch: Annotated[
        bool,
        typer.Option("--watch", "-w", help="Re-render whenever sources change.", rich_help_panel=INPUTS_PANEL),
    ] = False,
    glob: Annotated[
        list[str] | None,
        typer.Option(
            "--glob",
            "-g",
            metavar="MASK",
            help="Only render files matching MASK (repeatable).",
            rich_help_panel=INPUTS_PANEL,
        ),
    ] = None,
    templates: Annotated[
        bool,
        typer.Option(
            "--templates/--no-templates",
            help="Evaluate inputs as templates.",
            rich_help_panel=TEMPLATING_PANEL,
        ),
    ] = True,
    yaml_markers: Annotated[
        bool,
        typer.Option("--yaml-markers/--no-yaml-markers", hidden=True),
    ] = False,
    delimiters: Annotated[
        tuple[str, str] | None,
        typer.Option(
            "--delimiters",
            metavar="LEFT RIGHT",
            help="Custom variable delimiters.",
            rich_help_panel=TEMPLATING_PANEL,
        ),
    ] = None,
    allow_program_creation: Annotated[
        bool,
        typer.Option(
            "--allow-program-creation",
            help="Let templates create programs ad hoc.",
            rich_help_panel=TEMPLATING_PANEL,
        ),
    ] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Do not print progress lines.")] = False,
    rename_ext: Annotated[
        list[str] | None,
        typer.Option(
            "--rename-ext",
            metavar="FROM:TO",
            help="Rename output suffix FROM to TO (repeatable).",
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    base_directory: Annotated[
        str | None,
        typer.Option(
            "--base-directory",
            help="Directory output paths are made relative to.",
            rich_help_panel=OUTPUT_PANEL,
        ),
    ] = None,
    repository: Annotated[
        list[Path] | None,
        typer.Option(
            "--repository",
            "-r",
            help="Repository directory providing programs (repeatable).",
            rich_help_panel=SOURCES_PANEL,
        ),
    ] = None,
) -> None:
    """Render templates that call programs."""

    settings = settings_from(ctx)
    token = CancellationToken()
    with cli_errors():
        if output_file is not None and output_directory is not None:
            raise CLIError("--output-file and --output-directory are mutually exclusive", exit_code=2)
        if output_file is not None and len(inputs) != 1:
            raise CLIError("--output-file accepts exactly one input", exit_code=2)
        options = RenderOptions(
            with_templates=templates,
            with_yaml_markers=yaml_markers,
            delimiters=delimiters if delimiters and all(delimiters) else None,
            allow_program_creation=allow_program_creation,
            masks=tuple(glob or ()),
            renames=parse_renames(rename_ext),
            verbose=not quiet,
        )
        directories = repository_directories(settings, repository)
        repositories = [load_repository(directories, settings=settings)] if directories else []
        renderer = Renderer(repositories=repositories, options=options, token=token)
        render_inputs(
            renderer,
            inputs,
            output_directory=output_directory,
            output_file=output_file,
            base_directory=base_directory,
        )
        if not quiet:
            ok(f"Rendered {len(inputs)} input(s)")
        if not watch:
            return
        if STDIO_SENTINEL in inputs:
            raise CLIError("standard input cannot be watched", exit_code=2)
        template_watch = TemplateWatch(
            renderer=renderer,
            inputs=inputs,
            output_directory=output_directory,
            output_file=output_file,
            base_directory=base_directory,
            interval=settings.watch_interval,
        )
        tasks: list[WatchTask] = [repo.watch for repo in repositories]
        tasks.append(template_watch.run)
        if not quiet:
            info("Watching for changes, press Ctrl-C to stop")
        run_concurrently(tasks, token)


def register(app: typer.Typer) -> None:
    """Register the ``render`` command on ``app``."""

    app.command("render")(render_command)


__all__ = ["parse_renames", "register", "render_inputs"]
