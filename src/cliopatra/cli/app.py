# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared settings."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import CliopatraConfig, load_config
from ..errors import ConfigError
from ..logging import LOG_LEVELS, configure_logging, fail
from .commands import register_commands
from .typer_ext import create_typer

app = create_typer(
    name="cliopatra",
    help="Declarative command-line programs and the templates that run them.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help=f"Logging threshold ({', '.join(LOG_LEVELS)})."),
    ] = None,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Configuration file (YAML)."),
    ] = None,
) -> None:
    """Load settings and configure logging before any command runs."""

    try:
        settings = load_config(config)
        if log_level is not None:
            settings = CliopatraConfig.model_validate({**settings.model_dump(), "log_level": log_level})
    except ConfigError as exc:
        fail(str(exc))
        raise typer.Exit(code=2) from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
    configure_logging(settings.log_level)
    ctx.obj = settings


register_commands(app)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
