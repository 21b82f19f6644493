# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application factory and the help panels shared by cliopatra commands."""

from __future__ import annotations

from typing import Any, Final

import typer

HELP_OPTION_NAMES: Final[list[str]] = ["-h", "--help"]

# Rich help panels grouping related options in ``--help`` output.
SOURCES_PANEL: Final[str] = "Program sources"
OUTPUT_PANEL: Final[str] = "Output"
TEMPLATING_PANEL: Final[str] = "Templating"
INPUTS_PANEL: Final[str] = "Inputs and watching"


def create_typer(**kwargs: Any) -> typer.Typer:
    """Return a :class:`typer.Typer` rendering rich help with ``-h`` as an alias.

    Args:
        **kwargs: Forwarded to :class:`typer.Typer`; explicit values win over
            the defaults applied here.
    """

    context_settings = {"help_option_names": HELP_OPTION_NAMES, **kwargs.pop("context_settings", {})}
    kwargs.setdefault("rich_markup_mode", "rich")
    return typer.Typer(context_settings=context_settings, **kwargs)


__all__ = [
    "HELP_OPTION_NAMES",
    "INPUTS_PANEL",
    "OUTPUT_PANEL",
    "SOURCES_PANEL",
    "TEMPLATING_PANEL",
    "create_typer",
]
