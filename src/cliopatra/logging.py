# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing console helpers and root logger setup."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def detect_tty() -> bool:
    """Return ``True`` when stderr appears to be backed by a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=4)
def get_console(*, color: bool = True, emoji: bool = True) -> Console:
    """Return a Rich console bound to stderr for the given preferences.

    Standard output is reserved for rendered documents and program output.
    """

    tty = detect_tty()
    return Console(
        stderr=True,
        no_color=not (color and tty),
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str, use_emoji: bool) -> None:
    console = get_console(emoji=use_emoji)
    text = Text(msg)
    text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool = False) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji)


def ok(msg: str, *, use_emoji: bool = False) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji)


def warn(msg: str, *, use_emoji: bool = False) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji)


def fail(msg: str, *, use_emoji: bool = False) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji)


def configure_logging(level: str = "WARNING") -> None:
    """Route library logging through a Rich handler at ``level``.

    Args:
        level: One of :data:`LOG_LEVELS`, case-insensitive.

    Raises:
        ValueError: If ``level`` is not a known level name.
    """

    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"unknown log level '{level}'")
    handler = RichHandler(console=get_console(), show_path=False, rich_tracebacks=False)
    logging.basicConfig(level=normalized, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)


__all__ = ["LOG_LEVELS", "configure_logging", "emoji", "fail", "info", "ok", "warn"]
