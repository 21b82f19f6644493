# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Re-render templates whenever their sources change."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..cancellation import CancellationToken
from ..errors import CliopatraError, InvalidOptionError
from ..watcher import DEFAULT_INTERVAL, FileWatcher
from .paths import compute_base_directory
from .renderer import Renderer

LOGGER = logging.getLogger(__name__)


def _as_root(path: str) -> str:
    absolute = os.path.abspath(path)
    if os.path.isdir(absolute) and not absolute.endswith(os.sep):
        absolute += os.sep
    return absolute


@dataclass(slots=True)
class TemplateWatch:
    """Watch template inputs and re-render each changed file.

    Attributes:
        renderer: Renderer used for every re-render; its masks filter events.
        inputs: Template files and directories given by the user.
        output_directory: Directory receiving rendered files, mirroring the inputs.
        output_file: Single destination used instead of ``output_directory``.
        base_directory: Explicit base overriding the computed one.
        interval: Polling interval in seconds.
    """

    renderer: Renderer
    inputs: Sequence[str]
    output_directory: str | None = None
    output_file: str | None = None
    base_directory: str | None = None
    interval: float = DEFAULT_INTERVAL
    _roots: list[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.output_directory is None and self.output_file is None:
            raise InvalidOptionError("watching templates requires an output directory or output file")
        self._roots = [_as_root(path) for path in self.inputs]

    def output_path_for(self, path: str) -> str:
        """Return where the template at ``path`` is rendered to."""

        if self.output_file is not None:
            return self.output_file
        assert self.output_directory is not None  # nosec B101
        explicit = os.path.abspath(self.base_directory) if self.base_directory else None
        base = compute_base_directory(os.path.abspath(path), self._roots, explicit)
        return os.path.join(self.output_directory, os.path.relpath(path, base))

    def handle_write(self, path: str) -> None:
        """Re-render ``path``; failures are logged and the watch continues."""

        output = self.output_path_for(path)
        try:
            os.makedirs(os.path.dirname(output) or ".", exist_ok=True)
            self.renderer.render_file(path, output)
        except (CliopatraError, OSError) as exc:
            LOGGER.warning("could not render %s: %s", path, exc)
            return
        LOGGER.info("rendered %s -> %s", path, output)

    def handle_remove(self, path: str) -> None:
        LOGGER.info("template %s removed; leaving %s in place", path, self.output_path_for(path))

    def run(self, token: CancellationToken) -> None:
        """Watch until ``token`` fires.

        Raises:
            OperationCancelledError: When ``token`` is cancelled.
        """

        watcher = FileWatcher(
            paths=list(self.inputs),
            masks=self.renderer.options.masks,
            on_write=self.handle_write,
            on_remove=self.handle_remove,
            interval=self.interval,
        )
        watcher.run(token)


__all__ = ["TemplateWatch"]
