# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Template rendering with access to program lookup, mutation and execution."""

from __future__ import annotations

import io
import logging
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import IO, Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from ..cancellation import CancellationToken
from ..errors import (
    CliopatraError,
    InvalidOptionError,
    OperationCancelledError,
    ProgramCreationDisabledError,
    ProgramNotFoundError,
    TemplateRenderError,
)
from ..logging import info
from ..paths import matches_any, walk_files
from ..process import TextWriter
from ..program import Program, apply_options
from ..repository import ProgramRepository
from ..types import STDIO_SENTINEL
from .functions import MUTATION_FUNCTIONS
from .options import RenderOptions
from .paths import rename_output

LOGGER = logging.getLogger(__name__)

DELIMITER_COUNT = 2


class Renderer:
    """Render templates that look up, specialise and run programs.

    Programs are resolved from the local mapping first, then from each
    repository in order. ``run`` always works on a clone, so stored
    definitions never see call-site overrides.
    """

    def __init__(
        self,
        *,
        programs: Mapping[str, Program] | None = None,
        repositories: Sequence[ProgramRepository] = (),
        options: RenderOptions | None = None,
        token: CancellationToken | None = None,
    ) -> None:
        """Configure the renderer.

        Args:
            programs: Local programs consulted before any repository.
            repositories: Repositories consulted in order; first match wins.
            options: Feature flags and path handling; defaults when omitted.
            token: Cancellation token forwarded to every program run.
        """

        self.programs: dict[str, Program] = dict(programs or {})
        self.repositories: list[ProgramRepository] = list(repositories)
        self.options = options or RenderOptions()
        self.token = token

    # Program resolution -----------------------------------------------------------

    def lookup(self, name: str) -> Program:
        """Return the program called ``name``.

        Raises:
            ProgramNotFoundError: If no source knows ``name``.
        """

        program = self.programs.get(name)
        if program is not None:
            return program
        for repository in self.repositories:
            program = repository.get_program(name)
            if program is not None:
                return program
        raise ProgramNotFoundError(name)

    def create_program(self, name: str, *options: object) -> Program:
        """Return a new, empty program named ``name`` with ``options`` applied.

        Raises:
            ProgramCreationDisabledError: If program creation is not allowed.
        """

        if not self.options.allow_program_creation:
            raise ProgramCreationDisabledError(name)
        return apply_options(Program(name=name), options)

    def resolve_program(self, name: str) -> Program:
        """Look ``name`` up, creating an empty program when lookup fails and creation is allowed."""

        try:
            return self.lookup(name)
        except ProgramNotFoundError:
            if not self.options.allow_program_creation:
                raise
            LOGGER.debug("creating ad-hoc program %s", name)
            return self.create_program(name)

    def run(self, program: Program | str, *options: object) -> str:
        """Clone ``program``, apply ``options`` and return its captured output.

        Args:
            program: A program or the name of one.
            options: Mutations applied in order; strings become raw flags.

        Returns:
            str: Standard output of the child process.

        Raises:
            InvalidOptionError: If ``program`` or an option has an unsupported type.
        """

        if isinstance(program, Program):
            resolved = program
        elif isinstance(program, str):
            resolved = self.resolve_program(program)
        else:
            raise InvalidOptionError(f"invalid program type: {type(program).__name__}")
        specialised = apply_options(resolved.clone(), options)
        buffer = io.StringIO()
        specialised.run_into_writer(buffer, token=self.token)
        return buffer.getvalue()

    # Template plumbing -----------------------------------------------------------

    def template_functions(self) -> dict[str, Callable[..., Any]]:
        """Return the callables exposed to templates."""

        functions: dict[str, Callable[..., Any]] = dict(MUTATION_FUNCTIONS)
        functions.update(
            {
                "lookup": self.lookup,
                "program": self.create_program,
                "run": self.run,
            },
        )
        return functions

    def create_environment(self) -> Environment:
        """Return a template environment bound to :meth:`template_functions`.

        Raises:
            InvalidOptionError: If custom delimiters are not exactly a pair.
        """

        delimiters = self.options.delimiters
        kwargs: dict[str, Any] = {}
        if delimiters is not None:
            if len(delimiters) != DELIMITER_COUNT:
                raise InvalidOptionError(f"invalid delimiters: {list(delimiters)}")
            kwargs["variable_start_string"], kwargs["variable_end_string"] = delimiters
        # Bandit: renders plain-text documents, not HTML.
        environment = Environment(  # nosec B701
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            **kwargs,
        )
        environment.globals.update(self.template_functions())
        return environment

    def create_template(self, source: str, *, name: str = "template") -> Template:
        """Compile ``source`` into a template bound to the program functions.

        Raises:
            InvalidOptionError: If the delimiter configuration is invalid.
            TemplateRenderError: If ``source`` is not a valid template.
        """

        environment = self.create_environment()
        try:
            return environment.from_string(source)
        except TemplateError as exc:
            raise TemplateRenderError(f"{name}: {exc}") from exc

    # Rendering --------------------------------------------------------------------

    def render(self, reader: IO[str], writer: TextWriter, *, name: str = "template") -> None:
        """Render the template read from ``reader`` into ``writer``.

        Nothing is written when templating is disabled. Cliopatra errors and
        cancellation raised by template functions propagate unchanged; any
        other failure while evaluating the template is wrapped.

        Raises:
            TemplateRenderError: If the source is not UTF-8, or the template
                fails to parse or evaluate.
        """

        if not self.options.with_templates:
            return
        try:
            source = reader.read()
        except UnicodeDecodeError as exc:
            raise TemplateRenderError(f"{name}: template is not valid UTF-8: {exc}") from exc
        template = self.create_template(source, name=name)
        try:
            for chunk in template.generate():
                writer.write(chunk)
        except (CliopatraError, OperationCancelledError, OSError):
            raise
        except Exception as exc:
            raise TemplateRenderError(f"{name}: {exc}") from exc

    def render_file(self, file: str, output_file: str) -> None:
        """Render ``file`` to ``output_file`` after applying suffix renames.

        ``-`` as ``file`` reads standard input and writes standard output.
        """

        if file == STDIO_SENTINEL:
            if self.options.verbose:
                info("Rendering <stdin> -> <stdout>")
            self.render(sys.stdin, sys.stdout, name="<stdin>")
            return
        output_file = rename_output(output_file, self.options.renames)
        if self.options.verbose:
            info(f"Rendering {file} -> {output_file}")
        with open(file, encoding="utf-8") as source:
            if output_file == STDIO_SENTINEL:
                self.render(source, sys.stdout, name=file)
                return
            with open(output_file, "w", encoding="utf-8") as destination:
                self.render(source, destination, name=file)

    def render_directory(self, directory: str, output_directory: str) -> None:
        """Render every file below ``directory`` matching the masks into ``output_directory``.

        The relative layout is mirrored and missing directories are created.
        The first failing file aborts the whole render.
        """

        if not directory.endswith(os.sep):
            directory += os.sep
        for path in walk_files(directory, skip_hidden=False):
            if not matches_any(path, self.options.masks):
                continue
            output_file = os.path.join(output_directory, os.path.relpath(path, directory))
            os.makedirs(os.path.dirname(output_file) or ".", exist_ok=True)
            self.render_file(path, output_file)


__all__ = ["Renderer"]
