# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Renderer configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RenderOptions(BaseModel):
    """Feature flags and path handling for a :class:`~cliopatra.render.Renderer`.

    Attributes:
        with_templates: Evaluate inputs as templates; when off, rendering writes nothing.
        with_yaml_markers: Reserved for YAML marker recognition; accepted but inert.
        delimiters: Custom variable delimiter pair, ``None`` for engine defaults.
        allow_program_creation: Permit templates to create programs ad hoc.
        masks: Glob masks restricting directory renders and watches.
        renames: Output suffix substitutions, e.g. ``{".tmpl.md": ".md"}``.
        verbose: Print a progress line per rendered file.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    with_templates: bool = True
    with_yaml_markers: bool = False
    delimiters: tuple[str, ...] | None = None
    allow_program_creation: bool = False
    masks: tuple[str, ...] = ()
    renames: dict[str, str] = Field(default_factory=dict)
    verbose: bool = False


__all__ = ["RenderOptions"]
