# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Template rendering pipeline."""

from __future__ import annotations

from .functions import MUTATION_FUNCTIONS
from .options import RenderOptions
from .paths import compute_base_directory, parent_directory, rename_output
from .renderer import Renderer
from .watch import TemplateWatch

__all__ = (
    "MUTATION_FUNCTIONS",
    "RenderOptions",
    "Renderer",
    "TemplateWatch",
    "compute_base_directory",
    "parent_directory",
    "rename_output",
)
