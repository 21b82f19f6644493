# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading YAML definition documents."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import IO, cast

import yaml

from .errors import DefinitionError
from .types import YAMLValue


def parse_document(stream: IO[str] | str, *, context: str) -> Mapping[str, YAMLValue]:
    """Parse one YAML document and ensure it is a mapping.

    Args:
        stream: Open text stream or raw YAML text.
        context: Human-readable origin used in error messages.

    Returns:
        Mapping[str, YAMLValue]: Parsed top-level mapping.

    Raises:
        DefinitionError: If the YAML is invalid or not a mapping.
    """

    try:
        payload = cast(YAMLValue, yaml.safe_load(stream))
    except yaml.YAMLError as exc:
        raise DefinitionError(f"failed to parse YAML: {exc}", source=context) from exc
    if not isinstance(payload, Mapping):
        raise DefinitionError("expected a YAML mapping at the document root", source=context)
    return payload


def load_document(path: Path) -> Mapping[str, YAMLValue]:
    """Load a YAML definition document from disk.

    Raises:
        FileNotFoundError: If the document is missing.
        DefinitionError: If the document is not UTF-8 or cannot be parsed.
    """
    try:
        with path.open("r", encoding="utf-8") as stream:
            return parse_document(stream, context=str(path))
    except UnicodeDecodeError as exc:
        raise DefinitionError(f"document is not valid UTF-8: {exc}", source=path) from exc


__all__ = ["load_document", "parse_document"]
