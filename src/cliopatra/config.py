# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration file and environment loading."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .logging import LOG_LEVELS
from .watcher import DEFAULT_INTERVAL

CONFIG_ENV: Final[str] = "CLIOPATRA_CONFIG"
REPOSITORIES_ENV: Final[str] = "CLIOPATRA_REPOSITORIES"
LOG_LEVEL_ENV: Final[str] = "CLIOPATRA_LOG_LEVEL"
DEFAULT_CONFIG_PATH: Final[Path] = Path("~/.cliopatra/config.yaml")


class CliopatraConfig(BaseModel):
    """Settings shared by every command."""

    model_config = ConfigDict(extra="forbid")

    repositories: list[Path] = Field(default_factory=list)
    log_level: str = "WARNING"
    watch_interval: float = Field(default=DEFAULT_INTERVAL, gt=0)

    @field_validator("log_level")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return normalized


def _default_config_path(environ: Mapping[str, str]) -> Path | None:
    explicit = environ.get(CONFIG_ENV)
    if explicit:
        return Path(explicit)
    candidate = DEFAULT_CONFIG_PATH.expanduser()
    return candidate if candidate.is_file() else None


def load_config(path: Path | None = None, *, environ: Mapping[str, str] | None = None) -> CliopatraConfig:
    """Load configuration from YAML and apply environment overrides.

    The file is ``path`` when given, else ``$CLIOPATRA_CONFIG``, else
    ``~/.cliopatra/config.yaml`` when it exists. ``CLIOPATRA_REPOSITORIES``
    (``os.pathsep`` separated) and ``CLIOPATRA_LOG_LEVEL`` override file values.

    Args:
        path: Explicit configuration file.
        environ: Environment mapping, defaulting to :data:`os.environ`.

    Returns:
        CliopatraConfig: Validated configuration.

    Raises:
        ConfigError: If the file is unreadable or the resulting settings are invalid.
    """

    env = os.environ if environ is None else environ
    source = path if path is not None else _default_config_path(env)
    data: dict[str, object] = {}
    if source is not None:
        try:
            with source.open("r", encoding="utf-8") as stream:
                payload = yaml.safe_load(stream)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"could not read configuration {source}: {exc}") from exc
        if payload is not None:
            if not isinstance(payload, Mapping):
                raise ConfigError(f"{source}: expected a mapping at the document root")
            data.update(payload)
    repositories = env.get(REPOSITORIES_ENV)
    if repositories:
        data["repositories"] = [entry for entry in repositories.split(os.pathsep) if entry]
    log_level = env.get(LOG_LEVEL_ENV)
    if log_level:
        data["log_level"] = log_level
    try:
        return CliopatraConfig.model_validate(data)
    except ValidationError as exc:
        label = source if source is not None else "environment"
        raise ConfigError(f"invalid configuration ({label}): {exc}") from exc


__all__ = ["CliopatraConfig", "load_config"]
