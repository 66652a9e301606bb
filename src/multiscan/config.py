# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the multiscan orchestrator."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "multiscan"
ENV_JOBS: Final[str] = "MULTISCAN_JOBS"
ENV_DIRECTORY_FALLBACK: Final[str] = "MULTISCAN_DIRECTORY_FALLBACK"


class DirectoryFallback(str, Enum):
    """Policy applied to directory targets when an engine declares no patterns."""

    PLACEHOLDER = "placeholder"
    SKIP = "skip"


class OutputConfig(BaseModel):
    """Presentation preferences for user-facing console output."""

    model_config = ConfigDict(frozen=True)

    color: bool = True
    emoji: bool = True


class OrchestratorConfig(BaseModel):
    """Runtime settings consumed by the orchestrator and target resolver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    jobs: int | None = None
    directory_fallback: DirectoryFallback = DirectoryFallback.PLACEHOLDER
    follow_symlinks: bool = False
    verbose: bool = False
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("jobs")
    @classmethod
    def _validate_jobs(cls, value: int | None) -> int | None:
        """Ensure an explicit worker count is positive.

        Args:
            value: Requested worker count, or ``None`` for automatic sizing.

        Returns:
            int | None: The validated worker count.

        Raises:
            ValueError: If ``value`` is less than one.
        """

        if value is not None and value < 1:
            raise ValueError("jobs must be at least 1")
        return value


def load_config(project_root: Path, *, env: Mapping[str, str] | None = None) -> OrchestratorConfig:
    """Return the orchestrator configuration for ``project_root``.

    Settings are read from the ``[tool.multiscan]`` table of the project's
    ``pyproject.toml`` and then overridden by ``MULTISCAN_*`` environment
    variables.

    Args:
        project_root: Directory containing the optional ``pyproject.toml``.
        env: Environment mapping; defaults to ``os.environ``.

    Returns:
        OrchestratorConfig: Validated configuration.

    Raises:
        ConfigError: If the TOML document or any override is invalid.
    """

    payload = dict(_read_pyproject_section(project_root / PYPROJECT_FILENAME))
    payload.update(_environment_overrides(os.environ if env is None else env))
    try:
        return OrchestratorConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid multiscan configuration: {exc}") from exc


def _read_pyproject_section(path: Path) -> Mapping[str, Any]:
    """Return the ``[tool.multiscan]`` table from ``path`` when present."""

    if not path.is_file():
        return {}
    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}") from exc
    section = document.get(PYPROJECT_TOOL_KEY, {}).get(PYPROJECT_SECTION_KEY, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{PYPROJECT_TOOL_KEY}.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return section


def _environment_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    """Return configuration overrides sourced from ``env``."""

    overrides: dict[str, Any] = {}
    if raw_jobs := env.get(ENV_JOBS):
        try:
            overrides["jobs"] = int(raw_jobs)
        except ValueError as exc:
            raise ConfigError(f"{ENV_JOBS} must be an integer, got {raw_jobs!r}") from exc
    if raw_fallback := env.get(ENV_DIRECTORY_FALLBACK):
        overrides["directory_fallback"] = raw_fallback.strip().lower()
    return overrides


__all__ = [
    "DirectoryFallback",
    "OrchestratorConfig",
    "OutputConfig",
    "load_config",
]
