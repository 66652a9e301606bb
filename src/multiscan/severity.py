# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels normalising the numeric scales used by engines."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


HIGHEST_SEVERITY: Final[int] = 1
LOWEST_SEVERITY: Final[int] = 5

_SARIF_LEVELS: Final[dict[Severity, str]] = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.NOTE: "note",
}


def normalize_severity(value: int) -> Severity:
    """Return the :class:`Severity` bucket for an engine severity number.

    Engines rank violations from ``1`` (most severe) to ``5``. Values outside
    that range are clamped.

    Args:
        value: Engine-reported numeric severity.

    Returns:
        Severity: Normalised severity bucket.
    """

    clamped = min(max(value, HIGHEST_SEVERITY), LOWEST_SEVERITY)
    if clamped == HIGHEST_SEVERITY:
        return Severity.ERROR
    if clamped <= 3:
        return Severity.WARNING
    return Severity.NOTE


def severity_to_sarif(severity: Severity) -> str:
    """Return the SARIF ``level`` string for ``severity``."""

    return _SARIF_LEVELS.get(severity, "warning")


__all__ = [
    "HIGHEST_SEVERITY",
    "LOWEST_SEVERITY",
    "Severity",
    "normalize_severity",
    "severity_to_sarif",
]
