# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the multiscan orchestration core."""

from __future__ import annotations


class MultiscanError(Exception):
    """Base class for every error raised by multiscan."""


class ConfigError(MultiscanError):
    """Raised when configuration input is invalid."""


class EngineContractError(MultiscanError):
    """Raised when an engine violates its capability contract."""


class EngineRegistrationError(MultiscanError, ValueError):
    """Raised when an engine cannot be added to a registry."""


class EngineInitializationError(MultiscanError):
    """Raised when an engine or the rule catalog fails to initialise."""

    def __init__(self, component: str, message: str) -> None:
        """Capture the failing ``component`` alongside ``message``.

        Args:
            component: Name of the engine or catalog that failed.
            message: Error text reported by the component.
        """

        super().__init__(f"Failed to initialise {component}: {message}")
        self.component = component


class NotInitializedError(MultiscanError):
    """Raised when orchestration is requested before initialisation."""


class OrchestrationError(MultiscanError):
    """Raised when any dispatched engine fails during a run."""

    def __init__(self, engine: str, message: str) -> None:
        """Record the failing ``engine`` while preserving its error text.

        Args:
            engine: Name of the engine whose execution failed.
            message: Original error message surfaced by the engine.
        """

        super().__init__(message)
        self.engine = engine


class RecombinationError(MultiscanError):
    """Raised when results cannot be recombined into the requested format."""


class MessageFormatError(MultiscanError):
    """Raised when a framed engine message cannot be decoded."""


def describe_exception(exc: BaseException) -> str:
    """Return the most informative message available for ``exc``.

    Args:
        exc: Exception raised by a collaborator.

    Returns:
        str: ``str(exc)`` when non-empty, otherwise the exception's ``repr``.
    """

    text = str(exc)
    return text if text else repr(exc)


__all__ = [
    "ConfigError",
    "EngineContractError",
    "EngineInitializationError",
    "EngineRegistrationError",
    "MessageFormatError",
    "MultiscanError",
    "NotInitializedError",
    "OrchestrationError",
    "RecombinationError",
    "describe_exception",
]
