# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Capability contract implemented by every pluggable analysis engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from ..models import Rule, RuleGroup, RuleResult, RuleTarget

type EngineOptions = Mapping[str, str]


@runtime_checkable
class AnalysisEngine(Protocol):
    """Pluggable backend that owns a namespace of rules and executes them.

    Engines are registered in an :class:`~multiscan.engines.registry.EngineRegistry`
    handed to the orchestrator. The orchestrator only ever calls
    :meth:`run` from worker threads, one call per engine per run.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the identity matched against ``Rule.engine`` and ``RuleGroup.engine``."""
        raise NotImplementedError

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the engine for use; raise to signal a fatal failure."""
        raise NotImplementedError

    @abstractmethod
    def target_patterns(self, target: str) -> Sequence[str] | None:
        """Return the glob patterns selecting files under ``target``.

        Patterns prefixed with ``!`` exclude matches. An empty sequence means
        the engine applies no filtering; returning ``None`` violates the
        contract and aborts target resolution.

        Args:
            target: Raw target string supplied by the caller.

        Returns:
            Sequence[str] | None: Ordered glob patterns for ``target``.
        """
        raise NotImplementedError

    @abstractmethod
    def run(
        self,
        groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        options: EngineOptions,
    ) -> Sequence[RuleResult]:
        """Execute ``rules`` (or ``groups``) against ``targets``.

        Args:
            groups: Rule groups owned by this engine that matched the filters.
            rules: Rules owned by this engine that matched the filters.
            targets: Resolved targets with non-empty absolute paths.
            options: Opaque engine options supplied by the caller.

        Returns:
            Sequence[RuleResult]: Results in the engine's preferred order.
        """
        raise NotImplementedError


class BaseEngine(ABC):
    """Shared bookkeeping for engines with a fixed pattern list.

    Subclasses implement :meth:`run` and may override :meth:`_setup` for
    one-off preparation. :meth:`initialize` calls :meth:`_setup` at most once
    per instance.
    """

    def __init__(self, name: str, patterns: Sequence[str] = ()) -> None:
        """Create an engine.

        Args:
            name: Engine identity used by rules and rule groups.
            patterns: Glob patterns returned for every target.
        """

        if not name:
            raise ValueError("engine name must not be empty")
        self._name = name
        self._patterns = tuple(patterns)
        self._initialized = False

    @property
    def name(self) -> str:
        """Return the engine name."""

        return self._name

    @property
    def initialized(self) -> bool:
        """Return whether :meth:`initialize` has completed."""

        return self._initialized

    def initialize(self) -> None:
        """Run :meth:`_setup` once and mark the engine ready."""

        if self._initialized:
            return
        self._setup()
        self._initialized = True

    def _setup(self) -> None:
        """Prepare engine resources; the default does nothing."""

    def target_patterns(self, target: str) -> Sequence[str]:
        """Return the configured patterns regardless of ``target``."""

        return self._patterns

    @abstractmethod
    def run(
        self,
        groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        options: EngineOptions,
    ) -> Sequence[RuleResult]:
        """Execute ``rules`` against ``targets``; see :meth:`AnalysisEngine.run`."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, patterns={list(self._patterns)!r})"


__all__ = ["AnalysisEngine", "BaseEngine", "EngineOptions"]
