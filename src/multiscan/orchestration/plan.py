# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-engine dispatch decisions computed before any engine runs."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Final

from ..engines.base import AnalysisEngine
from ..models import Rule, RuleGroup, RuleResult, RuleTarget

REASON_ELIGIBLE: Final[str] = "eligible"
REASON_NO_RULES: Final[str] = "no matching rules"
REASON_NO_TARGETS: Final[str] = "no matching targets"


@dataclass(frozen=True, slots=True)
class OrchestratorHooks:
    """Provide lifecycle callbacks invoked around engine dispatch."""

    before_engine: Callable[[str], None] | None = None
    after_engine: Callable[[str, Sequence[RuleResult]], None] | None = None
    after_run: Callable[[Sequence[RuleResult]], None] | None = None


@dataclass(frozen=True, slots=True)
class EngineDecision:
    """Slice of the filtered selection and targets assigned to one engine."""

    engine: AnalysisEngine
    groups: tuple[RuleGroup, ...]
    rules: tuple[Rule, ...]
    targets: tuple[RuleTarget, ...]

    @property
    def name(self) -> str:
        """Return the engine name."""

        return self.engine.name

    @property
    def eligible(self) -> bool:
        """Return whether the engine has rules and at least one non-empty target."""

        return bool(self.rules) and any(target.paths for target in self.targets)

    @property
    def reason(self) -> str:
        """Return a short explanation of the eligibility decision."""

        if not self.rules:
            return REASON_NO_RULES
        if not self.eligible:
            return REASON_NO_TARGETS
        return REASON_ELIGIBLE

    def describe(self) -> str:
        """Return a single-line trace description of this decision."""

        return (
            f"[plan] engine={self.name} groups={len(self.groups)} rules={len(self.rules)} "
            f"targets={len(self.targets)} eligible={self.eligible} reason={self.reason}"
        )


@dataclass(frozen=True, slots=True)
class EnginePlan:
    """Ordered decisions for every registered engine."""

    decisions: tuple[EngineDecision, ...]

    @property
    def eligible(self) -> tuple[EngineDecision, ...]:
        """Return the decisions selected for dispatch, in registration order."""

        return tuple(decision for decision in self.decisions if decision.eligible)

    @property
    def skipped(self) -> tuple[EngineDecision, ...]:
        """Return the decisions that will not be dispatched."""

        return tuple(decision for decision in self.decisions if not decision.eligible)

    def __iter__(self) -> Iterator[EngineDecision]:
        return iter(self.decisions)

    def __len__(self) -> int:
        return len(self.decisions)


__all__ = [
    "EngineDecision",
    "EnginePlan",
    "OrchestratorHooks",
    "REASON_ELIGIBLE",
    "REASON_NO_RULES",
    "REASON_NO_TARGETS",
]
