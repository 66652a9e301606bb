# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule catalog contract consumed by the orchestrator."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..models import Filter, Rule, RuleGroup


@runtime_checkable
class RuleCatalog(Protocol):
    """Answer which rules and rule groups match a set of filters.

    Both queries must apply identical filter semantics so that engines consuming
    groups and engines consuming flat rules observe the same selection.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Load catalog state so the query methods become safe to call."""
        raise NotImplementedError

    @abstractmethod
    def rules_matching(self, filters: Sequence[Filter]) -> Sequence[Rule]:
        """Return rules matching ``filters`` in catalog order.

        Args:
            filters: Selection predicates supplied by the caller.

        Returns:
            Sequence[Rule]: Matching rules across every engine.
        """
        raise NotImplementedError

    @abstractmethod
    def rule_groups_matching(self, filters: Sequence[Filter]) -> Sequence[RuleGroup]:
        """Return rule groups matching ``filters`` in catalog order.

        Args:
            filters: Selection predicates supplied by the caller.

        Returns:
            Sequence[RuleGroup]: Matching groups across every engine.
        """
        raise NotImplementedError


__all__ = ["RuleCatalog"]
