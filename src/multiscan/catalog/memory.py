# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalog implementation backed by rule and group definitions held in memory."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..models import Filter, Rule, RuleGroup
from .base import RuleCatalog
from .filters import group_contains_rule, rule_matches, selected_group_kind

LOGGER = logging.getLogger(__name__)


class InMemoryRuleCatalog(RuleCatalog):
    """Serve catalog queries from pre-built :class:`Rule` and :class:`RuleGroup` records."""

    def __init__(self, rules: Iterable[Rule] = (), groups: Iterable[RuleGroup] = ()) -> None:
        """Create a catalog from ``rules`` and ``groups``.

        Args:
            rules: Rule definitions in catalog order.
            groups: Rule group definitions in catalog order.

        Raises:
            ValueError: If two rules of the same engine share a name.
        """

        self._rules = tuple(rules)
        self._groups = tuple(groups)
        seen: set[tuple[str, str]] = set()
        for rule in self._rules:
            identity = (rule.engine, rule.name)
            if identity in seen:
                raise ValueError(f"Rule '{rule.name}' registered twice for engine '{rule.engine}'")
            seen.add(identity)
        self.initialized = False

    def initialize(self) -> None:
        """Mark the catalog ready; in-memory definitions need no loading."""

        self.initialized = True
        LOGGER.debug("catalog ready: %d rules, %d groups", len(self._rules), len(self._groups))

    def rules_matching(self, filters: Sequence[Filter]) -> list[Rule]:
        """Return rules matching ``filters`` in catalog order."""

        return [rule for rule in self._rules if rule_matches(rule, filters)]

    def rule_groups_matching(self, filters: Sequence[Filter]) -> list[RuleGroup]:
        """Return groups holding at least one rule selected by ``filters``.

        Only groups of the kind chosen by :func:`selected_group_kind` are
        returned so an engine never receives the same rule through both a
        category and a ruleset.

        Args:
            filters: Selection predicates supplied by the caller.

        Returns:
            list[RuleGroup]: Matching groups in catalog order.
        """

        kind = selected_group_kind(filters)
        matching = self.rules_matching(filters)
        return [
            group
            for group in self._groups
            if group.kind is kind and any(group_contains_rule(group, rule) for rule in matching)
        ]


__all__ = ["InMemoryRuleCatalog"]
