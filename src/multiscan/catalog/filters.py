# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filter semantics shared by rule and rule-group selection."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable, Iterable, Sequence
from typing import Final

from ..models import Filter, FilterCategory, GroupKind, Rule, RuleGroup

_RULE_VALUES: Final[dict[FilterCategory, Callable[[Rule], Iterable[str]]]] = {
    FilterCategory.CATEGORY: lambda rule: rule.categories,
    FilterCategory.RULESET: lambda rule: rule.rulesets,
    FilterCategory.LANGUAGE: lambda rule: rule.languages,
    FilterCategory.ENGINE: lambda rule: (rule.engine,),
    FilterCategory.RULE_NAME: lambda rule: (rule.name,),
}


def rule_matches(rule: Rule, filters: Sequence[Filter]) -> bool:
    """Return whether ``rule`` satisfies ``filters``.

    Values sharing a :class:`FilterCategory` are OR'd together and distinct
    categories are AND'd. Negated values match rules that do not carry the
    value; a category holding only negated values requires every negation to
    hold. Matching is case-insensitive. No filters selects every rule.

    Args:
        rule: Catalog rule under evaluation.
        filters: Selection predicates supplied by the caller.

    Returns:
        bool: ``True`` when ``rule`` is selected.
    """

    by_category: dict[FilterCategory, list[Filter]] = defaultdict(list)
    for entry in filters:
        by_category[entry.category].append(entry)
    for category, entries in by_category.items():
        values = {value.casefold() for value in _RULE_VALUES[category](rule)}
        positives = [entry.term.casefold() for entry in entries if not entry.negated]
        negatives = [entry.term.casefold() for entry in entries if entry.negated]
        if any(term in values for term in negatives):
            return False
        if positives and not any(term in values for term in positives):
            return False
    return True


def selected_group_kind(filters: Sequence[Filter]) -> GroupKind:
    """Return the group kind an engine should execute for ``filters``.

    Ruleset groups are selected when the caller explicitly asks for a ruleset;
    category groups otherwise.
    """

    if any(entry.category is FilterCategory.RULESET and not entry.negated for entry in filters):
        return GroupKind.RULESET
    return GroupKind.CATEGORY


def group_contains_rule(group: RuleGroup, rule: Rule) -> bool:
    """Return whether ``rule`` belongs to ``group``."""

    if group.engine != rule.engine:
        return False
    members = rule.rulesets if group.kind is GroupKind.RULESET else rule.categories
    return any(member.casefold() == group.name.casefold() for member in members)


__all__ = ["group_contains_rule", "rule_matches", "selected_group_kind"]
