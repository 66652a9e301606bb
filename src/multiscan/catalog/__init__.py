# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rule catalog contracts, filter semantics, and an in-memory implementation."""

from __future__ import annotations

from .base import RuleCatalog
from .filters import group_contains_rule, rule_matches, selected_group_kind
from .memory import InMemoryRuleCatalog

__all__ = [
    "InMemoryRuleCatalog",
    "RuleCatalog",
    "group_contains_rule",
    "rule_matches",
    "selected_group_kind",
]
