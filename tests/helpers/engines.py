# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scriptable engine doubles shared by orchestration tests."""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from multiscan.models import Rule, RuleGroup, RuleResult, RuleTarget, RuleViolation


@dataclass(frozen=True)
class EngineCall:
    groups: tuple[RuleGroup, ...]
    rules: tuple[Rule, ...]
    targets: tuple[RuleTarget, ...]
    options: dict[str, str]


class FakeEngine:
    """Engine double recording calls and returning canned results."""

    def __init__(
        self,
        name: str,
        patterns: Sequence[str] | None = ("**/*",),
        *,
        results: Sequence[RuleResult] = (),
        error: Exception | None = None,
        init_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self.patterns = None if patterns is None else list(patterns)
        self.results = list(results)
        self.error = error
        self.init_error = init_error
        self.delay = delay
        self.init_calls = 0
        self.calls: list[EngineCall] = []
        self.thread_names: list[str] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def initialize(self) -> None:
        self.init_calls += 1
        if self.init_error is not None:
            raise self.init_error

    def target_patterns(self, target: str) -> list[str] | None:
        return self.patterns

    def run(
        self,
        groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        options: Mapping[str, str],
    ) -> list[RuleResult]:
        with self._lock:
            self.calls.append(EngineCall(tuple(groups), tuple(rules), tuple(targets), dict(options)))
            self.thread_names.append(threading.current_thread().name)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.results)


def make_result(engine: str, file_name: str, *rule_names: str, severity: int = 2) -> RuleResult:
    """Return a result for ``file_name`` with one violation per rule name."""

    violations = tuple(
        RuleViolation(
            rule_name=rule_name,
            message=f"{rule_name} violated",
            severity=severity,
            line=index + 1,
            column=4,
            category="Best Practices",
            url=f"https://rules.example.test/{rule_name}",
        )
        for index, rule_name in enumerate(rule_names)
    )
    return RuleResult(engine=engine, file_name=file_name, violations=violations)
