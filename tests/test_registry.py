# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ordered engine registry."""

import pytest

from multiscan.engines import AnalysisEngine, BaseEngine, EngineRegistry
from multiscan.errors import EngineRegistrationError, MultiscanError
from tests.helpers.engines import FakeEngine


def test_registry_preserves_registration_order() -> None:
    registry = EngineRegistry([FakeEngine("pmd"), FakeEngine("eslint")])
    registry.register(FakeEngine("retire-js"))

    assert list(registry) == ["pmd", "eslint", "retire-js"]
    assert [engine.name for engine in registry.engines()] == ["pmd", "eslint", "retire-js"]
    assert len(registry) == 3


def test_duplicate_names_are_rejected() -> None:
    registry = EngineRegistry([FakeEngine("pmd")])

    with pytest.raises(EngineRegistrationError, match="already registered") as excinfo:
        registry.register(FakeEngine("pmd"))

    assert isinstance(excinfo.value, MultiscanError)
    assert isinstance(excinfo.value, ValueError)
    assert len(registry) == 1


def test_lookup_by_name() -> None:
    engine = FakeEngine("pmd")
    registry = EngineRegistry([engine])

    assert registry["pmd"] is engine
    assert registry.try_get("pmd") is engine
    assert registry.try_get("eslint") is None
    with pytest.raises(KeyError):
        registry["eslint"]


def test_fake_engine_satisfies_protocol() -> None:
    assert isinstance(FakeEngine("pmd"), AnalysisEngine)


class _StaticEngine(BaseEngine):
    def __init__(self) -> None:
        super().__init__("static", ["*.cls", "!**/generated/**"])
        self.setup_calls = 0

    def _setup(self) -> None:
        self.setup_calls += 1

    def run(self, groups, rules, targets, options):
        return []


def test_base_engine_initializes_once_and_reports_patterns() -> None:
    engine = _StaticEngine()

    engine.initialize()
    engine.initialize()

    assert engine.initialized is True
    assert engine.setup_calls == 1
    assert engine.target_patterns("src") == ("*.cls", "!**/generated/**")
    assert isinstance(engine, AnalysisEngine)
    assert "static" in repr(engine)


def test_base_engine_requires_a_name() -> None:
    class _Nameless(BaseEngine):
        def run(self, groups, rules, targets, options):
            return []

    with pytest.raises(ValueError, match="name"):
        _Nameless("")
