# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from multiscan.messaging import Messenger
from multiscan.models import GroupKind, Rule, RuleGroup


@pytest.fixture
def console_buffer() -> io.StringIO:
    """Return the buffer backing :func:`quiet_console`."""
    return io.StringIO()


@pytest.fixture
def quiet_console(console_buffer: io.StringIO) -> Console:
    """Return a plain console writing into ``console_buffer``."""
    return Console(file=console_buffer, force_terminal=False, no_color=True, width=200)


@pytest.fixture
def messenger(quiet_console: Console) -> Messenger:
    """Return a messenger that writes into an in-memory console."""
    return Messenger(console=quiet_console)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a small mixed-language tree and make it the working directory."""
    src = tmp_path / "src"
    (src / "nested").mkdir(parents=True)
    (src / "Foo.cls").write_text("public class Foo {}\n", encoding="utf-8")
    (src / "Ignored.cls").write_text("public class Ignored {}\n", encoding="utf-8")
    (src / "nested" / "Bar.cls").write_text("public class Bar {}\n", encoding="utf-8")
    (src / "bar.js").write_text("var bar = 1;\n", encoding="utf-8")
    (src / ".hidden.js").write_text("var hidden = 1;\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def apex_rules() -> list[Rule]:
    """Return rules owned by the ``pmd`` and ``eslint`` engines."""
    return [
        Rule(
            name="ApexDoc",
            engine="pmd",
            categories=("Documentation",),
            rulesets=("Quickstart",),
            languages=("apex",),
        ),
        Rule(
            name="AvoidGlobalModifier",
            engine="pmd",
            categories=("Best Practices",),
            rulesets=("Security",),
            languages=("apex",),
        ),
        Rule(
            name="no-unused-vars",
            engine="eslint",
            categories=("Variables",),
            rulesets=("Recommended",),
            languages=("javascript",),
        ),
        Rule(
            name="no-eval",
            engine="eslint",
            categories=("Best Practices",),
            rulesets=("Security",),
            languages=("javascript",),
        ),
    ]


@pytest.fixture
def apex_groups() -> list[RuleGroup]:
    """Return category and ruleset groups matching :func:`apex_rules`."""
    return [
        RuleGroup(name="Documentation", engine="pmd", paths=("category/apex/documentation.xml",)),
        RuleGroup(name="Best Practices", engine="pmd", paths=("category/apex/bestpractices.xml",)),
        RuleGroup(name="Quickstart", engine="pmd", kind=GroupKind.RULESET, paths=("rulesets/quickstart.xml",)),
        RuleGroup(name="Security", engine="pmd", kind=GroupKind.RULESET, paths=("rulesets/security.xml",)),
        RuleGroup(name="Variables", engine="eslint"),
        RuleGroup(name="Best Practices", engine="eslint"),
    ]
