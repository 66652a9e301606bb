# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the multiscan package."""

from __future__ import annotations

from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import HIGHEST_SEVERITY, Severity, normalize_severity

NEGATION_PREFIX: Final[str] = "!"

type JsonScalar = str | int | float | bool | None
type JsonValue = JsonScalar | list[JsonValue] | dict[str, JsonValue]


class FilterCategory(str, Enum):
    """Enumerate the dimensions a :class:`Filter` can select rules by."""

    CATEGORY = "category"
    RULESET = "ruleset"
    LANGUAGE = "language"
    ENGINE = "engine"
    RULE_NAME = "rule_name"


class GroupKind(str, Enum):
    """Enumerate the kinds of rule groups an engine may execute."""

    CATEGORY = "category"
    RULESET = "ruleset"


class OutputFormat(str, Enum):
    """Report formats understood by the result recombinator."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"
    XML = "xml"
    JUNIT = "junit"
    SARIF = "sarif"


class Filter(BaseModel):
    """Immutable selection predicate over the rule catalog."""

    model_config = ConfigDict(frozen=True)

    category: FilterCategory
    value: str

    @field_validator("value")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        """Ensure filter values carry content beyond the negation marker.

        Args:
            value: Raw filter value supplied by the caller.

        Returns:
            str: The stripped filter value.

        Raises:
            ValueError: If ``value`` is empty once whitespace is removed.
        """

        stripped = value.strip()
        if not stripped or stripped == NEGATION_PREFIX:
            raise ValueError("filter value must not be empty")
        return stripped

    @property
    def negated(self) -> bool:
        """Return whether the filter excludes rules carrying :attr:`term`."""

        return self.value.startswith(NEGATION_PREFIX)

    @property
    def term(self) -> str:
        """Return the filter value without any negation prefix."""

        return self.value.removeprefix(NEGATION_PREFIX)


class Rule(BaseModel):
    """Catalog entry owned by exactly one engine."""

    model_config = ConfigDict(frozen=True)

    name: str
    engine: str
    description: str = ""
    source_package: str = ""
    categories: tuple[str, ...] = Field(default_factory=tuple)
    rulesets: tuple[str, ...] = Field(default_factory=tuple)
    languages: tuple[str, ...] = Field(default_factory=tuple)
    default_enabled: bool = True


class RuleGroup(BaseModel):
    """Named bundle of rules consumed by engines that execute whole groups."""

    model_config = ConfigDict(frozen=True)

    name: str
    engine: str
    kind: GroupKind = GroupKind.CATEGORY
    paths: tuple[str, ...] = Field(default_factory=tuple)


class RuleTarget(BaseModel):
    """Engine specific expansion of a user supplied target."""

    model_config = ConfigDict(frozen=True)

    original_target: str
    is_directory: bool = False
    paths: tuple[str, ...]


class RuleViolation(BaseModel):
    """Single finding reported by an engine."""

    model_config = ConfigDict(frozen=True)

    rule_name: str
    message: str
    severity: int = HIGHEST_SEVERITY
    line: int | None = None
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None
    category: str = ""
    url: str | None = None

    @property
    def normalized_severity(self) -> Severity:
        """Return the normalised severity bucket for this violation."""

        return normalize_severity(self.severity)


class RuleResult(BaseModel):
    """Violations produced by one engine for one file."""

    model_config = ConfigDict(frozen=True)

    engine: str
    file_name: str
    violations: tuple[RuleViolation, ...] = Field(default_factory=tuple)


class ReportTable(BaseModel):
    """Tabular report representation returned for :attr:`OutputFormat.TABLE`."""

    model_config = ConfigDict(frozen=True)

    columns: tuple[str, ...]
    rows: tuple[dict[str, JsonValue], ...] = Field(default_factory=tuple)


type Report = str | ReportTable


__all__ = [
    "Filter",
    "FilterCategory",
    "GroupKind",
    "JsonValue",
    "NEGATION_PREFIX",
    "OutputFormat",
    "Report",
    "ReportTable",
    "Rule",
    "RuleGroup",
    "RuleResult",
    "RuleTarget",
    "RuleViolation",
]
