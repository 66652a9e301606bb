# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""multiscan: route rules and targets to pluggable analysis engines and recombine their results."""

from __future__ import annotations

from importlib import metadata

from .catalog import InMemoryRuleCatalog, RuleCatalog
from .config import DirectoryFallback, OrchestratorConfig, OutputConfig, load_config
from .discovery import TargetResolver
from .engines import AnalysisEngine, BaseEngine, EngineRegistry
from .errors import (
    EngineContractError,
    EngineInitializationError,
    MultiscanError,
    NotInitializedError,
    OrchestrationError,
    RecombinationError,
)
from .messaging import Messenger
from .models import (
    Filter,
    FilterCategory,
    GroupKind,
    OutputFormat,
    ReportTable,
    Rule,
    RuleGroup,
    RuleResult,
    RuleTarget,
    RuleViolation,
)
from .orchestration.orchestrator import Orchestrator, OrchestratorOverrides
from .orchestration.plan import EngineDecision, EnginePlan, OrchestratorHooks
from .reporting import ResultRecombinator

try:
    __version__ = metadata.version("multiscan")
except metadata.PackageNotFoundError:  # pragma: no cover - local development fallback
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "AnalysisEngine",
    "BaseEngine",
    "DirectoryFallback",
    "EngineContractError",
    "EngineDecision",
    "EngineInitializationError",
    "EnginePlan",
    "EngineRegistry",
    "Filter",
    "FilterCategory",
    "GroupKind",
    "InMemoryRuleCatalog",
    "Messenger",
    "MultiscanError",
    "NotInitializedError",
    "OrchestrationError",
    "Orchestrator",
    "OrchestratorConfig",
    "OrchestratorHooks",
    "OrchestratorOverrides",
    "OutputConfig",
    "OutputFormat",
    "RecombinationError",
    "ReportTable",
    "ResultRecombinator",
    "Rule",
    "RuleCatalog",
    "RuleGroup",
    "RuleResult",
    "RuleTarget",
    "RuleViolation",
    "TargetResolver",
    "load_config",
]
