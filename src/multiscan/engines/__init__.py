# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Analysis engine contract and the ordered engine registry."""

from __future__ import annotations

from .base import AnalysisEngine, BaseEngine, EngineOptions
from .registry import EngineRegistry

__all__ = ["AnalysisEngine", "BaseEngine", "EngineOptions", "EngineRegistry"]
