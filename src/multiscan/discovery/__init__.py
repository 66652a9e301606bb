# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Target discovery: glob matching and per-engine target resolution."""

from __future__ import annotations

from .patterns import PatternMatcher, expand_braces, has_magic
from .targets import TargetResolver

__all__ = ["PatternMatcher", "TargetResolver", "expand_braces", "has_magic"]
