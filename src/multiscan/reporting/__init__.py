# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Result recombination and report emitters."""

from __future__ import annotations

from .recombinator import DEFAULT_EMITTERS, ResultRecombinator

__all__ = ["DEFAULT_EMITTERS", "ResultRecombinator"]
