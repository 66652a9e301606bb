# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-style glob helpers used to match targets against engine patterns."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from ..models import NEGATION_PREFIX

_MAGIC: Final[re.Pattern[str]] = re.compile(r"[*?\[]|[@!+]\(|\{[^{}]*(,|\.\.)[^{}]*\}")
_BRACE: Final[re.Pattern[str]] = re.compile(r"\{([^{}]*,[^{}]*)\}")
_PATTERN_CACHE_SIZE: Final[int] = 512


def has_magic(target: str) -> bool:
    """Return whether ``target`` contains glob metacharacters.

    Args:
        target: Raw target string supplied by the caller.

    Returns:
        bool: ``True`` when the target should be expanded as a glob pattern.
    """

    return _MAGIC.search(target) is not None


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternations in ``pattern`` into separate patterns.

    Args:
        pattern: Glob pattern possibly containing brace alternations.

    Returns:
        list[str]: Patterns without brace alternations, in left-to-right order.
    """

    match = _BRACE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        for candidate in expand_braces(f"{head}{option}{tail}"):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


@lru_cache(maxsize=_PATTERN_CACHE_SIZE)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a single brace-free glob ``pattern`` into a regular expression.

    ``*`` and ``?`` never cross ``/``; ``**`` spans any number of directories.
    Patterns that are not absolute float: they match at any directory boundary,
    so ``*.cls`` matches ``/work/src/Foo.cls``.

    Args:
        pattern: Glob pattern using ``/`` separators.

    Returns:
        re.Pattern[str]: Anchored expression matching POSIX-style paths.
    """

    anchored = pattern.startswith("/")
    body = pattern.removeprefix("./")
    parts: list[str] = []
    index = 0
    length = len(body)
    while index < length:
        char = body[index]
        if body.startswith("**/", index):
            parts.append("(?:[^/]*/)*")
            index += 3
        elif body.startswith("**", index):
            parts.append(".*")
            index += 2
        elif char == "*":
            parts.append("[^/]*")
            index += 1
        elif char == "?":
            parts.append("[^/]")
            index += 1
        elif char == "[":
            closing = body.find("]", index + 2)
            if closing == -1:
                parts.append(re.escape(char))
                index += 1
                continue
            members = body[index + 1 : closing].replace("\\", "\\\\").replace("[", "\\[")
            if members[0] in "!^":
                members = f"^/{members[1:]}"
            parts.append(f"[{members}]")
            index = closing + 1
        else:
            parts.append(re.escape(char))
            index += 1
    prefix = "" if anchored else "(?:.*/)?"
    return re.compile(f"{prefix}{''.join(parts)}")


def _compile_all(patterns: Iterable[str]) -> tuple[re.Pattern[str], ...]:
    """Compile ``patterns`` after brace expansion."""

    return tuple(compile_glob(expanded) for pattern in patterns for expanded in expand_braces(pattern))


@dataclass(frozen=True, slots=True)
class PatternMatcher:
    """Inclusive and exclusive matchers derived from an engine's target patterns.

    A path is accepted when it matches an inclusive pattern (or no inclusive
    patterns exist) and matches none of the exclusion patterns.
    """

    inclusive: tuple[re.Pattern[str], ...]
    exclusive: tuple[re.Pattern[str], ...]

    @classmethod
    def from_patterns(cls, patterns: Sequence[str]) -> PatternMatcher:
        """Build a matcher from ordered engine ``patterns``.

        Args:
            patterns: Glob patterns where a leading ``!`` marks an exclusion.

        Returns:
            PatternMatcher: Matcher splitting inclusions from exclusions.
        """

        inclusive = [pattern for pattern in patterns if not pattern.startswith(NEGATION_PREFIX)]
        exclusive = [
            pattern.removeprefix(NEGATION_PREFIX) for pattern in patterns if pattern.startswith(NEGATION_PREFIX)
        ]
        return cls(inclusive=_compile_all(inclusive), exclusive=_compile_all(exclusive))

    @property
    def has_inclusions(self) -> bool:
        """Return whether any inclusive pattern was declared."""

        return bool(self.inclusive)

    def is_included(self, path: str) -> bool:
        """Return whether ``path`` passes the inclusive matcher."""

        if not self.inclusive:
            return True
        return any(regex.fullmatch(path) for regex in self.inclusive)

    def is_not_excluded(self, path: str) -> bool:
        """Return whether ``path`` survives every exclusion pattern."""

        return not any(regex.fullmatch(path) for regex in self.exclusive)

    def __call__(self, path: str) -> bool:
        """Return whether ``path`` is accepted by both matchers."""

        normalized = path.replace("\\", "/")
        return self.is_included(normalized) and self.is_not_excluded(normalized)


__all__ = ["PatternMatcher", "compile_glob", "expand_braces", "has_magic"]
