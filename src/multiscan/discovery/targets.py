# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand raw targets into engine specific :class:`RuleTarget` records."""

from __future__ import annotations

import glob
import logging
import os
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ..config import DirectoryFallback, OrchestratorConfig
from ..engines.base import AnalysisEngine
from ..errors import EngineContractError
from ..messaging import DIRECTORY_WITHOUT_PATTERNS, Messenger
from ..models import RuleTarget
from .patterns import PatternMatcher, expand_braces, has_magic

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _ResolutionState:
    """Paths already claimed by earlier targets for the engine being resolved."""

    claimed: set[str] = field(default_factory=set)

    def claim(self, paths: Sequence[str]) -> tuple[str, ...]:
        """Return the unclaimed subset of ``paths`` in order, claiming each."""

        fresh: list[str] = []
        for path in paths:
            if path in self.claimed:
                continue
            self.claimed.add(path)
            fresh.append(path)
        return tuple(fresh)


class TargetResolver:
    """Resolve raw target strings against an engine's target patterns.

    Each raw target is classified as a glob pattern, a directory, a plain file,
    or missing. Glob patterns are expanded relative to the working directory,
    directories are walked and filtered by the engine's patterns, and plain
    files are accepted when the patterns match them. A leading ``~`` is
    expanded in every form. Blank, missing, and empty targets are skipped
    silently. Every retained path is absolute and appears at most once per
    engine.
    """

    def __init__(
        self,
        *,
        config: OrchestratorConfig | None = None,
        messenger: Messenger | None = None,
        cwd: Path | None = None,
    ) -> None:
        """Create a resolver.

        Args:
            config: Orchestrator settings; defaults are used when omitted.
            messenger: Message context notified when fallbacks are applied.
            cwd: Base directory for relative targets; the process working
                directory at resolution time when omitted.
        """

        self._config = config or OrchestratorConfig()
        self._messenger = messenger
        self._cwd = cwd

    def resolve(self, engine: AnalysisEngine, targets: Sequence[str]) -> list[RuleTarget]:
        """Return the rule targets ``engine`` should analyse.

        Args:
            engine: Engine whose target patterns filter the results.
            targets: Raw file, directory, or glob targets.

        Returns:
            list[RuleTarget]: Targets with non-empty path lists, in input order.

        Raises:
            EngineContractError: If the engine returns ``None`` for its patterns.
        """

        base = self._cwd if self._cwd is not None else Path.cwd()
        state = _ResolutionState()
        resolved: list[RuleTarget] = []
        for target in targets:
            patterns = engine.target_patterns(target)
            if patterns is None:
                raise EngineContractError(f"Engine '{engine.name}' supplied no target patterns for '{target}'")
            rule_target = self._resolve_one(engine, target, tuple(patterns), base, state)
            if rule_target is not None:
                resolved.append(rule_target)
        LOGGER.debug("resolved %d of %d targets for %s", len(resolved), len(targets), engine.name)
        return resolved

    def _resolve_one(
        self,
        engine: AnalysisEngine,
        target: str,
        patterns: tuple[str, ...],
        base: Path,
        state: _ResolutionState,
    ) -> RuleTarget | None:
        """Resolve a single raw ``target`` for ``engine``."""

        if not target.strip():
            LOGGER.debug("skipping blank target for %s", engine.name)
            return None
        matcher = PatternMatcher.from_patterns(patterns)
        expanded = os.path.expanduser(target)
        if has_magic(target):
            matches = [path for path in _expand_glob(expanded, base) if matcher(path)]
            return _build_target(target, state.claim(matches))

        candidate = Path(expanded)
        location = candidate if candidate.is_absolute() else base / candidate
        if location.is_dir():
            return self._resolve_directory(engine, target, location, patterns, matcher, state)
        if location.is_file():
            absolute = _absolute(location)
            if not matcher(absolute):
                return None
            return _build_target(target, state.claim([absolute]))
        LOGGER.debug("skipping missing target %s", target)
        return None

    def _resolve_directory(
        self,
        engine: AnalysisEngine,
        target: str,
        directory: Path,
        patterns: tuple[str, ...],
        matcher: PatternMatcher,
        state: _ResolutionState,
    ) -> RuleTarget | None:
        """Expand ``directory`` using the engine's patterns relative to it.

        Args:
            engine: Engine being resolved, used for fallback messaging.
            target: Raw target string as supplied by the caller.
            directory: Directory location on disk.
            patterns: Engine target patterns for ``target``.
            matcher: Matcher compiled from ``patterns``.
            state: Paths already claimed for the engine.

        Returns:
            RuleTarget | None: Directory target, or ``None`` when nothing matched.
        """

        if not patterns:
            if self._config.directory_fallback is DirectoryFallback.SKIP:
                return None
            if self._messenger is not None:
                self._messenger.warn(DIRECTORY_WITHOUT_PATTERNS, (engine.name, target))
            return _build_target(target, state.claim([_absolute(directory)]), is_directory=True)

        matches: list[str] = []
        for relative in _walk_relative(directory, follow_symlinks=self._config.follow_symlinks):
            if matcher(relative):
                matches.append(_absolute(directory / relative))
        return _build_target(target, state.claim(matches), is_directory=True)


def _absolute(path: Path | str) -> str:
    """Return the absolute, normalised string form of ``path``."""

    return os.path.abspath(path)


def _expand_glob(pattern: str, base: Path) -> list[str]:
    """Return absolute files matching ``pattern`` relative to ``base``.

    Args:
        pattern: Glob pattern, possibly containing brace alternations.
        base: Directory relative patterns are evaluated against.

    Returns:
        list[str]: Sorted absolute file paths without duplicates.
    """

    found: dict[str, None] = {}
    for expanded in expand_braces(pattern):
        root_dir = None if os.path.isabs(expanded) else base
        for match in glob.glob(expanded, root_dir=root_dir, recursive=True):
            location = Path(match) if root_dir is None else root_dir / match
            if location.is_file():
                found.setdefault(_absolute(location), None)
    return sorted(found)


def _walk_relative(directory: Path, *, follow_symlinks: bool) -> Iterator[str]:
    """Yield POSIX paths of non-hidden files under ``directory`` relative to it.

    Hidden files and directories are skipped, mirroring shell glob expansion.
    """

    for dirpath, dirnames, filenames in os.walk(directory, followlinks=follow_symlinks):
        dirnames[:] = sorted(name for name in dirnames if not name.startswith("."))
        current = Path(dirpath)
        for filename in sorted(filenames):
            if filename.startswith("."):
                continue
            yield (current / filename).relative_to(directory).as_posix()


def _build_target(target: str, paths: tuple[str, ...], *, is_directory: bool = False) -> RuleTarget | None:
    """Return a :class:`RuleTarget` for ``paths`` or ``None`` when empty."""

    if not paths:
        return None
    return RuleTarget(original_target=target, is_directory=is_directory, paths=paths)


__all__ = ["TargetResolver"]
