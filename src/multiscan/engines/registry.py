# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Ordered engine registry passed explicitly to the orchestrator."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from ..errors import EngineRegistrationError
from .base import AnalysisEngine


class EngineRegistry(Mapping[str, AnalysisEngine]):
    """Read-only mapping of engine names to engines preserving registration order.

    Registration order is the iteration order used for dispatch planning and
    for concatenating results, so reports are deterministic regardless of
    which engine finishes first.
    """

    def __init__(self, engines: Iterable[AnalysisEngine] = ()) -> None:
        """Create a registry populated with ``engines``.

        Args:
            engines: Engines to register in order.

        Raises:
            EngineRegistrationError: If two engines share a name.
        """

        self._engines: dict[str, AnalysisEngine] = {}
        for engine in engines:
            self.register(engine)

    def register(self, engine: AnalysisEngine) -> None:
        """Append ``engine`` to the registry enforcing uniqueness by name.

        Args:
            engine: Engine to register.

        Raises:
            EngineRegistrationError: If an engine with the same name exists.
        """

        if engine.name in self._engines:
            raise EngineRegistrationError(f"Engine '{engine.name}' already registered")
        self._engines[engine.name] = engine

    def engines(self) -> tuple[AnalysisEngine, ...]:
        """Return registered engines in registration order."""

        return tuple(self._engines.values())

    def try_get(self, name: str) -> AnalysisEngine | None:
        """Return the engine named ``name`` when registered, otherwise ``None``."""

        return self._engines.get(name)

    def __len__(self) -> int:
        return len(self._engines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._engines)

    def __getitem__(self, name: str) -> AnalysisEngine:
        return self._engines[name]


__all__ = ["EngineRegistry"]
