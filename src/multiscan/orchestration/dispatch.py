# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Fan eligible engines out to worker threads and join their results."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field

from ..engines.base import EngineOptions
from ..errors import OrchestrationError, describe_exception
from ..models import RuleResult
from .plan import EngineDecision, OrchestratorHooks

LOGGER = logging.getLogger(__name__)

_THREAD_PREFIX = "multiscan-engine"


@dataclass(slots=True)
class EngineDispatcher:
    """Execute engine decisions concurrently with an all-or-nothing join.

    Every decision is submitted at once; the dispatcher waits for all of them
    before inspecting outcomes. Results are concatenated in decision order, not
    completion order. The first failure in decision order aborts the batch and
    no partial results are returned.
    """

    jobs: int | None = None
    hooks: OrchestratorHooks = field(default_factory=OrchestratorHooks)
    debug_logger: Callable[[str], None] | None = None

    def dispatch(self, decisions: Sequence[EngineDecision], options: EngineOptions) -> list[RuleResult]:
        """Run ``decisions`` and return their concatenated results.

        Args:
            decisions: Eligible engine decisions in registration order.
            options: Engine options passed unchanged to every engine.

        Returns:
            list[RuleResult]: Results of every engine in decision order.

        Raises:
            OrchestrationError: If any engine raises during execution.
        """

        if not decisions:
            return []
        max_workers = self.jobs or len(decisions)
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=_THREAD_PREFIX) as executor:
            futures = [executor.submit(self._run_engine, decision, options) for decision in decisions]
            wait(futures)
        return self._collect(decisions, futures)

    def _run_engine(self, decision: EngineDecision, options: EngineOptions) -> list[RuleResult]:
        """Invoke a single engine, firing the configured hooks around it."""

        if self.hooks.before_engine:
            self.hooks.before_engine(decision.name)
        self._debug(f"dispatching {decision.name}")
        results = list(decision.engine.run(decision.groups, decision.rules, decision.targets, options))
        self._debug(f"{decision.name} returned {len(results)} results")
        if self.hooks.after_engine:
            self.hooks.after_engine(decision.name, results)
        return results

    def _collect(
        self,
        decisions: Sequence[EngineDecision],
        futures: Sequence[Future[list[RuleResult]]],
    ) -> list[RuleResult]:
        """Concatenate completed futures or raise for the first failure.

        Args:
            decisions: Decisions matching ``futures`` index for index.
            futures: Completed futures produced by :meth:`dispatch`.

        Returns:
            list[RuleResult]: Concatenated results in decision order.

        Raises:
            OrchestrationError: Wrapping the first engine failure encountered.
        """

        combined: list[RuleResult] = []
        for decision, future in zip(decisions, futures, strict=True):
            error = future.exception()
            if error is not None:
                LOGGER.debug("engine %s failed: %s", decision.name, error)
                raise OrchestrationError(decision.name, describe_exception(error)) from error
            combined.extend(future.result())
        return combined

    def _debug(self, message: str) -> None:
        """Emit ``message`` to the module logger and the optional debug logger."""

        LOGGER.debug(message)
        if self.debug_logger:
            self.debug_logger(message)


__all__ = ["EngineDispatcher"]
