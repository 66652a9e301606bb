# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""High level orchestration for running registered analysis engines."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..catalog.base import RuleCatalog
from ..config import OrchestratorConfig
from ..discovery.targets import TargetResolver
from ..engines.base import EngineOptions
from ..engines.registry import EngineRegistry
from ..errors import EngineInitializationError, NotInitializedError, describe_exception
from ..messaging import ENGINE_SKIPPED, Messenger
from ..models import Filter, OutputFormat, Report, Rule
from ..reporting.recombinator import ResultRecombinator
from .dispatch import EngineDispatcher
from .plan import EngineDecision, EnginePlan, OrchestratorHooks

LOGGER = logging.getLogger(__name__)

_CATALOG_COMPONENT = "rule catalog"


@dataclass(frozen=True)
class OrchestratorOverrides:
    """Optional collaborators replacing the orchestrator defaults."""

    resolver: TargetResolver | None = None
    recombinator: ResultRecombinator | None = None
    hooks: OrchestratorHooks | None = None
    debug_logger: Callable[[str], None] | None = None


class Orchestrator:
    """Coordinates rule selection, target resolution, dispatch, and recombination.

    The orchestrator starts uninitialised. :meth:`initialize` moves it to the
    initialised state exactly once; :meth:`run` and :meth:`plan` require that
    state because engines and the catalog are not safe to use before it.
    """

    def __init__(
        self,
        registry: EngineRegistry,
        catalog: RuleCatalog,
        *,
        config: OrchestratorConfig | None = None,
        messenger: Messenger | None = None,
        overrides: OrchestratorOverrides | None = None,
    ) -> None:
        """Create an orchestrator with the supplied collaborators.

        Args:
            registry: Engines to coordinate, in dispatch and report order.
            catalog: Catalog answering rule and rule-group queries.
            config: Runtime settings; defaults are used when omitted.
            messenger: Message context for user-facing warnings. When omitted
                every invocation creates its own.
            overrides: Optional replacements for the resolver, recombinator,
                hooks, and debug logger.
        """

        overrides = overrides or OrchestratorOverrides()
        self._registry = registry
        self._catalog = catalog
        self._config = config or OrchestratorConfig()
        self._messenger = messenger
        self._resolver = overrides.resolver
        self._recombinator = overrides.recombinator or ResultRecombinator()
        self._debug_logger = overrides.debug_logger
        self._dispatcher = EngineDispatcher(
            jobs=self._config.jobs,
            hooks=overrides.hooks or OrchestratorHooks(),
            debug_logger=overrides.debug_logger,
        )
        self._initialized = False
        self._init_lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        """Return whether :meth:`initialize` has completed successfully."""

        return self._initialized

    @property
    def messenger(self) -> Messenger | None:
        """Return the injected message context, or ``None`` when each run creates its own."""

        return self._messenger

    def _session(self) -> tuple[Messenger, TargetResolver]:
        """Return the messenger and resolver used by one invocation.

        Without an injected messenger every invocation gets a fresh one, so
        display deduplication and history never carry over between runs.
        """

        messenger = self._messenger or Messenger(output=self._config.output, verbose=self._config.verbose)
        resolver = self._resolver or TargetResolver(config=self._config, messenger=messenger)
        return messenger, resolver

    def _debug(self, message: str) -> None:
        """Emit ``message`` to the module logger and the optional debug logger."""

        LOGGER.debug(message)
        if self._debug_logger:
            self._debug_logger(message)

    def initialize(self) -> None:
        """Initialise every engine and the catalog once.

        Repeated calls return immediately. Any failure leaves the orchestrator
        uninitialised so a later call retries from scratch.

        Raises:
            EngineInitializationError: If an engine or the catalog fails.
        """

        with self._init_lock:
            if self._initialized:
                return
            for engine in self._registry.engines():
                try:
                    engine.initialize()
                except Exception as exc:
                    raise EngineInitializationError(engine.name, describe_exception(exc)) from exc
            try:
                self._catalog.initialize()
            except Exception as exc:
                raise EngineInitializationError(_CATALOG_COMPONENT, describe_exception(exc)) from exc
            self._initialized = True
        self._debug(f"initialised {len(self._registry)} engines and the rule catalog")

    def rules_matching(self, filters: Sequence[Filter]) -> list[Rule]:
        """Return catalog rules matching ``filters``.

        Raises:
            NotInitializedError: If :meth:`initialize` has not completed.
        """

        self._require_initialized()
        return list(self._catalog.rules_matching(filters))

    def plan(self, filters: Sequence[Filter], targets: Sequence[str]) -> EnginePlan:
        """Return per-engine decisions for ``filters`` and ``targets`` without running.

        Args:
            filters: Selection predicates over the rule catalog.
            targets: Raw file, directory, or glob targets.

        Returns:
            EnginePlan: One decision per registered engine in registration order.

        Raises:
            NotInitializedError: If :meth:`initialize` has not completed.
            EngineContractError: If an engine supplies no target patterns.
        """

        self._require_initialized()
        _, resolver = self._session()
        return self._build_plan(filters, targets, resolver)

    def _build_plan(
        self,
        filters: Sequence[Filter],
        targets: Sequence[str],
        resolver: TargetResolver,
    ) -> EnginePlan:
        """Compute one decision per registered engine using ``resolver``."""

        groups = tuple(self._catalog.rule_groups_matching(filters))
        rules = tuple(self._catalog.rules_matching(filters))
        decisions: list[EngineDecision] = []
        for engine in self._registry.engines():
            decision = EngineDecision(
                engine=engine,
                groups=tuple(group for group in groups if group.engine == engine.name),
                rules=tuple(rule for rule in rules if rule.engine == engine.name),
                targets=tuple(resolver.resolve(engine, targets)),
            )
            self._debug(decision.describe())
            decisions.append(decision)
        return EnginePlan(decisions=tuple(decisions))

    def run(
        self,
        filters: Sequence[Filter],
        targets: Sequence[str],
        output_format: OutputFormat | str,
        options: EngineOptions | None = None,
    ) -> Report:
        """Run every eligible engine and return the recombined report.

        Args:
            filters: Selection predicates over the rule catalog.
            targets: Raw file, directory, or glob targets.
            output_format: Report format handed to the recombinator.
            options: Opaque engine options forwarded unchanged to each engine.

        Returns:
            Report: Table or serialised document produced by the recombinator.

        Raises:
            NotInitializedError: If :meth:`initialize` has not completed.
            OrchestrationError: If any dispatched engine fails.
            RecombinationError: If ``output_format`` is unsupported; raised before
                any engine is dispatched.
        """

        self._require_initialized()
        resolved_format = self._recombinator.resolve_format(output_format)
        messenger, resolver = self._session()
        engine_plan = self._build_plan(filters, targets, resolver)
        for decision in engine_plan.skipped:
            if decision.rules:
                messenger.warn(ENGINE_SKIPPED, (decision.name, decision.reason), verbose=True)
        eligible = engine_plan.eligible
        self._debug(f"eligible engines: {[decision.name for decision in eligible]}")
        results = self._dispatcher.dispatch(eligible, dict(options or {}))
        self._debug(f"received {len(results)} results; recombining into {resolved_format.value}")
        if self._dispatcher.hooks.after_run:
            self._dispatcher.hooks.after_run(results)
        return self._recombinator.recombine(results, resolved_format)

    def _require_initialized(self) -> None:
        """Raise when the orchestrator has not been initialised."""

        if not self._initialized:
            raise NotInitializedError("Orchestrator.initialize() must complete before running engines")


__all__ = ["Orchestrator", "OrchestratorOverrides"]
