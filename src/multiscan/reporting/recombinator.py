# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Merge combined engine results into the report format requested by the caller."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Final

from ..errors import RecombinationError
from ..models import OutputFormat, Report, RuleResult
from .emitters import build_table, write_csv, write_json, write_junit, write_sarif, write_xml

LOGGER = logging.getLogger(__name__)

type ReportEmitter = Callable[[Sequence[RuleResult]], Report]

DEFAULT_EMITTERS: Final[Mapping[OutputFormat, ReportEmitter]] = {
    OutputFormat.TABLE: build_table,
    OutputFormat.JSON: write_json,
    OutputFormat.CSV: write_csv,
    OutputFormat.XML: write_xml,
    OutputFormat.JUNIT: write_junit,
    OutputFormat.SARIF: write_sarif,
}


class ResultRecombinator:
    """Dispatch combined results to the emitter registered for a format."""

    def __init__(self, emitters: Mapping[OutputFormat, ReportEmitter] | None = None) -> None:
        """Create a recombinator.

        Args:
            emitters: Optional emitter table replacing :data:`DEFAULT_EMITTERS`.
        """

        self._emitters = dict(DEFAULT_EMITTERS if emitters is None else emitters)

    @property
    def formats(self) -> tuple[OutputFormat, ...]:
        """Return the formats this recombinator can produce."""

        return tuple(self._emitters)

    def resolve_format(self, output_format: OutputFormat | str) -> OutputFormat:
        """Return the :class:`OutputFormat` for ``output_format`` when it is supported.

        Raises:
            RecombinationError: If no emitter handles ``output_format``.
        """

        try:
            resolved = OutputFormat(output_format)
        except ValueError as exc:
            raise RecombinationError(f"Unsupported output format: {output_format!r}") from exc
        if resolved not in self._emitters:
            raise RecombinationError(f"Unsupported output format: {resolved.value!r}")
        return resolved

    def recombine(self, results: Sequence[RuleResult], output_format: OutputFormat | str) -> Report:
        """Return ``results`` rendered in ``output_format``.

        Results are passed through in the order received.

        Args:
            results: Concatenated results from every dispatched engine.
            output_format: Requested report format or its string value.

        Returns:
            Report: A :class:`~multiscan.models.ReportTable` for tabular output,
            otherwise the serialised document.

        Raises:
            RecombinationError: If no emitter handles ``output_format``.
        """

        resolved = self.resolve_format(output_format)
        LOGGER.debug("recombining %d results into %s", len(results), resolved.value)
        return self._emitters[resolved](results)


__all__ = ["DEFAULT_EMITTERS", "ReportEmitter", "ResultRecombinator"]
