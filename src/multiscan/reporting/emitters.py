# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Serialise combined engine results into the supported report formats.

Every emitter walks results in the order it receives them and produces a
well-formed document for an empty result list.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterator, Sequence
from typing import Final
from xml.etree import ElementTree as ET

from ..models import JsonValue, ReportTable, RuleResult, RuleViolation
from ..severity import severity_to_sarif

SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"
JUNIT_SUITE_NAME: Final[str] = "multiscan"

TABLE_COLUMNS: Final[tuple[str, ...]] = (
    "Location",
    "Rule",
    "Severity",
    "Description",
    "Category",
    "URL",
    "Engine",
)
CSV_COLUMNS: Final[tuple[str, ...]] = (
    "Problem",
    "File",
    "Severity",
    "Line",
    "Column",
    "Rule",
    "Description",
    "URL",
    "Category",
    "Engine",
)


def _iter_violations(results: Sequence[RuleResult]) -> Iterator[tuple[RuleResult, RuleViolation]]:
    """Yield ``(result, violation)`` pairs preserving input order."""

    for result in results:
        for violation in result.violations:
            yield result, violation


def _location(file_name: str, violation: RuleViolation) -> str:
    """Return ``file:line:column`` with missing coordinates omitted."""

    parts = [file_name]
    if violation.line is not None:
        parts.append(str(violation.line))
        if violation.column is not None:
            parts.append(str(violation.column))
    return ":".join(parts)


def build_table(results: Sequence[RuleResult]) -> ReportTable:
    """Return a tabular view with one row per violation.

    Args:
        results: Combined engine results.

    Returns:
        ReportTable: Column names and rows keyed by column name.
    """

    rows: list[dict[str, JsonValue]] = []
    for result, violation in _iter_violations(results):
        rows.append(
            {
                "Location": _location(result.file_name, violation),
                "Rule": violation.rule_name,
                "Severity": violation.severity,
                "Description": violation.message.strip(),
                "Category": violation.category,
                "URL": violation.url or "",
                "Engine": result.engine,
            },
        )
    return ReportTable(columns=TABLE_COLUMNS, rows=tuple(rows))


def write_json(results: Sequence[RuleResult]) -> str:
    """Return results as a JSON array of per-file records."""

    payload = [result.model_dump(mode="json") for result in results]
    return json.dumps(payload, indent=2)


def write_csv(results: Sequence[RuleResult]) -> str:
    """Return one CSV row per violation preceded by a header row."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for problem, (result, violation) in enumerate(_iter_violations(results), start=1):
        writer.writerow(
            (
                problem,
                result.file_name,
                violation.severity,
                "" if violation.line is None else violation.line,
                "" if violation.column is None else violation.column,
                violation.rule_name,
                violation.message.strip(),
                violation.url or "",
                violation.category,
                result.engine,
            ),
        )
    return buffer.getvalue()


def _violation_attributes(violation: RuleViolation) -> dict[str, str]:
    """Return XML attributes describing ``violation``."""

    attributes = {
        "severity": str(violation.severity),
        "rule": violation.rule_name,
        "category": violation.category,
    }
    for name, value in (
        ("line", violation.line),
        ("column", violation.column),
        ("endLine", violation.end_line),
        ("endColumn", violation.end_column),
    ):
        if value is not None:
            attributes[name] = str(value)
    if violation.url:
        attributes["url"] = violation.url
    return attributes


def write_xml(results: Sequence[RuleResult]) -> str:
    """Return results as an XML document rooted at ``<results>``."""

    root = ET.Element("results", total=str(sum(len(result.violations) for result in results)))
    for result in results:
        element = ET.SubElement(root, "result", file=result.file_name, engine=result.engine)
        for violation in result.violations:
            child = ET.SubElement(element, "violation", _violation_attributes(violation))
            child.text = violation.message.strip()
    ET.indent(root)
    return ET.tostring(root, encoding="unicode", xml_declaration=True)


def write_junit(results: Sequence[RuleResult]) -> str:
    """Return a JUnit XML document with one test case per analysed file."""

    failures = sum(len(result.violations) for result in results)
    suites = ET.Element("testsuites", tests=str(len(results)), failures=str(failures))
    suite = ET.SubElement(
        suites,
        "testsuite",
        name=JUNIT_SUITE_NAME,
        tests=str(len(results)),
        failures=str(failures),
    )
    for result in results:
        case = ET.SubElement(suite, "testcase", name=result.file_name, classname=result.engine)
        for violation in result.violations:
            failure = ET.SubElement(
                case,
                "failure",
                message=violation.message.strip(),
                type=violation.rule_name,
            )
            failure.text = (
                f"{_location(result.file_name, violation)}: {violation.message.strip()}\n"
                f"Category: {violation.category} - {violation.rule_name}\n"
                f"Severity: {violation.severity}"
            )
    ET.indent(suites)
    return ET.tostring(suites, encoding="unicode", xml_declaration=True)


def _group_by_engine(results: Sequence[RuleResult]) -> list[tuple[str, list[RuleResult]]]:
    """Group results by engine in order of first appearance."""

    grouped: dict[str, list[RuleResult]] = {}
    for result in results:
        grouped.setdefault(result.engine, []).append(result)
    return list(grouped.items())


def _build_sarif_run(engine: str, results: Sequence[RuleResult]) -> dict[str, object]:
    """Construct the SARIF run dictionary for a single engine."""

    rules: dict[str, dict[str, object]] = {}
    entries: list[dict[str, object]] = []
    for result, violation in _iter_violations(results):
        if violation.rule_name not in rules:
            rule: dict[str, object] = {
                "id": violation.rule_name,
                "name": violation.rule_name,
                "shortDescription": {"text": violation.message.strip()[:120]},
                "properties": {"category": violation.category, "severity": violation.severity},
            }
            if violation.url:
                rule["helpUri"] = violation.url
            rules[violation.rule_name] = rule

        region: dict[str, int] = {}
        for key, value in (
            ("startLine", violation.line),
            ("startColumn", violation.column),
            ("endLine", violation.end_line),
            ("endColumn", violation.end_column),
        ):
            if value is not None:
                region[key] = int(value)
        physical_location: dict[str, object] = {"artifactLocation": {"uri": result.file_name}}
        if region:
            physical_location["region"] = region
        entries.append(
            {
                "ruleId": violation.rule_name,
                "level": severity_to_sarif(violation.normalized_severity),
                "message": {"text": violation.message.strip()},
                "locations": [{"physicalLocation": physical_location}],
            },
        )

    return {
        "tool": {"driver": {"name": engine, "rules": list(rules.values())}},
        "results": entries,
    }


def write_sarif(results: Sequence[RuleResult]) -> str:
    """Emit a SARIF document with one run per engine."""

    sarif_doc = {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [_build_sarif_run(engine, grouped) for engine, grouped in _group_by_engine(results)],
    }
    return json.dumps(sarif_doc, indent=2)


__all__ = [
    "CSV_COLUMNS",
    "TABLE_COLUMNS",
    "build_table",
    "write_csv",
    "write_json",
    "write_junit",
    "write_sarif",
    "write_xml",
]
