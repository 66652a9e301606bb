# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for result recombination and report emitters."""

import csv
import io
import json
from xml.etree import ElementTree as ET

import pytest

from multiscan.errors import RecombinationError
from multiscan.models import OutputFormat, ReportTable, RuleResult
from multiscan.reporting import ResultRecombinator
from multiscan.reporting.emitters import CSV_COLUMNS, TABLE_COLUMNS
from multiscan.severity import Severity, normalize_severity
from tests.helpers.engines import make_result


def _results() -> list[RuleResult]:
    return [
        make_result("pmd", "/work/src/Foo.cls", "ApexDoc", "AvoidGlobalModifier", severity=1),
        make_result("eslint", "/work/src/bar.js", "no-eval", severity=3),
        make_result("pmd", "/work/src/Baz.cls", "ApexDoc", severity=4),
    ]


def test_table_rows_preserve_input_order() -> None:
    table = ResultRecombinator().recombine(_results(), OutputFormat.TABLE)

    assert isinstance(table, ReportTable)
    assert table.columns == TABLE_COLUMNS
    assert [row["Location"] for row in table.rows] == [
        "/work/src/Foo.cls:1:4",
        "/work/src/Foo.cls:2:4",
        "/work/src/bar.js:1:4",
        "/work/src/Baz.cls:1:4",
    ]
    assert table.rows[2]["Engine"] == "eslint"
    assert table.rows[0]["URL"] == "https://rules.example.test/ApexDoc"


def test_json_report_round_trips_results() -> None:
    payload = json.loads(ResultRecombinator().recombine(_results(), OutputFormat.JSON))

    assert [entry["file_name"] for entry in payload] == ["/work/src/Foo.cls", "/work/src/bar.js", "/work/src/Baz.cls"]
    assert payload[0]["violations"][1]["rule_name"] == "AvoidGlobalModifier"


def test_csv_report_numbers_each_problem() -> None:
    document = ResultRecombinator().recombine(_results(), "csv")
    rows = list(csv.reader(io.StringIO(document)))

    assert tuple(rows[0]) == CSV_COLUMNS
    assert [row[0] for row in rows[1:]] == ["1", "2", "3", "4"]
    assert rows[3][5] == "no-eval"
    assert rows[3][9] == "eslint"


def test_xml_report_groups_violations_by_file() -> None:
    document = ResultRecombinator().recombine(_results(), OutputFormat.XML)
    root = ET.fromstring(document.split("?>", 1)[1])

    assert root.tag == "results"
    assert root.get("total") == "4"
    files = [element.get("file") for element in root.findall("result")]
    assert files == ["/work/src/Foo.cls", "/work/src/bar.js", "/work/src/Baz.cls"]
    first = root.find("result/violation")
    assert first is not None
    assert first.get("rule") == "ApexDoc"
    assert first.get("line") == "1"
    assert first.text == "ApexDoc violated"


def test_junit_report_counts_failures() -> None:
    document = ResultRecombinator().recombine(_results(), OutputFormat.JUNIT)
    root = ET.fromstring(document.split("?>", 1)[1])

    suite = root.find("testsuite")
    assert suite is not None
    assert suite.get("tests") == "3"
    assert suite.get("failures") == "4"
    assert [case.get("classname") for case in suite.findall("testcase")] == ["pmd", "eslint", "pmd"]


def test_sarif_report_has_one_run_per_engine() -> None:
    document = json.loads(ResultRecombinator().recombine(_results(), OutputFormat.SARIF))

    assert document["version"] == "2.1.0"
    assert [run["tool"]["driver"]["name"] for run in document["runs"]] == ["pmd", "eslint"]
    pmd_run = document["runs"][0]
    assert [rule["id"] for rule in pmd_run["tool"]["driver"]["rules"]] == ["ApexDoc", "AvoidGlobalModifier"]
    assert [result["level"] for result in pmd_run["results"]] == ["error", "error", "note"]
    region = pmd_run["results"][0]["locations"][0]["physicalLocation"]["region"]
    assert region == {"startLine": 1, "startColumn": 4}


@pytest.mark.parametrize("output_format", list(OutputFormat))
def test_every_format_accepts_empty_results(output_format: OutputFormat) -> None:
    report = ResultRecombinator().recombine([], output_format)

    if output_format is OutputFormat.TABLE:
        assert isinstance(report, ReportTable)
        assert report.rows == ()
    elif output_format in (OutputFormat.XML, OutputFormat.JUNIT):
        assert ET.fromstring(report.split("?>", 1)[1]) is not None
    elif output_format is OutputFormat.CSV:
        assert report.strip().count("\n") == 0
    else:
        assert json.loads(report) is not None


def test_unknown_format_is_rejected() -> None:
    with pytest.raises(RecombinationError, match="html"):
        ResultRecombinator().recombine([], "html")


def test_custom_emitter_table_limits_formats() -> None:
    recombinator = ResultRecombinator({OutputFormat.JSON: lambda results: "[]"})

    assert recombinator.formats == (OutputFormat.JSON,)
    with pytest.raises(RecombinationError):
        recombinator.recombine([], OutputFormat.CSV)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, Severity.ERROR), (1, Severity.ERROR), (2, Severity.WARNING), (3, Severity.WARNING), (5, Severity.NOTE), (9, Severity.NOTE)],
)
def test_normalize_severity_buckets(value: int, expected: Severity) -> None:
    assert normalize_severity(value) is expected
