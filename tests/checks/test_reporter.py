from __future__ import annotations

import io
import json

import pytest

from playstyle.checks import JsonReporter, Report, TerminalReporter
from playstyle.checks.base import Diagnostic, Location
from playstyle.types import Severity


def _diag(
    file: str = "a.yml",
    line: int = 1,
    column: int = 1,
    rule_id: str = "quote-style",
    severity: Severity = Severity.ERROR,
    message: str = "Wrap string values in double quotes: x",
) -> Diagnostic:
    return Diagnostic(
        rule_id=rule_id,
        severity=severity,
        location=Location(file=file, line=line, column=column),
        message=message,
    )


def describe_report() -> None:

    def sorts_by_location_then_rule() -> None:
        report = Report(
            [
                _diag(file="b.yml"),
                _diag(line=3),
                _diag(line=1, column=5, rule_id="key-spacing"),
                _diag(line=1, column=5, rule_id="boolean-literal"),
            ]
        )

        assert [
            (d.location.file, d.location.line, d.location.column, d.rule_id)
            for d in report
        ] == [
            ("a.yml", 1, 5, "boolean-literal"),
            ("a.yml", 1, 5, "key-spacing"),
            ("a.yml", 3, 1, "quote-style"),
            ("b.yml", 1, 1, "quote-style"),
        ]

    def removes_duplicates() -> None:
        report = Report([_diag(), _diag(), _diag(line=2)])

        assert len(report) == 2

    def detects_error_severity() -> None:
        assert Report([_diag(severity=Severity.ERROR)]).has_errors()
        assert not Report([_diag(severity=Severity.WARNING)]).has_errors()

    def merges_reports() -> None:
        merged = Report([_diag(line=2)]).merged(Report([_diag(line=1), _diag(line=2)]))

        assert [d.location.line for d in merged] == [1, 2]

    def describe_exit_code() -> None:

        def is_zero_without_diagnostics() -> None:
            assert Report().exit_code("error") == 0

        @pytest.mark.parametrize(
            ("severity", "fail_on", "expected"),
            [
                (Severity.ERROR, "error", 1),
                (Severity.WARNING, "error", 0),
                (Severity.WARNING, "warning", 1),
                (Severity.INFO, "warning", 0),
                (Severity.ERROR, "none", 0),
            ],
        )
        def follows_threshold(severity: Severity, fail_on: str, expected: int) -> None:
            report = Report([_diag(severity=severity)])

            assert report.exit_code(fail_on) == expected  # type: ignore[arg-type]

        @pytest.mark.parametrize(
            "rule_id", ["parse-error", "malformed-playbook", "io-error"]
        )
        def is_two_for_unusable_files(rule_id: str) -> None:
            report = Report([_diag(), _diag(file="b.yml", rule_id=rule_id)])

            assert report.has_fatal_errors()
            assert report.exit_code("none") == 2

        def treats_timeout_as_failure() -> None:
            report = Report([_diag(rule_id="timeout")])

            assert not report.has_fatal_errors()
            assert report.exit_code("error") == 1


def describe_terminal_reporter() -> None:

    def congratulates_without_diagnostics() -> None:
        out = io.StringIO()

        TerminalReporter(out).report_results([])

        assert "No warnings found, keep it up!" in out.getvalue()

    def prints_one_line_per_diagnostic() -> None:
        out = io.StringIO()

        TerminalReporter(out).report_results(
            [
                _diag(line=2, column=3),
                _diag(line=4, rule_id="jinja-spacing", message="Braces of {{x}} [sic]"),
            ]
        )

        assert out.getvalue().splitlines() == [
            "a.yml:2:3: [quote-style] Wrap string values in double quotes: x",
            "a.yml:4:1: [jinja-spacing] Braces of {{x}} [sic]",
        ]


def describe_json_reporter() -> None:

    def writes_json_lines() -> None:
        out = io.StringIO()

        JsonReporter(out).report_results(
            [_diag(line=2, column=3), _diag(severity=Severity.WARNING)]
        )

        records = [json.loads(line) for line in out.getvalue().splitlines()]
        assert records[0] == {
            "rule_id": "quote-style",
            "severity": "error",
            "location": {"file": "a.yml", "line": 2, "column": 3},
            "message": "Wrap string values in double quotes: x",
        }
        assert records[1]["severity"] == "warning"

    def writes_nothing_without_diagnostics() -> None:
        out = io.StringIO()

        JsonReporter(out).report_results([])

        assert out.getvalue() == ""
