"""Tests for the report builder."""

from __future__ import annotations

import json

from sqldoc_lint.report import (
    EXIT_CLEAN,
    EXIT_FATAL,
    EXIT_FINDINGS,
    build_report,
    exit_code_for,
    format_finding,
    render_json,
    render_text,
)
from sqldoc_lint.schemas import (
    DocumentError,
    DocumentReport,
    Finding,
    FindingKind,
    severity_for,
)


def _finding(path: str, line: int, kind: FindingKind, message: str = "problem") -> Finding:
    return Finding(path=path, line=line, kind=kind, message=message, severity=severity_for(kind))


class TestBuildReport:
    """Tests for build_report function."""

    def test_sorts_documents_and_findings(self) -> None:
        reports = [
            DocumentReport(
                path="b.md",
                findings=(
                    _finding("b.md", 9, FindingKind.BROKEN_LINK),
                    _finding("b.md", 2, FindingKind.UNBALANCED_PAREN),
                ),
            ),
            DocumentReport(path="a.md", findings=(_finding("a.md", 4, FindingKind.BROKEN_ANCHOR),)),
        ]

        report = build_report(reports)

        assert [d.path for d in report.documents] == ["a.md", "b.md"]
        assert [f.line for f in report.documents[1].findings] == [2, 9]

    def test_counts_by_kind(self) -> None:
        reports = [
            DocumentReport(
                path="a.md",
                findings=(
                    _finding("a.md", 1, FindingKind.BROKEN_ANCHOR),
                    _finding("a.md", 2, FindingKind.BROKEN_ANCHOR),
                    _finding("a.md", 3, FindingKind.NO_STATEMENT_KEYWORD),
                ),
            ),
            DocumentReport(path="b.md"),
        ]

        report = build_report(reports)

        assert report.counts == {"BrokenAnchor": 2, "NoStatementKeyword": 1}
        assert report.finding_count == 3
        assert report.document_count == 2
        assert report.exit_code == EXIT_FINDINGS

    def test_clean_corpus(self) -> None:
        report = build_report([DocumentReport(path="a.md")])

        assert report.exit_code == EXIT_CLEAN
        assert report.counts == {}


class TestExitCode:
    """Tests for exit_code_for function."""

    def test_failed_document_is_fatal(self) -> None:
        documents = [
            DocumentReport(path="a.md", findings=(_finding("a.md", 1, FindingKind.BROKEN_LINK),)),
            DocumentReport(path="b.md", error=DocumentError(message="unterminated code fence", line=3)),
        ]

        assert exit_code_for(documents) == EXIT_FATAL

    def test_warnings_respect_fail_on_warning(self) -> None:
        documents = [
            DocumentReport(path="a.md", findings=(_finding("a.md", 1, FindingKind.NO_STATEMENT_KEYWORD),))
        ]

        assert exit_code_for(documents, fail_on_warning=True) == EXIT_FINDINGS
        assert exit_code_for(documents, fail_on_warning=False) == EXIT_CLEAN

    def test_errors_fail_regardless_of_warning_setting(self) -> None:
        documents = [
            DocumentReport(path="a.md", findings=(_finding("a.md", 1, FindingKind.UNBALANCED_QUOTE),))
        ]

        assert exit_code_for(documents, fail_on_warning=False) == EXIT_FINDINGS


class TestRender:
    """Tests for text and JSON rendering."""

    def test_format_finding(self) -> None:
        finding = _finding("sql/joins.md", 12, FindingKind.UNBALANCED_QUOTE, "unterminated string literal")

        assert format_finding(finding) == "sql/joins.md:12: UnbalancedQuote: unterminated string literal"

    def test_render_text(self) -> None:
        report = build_report(
            [
                DocumentReport(path="a.md", findings=(_finding("a.md", 4, FindingKind.BROKEN_ANCHOR, "missing"),)),
                DocumentReport(path="b.md", error=DocumentError(message="unterminated code fence", line=7)),
            ]
        )

        assert render_text(report).splitlines() == [
            "a.md:4: BrokenAnchor: missing",
            "b.md:7: ParseError: unterminated code fence",
            "",
            "BrokenAnchor: 1",
            "1 findings in 2 documents (1 failed to parse)",
        ]

    def test_render_text_clean(self) -> None:
        report = build_report([DocumentReport(path=f"{i}.md") for i in range(3)])

        assert render_text(report) == "0 findings in 3 documents\n"

    def test_render_json(self) -> None:
        report = build_report(
            [DocumentReport(path="a.md", findings=(_finding("a.md", 4, FindingKind.BROKEN_LINK),))]
        )

        payload = json.loads(render_json(report))

        assert payload["finding_count"] == 1
        assert payload["documents"][0]["findings"][0]["kind"] == "BrokenLink"
        assert payload["documents"][0]["findings"][0]["severity"] == "error"
