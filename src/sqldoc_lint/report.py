"""Aggregate findings into a report and render it."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from sqldoc_lint.schemas import DocumentReport, Finding, FindingKind, LintReport, Severity

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_FATAL = 2


def build_report(
    documents: Iterable[DocumentReport],
    *,
    fail_on_warning: bool = True,
) -> LintReport:
    """Merge per-document results into a sorted :class:`LintReport`.

    Documents are sorted by path and findings by line, so two runs over the
    same tree produce identical reports.
    """
    ordered = sorted(
        (
            document.model_copy(
                update={"findings": tuple(sorted(document.findings, key=Finding.sort_key))}
            )
            for document in documents
        ),
        key=lambda document: document.path,
    )

    counts: Counter[str] = Counter()
    for document in ordered:
        counts.update(finding.kind.value for finding in document.findings)
    # Keep the enum order so summaries read the same way every run.
    summary = {kind.value: counts[kind.value] for kind in FindingKind if counts[kind.value]}

    finding_count = sum(len(document.findings) for document in ordered)
    failed_count = sum(1 for document in ordered if document.failed)

    return LintReport(
        documents=tuple(ordered),
        counts=summary,
        document_count=len(ordered),
        finding_count=finding_count,
        failed_count=failed_count,
        exit_code=exit_code_for(ordered, fail_on_warning=fail_on_warning),
    )


def exit_code_for(documents: Iterable[DocumentReport], *, fail_on_warning: bool = True) -> int:
    """0 when clean, 1 when findings are present, 2 when a document failed to parse."""
    status = EXIT_CLEAN
    for document in documents:
        if document.failed:
            return EXIT_FATAL
        for finding in document.findings:
            if fail_on_warning or finding.severity is Severity.ERROR:
                status = EXIT_FINDINGS
    return status


def format_finding(finding: Finding) -> str:
    return f"{finding.path}:{finding.line}: {finding.kind.value}: {finding.message}"


def format_summary(report: LintReport) -> str:
    """Return the ``N findings in M documents`` summary line."""
    summary = f"{report.finding_count} findings in {report.document_count} documents"
    if report.failed_count:
        summary += f" ({report.failed_count} failed to parse)"
    return summary


def render_text(report: LintReport, *, include_counts: bool = True) -> str:
    """Render one line per finding or failed document, then the summary."""
    lines: list[str] = []
    for document in report.documents:
        if document.error is not None:
            lines.append(
                f"{document.path}:{document.error.line}: {document.error.kind}: {document.error.message}"
            )
        lines.extend(format_finding(finding) for finding in document.findings)

    if include_counts and report.counts:
        if lines:
            lines.append("")
        for kind, count in report.counts.items():
            lines.append(f"{kind}: {count}")

    lines.append(format_summary(report))
    return "\n".join(lines) + "\n"


def render_json(report: LintReport) -> str:
    """Render the report as indented JSON."""
    return report.model_dump_json(indent=2) + "\n"
