"""Lint pipeline: load -> extract -> check -> report."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from sqldoc_lint.config import (
    CORE_STATEMENT_KEYWORDS,
    DEFAULT_FAIL_ON_WARNING,
    DEFAULT_REQUIRE_LANGUAGE,
    DEFAULT_SQL_ONLY,
    SQL_LANGUAGES,
)
from sqldoc_lint.exceptions import ParseError
from sqldoc_lint.extractor import extract_document
from sqldoc_lint.link_checker import check_links, check_toc
from sqldoc_lint.loader import load_documents_async
from sqldoc_lint.report import build_report
from sqldoc_lint.schemas import Document, DocumentError, DocumentReport, Finding, LintReport
from sqldoc_lint.sql_checker import check_sql_document, check_untagged_blocks

logger = logging.getLogger(__name__)


@dataclass
class LintOptions:
    """Options for a lint run.

    Attributes:
        fail_on_warning: If True, warning findings also make the run fail.
        sql_only: If True, only SQL code blocks are checked; TOC and link
            checks are skipped.
        require_language: If True, code fences without a language tag are
            reported.
        exclude: Glob patterns (root-relative POSIX paths) to skip.
        sql_languages: Fence tags treated as SQL.
        statement_keywords: Keywords accepted as the start of a statement.
            Defaults to the core DML/DDL set; pass
            ``ALL_STATEMENT_KEYWORDS`` to accept utility statements too.
    """

    fail_on_warning: bool = DEFAULT_FAIL_ON_WARNING
    sql_only: bool = DEFAULT_SQL_ONLY
    require_language: bool = DEFAULT_REQUIRE_LANGUAGE
    exclude: tuple[str, ...] = ()
    sql_languages: frozenset[str] = SQL_LANGUAGES
    statement_keywords: tuple[str, ...] = CORE_STATEMENT_KEYWORDS


def check_document(
    document: Document,
    corpus: Mapping[str, Document],
    *,
    root: Path | None = None,
    options: LintOptions | None = None,
) -> list[Finding]:
    """Run every enabled check against one extracted document."""
    opts = options or LintOptions()
    findings: list[Finding] = []
    if not opts.sql_only:
        findings.extend(check_toc(document))
        findings.extend(check_links(document, corpus, root=root))
        if opts.require_language:
            findings.extend(check_untagged_blocks(document))
    findings.extend(
        check_sql_document(
            document,
            languages=opts.sql_languages,
            keywords=opts.statement_keywords,
        )
    )
    return findings


def _extract(document: Document) -> tuple[Document, DocumentError | None]:
    try:
        return extract_document(document), None
    except ParseError as exc:
        logger.warning("Skipping %s: %s", document.path, exc)
        return document, DocumentError(message=exc.message, line=exc.line)


def _report_for(
    document: Document,
    error: DocumentError | None,
    corpus: Mapping[str, Document],
    root: Path,
    options: LintOptions,
) -> DocumentReport:
    if error is not None:
        return DocumentReport(path=document.path, error=error)
    findings = check_document(document, corpus, root=root, options=options)
    logger.debug("Checked %s: %d findings", document.path, len(findings))
    return DocumentReport(path=document.path, findings=tuple(findings))


async def lint_corpus(root: Path, options: LintOptions | None = None) -> LintReport:
    """Lint every Markdown document under ``root``.

    Each document is extracted and checked in its own worker thread. A
    document with an unterminated fence is marked failed without stopping
    the others.

    Raises:
        ReadError: If the tree or any file in it cannot be read.
    """
    opts = options or LintOptions()
    root = root.resolve()
    documents = await load_documents_async(root, exclude=opts.exclude)

    extracted = await asyncio.gather(
        *(asyncio.to_thread(_extract, document) for document in documents)
    )
    corpus = {document.path: document for document, _ in extracted}

    reports = await asyncio.gather(
        *(
            asyncio.to_thread(_report_for, document, error, corpus, root, opts)
            for document, error in extracted
        )
    )

    report = build_report(reports, fail_on_warning=opts.fail_on_warning)
    logger.info(
        "Linted %d documents under %s: %d findings, %d failed",
        report.document_count,
        root,
        report.finding_count,
        report.failed_count,
    )
    return report


def run_lint(root: Path, options: LintOptions | None = None) -> LintReport:
    """Synchronous wrapper around :func:`lint_corpus`."""
    return asyncio.run(lint_corpus(root, options))
