"""sqldoc-lint: validate Markdown SQL documentation."""

from sqldoc_lint.exceptions import (
    ConfigError,
    ParseError,
    ReadError,
    SqldocLintError,
)
from sqldoc_lint.extractor import extract_document, parse_markdown
from sqldoc_lint.linter import LintOptions, check_document, lint_corpus, run_lint
from sqldoc_lint.loader import load_documents, load_documents_async
from sqldoc_lint.report import build_report, render_json, render_text
from sqldoc_lint.schemas import Document, Finding, FindingKind, LintReport

__all__ = [
    "ConfigError",
    "Document",
    "Finding",
    "FindingKind",
    "LintOptions",
    "LintReport",
    "ParseError",
    "ReadError",
    "SqldocLintError",
    "build_report",
    "check_document",
    "extract_document",
    "lint_corpus",
    "load_documents",
    "load_documents_async",
    "parse_markdown",
    "render_json",
    "render_text",
    "run_lint",
]
