"""Shared schemas for sqldoc-lint."""

from sqldoc_lint.schemas.documents import (
    UNTAGGED,
    Block,
    CodeBlock,
    Document,
    LinkRef,
    ProseBlock,
    Section,
    TocEntry,
)
from sqldoc_lint.schemas.findings import (
    DocumentError,
    DocumentReport,
    Finding,
    FindingKind,
    LintReport,
    Severity,
    severity_for,
)

__all__ = [
    "UNTAGGED",
    "Block",
    "CodeBlock",
    "Document",
    "DocumentError",
    "DocumentReport",
    "Finding",
    "FindingKind",
    "LinkRef",
    "LintReport",
    "ProseBlock",
    "Section",
    "Severity",
    "TocEntry",
    "severity_for",
]
