"""Finding and report models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from sqldoc_lint.schemas.documents import Document


class FindingKind(str, Enum):
    """Kinds of non-fatal validation issues."""

    BROKEN_ANCHOR = "BrokenAnchor"
    BROKEN_LINK = "BrokenLink"
    UNBALANCED_QUOTE = "UnbalancedQuote"
    UNBALANCED_PAREN = "UnbalancedParen"
    NO_STATEMENT_KEYWORD = "NoStatementKeyword"
    UNTAGGED_CODE_BLOCK = "UntaggedCodeBlock"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


_WARNING_KINDS = frozenset({FindingKind.NO_STATEMENT_KEYWORD, FindingKind.UNTAGGED_CODE_BLOCK})


def severity_for(kind: FindingKind) -> Severity:
    """Return the default severity for a finding kind."""
    return Severity.WARNING if kind in _WARNING_KINDS else Severity.ERROR


class Finding(BaseModel):
    """A single validation issue.

    Attributes:
        path: Document path relative to the scanned root.
        line: 1-based document line the issue points at.
        kind: Finding kind.
        message: Human readable description.
        severity: ``error`` or ``warning``.
        section_index: Index of the section inside the document, or ``None``
            for content before the first heading.
        block_index: Index of the block inside its section or the preamble.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    line: int = Field(..., ge=1)
    kind: FindingKind
    message: str
    severity: Severity
    section_index: int | None = None
    block_index: int | None = None

    @classmethod
    def at(
        cls,
        document: Document,
        line: int,
        kind: FindingKind,
        message: str,
        *,
        position: tuple[int | None, int | None] | None = None,
    ) -> Finding:
        """Build a finding for ``document``.

        ``position`` is the ``(section_index, block_index)`` pair; when omitted
        it is located from ``line``.
        """
        section_index, block_index = position if position is not None else document.locate(line)
        return cls(
            path=document.path,
            line=line,
            kind=kind,
            message=message,
            severity=severity_for(kind),
            section_index=section_index,
            block_index=block_index,
        )

    def sort_key(self) -> tuple[int, str, int, int, str]:
        return (
            self.line,
            self.kind.value,
            -1 if self.section_index is None else self.section_index,
            -1 if self.block_index is None else self.block_index,
            self.message,
        )


class DocumentError(BaseModel):
    """A fatal per-document error, such as an unterminated code fence."""

    model_config = ConfigDict(frozen=True)

    kind: str = "ParseError"
    message: str
    line: int = Field(..., ge=1)


class DocumentReport(BaseModel):
    """Findings for one document."""

    model_config = ConfigDict(frozen=True)

    path: str
    findings: tuple[Finding, ...] = ()
    error: DocumentError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class LintReport(BaseModel):
    """Aggregated result of a lint run."""

    model_config = ConfigDict(frozen=True)

    documents: tuple[DocumentReport, ...] = ()
    counts: dict[str, int] = Field(default_factory=dict)
    document_count: int = 0
    finding_count: int = 0
    failed_count: int = 0
    exit_code: int = 0
