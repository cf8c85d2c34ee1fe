"""Table-of-contents and cross-document link checks."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path
from typing import Mapping

from sqldoc_lint.schemas import Document, Finding, FindingKind, LinkRef
from sqldoc_lint.sections import anchor_table


def check_toc(document: Document) -> list[Finding]:
    """Report every in-page link whose anchor matches no heading or HTML anchor."""
    anchors = anchor_table(document)
    findings: list[Finding] = []
    for entry in document.toc:
        if entry.anchor.lower() in anchors:
            continue
        findings.append(
            Finding.at(
                document,
                entry.line,
                FindingKind.BROKEN_ANCHOR,
                f"table of contents entry '{entry.label}' points to missing anchor '#{entry.anchor}'",
            )
        )
    return findings


def resolve_link_path(link: LinkRef) -> str | None:
    """Resolve a link target to a root-relative POSIX path.

    Absolute targets (``/guide.md``) are taken relative to the corpus root.

    Returns:
        The normalized path, or ``None`` when it escapes the root.
    """
    if link.path_part.startswith("/"):
        joined = link.path_part.lstrip("/")
    else:
        joined = posixpath.join(posixpath.dirname(link.source), link.path_part)
    normalized = posixpath.normpath(joined) if joined else "."
    if normalized == ".." or normalized.startswith("../"):
        return None
    return normalized


def resolve_links(
    document: Document,
    corpus: Mapping[str, Document],
    *,
    root: Path | None = None,
) -> list[LinkRef]:
    """Return copies of the document's links with ``resolved`` filled in."""
    return [
        link.model_copy(update={"resolved": _resolve(link, corpus, root)[2]})
        for link in document.links
    ]


def check_links(
    document: Document,
    corpus: Mapping[str, Document],
    *,
    root: Path | None = None,
) -> list[Finding]:
    """Check links from ``document`` to other files.

    Markdown targets resolve against ``corpus``; anything else (images, SQL
    scripts, directories, excluded documents) must exist under ``root``.
    Paths compare case-sensitively. When the target is a corpus document,
    a ``#anchor`` suffix must also resolve inside it.
    """
    findings: list[Finding] = []
    for link in document.links:
        resolved, target_document, exists = _resolve(link, corpus, root)
        if resolved is None:
            findings.append(
                Finding.at(
                    document,
                    link.line,
                    FindingKind.BROKEN_LINK,
                    f"link target '{link.target}' points outside the documentation root",
                )
            )
            continue
        if not exists:
            findings.append(
                Finding.at(
                    document,
                    link.line,
                    FindingKind.BROKEN_LINK,
                    f"link target '{link.target}' does not exist",
                )
            )
            continue

        if link.anchor and target_document is not None and target_document.extracted:
            if link.anchor.lower() not in anchor_table(target_document):
                findings.append(
                    Finding.at(
                        document,
                        link.line,
                        FindingKind.BROKEN_ANCHOR,
                        f"link '{link.target}' points to missing anchor '#{link.anchor}' in {resolved}",
                    )
                )
    return findings


def _resolve(
    link: LinkRef,
    corpus: Mapping[str, Document],
    root: Path | None,
) -> tuple[str | None, Document | None, bool]:
    resolved = resolve_link_path(link)
    if resolved is None:
        return None, None, False
    target_document = corpus.get(resolved)
    if target_document is not None:
        return resolved, target_document, True
    exists = root is not None and _exists_case_sensitive(root, resolved)
    return resolved, None, exists


def _exists_case_sensitive(root: Path, relative: str) -> bool:
    if relative == ".":
        return root.is_dir()
    current = root
    for part in relative.split("/"):
        try:
            entries = os.listdir(current)
        except OSError:
            return False
        if part not in entries:
            return False
        current = current / part
    return True
