"""Heading slugs and anchor tables."""

from __future__ import annotations

import re
from typing import Iterable

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML anchor parsing (pip install beautifulsoup4)."
    ) from exc

from sqldoc_lint.schemas import Document

_INLINE_LINK_RE = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_HTML_TAG_RE = re.compile(r"<[A-Za-z!/][^>]*>")
_ANCHOR_ATTR_RE = re.compile(r"\b(?:id|name)\s*=", re.IGNORECASE)
_SLUG_DROP_RE = re.compile(r"[^\w\- ]")


def slugify_heading(text: str) -> str:
    """Compute the anchor slug for a heading.

    Lower-cases the rendered heading text, strips punctuation and turns each
    space into a hyphen: ``"Indexing in PostgreSQL"`` becomes
    ``"indexing-in-postgresql"``.
    """
    rendered = _INLINE_LINK_RE.sub(r"\1", text)
    rendered = _HTML_TAG_RE.sub("", rendered)
    rendered = rendered.strip().lower()
    rendered = _SLUG_DROP_RE.sub("", rendered)
    return rendered.replace(" ", "-")


def unique_slugs(headings: Iterable[str]) -> list[str]:
    """Slugify headings, suffixing repeats with ``-1``, ``-2`` and so on."""
    seen: dict[str, int] = {}
    taken: set[str] = set()
    slugs: list[str] = []
    for heading in headings:
        base = slugify_heading(heading)
        slug = base
        if slug in taken:
            count = seen.get(base, 0)
            while slug in taken:
                count += 1
                slug = f"{base}-{count}"
            seen[base] = count
        taken.add(slug)
        slugs.append(slug)
    return slugs


def collect_html_anchors(text: str) -> set[str]:
    """Return explicit anchors (``id`` and ``<a name>``) declared in inline HTML."""
    if not _HTML_TAG_RE.search(text) or not _ANCHOR_ATTR_RE.search(text):
        return set()
    soup = BeautifulSoup(text, "lxml")
    anchors: set[str] = set()
    for tag in soup.find_all(True):
        element_id = tag.get("id")
        if element_id:
            anchors.add(str(element_id).strip())
        if tag.name == "a":
            name = tag.get("name")
            if name:
                anchors.add(str(name).strip())
    return {anchor for anchor in anchors if anchor}


def anchor_table(document: Document) -> set[str]:
    """All anchors a link into ``document`` may target, lower-cased."""
    anchors = {section.slug for section in document.sections}
    anchors.update(document.html_anchors)
    return {anchor.lower() for anchor in anchors}
