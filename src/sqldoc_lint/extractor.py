"""Split Markdown documents into sections, blocks, TOC entries and links."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from urllib.parse import unquote

from sqldoc_lint.exceptions import ParseError
from sqldoc_lint.schemas import (
    UNTAGGED,
    Block,
    CodeBlock,
    Document,
    LinkRef,
    ProseBlock,
    Section,
    TocEntry,
)
from sqldoc_lint.sections import collect_html_anchors, unique_slugs

logger = logging.getLogger(__name__)

# Fences may be indented when they sit inside list items.
_FENCE_OPEN_RE = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
_HEADING_RE = re.compile(r"^ {0,3}(?P<hashes>#{1,6})(?:[ \t]+(?P<text>.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_CODE_SPAN_RE = re.compile(r"(`+)(?:(?!\1).)+?\1")
_INLINE_LINK_RE = re.compile(
    r"(?P<image>!?)\[(?P<label>(?:[^\[\]\\]|\\.|\[[^\]]*\])*)\]"
    r"\(\s*<?(?P<target>[^)\s>]*)>?(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
_REFERENCE_DEF_RE = re.compile(r"^ {0,3}\[(?P<label>[^\]^][^\]]*)\]:\s*<?(?P<target>[^\s>]+)>?")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


@dataclass
class _SectionBuilder:
    heading: str
    level: int
    line: int
    blocks: list[Block] = field(default_factory=list)
    prose: list[str] = field(default_factory=list)
    prose_line: int | None = None

    def add_prose(self, text: str, line_no: int) -> None:
        if self.prose_line is None:
            if not text.strip():
                return
            self.prose_line = line_no
        self.prose.append(text)

    def flush_prose(self) -> None:
        if self.prose_line is not None:
            text = "\n".join(self.prose).strip("\n")
            self.blocks.append(ProseBlock(text=text, line=self.prose_line))
        self.prose = []
        self.prose_line = None


@dataclass
class ParsedMarkdown:
    """Raw extraction output before it is attached to a :class:`Document`."""

    preamble: list[Block]
    sections: list[Section]
    toc: list[TocEntry]
    links: list[LinkRef]
    html_anchors: set[str]


def fence_language(info: str) -> str:
    """Return the lower-cased language tag of a fence info string."""
    tokens = info.strip().split()
    if not tokens:
        return UNTAGGED
    tag = tokens[0].strip("{}").lstrip(".").lower()
    return tag or UNTAGGED


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` for an ATX heading line, else ``None``."""
    match = _HEADING_RE.match(line)
    if not match:
        return None
    text = match.group("text") or ""
    text = _CLOSING_HASHES_RE.sub("", text).strip()
    return len(match.group("hashes")), text


def parse_markdown(text: str, *, source: str = "") -> ParsedMarkdown:
    """Parse Markdown text into nested sections and blocks.

    Args:
        text: Raw document text.
        source: Document path, used for link references and error messages.

    Raises:
        ParseError: If a code fence is opened but never closed.
    """
    lines = text.splitlines()
    builders: list[_SectionBuilder] = []
    preamble = _SectionBuilder(heading="", level=0, line=1)
    current = preamble
    toc: list[TocEntry] = []
    links: list[LinkRef] = []
    html_chunks: list[str] = []

    index = 0
    while index < len(lines):
        line = lines[index]
        line_no = index + 1

        fence = _FENCE_OPEN_RE.match(line)
        if fence and not (fence.group("fence")[0] == "`" and "`" in fence.group("info")):
            marker = fence.group("fence")
            closing = re.compile(rf"^[ \t]*{re.escape(marker[0])}{{{len(marker)},}}[ \t]*$")
            end = index + 1
            while end < len(lines) and not closing.match(lines[end]):
                end += 1
            if end >= len(lines):
                raise ParseError("unterminated code fence", line=line_no, path=source or None)
            current.flush_prose()
            current.blocks.append(
                CodeBlock(
                    language=fence_language(fence.group("info")),
                    content="\n".join(lines[index + 1 : end]),
                    line=line_no,
                    end_line=end + 1,
                )
            )
            index = end + 1
            continue

        heading = parse_heading(line)
        if heading is not None:
            current.flush_prose()
            if current is not preamble:
                builders.append(current)
            level, heading_text = heading
            current = _SectionBuilder(heading=heading_text, level=level, line=line_no)
            _scan_links(heading_text, line_no, source, toc, links)
            _collect_html(heading_text, html_chunks)
            index += 1
            continue

        current.add_prose(line, line_no)
        _scan_links(line, line_no, source, toc, links)
        _collect_html(line, html_chunks)
        index += 1

    current.flush_prose()
    if current is not preamble:
        builders.append(current)

    slugs = unique_slugs(builder.heading for builder in builders)
    sections = [
        Section(
            heading=builder.heading,
            level=builder.level,
            line=builder.line,
            slug=slug,
            blocks=tuple(builder.blocks),
        )
        for builder, slug in zip(builders, slugs)
    ]

    return ParsedMarkdown(
        preamble=list(preamble.blocks),
        sections=sections,
        toc=toc,
        links=links,
        html_anchors=collect_html_anchors("\n".join(html_chunks)),
    )


def extract_document(document: Document) -> Document:
    """Return a copy of ``document`` with its structure filled in.

    Raises:
        ParseError: If the document contains an unterminated code fence.
    """
    parsed = parse_markdown(document.text, source=document.path)
    logger.debug(
        "Extracted %s: %d sections, %d TOC entries, %d links",
        document.path,
        len(parsed.sections),
        len(parsed.toc),
        len(parsed.links),
    )
    return document.model_copy(
        update={
            "extracted": True,
            "preamble": tuple(parsed.preamble),
            "sections": tuple(parsed.sections),
            "toc": tuple(parsed.toc),
            "links": tuple(parsed.links),
            "html_anchors": frozenset(parsed.html_anchors),
        }
    )


def _scan_links(
    line: str,
    line_no: int,
    source: str,
    toc: list[TocEntry],
    links: list[LinkRef],
) -> None:
    reference = _REFERENCE_DEF_RE.match(line)
    if reference:
        _classify(reference.group("label"), reference.group("target"), line_no, source, toc, links)
        return
    stripped = _CODE_SPAN_RE.sub("", line)
    for match in _INLINE_LINK_RE.finditer(stripped):
        _classify(match.group("label"), match.group("target"), line_no, source, toc, links)


def _classify(
    label: str,
    target: str,
    line_no: int,
    source: str,
    toc: list[TocEntry],
    links: list[LinkRef],
) -> None:
    target = target.strip()
    if not target or target.startswith("//") or _SCHEME_RE.match(target):
        return

    if target.startswith("#"):
        anchor = unquote(target[1:])
        if anchor:
            toc.append(TocEntry(label=label.strip(), anchor=anchor, line=line_no))
        return

    path_part, _, anchor = target.partition("#")
    path_part = unquote(path_part.split("?", 1)[0])
    if not path_part:
        return
    links.append(
        LinkRef(
            source=source,
            target=target,
            path_part=path_part,
            anchor=unquote(anchor) or None,
            line=line_no,
        )
    )


def _collect_html(line: str, html_chunks: list[str]) -> None:
    # Markup inside code spans is example text, not an anchor.
    stripped = _CODE_SPAN_RE.sub("", line)
    if "<" in stripped:
        html_chunks.append(stripped)
