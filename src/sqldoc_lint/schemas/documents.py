"""Document structure models."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

UNTAGGED = "untagged"


class ProseBlock(BaseModel):
    """A run of non-code Markdown text."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prose"] = "prose"
    text: str
    line: int = Field(..., ge=1)


class CodeBlock(BaseModel):
    """A fenced code block.

    Attributes:
        language: Lower-cased first token of the fence info string, or
            ``"untagged"`` when the fence declares none.
        content: Raw lines between the opening and closing fences.
        line: Line number of the opening fence.
        end_line: Line number of the closing fence.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["code"] = "code"
    language: str = UNTAGGED
    content: str
    line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)

    @property
    def is_tagged(self) -> bool:
        return self.language != UNTAGGED

    @property
    def content_line(self) -> int:
        """Document line holding the first content line."""
        return self.line + 1


Block = Annotated[Union[ProseBlock, CodeBlock], Field(discriminator="kind")]


class Section(BaseModel):
    """A heading and the blocks up to the next heading."""

    model_config = ConfigDict(frozen=True)

    heading: str
    level: int = Field(..., ge=1, le=6)
    line: int = Field(..., ge=1)
    slug: str
    blocks: tuple[Block, ...] = ()


class TocEntry(BaseModel):
    """An in-page link such as ``[Indexing](#indexing)``."""

    model_config = ConfigDict(frozen=True)

    label: str
    anchor: str
    line: int = Field(..., ge=1)


class LinkRef(BaseModel):
    """A link from one document to a relative path."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    path_part: str
    anchor: str | None = None
    line: int = Field(..., ge=1)
    resolved: bool = False


class Document(BaseModel):
    """A Markdown document.

    The loader fills in ``path`` and ``text``; the extractor returns a copy
    with the section structure, TOC entries, links and HTML anchors. Blocks
    before the first heading belong to no section and are kept in
    ``preamble``.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    text: str
    extracted: bool = False
    preamble: tuple[Block, ...] = ()
    sections: tuple[Section, ...] = ()
    toc: tuple[TocEntry, ...] = ()
    links: tuple[LinkRef, ...] = ()
    html_anchors: frozenset[str] = frozenset()

    def locate(self, line: int) -> tuple[int | None, int | None]:
        """Return ``(section_index, block_index)`` of the block holding ``line``.

        ``section_index`` is ``None`` for lines before the first heading; the
        block index then refers to ``preamble``.
        """
        section_index: int | None = None
        for index, section in enumerate(self.sections):
            if section.line <= line:
                section_index = index
            else:
                break
        blocks = self.preamble if section_index is None else self.sections[section_index].blocks
        block_index: int | None = None
        for index, block in enumerate(blocks):
            if block.line <= line:
                block_index = index
            else:
                break
        return section_index, block_index

    def code_blocks(self) -> list[tuple[int | None, int, CodeBlock]]:
        """Return ``(section_index, block_index, block)`` for every code block.

        Preamble blocks come first, with a ``None`` section index.
        """
        found: list[tuple[int | None, int, CodeBlock]] = []
        for block_index, block in enumerate(self.preamble):
            if isinstance(block, CodeBlock):
                found.append((None, block_index, block))
        for section_index, section in enumerate(self.sections):
            for block_index, block in enumerate(section.blocks):
                if isinstance(block, CodeBlock):
                    found.append((section_index, block_index, block))
        return found
