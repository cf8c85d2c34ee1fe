"""Lexical sanity checks for SQL code blocks.

This is deliberately not a SQL parser. It only tracks enough lexical state
(strings, quoted identifiers, dollar-quoted bodies and comments) to check
quote and parenthesis balance and to look for a statement keyword.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from sqldoc_lint.config import CORE_STATEMENT_KEYWORDS, SQL_LANGUAGES
from sqldoc_lint.schemas import CodeBlock, Document, Finding, FindingKind

_DOLLAR_TAG_RE = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")
_QUOTE_NAMES = {
    "'": "string literal",
    '"': "quoted identifier",
    "`": "backtick identifier",
}


@dataclass(frozen=True)
class SqlIssue:
    """A problem found in a code block; ``line_offset`` is 0-based within the content."""

    kind: FindingKind
    line_offset: int
    message: str


@dataclass
class SqlScan:
    """Lexical summary of an SQL snippet.

    Attributes:
        code: The snippet with strings and comments blanked out.
        unclosed_quote: ``(description, line_offset)`` of the first quote
            that never closes.
        stray_paren: Line offset of the first ``)`` with no opener.
        open_parens: Line offsets of ``(`` still open at the end.
    """

    code: str = ""
    unclosed_quote: tuple[str, int] | None = None
    stray_paren: int | None = None
    open_parens: list[int] = field(default_factory=list)


def scan_sql(content: str) -> SqlScan:
    """Walk ``content`` once, tracking strings, comments and parentheses."""
    scan = SqlScan()
    code: list[str] = []
    length = len(content)
    line = 0
    i = 0

    def blank(segment: str) -> None:
        code.append("".join("\n" if char == "\n" else " " for char in segment))

    while i < length:
        char = content[i]
        nxt = content[i + 1] if i + 1 < length else ""

        if char == "-" and nxt == "-":
            end = content.find("\n", i)
            end = length if end == -1 else end
            blank(content[i:end])
            i = end
            continue

        if char == "#" and _is_hash_comment(content, i):
            end = content.find("\n", i)
            end = length if end == -1 else end
            blank(content[i:end])
            i = end
            continue

        if char == "/" and nxt == "*":
            end = _block_comment_end(content, i)
            segment = content[i:end]
            blank(segment)
            line += segment.count("\n")
            i = end
            continue

        if char in _QUOTE_NAMES:
            end = _quoted_end(content, i, char)
            if end is None:
                scan.unclosed_quote = (_QUOTE_NAMES[char], line)
                blank(content[i:])
                break
            segment = content[i:end]
            blank(segment)
            line += segment.count("\n")
            i = end
            continue

        if char == "$" and not _follows_identifier(content, i):
            tag = _DOLLAR_TAG_RE.match(content, i)
            if tag:
                close = content.find(tag.group(0), tag.end())
                if close == -1:
                    scan.unclosed_quote = ("dollar-quoted body", line)
                    blank(content[i:])
                    break
                end = close + len(tag.group(0))
                segment = content[i:end]
                blank(segment)
                line += segment.count("\n")
                i = end
                continue

        if char == "(":
            scan.open_parens.append(line)
        elif char == ")":
            if scan.open_parens:
                scan.open_parens.pop()
            elif scan.stray_paren is None:
                scan.stray_paren = line
        elif char == "\n":
            line += 1

        code.append(char)
        i += 1

    scan.code = "".join(code)
    return scan


def keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    """Compile a case-insensitive whole-word pattern for ``keywords``."""
    words = sorted({keyword.upper() for keyword in keywords}, key=len, reverse=True)
    return re.compile(r"\b(?:" + "|".join(re.escape(word) for word in words) + r")\b", re.IGNORECASE)


_DEFAULT_KEYWORD_RE = keyword_pattern(CORE_STATEMENT_KEYWORDS)


def odd_single_quote_line(content: str) -> int | None:
    """Return the line offset of the last unescaped single quote if the count is odd.

    Every ``'`` counts, including those inside comments, quoted identifiers
    and dollar-quoted bodies. A backslash escapes the character after it and
    a doubled ``''`` counts twice, so it never changes the parity.
    """
    count = 0
    last_line = 0
    line = 0
    i = 0
    length = len(content)
    while i < length:
        char = content[i]
        if char == "\\":
            if content[i + 1 : i + 2] == "\n":
                line += 1
            i += 2
            continue
        if char == "\n":
            line += 1
        elif char == "'":
            count += 1
            last_line = line
        i += 1
    return last_line if count % 2 else None


def check_sql_text(content: str, *, keyword_re: re.Pattern[str] = _DEFAULT_KEYWORD_RE) -> list[SqlIssue]:
    """Run the quote, paren and keyword checks on raw SQL text.

    Each kind is reported at most once. An odd count of unescaped single
    quotes anywhere in the snippet, comments and identifiers included, is an
    unbalanced quote. When a quote never closes the rest of the snippet is
    inside that quote, so the paren check is skipped.
    """
    scan = scan_sql(content)
    issues: list[SqlIssue] = []

    if scan.unclosed_quote is not None:
        description, line_offset = scan.unclosed_quote
        issues.append(
            SqlIssue(FindingKind.UNBALANCED_QUOTE, line_offset, f"unterminated {description}")
        )
    else:
        odd_line = odd_single_quote_line(content)
        if odd_line is not None:
            issues.append(
                SqlIssue(
                    FindingKind.UNBALANCED_QUOTE,
                    odd_line,
                    "odd number of unescaped single quotes",
                )
            )
        if scan.stray_paren is not None:
            issues.append(
                SqlIssue(FindingKind.UNBALANCED_PAREN, scan.stray_paren, "')' without a matching '('")
            )
        elif scan.open_parens:
            issues.append(
                SqlIssue(
                    FindingKind.UNBALANCED_PAREN,
                    scan.open_parens[0],
                    f"{len(scan.open_parens)} unclosed '('",
                )
            )

    if not keyword_re.search(scan.code):
        issues.append(
            SqlIssue(FindingKind.NO_STATEMENT_KEYWORD, -1, "no SQL statement keyword found")
        )
    return issues


def check_sql_block(
    block: CodeBlock,
    *,
    keyword_re: re.Pattern[str] = _DEFAULT_KEYWORD_RE,
) -> list[tuple[int, FindingKind, str]]:
    """Check one code block and return ``(document_line, kind, message)`` triples.

    Keyword findings point at the opening fence; quote and paren findings
    point at the offending line.
    """
    located: list[tuple[int, FindingKind, str]] = []
    for issue in check_sql_text(block.content, keyword_re=keyword_re):
        if issue.line_offset < 0:
            line = block.line
        else:
            line = block.content_line + issue.line_offset
        located.append((line, issue.kind, issue.message))
    return located


def check_sql_document(
    document: Document,
    *,
    languages: Iterable[str] = SQL_LANGUAGES,
    keywords: Iterable[str] | None = None,
) -> list[Finding]:
    """Check every SQL-tagged code block in ``document``."""
    wanted = {language.lower() for language in languages}
    keyword_re = _DEFAULT_KEYWORD_RE if keywords is None else keyword_pattern(keywords)
    findings: list[Finding] = []
    for section_index, block_index, block in document.code_blocks():
        if block.language not in wanted:
            continue
        for line, kind, message in check_sql_block(block, keyword_re=keyword_re):
            findings.append(
                Finding.at(
                    document,
                    line,
                    kind,
                    message,
                    position=(section_index, block_index),
                )
            )
    return findings


def check_untagged_blocks(document: Document) -> list[Finding]:
    """Warn about code fences that declare no language."""
    return [
        Finding.at(
            document,
            block.line,
            FindingKind.UNTAGGED_CODE_BLOCK,
            "code fence has no language tag",
            position=(section_index, block_index),
        )
        for section_index, block_index, block in document.code_blocks()
        if not block.is_tagged
    ]


def _is_hash_comment(content: str, index: int) -> bool:
    # MySQL '#' comments; PostgreSQL uses '#' in operators such as '#>' and '#-'.
    line_start = content.rfind("\n", 0, index) + 1
    if content[line_start:index].strip():
        return False
    following = content[index + 1 : index + 2]
    return following not in {">", "-"}


def _block_comment_end(content: str, start: int) -> int:
    depth = 0
    i = start
    length = len(content)
    while i < length:
        pair = content[i : i + 2]
        if pair == "/*":
            depth += 1
            i += 2
        elif pair == "*/":
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    return length


def _quoted_end(content: str, start: int, quote: str) -> int | None:
    """Return the index just past the closing quote, or ``None`` if it never closes."""
    i = start + 1
    length = len(content)
    while i < length:
        char = content[i]
        if char == "\\" and quote == "'":
            i += 2
            continue
        if char == quote:
            if i + 1 < length and content[i + 1] == quote:
                i += 2
                continue
            return i + 1
        i += 1
    return None


def _follows_identifier(content: str, index: int) -> bool:
    if index == 0:
        return False
    previous = content[index - 1]
    return previous.isalnum() or previous in {"_", "$"}
