"""Load Markdown documents from a source tree."""

from __future__ import annotations

import asyncio
import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Iterable

from sqldoc_lint.config import DEFAULT_MARKDOWN_SUFFIXES
from sqldoc_lint.exceptions import ReadError
from sqldoc_lint.schemas import Document

logger = logging.getLogger(__name__)


def discover_markdown_files(
    root: Path,
    *,
    exclude: Iterable[str] = (),
    suffixes: Iterable[str] = DEFAULT_MARKDOWN_SUFFIXES,
) -> list[Path]:
    """List Markdown files under ``root`` sorted by relative path.

    Hidden files and directories (names starting with ``.``) are skipped, as
    are files whose root-relative POSIX path matches one of the ``exclude``
    glob patterns.

    Raises:
        ReadError: If ``root`` is not a readable directory.
    """
    if not root.is_dir():
        raise ReadError(root, "not a directory")

    patterns = tuple(exclude)
    wanted = {suffix.lower() for suffix in suffixes}
    found: list[tuple[str, Path]] = []
    try:
        candidates = list(root.rglob("*"))
    except OSError as exc:
        raise ReadError(root, exc.strerror or str(exc)) from exc

    for path in candidates:
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.suffix.lower() not in wanted or not path.is_file():
            continue
        rel_posix = relative.as_posix()
        if any(fnmatch(rel_posix, pattern) for pattern in patterns):
            logger.debug("Excluding %s", rel_posix)
            continue
        found.append((rel_posix, path))

    found.sort(key=lambda item: item[0])
    return [path for _, path in found]


def read_document(path: Path, root: Path) -> Document:
    """Read a single file into an unparsed :class:`Document`.

    Raises:
        ReadError: If the file cannot be read or is not valid UTF-8.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ReadError(path, f"cannot decode as UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    except OSError as exc:
        raise ReadError(path, exc.strerror or str(exc)) from exc
    return Document(path=path.relative_to(root).as_posix(), text=text)


async def read_document_async(path: Path, root: Path) -> Document:
    """Read a document in a worker thread."""
    return await asyncio.to_thread(read_document, path, root)


async def load_documents_async(root: Path, *, exclude: Iterable[str] = ()) -> list[Document]:
    """Read every Markdown document under ``root`` concurrently.

    The first unreadable file aborts the load.

    Returns:
        Documents sorted by path.
    """
    root = root.resolve()
    paths = discover_markdown_files(root, exclude=exclude)
    logger.debug("Found %d Markdown files under %s", len(paths), root)
    documents = await asyncio.gather(*(read_document_async(path, root) for path in paths))
    return list(documents)


def load_documents(root: Path, *, exclude: Iterable[str] = ()) -> list[Document]:
    """Synchronous wrapper around :func:`load_documents_async`."""
    return asyncio.run(load_documents_async(root, exclude=exclude))
