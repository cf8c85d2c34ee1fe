"""Test setup for sqldoc-lint."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from sqldoc_lint.extractor import extract_document  # noqa: E402
from sqldoc_lint.schemas import Document  # noqa: E402


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Build an extracted document from Markdown text."""

    def _make(text: str, path: str = "guide.md") -> Document:
        return extract_document(Document(path=path, text=text))

    return _make


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write ``{relative_path: text}`` under ``tmp_path`` and return the root."""

    def _write(files: dict[str, str]) -> Path:
        for relative, text in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path

    return _write
