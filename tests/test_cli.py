"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sqldoc_lint.cli import main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SQLDOC_LINT_ROOT_DIR",
        "SQLDOC_LINT_FAIL_ON_WARNING",
        "SQLDOC_LINT_SQL_ONLY",
        "SQLDOC_LINT_REQUIRE_LANGUAGE",
        "SQLDOC_LINT_EXTENDED_KEYWORDS",
        "SQLDOC_LINT_EXCLUDE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestMain:
    """Tests for the main entry point."""

    def test_clean_tree_exits_zero(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"a.md": "# A\n\n```sql\nSELECT 1;\n```\n"})

        code = main(["--root-dir", str(root)])

        assert code == 0
        assert capsys.readouterr().out == "0 findings in 1 documents\n"

    def test_findings_exit_one(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"a.md": "- [Foo](#nonexistent)\n"})

        code = main(["--root-dir", str(root)])

        out = capsys.readouterr().out
        assert code == 1
        assert out.startswith("a.md:1: BrokenAnchor: ")
        assert out.endswith("1 findings in 1 documents\n")

    def test_parse_error_exits_two(self, write_tree, capsys: pytest.CaptureFixture[str]) -> None:
        root = write_tree({"a.md": "```sql\nSELECT 1;\n"})

        code = main(["--root-dir", str(root)])

        assert code == 2
        assert "a.md:1: ParseError: unterminated code fence" in capsys.readouterr().out

    def test_missing_root_exits_two(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["--root-dir", str(tmp_path / "missing"), "--quiet"])

        assert code == 2
        assert "not a directory" in capsys.readouterr().err

    def test_no_fail_on_warning(self, write_tree) -> None:
        root = write_tree({"a.md": "```sql\n-- nothing here\n```\n"})

        assert main(["--root-dir", str(root)]) == 1
        assert main(["--root-dir", str(root), "--no-fail-on-warning"]) == 0

    def test_sql_only(self, write_tree) -> None:
        root = write_tree({"a.md": "[x](#missing)\n"})

        assert main(["--root-dir", str(root), "--sql-only"]) == 0

    def test_extended_keywords_flag(self, write_tree) -> None:
        root = write_tree({"a.md": "```sql\nSHOW search_path;\n```\n"})

        assert main(["--root-dir", str(root)]) == 1
        assert main(["--root-dir", str(root), "--extended-keywords"]) == 0

    def test_extended_keywords_from_environment(self, write_tree, monkeypatch: pytest.MonkeyPatch) -> None:
        root = write_tree({"a.md": "```sql\nVACUUM orders;\n```\n"})
        monkeypatch.setenv("SQLDOC_LINT_EXTENDED_KEYWORDS", "1")

        assert main(["--root-dir", str(root)]) == 0
        assert main(["--root-dir", str(root), "--no-extended-keywords"]) == 1

    def test_json_output_file(self, write_tree, tmp_path: Path) -> None:
        root = write_tree({"a.md": "[x](missing.md)\n"})
        output = tmp_path / "report.json"

        code = main(["--root-dir", str(root), "--format", "json", "--output", str(output)])

        payload = json.loads(output.read_text(encoding="utf-8"))
        assert code == 1
        assert payload["counts"] == {"BrokenLink": 1}

    def test_unwritable_output_exits_two(
        self, write_tree, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        root = write_tree({"a.md": "# A\n"})
        output = tmp_path / "missing" / "report.txt"

        code = main(["--root-dir", str(root), "--output", str(output), "--quiet"])

        assert code == 2
        assert not output.exists()
        assert f"cannot write report to {output}" in capsys.readouterr().err

    def test_environment_defaults(self, write_tree, monkeypatch: pytest.MonkeyPatch) -> None:
        root = write_tree({"a.md": "[x](#missing)\n"})
        monkeypatch.setenv("SQLDOC_LINT_ROOT_DIR", str(root))
        monkeypatch.setenv("SQLDOC_LINT_SQL_ONLY", "yes")

        assert main([]) == 0

    def test_invalid_environment_value(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
        monkeypatch.setenv("SQLDOC_LINT_FAIL_ON_WARNING", "maybe")

        assert main([]) == 2
        assert "SQLDOC_LINT_FAIL_ON_WARNING" in capsys.readouterr().err
