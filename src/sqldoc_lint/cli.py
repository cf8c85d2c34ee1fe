"""Command line entry point for sqldoc-lint."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqldoc_lint.config import ALL_STATEMENT_KEYWORDS, CORE_STATEMENT_KEYWORDS, settings_from_env
from sqldoc_lint.exceptions import ConfigError, ReadError
from sqldoc_lint.linter import LintOptions, run_lint
from sqldoc_lint.logging_config import configure_logging, get_logger
from sqldoc_lint.report import EXIT_FATAL, render_json, render_text

logger = get_logger(__name__)


def build_parser(
    *,
    root_dir: Path,
    fail_on_warning: bool,
    sql_only: bool,
    require_language: bool,
    extended_keywords: bool,
    exclude: tuple[str, ...],
) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqldoc-lint",
        description="Check Markdown SQL documentation for broken anchors, links and SQL snippets.",
    )
    parser.add_argument(
        "--root-dir",
        type=Path,
        default=root_dir,
        help="Directory to scan for Markdown files (default: %(default)s)",
    )
    parser.add_argument(
        "--fail-on-warning",
        action=argparse.BooleanOptionalAction,
        default=fail_on_warning,
        help="Exit with status 1 when only warnings are found (default: %(default)s)",
    )
    parser.add_argument(
        "--sql-only",
        action=argparse.BooleanOptionalAction,
        default=sql_only,
        help="Only check SQL code blocks; skip TOC and link checks",
    )
    parser.add_argument(
        "--require-language",
        action=argparse.BooleanOptionalAction,
        default=require_language,
        help="Report code fences without a language tag",
    )
    parser.add_argument(
        "--extended-keywords",
        action=argparse.BooleanOptionalAction,
        default=extended_keywords,
        help="Also accept utility statements (SET, SHOW, EXPLAIN, VACUUM, ...) as SQL keywords",
    )
    parser.add_argument(
        "--exclude",
        action="append",
        default=list(exclude),
        metavar="GLOB",
        help="Skip files whose root-relative path matches GLOB (repeatable)",
    )
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Report format")
    parser.add_argument("--output", type=Path, help="Write the report to this file instead of stdout")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return parser


def main(argv: list[str] | None = None) -> int:
    try:
        settings = settings_from_env()
    except ConfigError as exc:
        print(f"sqldoc-lint: {exc}", file=sys.stderr)
        return EXIT_FATAL

    parser = build_parser(
        root_dir=settings.root_dir,
        fail_on_warning=settings.fail_on_warning,
        sql_only=settings.sql_only,
        require_language=settings.require_language,
        extended_keywords=settings.extended_keywords,
        exclude=settings.exclude,
    )
    args = parser.parse_args(argv)
    configure_logging(-1 if args.quiet else args.verbose)

    options = LintOptions(
        fail_on_warning=args.fail_on_warning,
        sql_only=args.sql_only,
        require_language=args.require_language,
        exclude=tuple(args.exclude),
        statement_keywords=ALL_STATEMENT_KEYWORDS if args.extended_keywords else CORE_STATEMENT_KEYWORDS,
    )

    try:
        report = run_lint(args.root_dir, options)
    except ReadError as exc:
        logger.error("Aborting run: %s", exc)
        print(f"sqldoc-lint: cannot read {exc}", file=sys.stderr)
        return EXIT_FATAL

    rendered = render_json(report) if args.format == "json" else render_text(report)
    if args.output:
        try:
            args.output.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot write report to %s: %s", args.output, exc)
            print(f"sqldoc-lint: cannot write report to {args.output}: {exc.strerror or exc}", file=sys.stderr)
            return EXIT_FATAL
    else:
        sys.stdout.write(rendered)
    return report.exit_code
