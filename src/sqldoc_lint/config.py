"""Local configuration for sqldoc-lint."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from sqldoc_lint.exceptions import ConfigError

DEFAULT_ROOT_DIR = "."
DEFAULT_FAIL_ON_WARNING = True
DEFAULT_SQL_ONLY = False
DEFAULT_REQUIRE_LANGUAGE = False
DEFAULT_EXTENDED_KEYWORDS = False
DEFAULT_MARKDOWN_SUFFIXES = (".md", ".markdown")

# Fence tags treated as SQL by the sanity checker.
SQL_LANGUAGES = frozenset({"sql", "postgresql", "postgres", "pgsql", "plpgsql", "mysql"})

# Statement keywords every SQL example is expected to contain at least one of.
CORE_STATEMENT_KEYWORDS = (
    "SELECT",
    "INSERT",
    "UPDATE",
    "DELETE",
    "CREATE",
    "ALTER",
    "DROP",
    "GRANT",
    "REVOKE",
    "WITH",
    "BEGIN",
)

# Utility and transaction-control statements common in PostgreSQL/MySQL
# cheat-sheets. Only accepted when extended keywords are switched on.
EXTENDED_STATEMENT_KEYWORDS = (
    "EXPLAIN",
    "SET",
    "SHOW",
    "TRUNCATE",
    "COMMIT",
    "ROLLBACK",
    "SAVEPOINT",
    "RELEASE",
    "START",
    "CALL",
    "DO",
    "VACUUM",
    "ANALYZE",
    "REINDEX",
    "CLUSTER",
    "COPY",
    "LOCK",
    "PREPARE",
    "EXECUTE",
    "DEALLOCATE",
    "DECLARE",
    "FETCH",
    "CLOSE",
    "MERGE",
    "REPLACE",
    "USE",
    "DESCRIBE",
    "REFRESH",
    "LISTEN",
    "NOTIFY",
    "COMMENT",
    "LOAD",
)

ALL_STATEMENT_KEYWORDS = CORE_STATEMENT_KEYWORDS + EXTENDED_STATEMENT_KEYWORDS

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def env_list(name: str) -> tuple[str, ...]:
    """Read a comma separated list from the environment."""
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class EnvSettings:
    """Option defaults taken from ``SQLDOC_LINT_*`` environment variables."""

    root_dir: Path
    fail_on_warning: bool
    sql_only: bool
    require_language: bool
    extended_keywords: bool
    exclude: tuple[str, ...]


def settings_from_env() -> EnvSettings:
    """Read option defaults from the environment.

    Raises:
        ConfigError: If a boolean variable holds an unrecognized value.
    """
    return EnvSettings(
        root_dir=Path(os.getenv("SQLDOC_LINT_ROOT_DIR", DEFAULT_ROOT_DIR)).expanduser(),
        fail_on_warning=env_flag("SQLDOC_LINT_FAIL_ON_WARNING", DEFAULT_FAIL_ON_WARNING),
        sql_only=env_flag("SQLDOC_LINT_SQL_ONLY", DEFAULT_SQL_ONLY),
        require_language=env_flag("SQLDOC_LINT_REQUIRE_LANGUAGE", DEFAULT_REQUIRE_LANGUAGE),
        extended_keywords=env_flag("SQLDOC_LINT_EXTENDED_KEYWORDS", DEFAULT_EXTENDED_KEYWORDS),
        exclude=env_list("SQLDOC_LINT_EXCLUDE"),
    )
