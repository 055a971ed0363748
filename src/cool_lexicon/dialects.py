"""SQL dialect differences between the MySQL and SQLite backend families.

Everything backend-specific about a statement lives here; the lexicon
adapter only asks a :class:`Dialect` for finished SQL text.
"""

from __future__ import annotations

from enum import Enum

from cool_lexicon.exceptions import InvalidArgumentError
from cool_lexicon.models import BackendType

TABLE_NAME = "lexicon"
WORD_MAX_LENGTH = 100

# Escape character for LIKE patterns, accepted by both dialects
LIKE_ESCAPE = "!"


class Dialect(str, Enum):
    """SQL flavour spoken by a backend."""

    MYSQL = "mysql"
    SQLITE = "sqlite"

    @property
    def placeholder(self) -> str:
        """DB-API parameter marker (PyMySQL uses ``format`` paramstyle)."""
        return "%s" if self is Dialect.MYSQL else "?"

    @property
    def insert_ignore(self) -> str:
        """Insert verb that skips rows violating the primary key."""
        return "INSERT IGNORE" if self is Dialect.MYSQL else "INSERT OR IGNORE"

    @property
    def word_column(self) -> str:
        """Column definition for ``word``, including its collation."""
        if self is Dialect.MYSQL:
            return (
                f"word VARCHAR({WORD_MAX_LENGTH}) CHARACTER SET utf8mb4 "
                "COLLATE utf8mb4_unicode_ci NOT NULL"
            )
        return f"word VARCHAR({WORD_MAX_LENGTH}) NOT NULL COLLATE NOCASE"


_BACKEND_DIALECTS = {
    BackendType.MYSQL: Dialect.MYSQL,
    BackendType.LIBSQL: Dialect.SQLITE,
    BackendType.LIBSQL_TOKEN: Dialect.SQLITE,
    BackendType.SQLITE: Dialect.SQLITE,
}


def dialect_for(backend: BackendType) -> Dialect:
    """Return the dialect spoken by a backend type."""
    return _BACKEND_DIALECTS[backend]


# ---------------------------------------------------------------------------
# Statement builders
# ---------------------------------------------------------------------------

def build_insert_statement(dialect: Dialect, count: int) -> str:
    """Build one multi-row insert with ``count`` placeholder groups.

    Only placeholders are interpolated; the words themselves are always
    bound as parameters.
    """
    if count < 1:
        raise InvalidArgumentError("insert needs at least one row")
    groups = ", ".join([f"({dialect.placeholder})"] * count)
    return f"{dialect.insert_ignore} INTO {TABLE_NAME} (word) VALUES {groups}"


def build_exists_statement(dialect: Dialect) -> str:
    return (
        f"SELECT EXISTS (SELECT 1 FROM {TABLE_NAME} l "
        f"WHERE l.word = {dialect.placeholder})"
    )


def build_search_statement(dialect: Dialect) -> str:
    return (
        f"SELECT l.word FROM {TABLE_NAME} l "
        f"WHERE l.word LIKE {dialect.placeholder} ESCAPE '{LIKE_ESCAPE}' "
        "ORDER BY l.word"
    )


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def prefix_pattern(substring: str) -> str:
    return escape_like(substring) + "%"


def suffix_pattern(substring: str) -> str:
    return "%" + escape_like(substring)
