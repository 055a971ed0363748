"""Versioned schema migrations for the lexicon store."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from cool_lexicon.db import BackendConnection, cursor
from cool_lexicon.dialects import TABLE_NAME, Dialect
from cool_lexicon.exceptions import MigrationError

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "schema_migrations"

_DATABASE_NAME = re.compile(r"^[A-Za-z0-9_$]{1,64}$")


@dataclass(frozen=True, slots=True)
class Migration:
    """One schema step, with its SQL spelled out per dialect."""

    version: int
    description: str
    statements: dict[Dialect, tuple[str, ...]]


def _create_lexicon(dialect: Dialect) -> str:
    return (
        f"CREATE TABLE IF NOT EXISTS {TABLE_NAME} "
        f"({dialect.word_column}, PRIMARY KEY (word))"
    )


MIGRATIONS: tuple[Migration, ...] = (
    Migration(
        version=1,
        description="create lexicon table",
        statements={d: (_create_lexicon(d),) for d in Dialect},
    ),
)

LATEST_VERSION = max(m.version for m in MIGRATIONS)

_TRACKING_DDL = (
    f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} ("
    "version INTEGER NOT NULL PRIMARY KEY, "
    "description VARCHAR(255) NOT NULL, "
    "applied_at VARCHAR(32) NOT NULL)"
)


def _table_exists_statement(dialect: Dialect) -> str:
    if dialect is Dialect.MYSQL:
        return (
            "SELECT COUNT(*) FROM information_schema.tables "
            "WHERE table_schema = DATABASE() AND table_name = %s"
        )
    return "SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?"


# ---------------------------------------------------------------------------
# Version bookkeeping
# ---------------------------------------------------------------------------

def applied_versions(backend: BackendConnection) -> set[int]:
    """Return the set of migration versions recorded in the database."""
    with cursor(backend.conn) as cur:
        cur.execute(_table_exists_statement(backend.dialect), (MIGRATIONS_TABLE,))
        if not cur.fetchone()[0]:
            return set()
        cur.execute(f"SELECT version FROM {MIGRATIONS_TABLE}")
        return {int(row[0]) for row in cur.fetchall()}


def current_version(backend: BackendConnection) -> int:
    """Highest applied migration version, or 0 for an empty database."""
    return max(applied_versions(backend), default=0)


def check_schema_version(backend: BackendConnection) -> None:
    """Verify the database schema is not newer than this code knows."""
    try:
        version = current_version(backend)
    except backend.driver_errors as e:
        raise MigrationError(f"Cannot read schema version: {e}") from e
    if version > LATEST_VERSION:
        raise MigrationError(
            f"Incompatible schema version: {version} "
            f"(expected at most {LATEST_VERSION})"
        )


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def migrate(
    backend: BackendConnection,
    migrations: tuple[Migration, ...] = MIGRATIONS,
) -> list[int]:
    """Apply pending migrations in version order.

    Safe to call on every startup; returns the versions applied by this
    call, which is empty when the schema is already current.
    """
    conn = backend.conn
    try:
        with cursor(conn) as cur:
            cur.execute(_TRACKING_DDL)
        conn.commit()
        done = applied_versions(backend)
    except backend.driver_errors as e:
        raise MigrationError(f"Cannot prepare {MIGRATIONS_TABLE}: {e}") from e

    newest_known = max((m.version for m in migrations), default=0)
    if done and max(done) > newest_known:
        raise MigrationError(
            f"Incompatible schema version: {max(done)} "
            f"(expected at most {newest_known})"
        )

    applied: list[int] = []
    for migration in sorted(migrations, key=lambda m: m.version):
        if migration.version in done:
            continue
        _apply(backend, migration)
        applied.append(migration.version)

    if applied:
        logger.info("Applied migrations %s", applied)
    else:
        logger.debug("Schema is current at version %d", max(done, default=0))
    return applied


def _apply(backend: BackendConnection, migration: Migration) -> None:
    conn, dialect = backend.conn, backend.dialect
    statements = migration.statements.get(dialect)
    if statements is None:
        raise MigrationError(
            f"Migration {migration.version} has no SQL for dialect {dialect.value}"
        )

    logger.info("Applying migration %d: %s", migration.version, migration.description)
    record = (
        f"INSERT INTO {MIGRATIONS_TABLE} (version, description, applied_at) "
        f"VALUES ({dialect.placeholder}, {dialect.placeholder}, {dialect.placeholder})"
    )
    try:
        with cursor(conn) as cur:
            for statement in statements:
                cur.execute(statement)
            cur.execute(
                record,
                (migration.version, migration.description, _now()),
            )
        conn.commit()
    except backend.driver_errors as e:
        conn.rollback()
        raise MigrationError(
            f"Migration {migration.version} ({migration.description}) failed: {e}"
        ) from e


def ensure_database(backend: BackendConnection, database: str) -> None:
    """Create a MySQL schema if it does not already exist.

    ``backend`` must be a server-level connection without a selected
    database. SQLite-family backends have nothing to create.
    """
    if backend.dialect is not Dialect.MYSQL:
        return
    if not _DATABASE_NAME.match(database):
        raise MigrationError(f"Invalid database name: {database!r}")

    logger.info("Creating database %s if it does not already exist", database)
    try:
        with cursor(backend.conn) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        backend.conn.commit()
    except backend.driver_errors as e:
        raise MigrationError(f"Cannot create database {database!r}: {e}") from e


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")

