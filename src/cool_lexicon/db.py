"""Database connections for each supported backend."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from cool_lexicon.config import LexiconConfig
from cool_lexicon.dialects import Dialect, dialect_for
from cool_lexicon.exceptions import ConnectionFailureError
from cool_lexicon.models import BackendType

DEFAULT_SQLITE_TIMEOUT = 5.0

MASK = "****"


@dataclass(frozen=True, slots=True)
class BackendConnection:
    """An open DB-API connection plus what is needed to talk to it."""

    conn: Any
    dialect: Dialect
    driver_errors: tuple[type[BaseException], ...]


# ---------------------------------------------------------------------------
# Connection targets
# ---------------------------------------------------------------------------

def libsql_url(cfg: LexiconConfig) -> str:
    """URL handed to the libSQL client for a remote backend."""
    if "://" in cfg.host:
        return cfg.host
    if cfg.type is BackendType.LIBSQL_TOKEN:
        return f"libsql://{cfg.host}"
    return f"http://{cfg.host}:{cfg.effective_port}"


def describe_target(cfg: LexiconConfig) -> str:
    """Human-readable connection target with secrets masked."""
    if cfg.type is BackendType.MYSQL:
        return (
            f"{cfg.username}:{MASK}@tcp({cfg.host}:{cfg.effective_port})"
            f"/{cfg.database}"
        )
    if cfg.type in (BackendType.LIBSQL, BackendType.LIBSQL_TOKEN):
        if cfg.auth_token:
            return f"{libsql_url(cfg)}?authToken={MASK}"
        return libsql_url(cfg)
    return cfg.database


# ---------------------------------------------------------------------------
# Connect
# ---------------------------------------------------------------------------

def connect(cfg: LexiconConfig, *, select_database: bool = True) -> BackendConnection:
    """Open a connection to the backend described by ``cfg``.

    ``select_database=False`` connects a MySQL server without choosing a
    schema, which is needed before the schema itself exists.
    """
    if cfg.type is BackendType.MYSQL:
        return _connect_mysql(cfg, select_database)
    if cfg.type in (BackendType.LIBSQL, BackendType.LIBSQL_TOKEN):
        return _connect_libsql(cfg)
    if cfg.type is BackendType.SQLITE:
        return _connect_sqlite(cfg)
    raise ConnectionFailureError(f"No driver for backend type {cfg.type!r}")


def connect_sqlite(db_path: str = ":memory:", timeout: float | None = None) -> sqlite3.Connection:
    """Open a local SQLite database with lexicon PRAGMA settings."""
    conn = sqlite3.connect(
        db_path, timeout=timeout if timeout is not None else DEFAULT_SQLITE_TIMEOUT
    )
    if db_path != ":memory:":
        conn.execute("PRAGMA journal_mode = WAL")
    return conn


def _connect_sqlite(cfg: LexiconConfig) -> BackendConnection:
    try:
        conn = connect_sqlite(cfg.database, cfg.timeout)
    except sqlite3.Error as e:
        raise ConnectionFailureError(
            f"Cannot open SQLite database {cfg.database!r}: {e}"
        ) from e
    return BackendConnection(conn, Dialect.SQLITE, (sqlite3.Error,))


def _get_pymysql():
    """Import PyMySQL, raising a helpful error if not installed."""
    try:
        import pymysql
    except ImportError as e:
        raise ConnectionFailureError(
            "PyMySQL is required for the mysql backend. "
            "Install with: pip install 'cool-lexicon[mysql]'"
        ) from e
    return pymysql


def _connect_mysql(cfg: LexiconConfig, select_database: bool) -> BackendConnection:
    pymysql = _get_pymysql()
    kwargs: dict[str, Any] = {
        "host": cfg.host,
        "port": cfg.effective_port,
        "user": cfg.username,
        "password": cfg.password,
        "charset": "utf8mb4",
    }
    if select_database:
        kwargs["database"] = cfg.database
    if cfg.timeout is not None:
        kwargs["connect_timeout"] = cfg.timeout
        kwargs["read_timeout"] = cfg.timeout
        kwargs["write_timeout"] = cfg.timeout
    try:
        conn = pymysql.connect(**kwargs)
    except pymysql.MySQLError as e:
        raise ConnectionFailureError(
            f"Cannot connect to MySQL @ {describe_target(cfg)}: {e}"
        ) from e
    return BackendConnection(conn, Dialect.MYSQL, (pymysql.MySQLError,))


def _get_libsql():
    """Import the libSQL client, raising a helpful error if not installed."""
    try:
        import libsql_experimental as libsql
    except ImportError as e:
        raise ConnectionFailureError(
            "libsql-experimental is required for the libsql backends. "
            "Install with: pip install 'cool-lexicon[libsql]'"
        ) from e
    return libsql


def _connect_libsql(cfg: LexiconConfig) -> BackendConnection:
    libsql = _get_libsql()
    kwargs: dict[str, Any] = {"database": libsql_url(cfg)}
    if cfg.auth_token:
        kwargs["auth_token"] = cfg.auth_token
    try:
        conn = libsql.connect(**kwargs)
    except (ValueError, RuntimeError, OSError) as e:
        raise ConnectionFailureError(
            f"Cannot connect to libSQL @ {describe_target(cfg)}: {e}"
        ) from e
    # The client reports statement failures as ValueError
    return BackendConnection(conn, dialect_for(cfg.type), (ValueError,))


# ---------------------------------------------------------------------------
# Cursor helpers
# ---------------------------------------------------------------------------

@contextmanager
def cursor(conn: Any) -> Generator[Any, None, None]:
    """Yield a cursor that is closed afterwards, whatever the driver."""
    cur = conn.cursor()
    try:
        yield cur
    finally:
        cur.close()
