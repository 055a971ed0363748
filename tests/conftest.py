"""Shared test fixtures for cool-lexicon."""

import sqlite3

import pytest

from cool_lexicon import db, migrations
from cool_lexicon.db import BackendConnection
from cool_lexicon.dialects import Dialect
from cool_lexicon.lexicon import SQLLexicon

SEED_WORDS = ("नमस्ते", "धन्यवाद", "नमस्कार", "सुंदर", "मोक्ष")


@pytest.fixture
def backend():
    """In-memory SQLite backend with the schema migrated."""
    conn = db.connect_sqlite(":memory:")
    b = BackendConnection(conn, Dialect.SQLITE, (sqlite3.Error,))
    migrations.migrate(b)
    yield b
    conn.close()


@pytest.fixture
def statements(backend):
    """List collecting every SQL statement run on the backend from now on."""
    seen = []
    backend.conn.set_trace_callback(seen.append)
    return seen


@pytest.fixture
def lexicon(backend):
    """Empty lexicon over the in-memory backend."""
    with SQLLexicon.from_backend(backend) as lx:
        yield lx


@pytest.fixture
def seeded_lexicon(lexicon):
    """Lexicon holding the five Hindi seed words."""
    lexicon.add(list(SEED_WORDS))
    return lexicon


def count_words(conn, word=None):
    if word is None:
        return conn.execute("SELECT COUNT(*) FROM lexicon").fetchone()[0]
    return conn.execute(
        "SELECT COUNT(*) FROM lexicon WHERE word = ?", (word,)
    ).fetchone()[0]


class FlakyConnection:
    """Connection proxy whose statements fail when a parameter contains a ``fail_on`` token."""

    def __init__(self, conn, fail_on=(), fail_inserts_after=None):
        self._conn = conn
        self.fail_on = set(fail_on)
        self.fail_inserts_after = fail_inserts_after
        self.inserts = 0
        self.rollbacks = 0

    def cursor(self):
        return _FlakyCursor(self, self._conn.cursor())

    def commit(self):
        self._conn.commit()

    def rollback(self):
        self.rollbacks += 1
        self._conn.rollback()

    def close(self):
        self._conn.close()


class _FlakyCursor:
    def __init__(self, owner, cur):
        self._owner = owner
        self._cur = cur

    def execute(self, sql, params=()):
        owner = self._owner
        if any(token in str(p) for p in params for token in owner.fail_on):
            raise sqlite3.OperationalError(f"simulated failure for {params!r}")
        if sql.startswith("INSERT"):
            owner.inserts += 1
            if owner.fail_inserts_after is not None and owner.inserts > owner.fail_inserts_after:
                raise sqlite3.OperationalError("simulated insert failure")
        return self._cur.execute(sql, params)

    def fetchone(self):
        return self._cur.fetchone()

    def fetchall(self):
        return self._cur.fetchall()

    def close(self):
        self._cur.close()
