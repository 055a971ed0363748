"""Lexicon contract and its SQL-backed implementation."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol, TypeVar

from cool_lexicon import dialects as _sql
from cool_lexicon.db import BackendConnection, cursor
from cool_lexicon.dialects import Dialect
from cool_lexicon.exceptions import (
    InvalidArgumentError,
    LexiconClosedError,
    QueryError,
)
from cool_lexicon.models import OperationResult

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])

# Rows per INSERT statement; keeps SQLite under its bound-variable limit
INSERT_CHUNK_SIZE = 500

LookupResult = dict[str, OperationResult[bool]]
SearchResult = dict[str, OperationResult[list[str]]]


class Lexicon(Protocol):
    """A collection of words.

    Unlike a dictionary, a lexicon stores only words and no meaning.
    Every batch operation requires at least one input and raises
    :class:`InvalidArgumentError` otherwise.
    """

    def lookup(self, words: Iterable[str]) -> LookupResult:
        """Map each word to whether it exists in the lexicon."""
        ...

    def get_all_words_starting_with(self, substrings: Iterable[str]) -> SearchResult:
        """Map each substring to the stored words starting with it.

        Substrings without matches are left out of the mapping.
        """
        ...

    def get_all_words_ending_with(self, substrings: Iterable[str]) -> SearchResult:
        """Map each substring to the stored words ending with it."""
        ...

    def add(self, words: Iterable[str]) -> None:
        """Add all words at once; existing words are skipped."""
        ...

    def close(self) -> None:
        """Release the lexicon's resources. Single use."""
        ...


def _requires_open(method: _F) -> _F:
    """Decorator: refuse to run once the lexicon has been closed."""

    @functools.wraps(method)
    def wrapper(self: SQLLexicon, *args: Any, **kwargs: Any) -> Any:
        if self._conn is None:
            raise LexiconClosedError(
                f"{method.__name__}() called on a closed lexicon"
            )
        return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _as_batch(values: Iterable[str] | str | None, what: str) -> list[str]:
    if values is None:
        raise InvalidArgumentError(f"list of {what} is nil or empty")
    batch = [values] if isinstance(values, str) else list(values)
    if not batch:
        raise InvalidArgumentError(f"list of {what} is nil or empty")
    for value in batch:
        if not isinstance(value, str):
            raise InvalidArgumentError(f"{what} must be strings, got {value!r}")
    return batch


class SQLLexicon:
    """Lexicon stored in a single SQL table, for MySQL and SQLite dialects.

    The lexicon owns ``conn`` from construction until :meth:`close`.
    ``driver_errors`` are the exception classes the driver raises for a
    failed statement; they are reported as :class:`QueryError`. At least
    one class is required.
    """

    def __init__(
        self,
        conn: Any,
        dialect: Dialect,
        driver_errors: tuple[type[BaseException], ...],
    ) -> None:
        if conn is None:
            raise InvalidArgumentError("database connection is None")
        if not driver_errors:
            raise InvalidArgumentError("driver error classes are required")
        self._conn = conn
        self._dialect = dialect
        self._driver_errors = driver_errors
        self._exists_sql = _sql.build_exists_statement(dialect)
        self._search_sql = _sql.build_search_statement(dialect)

    @classmethod
    def from_backend(cls, backend: BackendConnection) -> SQLLexicon:
        return cls(backend.conn, backend.dialect, backend.driver_errors)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def closed(self) -> bool:
        return self._conn is None

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is None:
            logger.debug("close() on an already closed lexicon ignored")
            return
        conn, self._conn = self._conn, None
        conn.close()

    def __enter__(self) -> SQLLexicon:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @_requires_open
    def lookup(self, words: Iterable[str]) -> LookupResult:
        batch = _as_batch(words, "words")
        logger.debug("lookup of %d word(s)", len(batch))

        result: LookupResult = {}
        for word in batch:
            try:
                with cursor(self._conn) as cur:
                    cur.execute(self._exists_sql, (word,))
                    row = cur.fetchone()
            except self._driver_errors as e:
                logger.warning("lookup failed for %r: %s", word, e)
                result[word] = OperationResult(
                    False, QueryError(f"lookup of {word!r} failed: {e}")
                )
                continue
            result[word] = OperationResult(bool(row[0]) if row else False)
        return result

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    @_requires_open
    def get_all_words_starting_with(self, substrings: Iterable[str]) -> SearchResult:
        return self._search(
            _as_batch(substrings, "substrings"), _sql.prefix_pattern, "starts with"
        )

    @_requires_open
    def get_all_words_ending_with(self, substrings: Iterable[str]) -> SearchResult:
        return self._search(
            _as_batch(substrings, "substrings"), _sql.suffix_pattern, "ends with"
        )

    def _search(
        self,
        substrings: list[str],
        to_pattern: Callable[[str], str],
        label: str,
    ) -> SearchResult:
        logger.debug("%s search for %d substring(s)", label, len(substrings))

        result: SearchResult = {}
        for substring in substrings:
            try:
                with cursor(self._conn) as cur:
                    cur.execute(self._search_sql, (to_pattern(substring),))
                    words = [row[0] for row in cur.fetchall()]
            except self._driver_errors as e:
                # Skip and continue
                logger.warning("%s search failed for %r: %s", label, substring, e)
                result[substring] = OperationResult(
                    [], QueryError(f"{label} search for {substring!r} failed: {e}")
                )
                continue
            if words:
                result[substring] = OperationResult(words)
        return result

    # ------------------------------------------------------------------
    # Add
    # ------------------------------------------------------------------

    @_requires_open
    def add(self, words: Iterable[str]) -> None:
        batch = _as_batch(words, "words")
        logger.debug("adding %d word(s)", len(batch))

        try:
            with cursor(self._conn) as cur:
                for start in range(0, len(batch), INSERT_CHUNK_SIZE):
                    chunk = batch[start:start + INSERT_CHUNK_SIZE]
                    cur.execute(
                        _sql.build_insert_statement(self._dialect, len(chunk)),
                        tuple(chunk),
                    )
            self._conn.commit()
        except self._driver_errors as e:
            self._conn.rollback()
            raise QueryError(f"adding {len(batch)} word(s) failed: {e}") from e
