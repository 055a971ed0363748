"""Domain model dataclasses and enums for cool-lexicon."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from cool_lexicon.exceptions import LexiconError

V = TypeVar("V")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class BackendType(str, Enum):
    """Kinds of word store a lexicon can be backed by."""

    MYSQL = "mysql"
    LIBSQL = "libsql"
    LIBSQL_TOKEN = "libsql-token"
    SQLITE = "sqlite"

    @property
    def is_remote(self) -> bool:
        return self is not BackendType.SQLITE


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OperationResult(Generic[V]):
    """Outcome of one item in a batch operation.

    ``value`` is meaningful only when ``error`` is None. A failed item
    keeps a neutral value (``False`` or ``[]``) so callers can still
    iterate over results without special-casing.
    """

    value: V
    error: LexiconError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
