"""Custom exception hierarchy for cool-lexicon."""

from __future__ import annotations


class LexiconError(Exception):
    """Base exception for all cool-lexicon errors."""


class InvalidArgumentError(LexiconError):
    """Nil or empty word list passed to a batch operation."""


class ConfigError(LexiconError):
    """Missing or invalid configuration (bad type, missing credentials)."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message)


class ConnectionFailureError(LexiconError):
    """Backend cannot be reached, or its driver is not installed."""


class QueryError(LexiconError):
    """A single SQL statement failed."""


class MigrationError(LexiconError):
    """Schema setup failed or the schema is newer than this code."""


class LexiconClosedError(LexiconError):
    """Operation attempted on a closed lexicon."""


class InputError(LexiconError):
    """Words could not be read from the given input source."""


class NoInputValueError(InputError):
    """Raw input value is empty or blank."""


class OutputError(LexiconError):
    """Results could not be written to the output destination."""
