"""cool-lexicon: a word store with lookup, prefix/suffix search and bulk add."""

__version__ = "0.4.0"

from cool_lexicon.config import LexiconConfig, load_config
from cool_lexicon.dialects import Dialect
from cool_lexicon.exceptions import (
    ConfigError,
    ConnectionFailureError,
    InputError,
    InvalidArgumentError,
    LexiconClosedError,
    LexiconError,
    MigrationError,
    NoInputValueError,
    OutputError,
    QueryError,
)
from cool_lexicon.factory import get_instance
from cool_lexicon.lexicon import Lexicon, SQLLexicon
from cool_lexicon.models import BackendType, OperationResult

__all__ = [
    "__version__",
    # Lexicon
    "Lexicon",
    "SQLLexicon",
    "get_instance",
    # Configuration
    "LexiconConfig",
    "load_config",
    # Models and enums
    "BackendType",
    "Dialect",
    "OperationResult",
    # Exceptions
    "LexiconError",
    "InvalidArgumentError",
    "ConfigError",
    "ConnectionFailureError",
    "QueryError",
    "MigrationError",
    "LexiconClosedError",
    "InputError",
    "NoInputValueError",
    "OutputError",
]
