"""Suppliers that turn a raw CLI value into a batch of words."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from cool_lexicon.exceptions import InputError, NoInputValueError

WordSupplier = Callable[[str], list[str]]


def words_from_value(raw: str) -> list[str]:
    """Treat the raw value itself as a single word."""
    value = raw.strip()
    if not value:
        raise NoInputValueError("raw value is empty or blank")
    return [value]


def words_from_file(raw: str) -> list[str]:
    """Treat the raw value as a path to a file of whitespace-separated words."""
    path = raw.strip()
    if not path:
        raise NoInputValueError("raw value is empty or blank")
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"input: file is corrupt or does not exist: {path}: {e}") from e
    return text.split()


def get_supplier(file_based: bool) -> WordSupplier:
    return words_from_file if file_based else words_from_value
