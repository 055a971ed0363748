"""Consumers that report the per-item results of a lexicon operation."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from cool_lexicon.exceptions import OutputError
from cool_lexicon.models import OperationResult

logger = logging.getLogger(__name__)

Output = Mapping[str, OperationResult[Any]]


class OutputConsumer(Protocol):
    def consume(self, operation: str, output: Output, consume_errors: bool = True) -> None:
        ...


def format_lines(output: Output, consume_errors: bool = True) -> list[str]:
    """Render one ``key : value`` line per result.

    Failed items become ``key : error : message`` lines, or are dropped
    when ``consume_errors`` is false.
    """
    lines = []
    for key, result in output.items():
        if result.error is not None:
            if consume_errors:
                lines.append(f"{key} : error : {result.error}")
            continue
        lines.append(f"{key} : {json.dumps(result.value, ensure_ascii=False)}")
    return lines


class LogConsumer:
    """Send results to the log, which is the terminal unless configured otherwise."""

    def consume(self, operation: str, output: Output, consume_errors: bool = True) -> None:
        lines = format_lines(output, consume_errors)
        if not lines:
            logger.info("%s result: no matches", operation)
            return
        for line in lines:
            logger.info("%s result: %s", operation, line)


class FileConsumer:
    """Write results to ``<folder>/<operation>.txt``."""

    def __init__(self, folder: str | Path) -> None:
        self.folder = Path(folder)

    def path_for(self, operation: str) -> Path:
        return self.folder / f"{operation}.txt"

    def consume(self, operation: str, output: Output, consume_errors: bool = True) -> None:
        path = self.path_for(operation)
        lines = format_lines(output, consume_errors)
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
        except OSError as e:
            raise OutputError(f"cannot write {path}: {e}") from e
        logger.info("result of %s : %s", operation, path)
