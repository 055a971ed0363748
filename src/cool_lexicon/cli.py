"""
Command-line interface for cool-lexicon.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, List, NamedTuple, Optional

from . import __version__
from .config import DEFAULT_CONFIG_FILE, load_config
from .exceptions import ConfigError, InputError, LexiconError, OutputError
from .factory import get_instance
from .inputs import WordSupplier, get_supplier
from .lexicon import SQLLexicon
from .outputs import FileConsumer, LogConsumer, OutputConsumer

logger = logging.getLogger("cool_lexicon")


class Operation(NamedTuple):
    """A lexicon operation selectable from the command line."""
    flag: str
    name: str
    run: Callable[[SQLLexicon, List[str], OutputConsumer], bool]


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the cool-lexicon CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    selected = [(op, getattr(args, op.flag)) for op in OPERATIONS if getattr(args, op.flag)]
    if not selected:
        parser.print_help()
        print("\n  [ERROR] no operation provided")
        return 1

    try:
        config = load_config(args.cfg)
    except ConfigError as e:
        print(f"\n  [CONFIG ERROR] {e}")
        if e.line:
            print(f"                Line: {e.line}")
        return 1
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
        return 1

    try:
        lexicon = get_instance(config, setup_check=args.check)
    except LexiconError as e:
        print(f"\n  [ERROR] {e}")
        return 1

    supplier = get_supplier(args.input_files)
    consumer: OutputConsumer = (
        FileConsumer(args.output_dir) if args.output_dir else LogConsumer()
    )

    failures = 0
    with lexicon:
        for op, raw in selected:
            if not _run(op, raw, lexicon, supplier, consumer):
                failures += 1

    return 1 if failures else 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cool-lexicon",
        description="Look up, search and add words in a lexicon database",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--cfg",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help=f"Config file location (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Create the database and apply schema migrations if required",
    )
    parser.add_argument(
        "--if",
        dest="input_files",
        action="store_true",
        help="Treat every operation value as a file containing the input words",
    )
    parser.add_argument(
        "--of",
        dest="output_dir",
        type=Path,
        help="Write each operation's result to <dir>/<operation>.txt instead of the log",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    ops = parser.add_argument_group("operations")
    ops.add_argument("--ex", metavar="WORD", help="Check if the given word exists")
    ops.add_argument("--ss", metavar="SUBSTRING", help="Find words that start with the given substring")
    ops.add_argument("--se", metavar="SUBSTRING", help="Find words that end with the given substring")
    ops.add_argument("--ad", metavar="WORD", help="Add the given word to the lexicon")

    return parser


def _run(
    op: Operation,
    raw: str,
    lexicon: SQLLexicon,
    supplier: WordSupplier,
    consumer: OutputConsumer,
) -> bool:
    """Run one operation, logging instead of raising on failure."""
    try:
        words = supplier(raw)
        return op.run(lexicon, words, consumer)
    except InputError as e:
        logger.error("could not read input for '%s' (%s): %s", op.name, raw, e)
    except OutputError as e:
        logger.error("could not write output of '%s' (%s): %s", op.name, raw, e)
    except LexiconError as e:
        logger.error("could not perform '%s' for (%s): %s", op.name, raw, e)
    return False


def _lookup(lexicon: SQLLexicon, words: List[str], consumer: OutputConsumer) -> bool:
    output = lexicon.lookup(words)
    consumer.consume("lookup", output)
    return all(r.ok for r in output.values())


def _starts_with(lexicon: SQLLexicon, words: List[str], consumer: OutputConsumer) -> bool:
    output = lexicon.get_all_words_starting_with(words)
    consumer.consume("starts_with", output)
    return all(r.ok for r in output.values())


def _ends_with(lexicon: SQLLexicon, words: List[str], consumer: OutputConsumer) -> bool:
    output = lexicon.get_all_words_ending_with(words)
    consumer.consume("ends_with", output)
    return all(r.ok for r in output.values())


def _add(lexicon: SQLLexicon, words: List[str], consumer: OutputConsumer) -> bool:
    lexicon.add(words)
    logger.info("added %d word(s)", len(words))
    return True


OPERATIONS = (
    Operation("ex", "lookup", _lookup),
    Operation("ss", "starts with", _starts_with),
    Operation("se", "ends with", _ends_with),
    Operation("ad", "add", _add),
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )


if __name__ == "__main__":
    sys.exit(main())
