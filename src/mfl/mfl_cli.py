"""
MFL CLI Entrypoint.

This module provides the command-line interface for parsing MFL source code and
displaying the resulting syntax tree.

Features:
    - Read source from `.mfl` files or inline strings.
    - Lex and parse the code, printing the tree in indented or JSON form.
    - Dump the raw token stream for debugging.
    - Launch an interactive REPL.

Example usage:
    mfl program.mfl
    mfl -s "val x := 1 + 2;"
    mfl program.mfl --json
    mfl -s "1 < 2;" --tokens
    mfl --repl

Functions:
    configure_logging(level: int) -> None:
        Attaches a stderr handler to the `mfl` logger.

    run_mfl(source: str, is_string: bool = False, as_json: bool = False,
            tokens: bool = False) -> None:
        Executes the MFL pipeline (read → lex → parse → display).

    main() -> int:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import json
import logging
import sys

from mfl.mfl_errors import ParseError
from mfl.mfl_lexer import tokenize
from mfl.mfl_parser import Parser

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("mfl")


def configure_logging(level: int = logging.WARNING) -> None:
    """Route `mfl` log records to stderr at `level`, replacing earlier handlers."""
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)


def run_mfl(
    source: str,
    is_string: bool = False,
    as_json: bool = False,
    tokens: bool = False,
) -> None:
    """
    Run the MFL toolchain: read, lex, parse, and print the syntax tree.

    Args:
        source (str): The MFL source code or path to a `.mfl` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        as_json (bool): If True, prints the tree as JSON instead of the indented form.
        tokens (bool): If True, prints the token stream instead of parsing.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.mfl'.
        ParseError: If the source is not a valid MFL program.
    """
    if not is_string and not source.endswith(".mfl"):
        raise ValueError("Only .mfl files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if tokens:
        for tok in tokenize(source):
            print(f"{tok.line}:{tok.col}\t{tok!r}")
        return

    tree = Parser.from_string(source).parse()

    if as_json:
        print(json.dumps(tree.to_dict(), indent=2))
    else:
        tree.display()


def main() -> int:
    """
    Entry point for the MFL CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise parses the given file or string and prints its tree.

    Returns:
        int: Process exit status; 1 when the source cannot be read or parsed.
    """
    if len(sys.argv) == 1:
        from mfl.mfl_repl import start_repl

        configure_logging(logging.CRITICAL)
        start_repl()
        return 0
    parser = argparse.ArgumentParser(
        prog="mfl", description="Parse MFL source and display its syntax tree."
    )
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream and stop"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress diagnostic logging"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of parsing a source",
    )

    args = parser.parse_args()

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.CRITICAL)
    else:
        configure_logging(logging.WARNING)

    if args.repl or args.source is None:
        from mfl.mfl_repl import start_repl

        # The REPL reports errors itself; log records would duplicate them.
        if not args.verbose:
            configure_logging(logging.CRITICAL)
        start_repl(as_json=args.as_json, verbose=args.verbose)
        return 0

    try:
        run_mfl(
            source=args.source,
            is_string=args.string,
            as_json=args.as_json,
            tokens=args.tokens,
        )
    except (ParseError, OSError, UnicodeDecodeError) as e:
        print(f"[error] >>> {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
