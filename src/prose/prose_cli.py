"""
Prose CLI Entrypoint.

This module provides the command-line interface for inspecting Prose source
code: it tokenizes and parses a program and prints the resulting AST.

Features:
    - Read source from `.prose` files or inline strings.
    - Print the AST as JSON (default) or as a Python repr.
    - Dump the token stream instead of parsing.
    - Report read failures and the first syntax error on stderr with a non-zero exit status.

Example usage:
    prose hello.prose
    prose -s "let x be 1 + 2"
    prose hello.prose --tokens
    prose hello.prose --format repr --verbose

Functions:
    run_prose(source: str, is_string: bool = False, fmt: str = "json", tokens_only: bool = False,
              indent: int = 2) -> Program | None:
        Executes the pipeline (read → lex → parse → print).

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments, configures logging and invokes `run_prose`.
"""

import argparse
import json
import logging
import sys

from prose.prose_ast import Program
from prose.prose_lexer import CharacterStream, LexError, Lexer
from prose.prose_parser import ParseError, Parser

logger = logging.getLogger(__name__)


def run_prose(
    source: str,
    is_string: bool = False,
    fmt: str = "json",
    tokens_only: bool = False,
    indent: int = 2,
) -> Program | None:
    """
    Run the Prose front end: read, lex, parse, and print.

    Args:
        source (str): Prose source code or path to a `.prose` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        fmt (str): Output format for the AST, 'json' or 'repr'. Defaults to 'json'.
        tokens_only (bool): If True, prints the token stream and skips parsing.
        indent (int): JSON indentation width.

    Returns:
        The parsed Program, or None when `tokens_only` is set.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.prose'.
        LexError: If the source cannot be tokenized.
        ParseError: On the first syntax error.
    """
    if not is_string and not source.endswith(".prose"):
        raise ValueError("Only .prose files are supported.")
    # 1. Read source
    if not is_string:
        logger.debug("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    tokens = Lexer(CharacterStream(source, 0, 1, 1)).tokenize()

    if tokens_only:
        for tok in tokens:
            print(f"{tok.line}:{tok.col}\t{tok.type}\t{tok.value!r}")
        return None

    # 3. Parsing
    program = Parser(tokens).parse()

    # 4. Output result
    if fmt == "repr":
        print(repr(program))
    else:
        print(json.dumps(program.to_dict(), indent=indent))
    return program


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Prose CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print tokens instead of the AST.
        - `-f`, `--format`: AST output format ('json' or 'repr'), default is 'json'.
        - `--indent`: JSON indentation width.
        - `-v`, `--verbose`: Enable debug logging.

    Returns:
        Process exit status: 0 on success, 1 on a read or syntax error.
    """
    parser = argparse.ArgumentParser(prog="prose")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream and exit"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=("json", "repr"),
        default="json",
        help="AST output format (default: json)",
    )
    parser.add_argument(
        "--indent", type=int, default=2, help="JSON indentation width (default: 2)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )

    try:
        run_prose(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            tokens_only=args.tokens,
            indent=args.indent,
        )
    except (LexError, ParseError, OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    sys.exit(main())
