"""
Prose Language Parser

Parses Prose token streams into structured abstract syntax trees (ASTs).

This module implements the recursive-descent parser that turns the flat list
of `Token` objects produced by `prose.prose_lexer` into a `Program` of typed
statement and expression nodes from `prose.prose_ast`.

Supported Constructs
--------------------
- Expressions (infix, all levels left-associative, tightest last):
    * Comparison: `>`, `<`, `>=`, `<=`, `==`, `!=`
    * Additive: `+`, `-`
    * Multiplicative: `*`, `/`
    * Primary: number, string, identifier
- Statements:
    * Binding: `let x be <expr>`
    * Output: `show <expr>`
    * Conditional: `when <expr> then` <block> [`otherwise` <block>]
    * Function definition: `define f [with a b ...]` <block> [`end`]
    * Bare expression statements

Blocks are delimited by INDENT / DEDENT tokens. A block header with no
indented body yields an empty block. Function bodies additionally accept an
`end` keyword after the body; `when` blocks do not.

Parser Behavior
---------------
- Fail-fast: the first syntax error raises `ParseError` and aborts the parse.
  No partial tree is returned and there is no resynchronization.
- Token kinds are compared by type only; payloads (identifier names, numeric
  values) never affect matching.
- Reading past the end of the token list yields a synthesized EOF token.
- Nested blocks recurse through `parse_statement`, so nesting depth is bounded
  by the interpreter recursion limit (a few hundred levels by default). Going
  deeper raises `RecursionError`.

Entry Points
------------
- `Parser(tokens).parse()`: Parse a full program.
- `Parser(tokens).parse_expression()`: Parse a single expression.
- `parse_tokens(tokens)` / `parse_source(text)`: Module-level shortcuts.

Raises
------
ParseError
    Raised when an expected token kind is missing or a token cannot start an
    expression.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from prose import prose_constants as C
from prose.prose_ast import (
    BinaryOp,
    BinaryOperator,
    Expression,
    ExpressionStatement,
    FunctionDef,
    Identifier,
    Let,
    Number,
    Program,
    Show,
    Statement,
    String,
    When,
)
from prose.prose_lexer import Token, tokenize

logger = logging.getLogger(__name__)

THEN_TERMINATORS = frozenset({C.DEDENT, C.OTHERWISE, C.EOF})
OTHERWISE_TERMINATORS = frozenset({C.DEDENT, C.EOF})
BODY_TERMINATORS = frozenset({C.END, C.DEDENT, C.EOF})


class ParseError(SyntaxError):
    """Raised on the first syntax error found while parsing.

    Attributes:
        message (str): The error text without position information.
        token (Token): The token the parser was looking at.
        line (int): Line of the offending token (0 when unknown).
        col (int): Column of the offending token (0 when unknown).
    """

    def __init__(self, message: str, token: Token) -> None:
        self.message = message
        self.token = token
        self.line = token.line
        self.col = token.col
        if token.line:
            super().__init__(f"{message} (line {token.line}, col {token.col})")
        else:
            super().__init__(message)


def describe(tok: Token) -> str:
    """Short printable form of a token for error messages, e.g. `NUMBER (5.0)`."""
    if tok.type in C.PAYLOAD_TOKENS:
        return f"{tok.type} ({tok.value!r})"
    return tok.type


class TokenStream:
    """
    Read cursor over a token list.

    The only owner of the read position. Past the end of the list, `current()`
    returns a synthesized EOF token instead of raising, so callers may advance
    freely.

    Attributes:
        tokens (Sequence[Token]): The tokens being read.
        position (int): Index of the current token; never exceeds `len(tokens)`.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.position = 0
        if tokens:
            last = tokens[-1]
            self._eof = Token(C.EOF, C.EOF, last.line, last.col)
        else:
            self._eof = Token(C.EOF, C.EOF)

    def current(self) -> Token:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return self._eof

    def peek(self, offset: int = 1) -> Token:
        index = self.position + offset
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return self._eof

    def advance(self) -> Token:
        """Moves forward one token unless already past the end; returns the new current token."""
        if self.position < len(self.tokens):
            self.position += 1
        return self.current()

    def check(self, *types: str) -> bool:
        return self.current().type in types

    def at_end(self) -> bool:
        return self.current().type == C.EOF

    def expect(self, type_: str, message: str | None = None) -> Token:
        """Consumes the current token if its kind is `type_`.

        Args:
            type_: The required token kind.
            message: Replaces the default "Expected <KIND>" wording.

        Returns:
            The consumed token.

        Raises:
            ParseError: If the kind does not match. The position is left unchanged.
        """
        tok = self.current()
        if tok.type != type_:
            raise ParseError(
                f"{message or f'Expected {type_}'}, found {describe(tok)}", tok
            )
        self.advance()
        return tok

    def skip_newlines(self) -> None:
        while self.current().type == C.NEWLINE:
            self.advance()


class Parser:
    """
    Prose Parser Class

    Transforms a list of lexical tokens into a `Program`. One instance parses
    one token list; the dispatcher keeps no state between statements.

    Attributes
    ----------
    stream : TokenStream
        Cursor over the input tokens.

    Methods
    -------
    parse() -> Program
        Parse a complete program.
    parse_statement() -> Statement
        Parse one statement, dispatching on the lookahead kind.
    parse_block(terminators, keyword_terminator=None) -> tuple[Statement, ...]
        Parse an optional INDENT ... DEDENT block.
    parse_expression() -> Expression
        Parse one expression (comparison level).
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.stream = TokenStream(tokens)

    def parse(self) -> Program:
        """Parse a full Prose program."""
        logger.debug("parsing %d tokens", len(self.stream.tokens))
        statements: list[Statement] = []
        self.stream.skip_newlines()

        while not self.stream.at_end():
            statements.append(self.parse_statement())
            self.stream.skip_newlines()

        logger.debug("parsed %d top-level statements", len(statements))
        return Program(tuple(statements), line=1, col=1)

    def parse_statement(self) -> Statement:
        """Parse a single statement, top-level or inside a block."""
        tok = self.stream.current()
        logger.debug("statement %s at %d:%d", tok.type, tok.line, tok.col)

        if tok.type == C.LET:
            return self.parse_let()
        if tok.type == C.SHOW:
            return self.parse_show()
        if tok.type == C.WHEN:
            return self.parse_when()
        if tok.type == C.DEFINE:
            return self.parse_function_def()

        expr = self.parse_expression()
        return ExpressionStatement(expr, line=tok.line, col=tok.col)

    def parse_let(self) -> Let:
        """Parse `let <identifier> be <expression>`."""
        let_tok = self.stream.expect(C.LET)
        name_tok = self.stream.expect(C.IDENT, "Expected identifier after 'let'")
        self.stream.expect(C.BE)
        value = self.parse_expression()
        return Let(name_tok.value, value, line=let_tok.line, col=let_tok.col)

    def parse_show(self) -> Show:
        show_tok = self.stream.expect(C.SHOW)
        value = self.parse_expression()
        return Show(value, line=show_tok.line, col=show_tok.col)

    def parse_when(self) -> When:
        """Parse a `when` conditional with an optional `otherwise` branch."""
        when_tok = self.stream.expect(C.WHEN)
        condition = self.parse_expression()
        self.stream.expect(C.THEN)
        self.stream.skip_newlines()

        then_block = self.parse_block(THEN_TERMINATORS)

        otherwise_block: tuple[Statement, ...] | None = None
        if self.stream.check(C.OTHERWISE):
            self.stream.advance()
            self.stream.skip_newlines()
            otherwise_block = self.parse_block(OTHERWISE_TERMINATORS)

        return When(
            condition,
            then_block,
            otherwise_block,
            line=when_tok.line,
            col=when_tok.col,
        )

    def parse_function_def(self) -> FunctionDef:
        """Parse `define <name> [with <param> ...]` and its body."""
        define_tok = self.stream.expect(C.DEFINE)
        name_tok = self.stream.expect(
            C.IDENT, "Expected function name after 'define'"
        )

        parameters: list[str] = []
        if self.stream.check(C.WITH):
            self.stream.advance()
            while self.stream.check(C.IDENT):
                parameters.append(self.stream.current().value)
                self.stream.advance()

        self.stream.skip_newlines()
        body = self.parse_block(BODY_TERMINATORS, keyword_terminator=C.END)

        return FunctionDef(
            name_tok.value,
            tuple(parameters),
            body,
            line=define_tok.line,
            col=define_tok.col,
        )

    def parse_block(
        self, terminators: Iterable[str], keyword_terminator: str | None = None
    ) -> tuple[Statement, ...]:
        """Parse an indented block of statements.

        Without a leading INDENT the block is empty and nothing is consumed
        (apart from `keyword_terminator`, see below). Otherwise statements are
        parsed until the current kind is in `terminators`, and a closing DEDENT
        is consumed if present. Terminators other than DEDENT are left for the
        caller.

        Args:
            terminators: Token kinds that end the statement loop. EOF always does.
            keyword_terminator: A keyword kind (e.g. END) consumed after the
                block if it is the current token.
        """
        stop = frozenset(terminators) | {C.EOF}
        statements: list[Statement] = []

        if self.stream.check(C.INDENT):
            self.stream.advance()
            while self.stream.current().type not in stop:
                statements.append(self.parse_statement())
                self.stream.skip_newlines()
            if self.stream.check(C.DEDENT):
                self.stream.advance()

        if keyword_terminator is not None and self.stream.check(keyword_terminator):
            self.stream.advance()

        return tuple(statements)

    def parse_expression(self) -> Expression:
        """Parse an expression. The single entry point wherever one is required."""
        return self.parse_comparison()

    def parse_comparison(self) -> Expression:
        return self._parse_binary(self.parse_additive, C.COMPARISON_OPS)

    def parse_additive(self) -> Expression:
        return self._parse_binary(self.parse_multiplicative, C.ARITH_ADD_OPS)

    def parse_multiplicative(self) -> Expression:
        return self._parse_binary(self.parse_primary, C.ARITH_MUL_OPS)

    def _parse_binary(
        self, operand: Callable[[], Expression], operators: frozenset[str]
    ) -> Expression:
        """Left fold: `operand (op operand)*` → nested BinaryOp, left-associative."""
        left = operand()
        while self.stream.current().type in operators:
            op_tok = self.stream.current()
            self.stream.advance()
            right = operand()
            left = BinaryOp(
                left,
                BinaryOperator.from_token_type(op_tok.type),
                right,
                line=left.line,
                col=left.col,
            )
        return left

    def parse_primary(self) -> Expression:
        """Parse a number, string, or identifier."""
        tok = self.stream.current()
        if tok.type == C.NUMBER:
            try:
                value = float(tok.value)
            except (TypeError, ValueError) as e:
                raise ParseError(f"Invalid number literal: {tok!r}", tok) from e
            self.stream.advance()
            return Number(value, line=tok.line, col=tok.col)
        if tok.type == C.STRING:
            self.stream.advance()
            return String(tok.value, line=tok.line, col=tok.col)
        if tok.type == C.IDENT:
            self.stream.advance()
            return Identifier(tok.value, line=tok.line, col=tok.col)
        raise ParseError(f"Unexpected token in expression: {tok!r}", tok)


def parse_tokens(tokens: Sequence[Token]) -> Program:
    """Parse an already tokenized program."""
    return Parser(tokens).parse()


def parse_source(source: str) -> Program:
    """Tokenize and parse Prose source text.

    Raises:
        LexError: If the text cannot be tokenized.
        ParseError: On the first syntax error.
    """
    return Parser(tokenize(source)).parse()


__all__ = [
    "ParseError",
    "Parser",
    "TokenStream",
    "describe",
    "parse_source",
    "parse_tokens",
]
