"""
Lexical analyzer for the Prose programming language.

This module converts raw source text into the token stream consumed by
`prose.prose_parser`:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    LexError: Raised for malformed lexemes and inconsistent indentation.

Features:
    - Skips inline whitespace and `#` comments
    - Emits NEWLINE at the end of every non-blank line
    - Tracks an indentation stack and emits INDENT / DEDENT markers
    - Recognizes:
        * Keywords (`let`, `be`, `show`, `when`, `then`, `otherwise`, `define`, `with`, `end`)
        * Identifiers
        * Numbers (integer and decimal, valued as float)
        * Strings (single or double quoted, with escape sequences)
        * Arithmetic and comparison operators (longest match)

Raises:
    LexError: If a malformed number, unterminated string, or a dedent to an
        unknown indentation level is encountered.

Example:
    >>> Lexer(CharacterStream("show 42")).tokenize()
    [Token(SHOW, show), Token(NUMBER, 42.0), Token(NEWLINE, \\n), Token(EOF, EOF)]

Exports:
    - CharacterStream
    - LexError
    - Lexer
    - Token
    - tokenize
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from prose import prose_constants as C

logger = logging.getLogger(__name__)

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"', "'": "'"}


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9" and len(ch) == 1


class LexError(SyntaxError):
    """Raised when the source text cannot be tokenized.

    Attributes:
        line (int): Line where the problem was detected.
        col (int): Column where the problem was detected.
    """

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        super().__init__(f"{message} at line {line}, col {col}")
        self.line = line
        self.col = col


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character `offset` places ahead, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Prose language.

    Attributes:
        type (str): The token kind (e.g. 'IDENT', 'NUMBER', 'INDENT', 'EOF').
        value (Any): The payload: identifier name, float, string text, or the lexeme.
        line (int): The 1-based line number where the token appears (0 if synthesized).
        col (int): The 1-based column number where the token starts (0 if synthesized).
    """

    __slots__ = ("type", "value", "line", "col")

    def __init__(self, type_: str, value: Any = None, line: int = 0, col: int = 0):
        object.__setattr__(self, "type", type_)
        object.__setattr__(self, "value", type_ if value is None else value)
        object.__setattr__(self, "line", line)
        object.__setattr__(self, "col", col)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Token is immutable")

    def __repr__(self) -> str:
        value = self.value
        if isinstance(value, str):
            value = value.encode("unicode_escape").decode("ascii")
        return f"Token({self.type}, {value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the Prose language.

    Produces one token per `next_token()` call. Indentation changes can yield
    several markers at once (one DEDENT per closed level), so those are queued
    and handed out on subsequent calls.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        indent_stack (list[int]): Open indentation widths, outermost first.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.indent_stack: list[int] = [0]
        self.pending: deque[Token] = deque()
        self.at_line_start = True
        self.line_has_content = False
        self.finished = False

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips inline whitespace and comments, stopping at a newline."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def read_indentation(self) -> None:
        """Measures the leading width of the next logical line and queues INDENT/DEDENT markers.

        Blank and comment-only lines are consumed entirely and do not affect
        the indentation stack.
        """
        while True:
            width = 0
            while not self.stream.end_of_file() and self.peek() in " \t\r":
                ch = self.advance()
                if ch == " ":
                    width += 1
                elif ch == "\t":
                    width += C.TAB_WIDTH
            if self.peek() == "#":
                self.skip_comment()
            if self.peek() == "\n":
                self.advance()
                continue
            break

        self.at_line_start = False
        if self.stream.end_of_file():
            return

        line, col = self.stream.line, self.stream.column
        top = self.indent_stack[-1]
        if width > top:
            self.indent_stack.append(width)
            self.pending.append(Token(C.INDENT, width, line, col))
        elif width < top:
            while width < self.indent_stack[-1]:
                self.indent_stack.pop()
                self.pending.append(Token(C.DEDENT, width, line, col))
            if width != self.indent_stack[-1]:
                raise LexError("Inconsistent dedent", line, col)

    def finish(self) -> Token:
        """Queues the trailing NEWLINE, closing DEDENTs and EOF."""
        line, col = self.stream.line, self.stream.column
        if self.line_has_content:
            self.pending.append(Token(C.NEWLINE, "\n", line, col))
            self.line_has_content = False
        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self.pending.append(Token(C.DEDENT, 0, line, col))
        self.pending.append(Token(C.EOF, C.EOF, line, col))
        self.finished = True
        return self.pending.popleft()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position."""
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(C.MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in C.OPERATORS:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(C.OPERATORS[max_token], max_token, line, col)

        return None

    def read_number(self, line: int, col: int) -> Token:
        num = ""
        has_dot = False
        while not self.stream.end_of_file() and (
            _is_digit(self.peek()) or self.peek() == "."
        ):
            if self.peek() == ".":
                if has_dot:
                    raise LexError("Invalid number format", line, col)
                has_dot = True
            num += self.advance()
        return Token(C.NUMBER, float(num), line, col)

    def read_string(self, line: int, col: int) -> Token:
        quote = self.advance()
        val = ""
        while not self.stream.end_of_file() and self.peek() not in (quote, "\n"):
            if self.peek() == "\\":
                self.advance()
                if self.stream.end_of_file():
                    break
                esc = self.advance()
                val += _ESCAPES.get(esc, "\\" + esc)
            else:
                val += self.advance()
        if self.peek() == quote:
            self.advance()
            return Token(C.STRING, val, line, col)
        raise LexError("Unterminated string", line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token or inconsistent dedent is encountered.
        """
        if self.pending:
            return self.pending.popleft()
        if self.finished:
            return Token(C.EOF, C.EOF, self.stream.line, self.stream.column)

        if self.at_line_start:
            self.read_indentation()
            if self.pending:
                return self.pending.popleft()

        self.skip_whitespace()

        if self.stream.end_of_file():
            return self.finish()

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        if ch == "\n":
            self.advance()
            self.at_line_start = True
            self.line_has_content = False
            return Token(C.NEWLINE, "\n", line, col)

        self.line_has_content = True

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            word = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                word += self.advance()
            if word in C.KEYWORDS:
                return Token(C.KEYWORDS[word], word, line, col)
            return Token(C.IDENT, word, line, col)

        # 2. Number
        if _is_digit(ch):
            return self.read_number(line, col)

        # 3. String
        if ch in ('"', "'"):
            return self.read_string(line, col)

        # 4. Operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character; the parser decides what to do with it
        return Token(C.ERROR, self.advance(), line, col)

    def tokenize(self) -> list[Token]:
        """Runs the lexer to completion. The returned list always ends with EOF."""
        tokens: list[Token] = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type == C.EOF:
                break
        logger.debug("tokenized %d tokens", len(tokens))
        return tokens


def tokenize(source: str) -> list[Token]:
    """Tokenizes a complete source string."""
    return Lexer(CharacterStream(source)).tokenize()


__all__ = ["CharacterStream", "LexError", "Lexer", "Token", "tokenize"]
