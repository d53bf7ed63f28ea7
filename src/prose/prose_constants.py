"""
Token kinds and lexical tables for the Prose language.

Token kinds are plain uppercase strings so they print cleanly in error
messages (``Expected BE, found NUMBER``) and compare by value.

Exports:
    - KEYWORDS: word → token kind for reserved words
    - OPERATORS: symbol → token kind for operators (longest match wins)
    - ARITH_ADD_OPS / ARITH_MUL_OPS / COMPARISON_OPS: operator kinds per precedence tier
    - TAB_WIDTH: indentation width counted for a tab character
"""

EOF = "EOF"
NEWLINE = "NEWLINE"
INDENT = "INDENT"
DEDENT = "DEDENT"

IDENT = "IDENT"
NUMBER = "NUMBER"
STRING = "STRING"
ERROR = "ERROR"

LET = "LET"
BE = "BE"
SHOW = "SHOW"
WHEN = "WHEN"
THEN = "THEN"
OTHERWISE = "OTHERWISE"
DEFINE = "DEFINE"
WITH = "WITH"
END = "END"

PLUS = "PLUS"
SUB = "SUB"
MULT = "MULT"
DIV = "DIV"

GT = "GT"
LT = "LT"
GE = "GE"
LE = "LE"
EQ = "EQ"
NE = "NE"

KEYWORDS: dict[str, str] = {
    "let": LET,
    "be": BE,
    "show": SHOW,
    "when": WHEN,
    "then": THEN,
    "otherwise": OTHERWISE,
    "define": DEFINE,
    "with": WITH,
    "end": END,
}

OPERATORS: dict[str, str] = {
    "+": PLUS,
    "-": SUB,
    "*": MULT,
    "/": DIV,
    ">": GT,
    "<": LT,
    ">=": GE,
    "<=": LE,
    "==": EQ,
    "!=": NE,
}

ARITH_ADD_OPS: frozenset[str] = frozenset({PLUS, SUB})
ARITH_MUL_OPS: frozenset[str] = frozenset({MULT, DIV})
COMPARISON_OPS: frozenset[str] = frozenset({GT, LT, GE, LE, EQ, NE})

# Kinds that carry a payload distinct from their lexeme
PAYLOAD_TOKENS: frozenset[str] = frozenset({IDENT, NUMBER, STRING, ERROR})

TAB_WIDTH = 4

MAX_OPERATOR_LEN = max(len(op) for op in OPERATORS)
