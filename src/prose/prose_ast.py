"""
Defines the abstract syntax tree (AST) node types for the Prose language.

Node families:
    Expression:
        Number, String, Identifier, BinaryOp
    Statement:
        Let, Show, When, FunctionDef, ExpressionStatement
    Program:
        The root node; an ordered tuple of top-level statements.

Every node is a frozen dataclass. Child collections are tuples, so a tree is
never mutated once the parser hands it back. Each node records the `line` and
`col` of its first token; positions are excluded from equality and repr so
two trees with the same shape compare equal regardless of where they came
from.

Each node tracks:
    kind (str): The syntactic construct type (e.g. "let", "when", "binary_op").
    line (int): Source line number for error messages (0 when unknown).
    col (int): Source column number for error messages (0 when unknown).

Usage:
    This module is the parser's output format. Evaluators pattern-match on the
    node classes; tooling serializes trees with `to_dict()`.

Example:
    node = Let("x", BinaryOp(Number(1.0), BinaryOperator.ADD, Number(2.0)))
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Union

from prose import prose_constants as C

ASTDict = dict[str, Any]
"""JSON-compatible dictionary form of a node, produced by `to_dict()`."""


class BinaryOperator(enum.Enum):
    """Binary operators, valued by their source symbol."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN_OR_EQUAL = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_token_type(cls, token_type: str) -> BinaryOperator:
        """Maps an operator token kind (e.g. "PLUS") to its operator.

        Raises:
            KeyError: If `token_type` is not an operator kind.
        """
        return _BY_TOKEN_TYPE[token_type]


_BY_TOKEN_TYPE: dict[str, BinaryOperator] = {
    C.PLUS: BinaryOperator.ADD,
    C.SUB: BinaryOperator.SUBTRACT,
    C.MULT: BinaryOperator.MULTIPLY,
    C.DIV: BinaryOperator.DIVIDE,
    C.GT: BinaryOperator.GREATER_THAN,
    C.LT: BinaryOperator.LESS_THAN,
    C.GE: BinaryOperator.GREATER_THAN_OR_EQUAL,
    C.LE: BinaryOperator.LESS_THAN_OR_EQUAL,
    C.EQ: BinaryOperator.EQUAL,
    C.NE: BinaryOperator.NOT_EQUAL,
}


def _to_plain(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, BinaryOperator):
        return value.symbol
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class ASTNode:
    """
    Base class for every Prose AST node.

    Attributes:
        kind (ClassVar[str]): Node type name, fixed per subclass.
        line (int): Line of the node's first token.
        col (int): Column of the node's first token.

    Methods:
        to_dict(): Converts the node (and all descendants) into nested dicts.
    """

    kind: ClassVar[str] = "node"

    line: int = field(default=0, compare=False, repr=False, kw_only=True)
    col: int = field(default=0, compare=False, repr=False, kw_only=True)

    def to_dict(self) -> ASTDict:
        out: ASTDict = {"kind": self.kind, "line": self.line, "col": self.col}
        for f in fields(self):
            if f.name in ("line", "col"):
                continue
            out[f.name] = _to_plain(getattr(self, f.name))
        return out


# Expressions


@dataclass(frozen=True)
class Number(ASTNode):
    kind: ClassVar[str] = "number"

    value: float


@dataclass(frozen=True)
class String(ASTNode):
    kind: ClassVar[str] = "string"

    value: str


@dataclass(frozen=True)
class Identifier(ASTNode):
    kind: ClassVar[str] = "identifier"

    name: str


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """`left <operator> right`; both operands are owned subtrees."""

    kind: ClassVar[str] = "binary_op"

    left: Expression
    operator: BinaryOperator
    right: Expression


Expression = Union[Number, String, Identifier, BinaryOp]


# Statements


@dataclass(frozen=True)
class Let(ASTNode):
    """`let <identifier> be <value>`"""

    kind: ClassVar[str] = "let"

    identifier: str
    value: Expression


@dataclass(frozen=True)
class Show(ASTNode):
    kind: ClassVar[str] = "show"

    value: Expression


@dataclass(frozen=True)
class When(ASTNode):
    """
    Conditional statement.

    `otherwise_block` is None when the source had no `otherwise` clause, and
    an empty tuple when the clause was present but had no indented body.
    """

    kind: ClassVar[str] = "when"

    condition: Expression
    then_block: tuple[Statement, ...] = ()
    otherwise_block: tuple[Statement, ...] | None = None


@dataclass(frozen=True)
class FunctionDef(ASTNode):
    """`define <name> [with <param>...]` followed by a body block."""

    kind: ClassVar[str] = "function_def"

    name: str
    parameters: tuple[str, ...] = ()
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    kind: ClassVar[str] = "expression_statement"

    expr: Expression


Statement = Union[Let, Show, When, FunctionDef, ExpressionStatement]


@dataclass(frozen=True)
class Program(ASTNode):
    """Root node. Statement order is execution order."""

    kind: ClassVar[str] = "program"

    statements: tuple[Statement, ...] = ()


__all__ = [
    "ASTDict",
    "ASTNode",
    "BinaryOp",
    "BinaryOperator",
    "Expression",
    "ExpressionStatement",
    "FunctionDef",
    "Identifier",
    "Let",
    "Number",
    "Program",
    "Show",
    "Statement",
    "String",
    "When",
]
