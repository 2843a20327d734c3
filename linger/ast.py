"""Surface (sugared) syntax tree for the Linger language.

The classes in this module are what the parser produces. They mirror the
source closely, including the convenience forms (``for`` loops, ``else if``
chains, ``const`` and compound assignment) that the desugarer later lowers
into the smaller core language in :mod:`linger.core`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from .builtin_function import Builtin


class Operator(Enum):
    """Every operator of the language.

    Increment and decrement come in prefix and postfix flavours; their
    values carry an ``x`` marking the operand position so that both can
    share a symbol.
    """
    LOGIC_OR = '||'
    LOGIC_AND = '&&'
    EQ = '=='
    NE = '!='
    LT = '<'
    GT = '>'
    LTE = '<='
    GTE = '>='
    PLUS = '+'
    MINUS = '-'
    TIMES = '*'
    MOD = '%'
    DIV = '/'
    LOGIC_NOT = '!'
    PRE_INCREMENT = '++x'
    POST_INCREMENT = 'x++'
    PRE_DECREMENT = '--x'
    POST_DECREMENT = 'x--'

    @property
    def symbol(self) -> str:
        return self.value.replace('x', '')

    @property
    def is_binary(self) -> bool:
        return self in BINARY_OPERATORS

    @property
    def is_unary(self) -> bool:
        return self in UNARY_OPERATORS


BINARY_OPERATORS = frozenset({
    Operator.LOGIC_OR, Operator.LOGIC_AND, Operator.EQ, Operator.NE,
    Operator.LT, Operator.GT, Operator.LTE, Operator.GTE,
    Operator.PLUS, Operator.MINUS, Operator.TIMES, Operator.MOD, Operator.DIV,
})

UNARY_OPERATORS = frozenset({
    Operator.MINUS, Operator.LOGIC_NOT,
    Operator.PRE_INCREMENT, Operator.POST_INCREMENT,
    Operator.PRE_DECREMENT, Operator.POST_DECREMENT,
})

INCREMENT_OPERATORS = frozenset({
    Operator.PRE_INCREMENT, Operator.POST_INCREMENT,
    Operator.PRE_DECREMENT, Operator.POST_DECREMENT,
})

# compound assignment symbol -> the binary operator it applies
ASSIGN_OPERATORS = {
    '+=': Operator.PLUS,
    '-=': Operator.MINUS,
    '*=': Operator.TIMES,
    '/=': Operator.DIV,
    '%=': Operator.MOD,
}


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class ProcDecl(Node):
    name: str
    params: List[str]
    body: 'Block'


@dataclass
class Program(Node):
    procedures: List[ProcDecl]

    def procedure(self, name: str) -> Optional[ProcDecl]:
        for proc in self.procedures:
            if proc.name == name:
                return proc
        return None


# Statements

@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class LetStmt(Node):
    name: str
    expr: Node


@dataclass
class ConstStmt(Node):
    name: str
    expr: Node


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class OperatorAssign(Node):
    op: Operator
    name: str
    value: Node


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class IfStmt(Node):
    condition: Node
    then_block: Block
    else_ifs: List[Tuple[Node, Block]]
    else_block: Optional[Block]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Block


@dataclass
class ForStmt(Node):
    init: Node
    condition: Node
    step: Node
    body: List[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


# Expressions

@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Num', 'Bool', 'Str'


@dataclass
class Ident(Node):
    name: str


@dataclass
class BinaryOp(Node):
    op: Operator
    left: Node
    right: Node


@dataclass
class UnaryOp(Node):
    op: Operator
    operand: Node


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class PrimitiveCall(Node):
    builtin: Builtin
    args: List[Node]


@dataclass
class LambdaExpr(Node):
    params: List[str]
    body: List[Node]
