"""Core syntax tree for the Linger language.

This is the minimal language the interpreter evaluates. ``for`` loops,
``else if`` chains, constants and compound assignment no longer exist here;
:mod:`linger.desugar` rewrites them into the forms below. Operators and
builtins are shared with the surface tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .ast import Operator
from .builtin_function import Builtin


@dataclass
class Node:
    """Base class for all core nodes."""
    pass


@dataclass
class Procedure(Node):
    name: str
    params: List[str]
    body: List[Node]


@dataclass
class Program(Node):
    procedures: List[Procedure]  # every procedure except main
    main: List[Node]


# Statements

@dataclass
class ExprStmt(Node):
    expr: Node


@dataclass
class LetStmt(Node):
    name: str
    expr: Node
    constant: bool = False


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class IfStmt(Node):
    condition: Node
    then_branch: Node
    else_branch: Optional[Node]


@dataclass
class WhileStmt(Node):
    condition: Node
    body: Node


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class ReturnStmt(Node):
    value: Optional[Node]


@dataclass
class BreakStmt(Node):
    pass


@dataclass
class ContinueStmt(Node):
    pass


# Expressions

@dataclass
class Literal(Node):
    value: Any
    literal_type: str


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
class PrimitiveCall(Node):
    builtin: Builtin
    args: List[Node]


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class LambdaExpr(Node):
    params: List[str]
    body: List[Node]
