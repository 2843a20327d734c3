"""Lowering of the surface tree into the core language.

The rewrites are purely syntactic:

* ``for (init; cond; step) { body }`` becomes
  ``{ init; while (cond) { body; step } }``;
* ``if / else if / else`` chains fold right into nested ``if``/``else``;
* ``const x = e`` becomes a constant ``let``;
* ``x op= e`` becomes ``x = x op e``.

Everything else maps one-to-one, lambda bodies included.
"""

from __future__ import annotations

from typing import List, Optional

from . import ast
from . import core


def desugar(program: ast.Program) -> core.Program:
    procedures: List[core.Procedure] = []
    main: List[core.Node] = []
    for proc in program.procedures:
        body = desugar_statements(proc.body.statements)
        if proc.name == 'main':
            main = body
        else:
            procedures.append(core.Procedure(proc.name, list(proc.params), body))
    return core.Program(procedures, main)


def desugar_statements(statements: List[ast.Node]) -> List[core.Node]:
    return [desugar_node(stmt) for stmt in statements]


def desugar_node(node: ast.Node) -> core.Node:
    if isinstance(node, ast.ExprStmt):
        return core.ExprStmt(desugar_node(node.expr))
    elif isinstance(node, ast.LetStmt):
        return core.LetStmt(node.name, desugar_node(node.expr))
    elif isinstance(node, ast.ConstStmt):
        return core.LetStmt(node.name, desugar_node(node.expr), constant=True)
    elif isinstance(node, ast.Assign):
        return core.Assign(node.name, desugar_node(node.value))
    elif isinstance(node, ast.OperatorAssign):
        value = core.BinaryOp(node.op, core.Ident(node.name), desugar_node(node.value))
        return core.Assign(node.name, value)
    elif isinstance(node, ast.Block):
        return core.Block(desugar_statements(node.statements))
    elif isinstance(node, ast.IfStmt):
        return desugar_if(node)
    elif isinstance(node, ast.WhileStmt):
        return core.WhileStmt(desugar_node(node.condition), desugar_node(node.body))
    elif isinstance(node, ast.ForStmt):
        body = desugar_statements(node.body) + [desugar_node(node.step)]
        loop = core.WhileStmt(desugar_node(node.condition), core.Block(body))
        return core.Block([desugar_node(node.init), loop])
    elif isinstance(node, ast.BreakStmt):
        return core.BreakStmt()
    elif isinstance(node, ast.ContinueStmt):
        return core.ContinueStmt()
    elif isinstance(node, ast.ReturnStmt):
        value = desugar_node(node.value) if node.value is not None else None
        return core.ReturnStmt(value)
    elif isinstance(node, ast.Literal):
        return core.Literal(node.value, node.literal_type)
    elif isinstance(node, ast.Ident):
        return core.Ident(node.name)
    elif isinstance(node, ast.BinaryOp):
        return core.BinaryOp(node.op, desugar_node(node.left), desugar_node(node.right))
    elif isinstance(node, ast.UnaryOp):
        return core.UnaryOp(node.op, desugar_node(node.operand))
    elif isinstance(node, ast.Call):
        return core.Call(desugar_node(node.func), [desugar_node(a) for a in node.args])
    elif isinstance(node, ast.PrimitiveCall):
        return core.PrimitiveCall(node.builtin, [desugar_node(a) for a in node.args])
    elif isinstance(node, ast.LambdaExpr):
        return core.LambdaExpr(list(node.params), desugar_statements(node.body))
    else:
        raise TypeError(f"Cannot desugar node {node!r}")


def desugar_if(node: ast.IfStmt) -> core.IfStmt:
    else_branch: Optional[core.Node] = None
    if node.else_block is not None:
        else_branch = desugar_node(node.else_block)
    for condition, block in reversed(node.else_ifs):
        else_branch = core.IfStmt(desugar_node(condition), desugar_node(block), else_branch)
    return core.IfStmt(desugar_node(node.condition), desugar_node(node.then_block), else_branch)
