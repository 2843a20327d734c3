"""Interpreter for the Linger language.

This module ties the toolchain together (tokenize, parse, desugar) and
evaluates the resulting core tree. Statements return a ``(value, signal)``
pair where the signal is a :class:`ControlFlow` member; ``return``,
``break`` and ``continue`` travel outwards through these pairs rather than
through Python exceptions. Exceptions are reserved for errors, all of them
subclasses of :class:`~linger.errors.LingerError`.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from enum import Enum
from typing import Any, List, Tuple, Union

from . import core
from .ast import Operator
from .ast import Program as SurfaceProgram
from .builtin_function import BUILTINS
from .desugar import desugar
from .environment import Environment
from .errors import (
    ArgMismatch, BadArg, BadArgs, BinaryAsUnary, BreakNotInLoop,
    ContinueNotInLoop, DivisionByZero, ExpectedBool, IntegerOverflow,
    InvalidAssignmentTarget, LingerError, NestingTooDeep, RecursionDepthExceeded,
    UnaryAsBinary,
)
from .lexer import tokenize
from .parser import parse
from .std.io import StreamSink
from .types import VOID, LambdaVal, in_int64_range, is_num, to_string, type_name


class ControlFlow(Enum):
    NORMAL = 'normal'
    RETURN = 'return'
    BREAK = 'break'
    CONTINUE = 'continue'


Result = Tuple[Any, ControlFlow]

# Python frames used per Linger call, with headroom for nested expressions
_FRAMES_PER_CALL = 16


@contextmanager
def recursion_limit(limit: int):
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(previous, limit))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def _checked(value: int) -> int:
    if not in_int64_range(value):
        raise IntegerOverflow()
    return value


def _divide(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZero()
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def _remainder(left: int, right: int) -> int:
    return left - right * _divide(left, right)


class Interpreter:
    """Evaluates desugared Linger programs."""
    def __init__(self, sink=None, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_call_depth: int = 1000):
        self.sink = sink if sink is not None else StreamSink()
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.global_env = Environment()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def interpret(self, program: core.Program) -> Any:
        """Run ``main`` and return its value."""
        if self.debug_level > 0:
            self.debug_fp = open(self.debug_file, 'w', encoding='utf-8')
        try:
            if self.debug_level >= 1:
                self.debug("program start")
            self.install_procedures(program.procedures)
            main_env = self.global_env.child_scope()
            self.call_depth = 0
            value = self.execute_block(program.main, main_env, in_loop=False)
            if self.debug_level >= 1:
                self.debug(f"program finished: {type_name(value)} {to_string(value)}")
            return value
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def install_procedures(self, procedures: List[core.Procedure]):
        for proc in procedures:
            self.global_env.bind(proc.name, LambdaVal(proc.params, proc.body, self.global_env, proc.name))
            if self.debug_level >= 2:
                self.debug(f"install proc {proc.name}({', '.join(proc.params)})")

    # Statements

    def execute_block(self, statements: List[core.Node], env: Environment, in_loop: bool) -> Any:
        """Run a statement list as a procedure or lambda body and return its value."""
        value, _ = self.execute_statements(statements, env, in_loop)
        return value

    def execute_statements(self, statements: List[core.Node], env: Environment, in_loop: bool) -> Result:
        value = VOID
        for stmt in statements:
            value, flow = self.execute(stmt, env, in_loop)
            if flow == ControlFlow.RETURN:
                return value, flow
            if flow == ControlFlow.BREAK:
                if not in_loop:
                    raise BreakNotInLoop()
                return value, flow
            if flow == ControlFlow.CONTINUE:
                if not in_loop:
                    raise ContinueNotInLoop()
                return value, flow
        return value, ControlFlow.NORMAL

    def execute(self, node: core.Node, env: Environment, in_loop: bool) -> Result:
        if isinstance(node, core.ExprStmt):
            return self.evaluate(node.expr, env), ControlFlow.NORMAL
        if isinstance(node, core.LetStmt):
            value = self.evaluate(node.expr, env)
            env.bind(node.name, value, constant=node.constant)
            if self.debug_level >= 2:
                kind = 'const' if node.constant else 'let'
                self.debug(f"{kind} {node.name}: {type_name(value)} = {to_string(value)}")
            return VOID, ControlFlow.NORMAL
        if isinstance(node, core.Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name}: {type_name(value)} = {to_string(value)}")
            return VOID, ControlFlow.NORMAL
        if isinstance(node, core.Block):
            return self.execute_statements(node.statements, env, in_loop)
        if isinstance(node, core.IfStmt):
            cond = self.condition(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"if condition -> {to_string(cond)}")
            if cond:
                return self.execute(node.then_branch, env, in_loop)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env, in_loop)
            return VOID, ControlFlow.NORMAL
        if isinstance(node, core.WhileStmt):
            return self.execute_while(node, env)
        if isinstance(node, core.ReturnStmt):
            value = self.evaluate(node.value, env) if node.value is not None else VOID
            return value, ControlFlow.RETURN
        if isinstance(node, core.BreakStmt):
            return VOID, ControlFlow.BREAK
        if isinstance(node, core.ContinueStmt):
            return VOID, ControlFlow.CONTINUE
        raise TypeError(f"execute: unexpected node type {type(node).__name__}")

    def execute_while(self, node: core.WhileStmt, env: Environment) -> Result:
        iterations = 0
        while True:
            cond = self.condition(node.condition, env)
            if self.debug_level >= 3:
                self.debug(f"while condition (iteration {iterations}) -> {to_string(cond)}")
            if not cond:
                return VOID, ControlFlow.NORMAL
            value, flow = self.execute(node.body, env, True)
            if flow == ControlFlow.RETURN:
                return value, flow
            if flow == ControlFlow.BREAK:
                return VOID, ControlFlow.NORMAL
            iterations += 1

    def condition(self, expr: core.Node, env: Environment) -> bool:
        value = self.evaluate(expr, env)
        if not isinstance(value, bool):
            raise BadArg(value)
        return value

    # Expressions

    def evaluate(self, node: core.Node, env: Environment) -> Any:
        if isinstance(node, core.Literal):
            return node.value
        if isinstance(node, core.Ident):
            return env.lookup(node.name)
        if isinstance(node, core.LambdaExpr):
            return LambdaVal(node.params, node.body, env)
        if isinstance(node, core.BinaryOp):
            return self.evaluate_binary(node, env)
        if isinstance(node, core.UnaryOp):
            return self.evaluate_unary(node, env)
        if isinstance(node, core.Call):
            return self.call(node, env)
        if isinstance(node, core.PrimitiveCall):
            return self.call_builtin(node, env)
        raise TypeError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_binary(self, node: core.BinaryOp, env: Environment) -> Any:
        op = node.op
        if not op.is_binary:
            raise UnaryAsBinary(op)
        if op in (Operator.LOGIC_AND, Operator.LOGIC_OR):
            left = self.evaluate(node.left, env)
            if not isinstance(left, bool):
                raise ExpectedBool(left)
            if op == Operator.LOGIC_AND and not left:
                return False
            if op == Operator.LOGIC_OR and left:
                return True
            right = self.evaluate(node.right, env)
            if not isinstance(right, bool):
                raise ExpectedBool(right)
            return right
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)
        if op in (Operator.EQ, Operator.NE, Operator.LT, Operator.GT, Operator.LTE, Operator.GTE):
            return self.compare(op, left, right)
        return self.arithmetic(op, left, right)

    def arithmetic(self, op: Operator, left: Any, right: Any) -> Any:
        if op == Operator.PLUS and isinstance(left, str) and isinstance(right, str):
            return left + right
        if not is_num(left):
            raise BadArg(left)
        if not is_num(right):
            raise BadArg(right)
        if op == Operator.PLUS:
            return _checked(left + right)
        if op == Operator.MINUS:
            return _checked(left - right)
        if op == Operator.TIMES:
            return _checked(left * right)
        if op == Operator.DIV:
            return _checked(_divide(left, right))
        if op == Operator.MOD:
            return _remainder(left, right)
        raise UnaryAsBinary(op)

    def compare(self, op: Operator, left: Any, right: Any) -> bool:
        kind = type_name(left)
        if kind not in ('Num', 'Str', 'Bool') or kind != type_name(right):
            raise BadArgs([left, right])
        if op == Operator.EQ:
            return left == right
        if op == Operator.NE:
            return left != right
        if op == Operator.LT:
            return left < right
        if op == Operator.GT:
            return left > right
        if op == Operator.LTE:
            return left <= right
        return left >= right

    def evaluate_unary(self, node: core.UnaryOp, env: Environment) -> Any:
        op = node.op
        if not op.is_unary:
            raise BinaryAsUnary(op)
        if op == Operator.MINUS:
            value = self.evaluate(node.operand, env)
            if not is_num(value):
                raise BadArg(value)
            return _checked(-value)
        if op == Operator.LOGIC_NOT:
            value = self.evaluate(node.operand, env)
            if not isinstance(value, bool):
                raise ExpectedBool(value)
            return not value
        return self.increment(node, env)

    def increment(self, node: core.UnaryOp, env: Environment) -> int:
        if not isinstance(node.operand, core.Ident):
            raise InvalidAssignmentTarget()
        name = node.operand.name
        old = env.lookup(name)
        if not is_num(old):
            raise BadArg(old)
        step = 1 if node.op in (Operator.PRE_INCREMENT, Operator.POST_INCREMENT) else -1
        new = _checked(old + step)
        env.assign(name, new)
        if node.op in (Operator.PRE_INCREMENT, Operator.PRE_DECREMENT):
            return new
        return old

    def call(self, node: core.Call, env: Environment) -> Any:
        callee = self.evaluate(node.func, env)
        if not isinstance(callee, LambdaVal):
            raise BadArg(callee)
        name = node.func.name if isinstance(node.func, core.Ident) else '<lambda>'
        if len(node.args) != len(callee.params):
            raise ArgMismatch(name, len(node.args), len(callee.params))
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 4:
            self.debug(f"call {name}({', '.join(to_string(a) for a in args)})")
        if self.call_depth >= self.max_call_depth:
            raise RecursionDepthExceeded(self.max_call_depth)
        call_env = callee.env.child_scope(dict(zip(callee.params, args)))
        self.call_depth += 1
        try:
            return self.execute_block(callee.body, call_env, in_loop=False)
        finally:
            self.call_depth -= 1

    def call_builtin(self, node: core.PrimitiveCall, env: Environment) -> Any:
        builtin = BUILTINS[node.builtin]
        if builtin.arity is not None and len(node.args) != builtin.arity:
            raise ArgMismatch(builtin.name, len(node.args), builtin.arity)
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.debug_level >= 4:
            self.debug(f"call builtin {builtin.name}({', '.join(to_string(a) for a in args)})")
        return builtin.fn(args, self.sink)


def parse_program(source: str) -> SurfaceProgram:
    """Tokenize and parse source text into a surface program."""
    return parse(tokenize(source))


def compile_program(source: str) -> core.Program:
    """Tokenize, parse and desugar source text into a core program."""
    return desugar(parse_program(source))


def run_program(source: str, sink=None, debug_level: int = 0, debug_file: str = 'debug.txt',
                max_call_depth: int = 1000) -> Any:
    """Compile and run a Linger program, raising :class:`LingerError` on failure."""
    interpreter = Interpreter(sink=sink, debug_level=debug_level, debug_file=debug_file,
                              max_call_depth=max_call_depth)
    with recursion_limit(max_call_depth * _FRAMES_PER_CALL + 1000):
        try:
            program = compile_program(source)
        except RecursionError:
            raise NestingTooDeep() from None
        try:
            return interpreter.interpret(program)
        except RecursionError:
            raise RecursionDepthExceeded(max_call_depth) from None


def run(source: str, sink=None, **options) -> Union[Any, LingerError]:
    """Run a Linger program and return its value, or the error it failed with."""
    try:
        return run_program(source, sink=sink, **options)
    except LingerError as exc:
        return exc
