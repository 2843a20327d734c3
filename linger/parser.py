"""Parser for the Linger language.

A hand-written recursive-descent parser over the token list produced by
:func:`linger.lexer.tokenize`. It builds the surface tree defined in
:mod:`linger.ast` and performs every syntactic check the language has:

* keywords can never name a variable, a procedure or a parameter;
* procedure names are unique and exactly one of them is ``main``;
* the clauses of a ``for`` header must be an initialization, a condition
  and an assignment, in that order;
* bodies of ``if``/``while``/``for``/``proc`` must be blocks.

Expressions are parsed by one method per precedence level, loosest first::

    or -> and -> equality -> relational -> additive -> multiplicative
       -> unary -> call -> terminal

Each binary level consumes zero or more operators of its own tier in a
loop, which yields left-associative trees.

The only ambiguity in the grammar is an opening parenthesis in terminal
position, which may start a lambda parameter list or a parenthesised
expression. The parser first scans ahead for ``( name, ... ) ->`` without
moving its cursor; only a successful scan followed by the arrow commits to
a lambda, otherwise the same tokens are parsed again as an expression.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .ast import (
    ASSIGN_OPERATORS, INCREMENT_OPERATORS, Assign, BinaryOp, Block,
    BreakStmt, Call, ConstStmt, ContinueStmt, ExprStmt, ForStmt, Ident,
    IfStmt, LambdaExpr, LetStmt, Literal, Node, Operator, OperatorAssign,
    PrimitiveCall, ProcDecl, Program, ReturnStmt, UnaryOp, WhileStmt,
)
from .builtin_function import lookup_builtin
from .errors import (
    Expected, ExpectedAssignment, ExpectedAssignmentOrInitialization,
    ExpectedBlock, ExpectedStatement, KeywordAsParam, KeywordAsProc,
    KeywordAsVar, MultipleSameNamedProcs, NoMain, ParseError,
    UnexpectedEOF, UnexpectedToken,
)
from .lexer import Token, TokenKind


_SYMBOLIC_KINDS = (TokenKind.KEYWORD, TokenKind.OPERATOR, TokenKind.PUNCT)


def is_assignment(stmt: Node) -> bool:
    if isinstance(stmt, (Assign, OperatorAssign)):
        return True
    if isinstance(stmt, ExprStmt) and isinstance(stmt.expr, UnaryOp):
        return stmt.expr.op in INCREMENT_OPERATORS
    return False


def is_assignment_or_initialization(stmt: Node) -> bool:
    return isinstance(stmt, LetStmt) or is_assignment(stmt)


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = list(tokens)
        self.pos = 0

    # Token helpers

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        if index < len(self.tokens):
            return self.tokens[index]
        return None

    def at(self, index: int, *values: str) -> bool:
        """Whether the token at absolute ``index`` is one of ``values``."""
        if index >= len(self.tokens):
            return False
        token = self.tokens[index]
        return token.kind in _SYMBOLIC_KINDS and token.value in values

    def match(self, *values: str, offset: int = 0) -> bool:
        return self.at(self.pos + offset, *values)

    def match_kind(self, kind: TokenKind, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.kind == kind

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        self.pos += 1
        return token

    def consume(self, value: str) -> Token:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        if not self.match(value):
            raise Expected(value, token)
        self.pos += 1
        return token

    def unexpected(self) -> ParseError:
        token = self.peek()
        if token is None:
            return UnexpectedEOF()
        return UnexpectedToken(token)

    # Program structure

    def parse_program(self) -> Program:
        procedures: List[ProcDecl] = []
        while self.match('proc'):
            proc = self.parse_proc()
            if any(p.name == proc.name for p in procedures):
                raise MultipleSameNamedProcs(proc.name)
            procedures.append(proc)
        if self.peek() is not None:
            raise self.unexpected()
        if not any(p.name == 'main' for p in procedures):
            raise NoMain()
        return Program(procedures)

    def parse_proc(self) -> ProcDecl:
        self.consume('proc')
        name_token = self.peek()
        if self.match_kind(TokenKind.KEYWORD):
            raise KeywordAsProc(name_token.value)
        if not self.match_kind(TokenKind.IDENT):
            raise self.unexpected()
        self.advance()
        self.consume('(')
        params = self.parse_params()
        body = self.parse_block()
        return ProcDecl(name_token.value, params, body)

    def scan_params(self, start: int) -> Tuple[List[Token], int]:
        """Scan a parameter list beginning just after its ``(``.

        Returns the name tokens and the index just past the closing ``)``.
        Keywords are accepted as names here so that the caller decides
        whether they are an error. The parser's cursor is not moved.
        """
        names: List[Token] = []
        index = start
        if self.at(index, ')'):
            return names, index + 1
        while True:
            if index >= len(self.tokens):
                raise UnexpectedEOF()
            token = self.tokens[index]
            if token.kind not in (TokenKind.IDENT, TokenKind.KEYWORD):
                raise UnexpectedToken(token)
            names.append(token)
            index += 1
            if self.at(index, ')'):
                return names, index + 1
            if not self.at(index, ','):
                if index >= len(self.tokens):
                    raise UnexpectedEOF()
                raise UnexpectedToken(self.tokens[index])
            if self.at(index + 1, ')'):
                raise UnexpectedToken(self.tokens[index])
            index += 1

    def parse_params(self) -> List[str]:
        """Parse the rest of a parameter list whose ``(`` was consumed."""
        names, end = self.scan_params(self.pos)
        self.pos = end
        return self.check_params(names)

    def check_params(self, names: List[Token]) -> List[str]:
        for token in names:
            if token.kind == TokenKind.KEYWORD:
                raise KeywordAsParam(token.value)
        return [token.value for token in names]

    def parse_block(self) -> Block:
        if not self.match('{'):
            raise ExpectedBlock()
        self.consume('{')
        statements: List[Node] = []
        while not self.match('}'):
            if self.peek() is None:
                raise UnexpectedEOF()
            statements.append(self.parse_statement())
        self.consume('}')
        return Block(statements)

    # Statements

    def end_statement(self, semicolon: bool):
        if semicolon:
            self.consume(';')

    def parse_statement(self, semicolon: bool = True) -> Node:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        assign_symbols = ('=',) + tuple(ASSIGN_OPERATORS)
        if self.match(*assign_symbols, offset=1):
            if token.kind == TokenKind.KEYWORD:
                raise KeywordAsVar(token.value)
            if token.kind == TokenKind.IDENT:
                return self.parse_assignment(semicolon)
        if self.match('let', 'const'):
            return self.parse_binding(semicolon)
        if self.match('if'):
            return self.parse_if_stmt()
        if self.match('while'):
            return self.parse_while_stmt()
        if self.match('for'):
            return self.parse_for_stmt()
        if self.match('return'):
            return self.parse_return_stmt(semicolon)
        if self.match('break'):
            self.advance()
            self.end_statement(semicolon)
            return BreakStmt()
        if self.match('continue'):
            self.advance()
            self.end_statement(semicolon)
            return ContinueStmt()
        if self.match('{'):
            return self.parse_block()
        expr = self.parse_expression()
        self.end_statement(semicolon)
        return ExprStmt(expr)

    def parse_binding(self, semicolon: bool) -> Node:
        keyword = self.advance()
        name_token = self.peek()
        if self.match_kind(TokenKind.KEYWORD):
            raise KeywordAsVar(name_token.value)
        if not self.match_kind(TokenKind.IDENT):
            raise self.unexpected()
        self.advance()
        self.consume('=')
        expr = self.parse_expression()
        self.end_statement(semicolon)
        if keyword.value == 'const':
            return ConstStmt(name_token.value, expr)
        return LetStmt(name_token.value, expr)

    def parse_assignment(self, semicolon: bool) -> Node:
        name_token = self.advance()
        op_token = self.advance()
        value = self.parse_expression()
        self.end_statement(semicolon)
        if op_token.value == '=':
            return Assign(name_token.value, value)
        return OperatorAssign(ASSIGN_OPERATORS[op_token.value], name_token.value, value)

    def parse_if_stmt(self) -> IfStmt:
        self.consume('if')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        then_block = self.parse_block()
        else_ifs: List[Tuple[Node, Block]] = []
        while self.match('else') and self.match('if', offset=1):
            self.consume('else')
            self.consume('if')
            self.consume('(')
            cond = self.parse_expression()
            self.consume(')')
            else_ifs.append((cond, self.parse_block()))
        else_block = None
        if self.match('else'):
            self.consume('else')
            else_block = self.parse_block()
        return IfStmt(condition, then_block, else_ifs, else_block)

    def parse_while_stmt(self) -> WhileStmt:
        self.consume('while')
        self.consume('(')
        condition = self.parse_expression()
        self.consume(')')
        body = self.parse_block()
        return WhileStmt(condition, body)

    def parse_for_stmt(self) -> ForStmt:
        self.consume('for')
        self.consume('(')
        if self.peek() is None or self.match('}'):
            raise ExpectedStatement()
        init = self.parse_statement(semicolon=True)
        if not is_assignment_or_initialization(init):
            raise ExpectedAssignmentOrInitialization()
        condition = self.parse_expression()
        self.consume(';')
        if self.peek() is None or self.match('}'):
            raise ExpectedStatement()
        step = self.parse_statement(semicolon=False)
        if not is_assignment(step):
            raise ExpectedAssignment()
        self.consume(')')
        body = self.parse_block()
        return ForStmt(init, condition, step, body.statements)

    def parse_return_stmt(self, semicolon: bool) -> ReturnStmt:
        self.consume('return')
        bare = self.peek() is None or self.match(';')
        if not semicolon:
            bare = bare or self.match(')', ',', '}')
        value = None if bare else self.parse_expression()
        self.end_statement(semicolon)
        return ReturnStmt(value)

    # Expressions

    def parse_expression(self) -> Node:
        return self.parse_logic_or()

    def parse_binary_level(self, operand, operators: dict) -> Node:
        node = operand()
        while self.match(*operators):
            op = operators[self.advance().value]
            right = operand()
            node = BinaryOp(op, node, right)
        return node

    def parse_logic_or(self) -> Node:
        return self.parse_binary_level(self.parse_logic_and, {'||': Operator.LOGIC_OR})

    def parse_logic_and(self) -> Node:
        return self.parse_binary_level(self.parse_equality, {'&&': Operator.LOGIC_AND})

    def parse_equality(self) -> Node:
        return self.parse_binary_level(self.parse_relational, {
            '==': Operator.EQ,
            '!=': Operator.NE,
        })

    def parse_relational(self) -> Node:
        return self.parse_binary_level(self.parse_additive, {
            '<': Operator.LT,
            '>': Operator.GT,
            '<=': Operator.LTE,
            '>=': Operator.GTE,
        })

    def parse_additive(self) -> Node:
        return self.parse_binary_level(self.parse_multiplicative, {
            '+': Operator.PLUS,
            '-': Operator.MINUS,
        })

    def parse_multiplicative(self) -> Node:
        return self.parse_binary_level(self.parse_unary, {
            '*': Operator.TIMES,
            '%': Operator.MOD,
            '/': Operator.DIV,
        })

    def parse_unary(self) -> Node:
        if self.match('-', '!'):
            op = Operator.MINUS if self.advance().value == '-' else Operator.LOGIC_NOT
            return UnaryOp(op, self.parse_unary())
        if self.match('++', '--'):
            op = Operator.PRE_INCREMENT if self.advance().value == '++' else Operator.PRE_DECREMENT
            return UnaryOp(op, self.parse_call())
        node = self.parse_call()
        if self.match('++'):
            self.advance()
            return UnaryOp(Operator.POST_INCREMENT, node)
        if self.match('--'):
            self.advance()
            return UnaryOp(Operator.POST_DECREMENT, node)
        return node

    def parse_call(self) -> Node:
        node = self.parse_terminal()
        while self.match('('):
            self.consume('(')
            args = self.parse_args()
            builtin = lookup_builtin(node.name) if isinstance(node, Ident) else None
            if builtin is not None:
                node = PrimitiveCall(builtin, args)
            else:
                node = Call(node, args)
        return node

    def parse_args(self) -> List[Node]:
        args: List[Node] = []
        if self.match(')'):
            self.consume(')')
            return args
        while True:
            args.append(self.parse_expression())
            if self.match(')'):
                self.consume(')')
                return args
            if self.match(',') and not self.match(')', offset=1):
                self.consume(',')
                continue
            raise self.unexpected()

    def parse_terminal(self) -> Node:
        token = self.peek()
        if token is None:
            raise UnexpectedEOF()
        if token.kind == TokenKind.NUMBER:
            self.advance()
            return Literal(token.value, 'Num')
        if token.kind == TokenKind.STRING:
            self.advance()
            return Literal(token.value, 'Str')
        if token.kind == TokenKind.KEYWORD:
            if token.value in ('true', 'false'):
                self.advance()
                return Literal(token.value == 'true', 'Bool')
            raise KeywordAsVar(token.value)
        if token.kind == TokenKind.IDENT:
            self.advance()
            return Ident(token.value)
        if self.match('('):
            return self.parse_paren_or_lambda()
        raise UnexpectedToken(token)

    def parse_paren_or_lambda(self) -> Node:
        try:
            names, end = self.scan_params(self.pos + 1)
        except UnexpectedToken:
            names, end = None, self.pos
        if names is not None and self.at(end, '->'):
            self.pos = end + 1
            params = self.check_params(names)
            return LambdaExpr(params, self.parse_lambda_body())
        # not a lambda: reparse the same tokens as a grouped expression
        self.consume('(')
        expr = self.parse_expression()
        self.consume(')')
        return expr

    def parse_lambda_body(self) -> List[Node]:
        if self.peek() is None or self.match('}'):
            raise ExpectedStatement()
        body = self.parse_statement(semicolon=False)
        if isinstance(body, Block):
            return body.statements
        return [body]


def parse(tokens: Sequence[Token]) -> Program:
    """Parse a token list into a surface :class:`~linger.ast.Program`."""
    return Parser(tokens).parse_program()
