"""Error taxonomy for Linger.

Every failure a Linger program can produce is a subclass of
:class:`LingerError`, grouped into three tiers: tokenizer, parse and
runtime errors. Each class owns exactly one message format so the driver
can report any of them uniformly with ``str(error)``.
"""

from typing import Any, List, Optional

from linger.types import to_string


def _display(value: Any) -> str:
    return to_string(value)


def _where(line: Optional[int], column: Optional[int]) -> str:
    if line is None:
        return ''
    return f" @ ({line}, {column})"


class LingerError(Exception):
    """Base class for all tokenizer, parse and runtime errors."""


###############################################################################
# Tokenizer errors
###############################################################################

class TokenizerError(LingerError):
    pass


class UnknownToken(TokenizerError):
    def __init__(self, text: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"unknown token: {text}{_where(line, column)}")
        self.text = text
        self.line = line
        self.column = column


class UnterminatedStringLiteral(TokenizerError):
    def __init__(self, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"unterminated string literal{_where(line, column)}")
        self.line = line
        self.column = column


class InvalidEscapeSequence(TokenizerError):
    def __init__(self, char: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"invalid escape sequence \"\\{char}\"{_where(line, column)}")
        self.char = char
        self.line = line
        self.column = column


class InvalidNumberLiteral(TokenizerError):
    def __init__(self, text: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(f"invalid number literal: {text}{_where(line, column)}")
        self.text = text
        self.line = line
        self.column = column


###############################################################################
# Parse errors
###############################################################################

class ParseError(LingerError):
    pass


class NoMain(ParseError):
    def __init__(self):
        super().__init__("main procedure not found")


class MultipleSameNamedProcs(ParseError):
    def __init__(self, name: str):
        super().__init__(f"multiple procedures with name \"{name}\"")
        self.name = name


class UnexpectedToken(ParseError):
    def __init__(self, token: Any):
        super().__init__(f"unexpected token {token} @ ({token.line}, {token.column})")
        self.token = token


class UnexpectedEOF(ParseError):
    def __init__(self):
        super().__init__("unexpected end of input")


class Expected(ParseError):
    def __init__(self, target: str, token: Any):
        super().__init__(
            f"expected token {target} @ ({token.line}, {token.column}), instead got {token}"
        )
        self.target = target
        self.token = token


class KeywordAsVar(ParseError):
    def __init__(self, keyword: str):
        super().__init__(f"keyword \"{keyword}\" used as variable")
        self.keyword = keyword


class KeywordAsProc(ParseError):
    def __init__(self, keyword: str):
        super().__init__(f"keyword \"{keyword}\" used as procedure name")
        self.keyword = keyword


class KeywordAsParam(ParseError):
    def __init__(self, keyword: str):
        super().__init__(f"keyword \"{keyword}\" used as parameter name")
        self.keyword = keyword


class ExpectedStatement(ParseError):
    def __init__(self):
        super().__init__("expected statement")


class ExpectedBlock(ParseError):
    def __init__(self):
        super().__init__("expected block")


class ExpectedAssignment(ParseError):
    def __init__(self):
        super().__init__("expected assignment")


class ExpectedAssignmentOrInitialization(ParseError):
    def __init__(self):
        super().__init__("expected assignment or initialization")


class NestingTooDeep(ParseError):
    def __init__(self):
        super().__init__("program is nested too deeply to parse")


###############################################################################
# Runtime errors
###############################################################################

class LingerRuntimeError(LingerError):
    pass


class UnknownVariable(LingerRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"unknown variable \"{name}\"")
        self.name = name


class BadArg(LingerRuntimeError):
    def __init__(self, value: Any):
        super().__init__(f"bad argument \"{_display(value)}\"")
        self.value = value


class BadArgs(LingerRuntimeError):
    def __init__(self, values: List[Any]):
        super().__init__(f"bad args: [{', '.join(_display(v) for v in values)}]")
        self.values = list(values)


class ArgMismatch(LingerRuntimeError):
    def __init__(self, proc_name: str, given: int, expected: int):
        super().__init__(
            f"procedure \"{proc_name}\" expected {expected} args, instead got {given}"
        )
        self.proc_name = proc_name
        self.given = given
        self.expected = expected


class ExpectedBool(LingerRuntimeError):
    def __init__(self, value: Any):
        super().__init__(f"expected boolean value, instead got {_display(value)}")
        self.value = value


class BinaryAsUnary(LingerRuntimeError):
    def __init__(self, op: Any):
        super().__init__(f"binary operator \"{getattr(op, 'symbol', op)}\" used as unary operator")
        self.op = op


class UnaryAsBinary(LingerRuntimeError):
    def __init__(self, op: Any):
        super().__init__(f"unary operator \"{getattr(op, 'symbol', op)}\" used as binary operator")
        self.op = op


class BreakNotInLoop(LingerRuntimeError):
    def __init__(self):
        super().__init__("tried to break while not within a loop")


class ContinueNotInLoop(LingerRuntimeError):
    def __init__(self):
        super().__init__("continue statement found outside of a loop")


class InvalidAssignmentTarget(LingerRuntimeError):
    def __init__(self):
        super().__init__("invalid assignment target")


class ConstantReassignment(LingerRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"cannot assign to constant \"{name}\"")
        self.name = name


class DivisionByZero(LingerRuntimeError):
    def __init__(self):
        super().__init__("division by zero")


class IntegerOverflow(LingerRuntimeError):
    def __init__(self):
        super().__init__("integer overflow")


class RecursionDepthExceeded(LingerRuntimeError):
    def __init__(self, limit: int):
        super().__init__(f"maximum recursion depth of {limit} exceeded")
        self.limit = limit
