# Linger language package
# This package provides the parser, desugarer and interpreter for Linger.
from .errors import LingerError, ParseError, LingerRuntimeError, TokenizerError
from .interpreter import (
    ControlFlow, Interpreter, compile_program, parse_program, run, run_program,
)
from .std.io import BufferSink, StreamSink

__all__ = [
    'run',
    'run_program',
    'parse_program',
    'compile_program',
    'Interpreter',
    'ControlFlow',
    'LingerError',
    'TokenizerError',
    'ParseError',
    'LingerRuntimeError',
    'BufferSink',
    'StreamSink',
]
