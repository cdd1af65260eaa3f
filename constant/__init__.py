# Constant language package
# This package provides the lexer, block parser and stack-machine interpreter
# for the Constant language.
from .interpreter import run, run_program, parse_program, Interpreter, RunResult
from .environment import Environment
from .errors import ConstantError, LexError, ParseError, ConstantRuntimeError

__all__ = [
    'run',
    'run_program',
    'parse_program',
    'Interpreter',
    'RunResult',
    'Environment',
    'ConstantError',
    'LexError',
    'ParseError',
    'ConstantRuntimeError',
]
