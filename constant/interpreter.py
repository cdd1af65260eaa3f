"""Interpreter for the Constant language.

This module ties the toolchain together: `parse_program` lexes and
block-parses source text, and `Interpreter` walks the resulting
`Program` as a stack machine. One `Interpreter` owns one operand stack
and one `Environment`; reusing it across calls (as the REPL does) keeps
both alive between inputs.

Errors are raised as `ConstantError` subclasses by `Interpreter.run`.
`Interpreter.run_source` and the module level `run` catch them and
return a `RunResult` instead, which is what the command line driver
consumes.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .ast import (
    Program, PushLiteral, PushVariable, BindVariable, Operator, BuiltinCall,
    IfChain, WhileLoop, Node,
)
from .environment import Environment
from .errors import ConstantError, ConstantRuntimeError
from .lexer import tokenize
from .parser import parse_tokens
from .std import BasicIO, populate_builtins
from .types import ErrorVal, Value, format_stack, is_number, to_repr, type_name


def parse_program(source: str) -> Program:
    """Parse the given source code into a Program.

    The whole token list is produced before parsing starts, and parsing
    finishes before anything runs, so lexer and parser errors never leave
    side effects behind.
    """
    tokens = tokenize(source)
    return parse_tokens(tokens)


@dataclass
class RunResult:
    """Outcome of running one piece of source text."""
    stack: List[Value] = field(default_factory=list)
    error: Optional[ErrorVal] = None

    @property
    def ok(self) -> bool:
        return self.error is None


ARITHMETIC: Dict[str, Callable[[Any, Any], Any]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
}

COMPARISONS: Dict[str, Callable[[Any, Any], bool]] = {
    '>': operator.gt,
    '<': operator.lt,
    '>=': operator.ge,
    '<=': operator.le,
}


class Interpreter:
    """Stack machine that executes Constant programs."""
    def __init__(self, environment: Optional[Environment] = None,
                 output: Optional[Callable[[str], None]] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.env = environment if environment is not None else Environment()
        self.stack: List[Value] = []
        self.io = BasicIO(output)
        self.builtins = populate_builtins(self.io)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc):
        self.close()

    # Public API
    def run(self, program: Program) -> List[Value]:
        """Execute a program against this interpreter's stack and environment.

        Returns a copy of the operand stack once the program finishes.
        A `ConstantRuntimeError` aborts the program immediately and leaves
        the stack and environment as they were when it was raised.
        """
        if self.debug_level >= 1:
            self.debug(f"run {len(program)} statements, stack {format_stack(self.stack)}")
        try:
            self.execute_block(program)
        except ConstantRuntimeError as e:
            if self.debug_level >= 1:
                self.debug(f"abort: {e.err}")
            raise
        if self.debug_level >= 1:
            self.debug(f"finished, stack {format_stack(self.stack)}")
        return list(self.stack)

    def run_source(self, source: str) -> RunResult:
        """Lex, parse and run source text, reporting errors in the result."""
        try:
            program = parse_program(source)
            self.run(program)
        except ConstantError as e:
            if self.debug_level >= 1 and not isinstance(e, ConstantRuntimeError):
                self.debug(f"rejected: {e.err}")
            return RunResult(list(self.stack), e.err)
        return RunResult(list(self.stack))

    def execute_block(self, program: Program):
        for stmt in program:
            self.execute(stmt)
            if self.debug_level >= 4:
                self.debug(f"{stmt.line}:{stmt.column} {type(stmt).__name__} -> {format_stack(self.stack)}")

    def execute(self, node: Node):
        if isinstance(node, PushLiteral):
            self.stack.append(node.value)
            return
        if isinstance(node, PushVariable):
            self.stack.append(self.env.get(node.name, node.line, node.column))
            return
        if isinstance(node, BindVariable):
            self.require(1, f"bind {node.name}", node)
            value = self.stack.pop()
            self.env.set(node.name, value)
            if self.debug_level >= 2:
                self.debug(f"bind {node.name} = {to_repr(value)}")
            return
        if isinstance(node, Operator):
            self.require(2, f"'{node.op}'", node)
            left, right = self.stack[-2], self.stack[-1]
            result = self.apply_binary_op(node.op, left, right, node)
            del self.stack[-2:]
            self.stack.append(result)
            return
        if isinstance(node, BuiltinCall):
            builtin = self.builtins[node.name]
            self.require(builtin.arity, node.name, node)
            builtin.fn(self.stack)
            return
        if isinstance(node, IfChain):
            for branch in node.branches:
                if self.evaluate_condition(branch.condition, node, 'if'):
                    self.execute_block(branch.body)
                    return
            if node.else_body is not None:
                self.execute_block(node.else_body)
            return
        if isinstance(node, WhileLoop):
            while self.evaluate_condition(node.condition, node, 'while'):
                self.execute_block(node.body)
            return
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate_condition(self, condition: Program, node: Node, keyword: str) -> bool:
        """Run a condition program and pop the Bool it leaves on the stack."""
        self.execute_block(condition)
        self.require(1, f"'{keyword}' condition", node)
        result = self.stack[-1]
        if not isinstance(result, bool):
            raise self.fail('NonBooleanCondition',
                            f"'{keyword}' condition must produce a Bool, got {type_name(result)} {to_repr(result)}", node)
        self.stack.pop()
        if self.debug_level >= 3:
            self.debug(f"{keyword} condition at {node.line}:{node.column} -> {to_repr(result)}")
        return result

    def require(self, count: int, action: str, node: Node):
        if len(self.stack) < count:
            plural = 'item' if count == 1 else 'items'
            raise self.fail('StackUnderflow',
                            f"{action} requires at least {count} {plural} on the stack, found {len(self.stack)}", node)

    def fail(self, kind: str, message: str, node: Node) -> ConstantRuntimeError:
        return ConstantRuntimeError(kind, message, node.line, node.column)

    def apply_binary_op(self, op: str, a: Value, b: Value, node: Node) -> Value:
        if op in ('==', '!='):
            eq = self.equal_values(a, b, op, node)
            return eq if op == '==' else not eq
        if not (is_number(a) and is_number(b)):
            raise self.fail('TypeMismatch', f"'{op}' requires numeric operands, got {type_name(a)} and {type_name(b)}", node)
        try:
            return self.numeric_op(op, a, b, node)
        except OverflowError:
            # an Int too large to become a Float
            raise self.fail('NumericOverflow', f"'{op}' result does not fit in a Float", node) from None

    def numeric_op(self, op: str, a: Value, b: Value, node: Node) -> Value:
        if op in COMPARISONS:
            return COMPARISONS[op](a, b)
        if op == '/':
            if b == 0:
                raise self.fail('DivisionByZero', 'division by zero', node)
            # true division: Int / Int is a Float too
            return a / b
        if op == '%':
            if b == 0:
                raise self.fail('DivisionByZero', 'modulo by zero', node)
            if isinstance(a, int) and isinstance(b, int):
                # remainder takes the sign of the dividend
                r = abs(a) % abs(b)
                return r if a >= 0 else -r
            return math.fmod(a, b)
        if op in ARITHMETIC:
            return ARITHMETIC[op](a, b)
        raise self.fail('TypeMismatch', f"unknown operator {op}", node)

    def equal_values(self, a: Value, b: Value, op: str, node: Node) -> bool:
        # Int and Float compare by value; other variants only with themselves
        if is_number(a) and is_number(b):
            return a == b
        if isinstance(a, bool) and isinstance(b, bool):
            return a == b
        if isinstance(a, str) and isinstance(b, str):
            return a == b
        raise self.fail('TypeMismatch', f"cannot compare {type_name(a)} and {type_name(b)} with '{op}'", node)


def run(source: str, environment: Optional[Environment] = None,
        output: Optional[Callable[[str], None]] = None) -> RunResult:
    """Run source text in a fresh interpreter and report the outcome.

    Pass the same `environment` to several calls to keep bindings between
    them; the operand stack always starts empty.
    """
    interpreter = Interpreter(environment=environment, output=output)
    return interpreter.run_source(source)


def run_program(source: str, debug_level: int = 0) -> List[Value]:
    """Convenience function to parse and run a program, returning its final stack."""
    program = parse_program(source)
    with Interpreter(debug_level=debug_level) as interpreter:
        return interpreter.run(program)
