"""Statement node definitions for the Constant language.

The block parser turns a flat token stream into a `Program`: an ordered
list of the statements below. `IfChain` and `WhileLoop` own their
condition and body sub-programs, so nesting in the source becomes
nesting of `Program` objects. Every node remembers the source position of
the token it came from, which the interpreter uses for error reporting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .types import Value


@dataclass
class Node:
    """Base class for all statement nodes."""
    line: int = field(default=0, kw_only=True, compare=False)
    column: int = field(default=0, kw_only=True, compare=False)


@dataclass
class Program(Node):
    body: List[Node]

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self):
        return iter(self.body)


@dataclass
class PushLiteral(Node):
    value: Value


@dataclass
class PushVariable(Node):
    name: str


@dataclass
class BindVariable(Node):
    name: str


@dataclass
class Operator(Node):
    op: str


@dataclass
class BuiltinCall(Node):
    name: str


@dataclass
class Branch:
    condition: Program
    body: Program


@dataclass
class IfChain(Node):
    branches: List[Branch]
    else_body: Optional[Program] = None


@dataclass
class WhileLoop(Node):
    condition: Program
    body: Program


def nesting_depth(program: Program) -> int:
    """Return how many `if`/`while` blocks deep the program nests."""
    deepest = 0
    for stmt in program:
        if isinstance(stmt, IfChain):
            parts = [p for b in stmt.branches for p in (b.condition, b.body)]
            if stmt.else_body is not None:
                parts.append(stmt.else_body)
        elif isinstance(stmt, WhileLoop):
            parts = [stmt.condition, stmt.body]
        else:
            continue
        deepest = max(deepest, 1 + max(nesting_depth(p) for p in parts))
    return deepest
