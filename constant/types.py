"""Runtime values and helpers for Constant.

Constant values are plain Python objects: ``bool`` for Bool, ``int`` for
Int, ``float`` for Float and ``str`` for String. Since ``bool`` is a
subclass of ``int`` every numeric check in this module excludes it
explicitly. This module also defines the ``ErrorVal`` record that every
lexer, parser and runtime error carries.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from typing import Any, Optional, Union

Value = Union[bool, int, float, str]


@dataclass
class ErrorVal:
    """Describes a Constant error.

    ``category`` is one of 'LexError', 'ParseError' or 'RuntimeError';
    ``kind`` names the specific failure inside that category, for example
    'StackUnderflow'. ``line`` and ``column`` are 1-based and may be
    missing when no source position is known.
    """
    category: str
    kind: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        where = f" at {self.line}:{self.column}" if self.line is not None else ''
        return f"{self.category}({self.kind}){where}: {self.message}"


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def type_name(value: Any) -> str:
    """Return the Constant type name of a runtime value."""
    if isinstance(value, bool):
        return 'Bool'
    if isinstance(value, int):
        return 'Int'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a value to the text `print` emits for it.

    Floats use Python's repr, the shortest text that reads back as the
    same Float: ``2.5``, ``5.0``, and exponent notation such as ``1e+16``
    or ``1e-05`` outside the range repr writes plainly.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the interpreter's int-to-str digit limit
            return str(decimal.Decimal(value))
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value
    return str(value)


def to_repr(value: Any) -> str:
    """Debug form used when echoing the stack: strings keep their quotes."""
    if isinstance(value, str):
        escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n').replace('\t', '\\t')
        return f'"{escaped}"'
    return to_string(value)


def format_stack(stack: list) -> str:
    return '[' + ', '.join(to_repr(v) for v in stack) + ']'
