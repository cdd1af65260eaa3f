from typing import Optional
from constant.types import ErrorVal


class ConstantError(Exception):
    """Base exception used to propagate Constant errors."""
    category = 'Error'

    def __init__(self, kind: str, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.err = ErrorVal(self.category, kind, message, line, column)
        super().__init__(str(self.err))

    @property
    def kind(self) -> str:
        return self.err.kind


class LexError(ConstantError):
    """Raised by the lexer: UnterminatedString, InvalidNumber, UnknownCharacter."""
    category = 'LexError'


class ParseError(ConstantError):
    """Raised by the block parser before any statement runs."""
    category = 'ParseError'


class ConstantRuntimeError(ConstantError):
    """Raised by the interpreter while a program is executing."""
    category = 'RuntimeError'
