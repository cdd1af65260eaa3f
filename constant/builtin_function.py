from dataclasses import dataclass
from typing import Any


@dataclass
class BuiltinFunction:
    """A stack built-in: ``fn(stack)`` runs once ``arity`` values are present."""
    name: str
    arity: int
    fn: Any

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
