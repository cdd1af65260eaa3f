from typing import Dict, Optional
from constant.errors import ConstantRuntimeError
from constant.types import Value


class Environment:
    """Maps variable names to the value they were most recently bound to.

    There is a single flat Environment per run (or per REPL session);
    rebinding overwrites and names are never removed.
    """
    def __init__(self):
        self.values: Dict[str, Value] = {}

    def __len__(self) -> int:
        return len(self.values)

    def get(self, name: str, line: Optional[int] = None, column: Optional[int] = None) -> Value:
        if name in self.values:
            return self.values[name]
        raise ConstantRuntimeError('UnboundVariable', f"identifier '{name}' does not exist", line, column)

    def set(self, name: str, value: Value):
        self.values[name] = value
