import builtins
from typing import Callable, Optional
from constant.types import Value, to_string


class BasicIO:
    """Output sink behind the `print` built-in.

    The sink is any single-argument callable that receives the text of one
    printed value. It defaults to Python's print, so every value lands on
    its own line of stdout.
    """
    def __init__(self, output: Optional[Callable[[str], None]] = None):
        self.output = output if output is not None else builtins.print

    def write_value(self, value: Value) -> None:
        self.output(to_string(value))
