from .basic_io import BasicIO
from constant.builtin_function import BuiltinFunction
from typing import Dict, List, Any

def populate_builtins(basic_io: BasicIO) -> Dict[str, BuiltinFunction]:
        """Build the table of stack built-ins.

        Each function receives the operand stack after the interpreter has
        checked that at least ``arity`` values are on it.
        """

        def std_print(stack: List[Any]) -> None:
            basic_io.write_value(stack.pop())

        def std_dup(stack: List[Any]) -> None:
            stack.append(stack[-1])

        def std_swap(stack: List[Any]) -> None:
            stack[-1], stack[-2] = stack[-2], stack[-1]

        def std_drop(stack: List[Any]) -> None:
            stack.pop()

        return {
            'print': BuiltinFunction('print', 1, std_print),
            'dup': BuiltinFunction('dup', 1, std_dup),
            'swap': BuiltinFunction('swap', 2, std_swap),
            'drop': BuiltinFunction('drop', 1, std_drop),
        }
