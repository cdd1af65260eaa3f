from pathlib import Path

import pytest

from constant.errors import ConstantRuntimeError
from constant.interpreter import parse_program, Interpreter


def test_program_8_runtime_error_stops_the_run(capsys):
    with open(Path(__file__).parent.parent / 'examples' / 'program_8.const', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    with pytest.raises(ConstantRuntimeError) as exc:
        interp.run(ast)
    assert exc.value.kind == 'StackUnderflow'
    assert (exc.value.err.line, exc.value.err.column) == (3, 1)
    out = capsys.readouterr().out.strip()
    assert out == 'before'
