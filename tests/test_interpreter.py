import pytest

from constant.environment import Environment
from constant.errors import ConstantRuntimeError
from constant.interpreter import Interpreter, run, run_program


def runtime_error(source):
    with pytest.raises(ConstantRuntimeError) as exc:
        run_program(source)
    return exc.value


@pytest.mark.parametrize('a, b', [(0, 0), (3, 4), (123456789, 987654321), (7, 0)])
def test_integer_addition_stays_int(a, b):
    stack = run_program(f'{a} {b} +')
    assert stack == [a + b]
    assert type(stack[0]) is int


@pytest.mark.parametrize('a, b', [(7, 2), (6, 3), (1, 3), (0, 5)])
def test_division_is_real_division(a, b):
    stack = run_program(f'{a} {b} /')
    assert stack == [a / b]
    assert type(stack[0]) is float


@pytest.mark.parametrize('source', ['5 0 /', '5 0.0 /', '2.5 0 /', '5 0 %'])
def test_division_by_zero(source):
    assert runtime_error(source).kind == 'DivisionByZero'


@pytest.mark.parametrize('source, expected', [
    ('10 4 -', 6),
    ('6 7 *', 42),
    ('1 2.5 +', 3.5),
    ('1.5 2 *', 3.0),
    ('10 0.5 -', 9.5),
    ('7 3 %', 1),
    ('0 7 - 3 %', -1),
    ('7.5 2 %', 1.5),
])
def test_arithmetic(source, expected):
    stack = run_program(source)
    assert stack == [expected]
    assert type(stack[0]) is type(expected)


def test_operands_are_left_then_right():
    assert run_program('10 3 -') == [7]
    assert run_program('3 10 <') == [True]


@pytest.mark.parametrize('source, expected', [
    ('3 4 <', True),
    ('3 4 >', False),
    ('4 4 >=', True),
    ('4.5 4 <=', False),
    ('1 1.0 ==', True),
    ('1 1.5 !=', True),
    ('"a" "a" ==', True),
    ('"a" "b" ==', False),
    ('true false !=', True),
    ('false false ==', True),
])
def test_comparisons(source, expected):
    assert run_program(source) == [expected]


@pytest.mark.parametrize('source', [
    '"a" 1 +',
    '1 "a" -',
    'true 1 +',
    '"a" "b" +',
    '"a" 1 <',
    'true false >',
    'true 1 ==',
    '"1" 1 !=',
])
def test_type_mismatch(source):
    assert runtime_error(source).kind == 'TypeMismatch'


def test_failed_operator_keeps_its_operands():
    interp = Interpreter()
    result = interp.run_source('"a" 1 +')
    assert not result.ok
    assert result.error.kind == 'TypeMismatch'
    assert result.stack == ['a', 1]


def test_unbound_variable():
    err = runtime_error('x')
    assert err.kind == 'UnboundVariable'
    assert "'x'" in err.err.message


def test_bind_then_reference_restores_the_stack():
    interp = Interpreter()
    assert interp.run_source('1 2 3 bind x x').stack == [1, 2, 3]
    assert interp.env.values == {'x': 3}


def test_rebind_overwrites():
    interp = Interpreter()
    interp.run_source('1 bind x 2 bind x x x')
    assert interp.stack == [2, 2]
    assert len(interp.env) == 1


@pytest.mark.parametrize('source, expected', [
    ('"v" dup', ['v', 'v']),
    ('1 2 swap', [2, 1]),
    ('1 2 drop', [1]),
])
def test_stack_words(source, expected):
    assert run_program(source) == expected


@pytest.mark.parametrize('source', ['dup', 'swap', '1 swap', 'drop', 'print', 'bind x', '1 +', '+'])
def test_stack_underflow(source):
    assert runtime_error(source).kind == 'StackUnderflow'


@pytest.mark.parametrize('source, expected', [
    ('1.5 print', '1.5'),
    ('10 2 / print', '5.0'),
    ('true print false print', 'true\nfalse'),
    ('"unquoted text" print', 'unquoted text'),
    ('0 42 - print', '-42'),
])
def test_print_formats(capsys, source, expected):
    assert run_program(source) == []
    assert capsys.readouterr().out == expected + '\n'


@pytest.mark.parametrize('value, expected', [(10, 'small'), (16, 'mid'), (25, 'big')])
def test_if_chain_scenario(capsys, value, expected):
    run_program(f'{value} bind x  if x 20 > do "big" print elif x 15 > do "mid" print else do "small" print end')
    assert capsys.readouterr().out == expected + '\n'


def test_if_without_true_branch_does_nothing(capsys):
    assert run_program('if false do "no" print elif 1 2 > do "no" print end') == []
    assert capsys.readouterr().out == ''


def test_while_scenario(capsys):
    interp = Interpreter()
    interp.run_source('0 bind x  while x 20 < do x print x 1 + bind x end')
    assert capsys.readouterr().out.splitlines() == [str(n) for n in range(20)]
    assert interp.env.values == {'x': 20}
    assert interp.stack == []


def test_condition_may_use_values_already_on_the_stack(capsys):
    run_program('true if do "yes" print end')
    assert capsys.readouterr().out == 'yes\n'


@pytest.mark.parametrize('source', ['if 1 do end', 'while "x" do end', 'if false do elif 0 do end'])
def test_non_boolean_condition(source):
    assert runtime_error(source).kind == 'NonBooleanCondition'


def test_condition_without_result_underflows():
    assert runtime_error('if do end').kind == 'StackUnderflow'


def test_runtime_error_aborts_the_rest(capsys):
    interp = Interpreter()
    result = interp.run_source('1 print 5 bind y x 2 print')
    assert capsys.readouterr().out == '1\n'
    assert result.error.kind == 'UnboundVariable'
    assert result.stack == []
    assert interp.env.values == {'y': 5}


def test_parse_error_has_no_side_effects(capsys):
    interp = Interpreter()
    result = interp.run_source('"a" print 1 bind x end')
    assert result.error.category == 'ParseError'
    assert result.error.kind == 'UnmatchedEnd'
    assert capsys.readouterr().out == ''
    assert len(interp.env) == 0


def test_lex_error_is_reported_in_the_result():
    result = run('1 2 "open')
    assert not result.ok
    assert result.error.category == 'LexError'
    assert result.error.kind == 'UnterminatedString'


def test_error_position():
    result = run('1 2\n  drop drop drop')
    assert (result.error.line, result.error.column) == (2, 13)
    assert str(result.error) == 'RuntimeError(StackUnderflow) at 2:13: drop requires at least 1 item on the stack, found 0'


def test_output_sink():
    lines = []
    result = run('"a" print 1 print', output=lines.append)
    assert result.ok
    assert lines == ['a', '1']


def test_shared_environment_between_runs():
    env = Environment()
    lines = []
    assert run('5 bind x 1', environment=env).stack == [1]
    result = run('x print', environment=env, output=lines.append)
    assert result.ok and result.stack == []
    assert lines == ['5']


def test_interpreter_keeps_stack_between_inputs():
    interp = Interpreter()
    interp.run_source('1 2')
    assert interp.run_source('+').stack == [3]


def test_debug_log(tmp_path):
    log = tmp_path / 'debug.txt'
    with Interpreter(debug_level=4, debug_file=str(log), output=lambda text: None) as interp:
        interp.run_source('1 bind x if x 1 == do x print end')
        interp.run_source('y')
    text = log.read_text(encoding='utf-8')
    assert 'bind x = 1' in text
    assert 'if condition at 1:10 -> true' in text
    assert 'BuiltinCall -> []' in text
    assert 'finished, stack []' in text
    assert 'abort: RuntimeError(UnboundVariable)' in text


def test_no_debug_file_by_default(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    Interpreter().run_source('1')
    assert not (tmp_path / 'debug.txt').exists()


# 10 squared nine times: 10 ** 512, far past the largest Float
HUGE = '10 bind x ' + 'x x * bind x ' * 9


@pytest.mark.parametrize('tail', ['x 1.5 +', 'x 3 /', '1.5 x -', 'x 2.0 *', 'x 1.5 %'])
def test_int_too_large_for_float_is_a_runtime_error(tail):
    interp = Interpreter()
    result = interp.run_source(HUGE + tail)
    assert not result.ok
    assert result.error.category == 'RuntimeError'
    assert result.error.kind == 'NumericOverflow'
    assert len(result.stack) == 2
    assert interp.env.values == {'x': 10 ** 512}


def test_huge_ints_still_compare_and_multiply():
    assert run_program(HUGE + 'x 1.5 > x x ==') == [True, True]
    assert run_program(HUGE + 'x 10 *') == [10 ** 513]


def test_huge_int_literal_and_print():
    lines = []
    result = run('9' * 5000 + ' dup print', output=lines.append)
    assert result.ok
    assert result.stack == [10 ** 5000 - 1]
    assert lines == ['9' * 5000]


def test_printed_floats_use_shortest_repr(capsys):
    run_program('10000000000000000.0 print 1 100000 / print')
    assert capsys.readouterr().out == '1e+16\n1e-05\n'
