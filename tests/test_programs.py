from pathlib import Path

from linger.interpreter import run_program

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def read_example(name):
    with open(EXAMPLES / name, 'r', encoding='utf-8') as f:
        return f.read()


def test_program_hello(capsys):
    run_program(read_example('hello.ling'))
    out = capsys.readouterr().out.strip()
    assert out == 'Hello, Linger!'


def test_program_factorial(capsys):
    run_program(read_example('factorial.ling'))
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['1 1', '2 2', '3 6', '4 24', '5 120']


def test_program_fibonacci(capsys):
    result = run_program(read_example('fibonacci.ling'))
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['fib 2 = 1', 'fib 4 = 3', 'fib 6 = 8', 'fib 8 = 21', 'fib 10 = 55']
    assert result == 6765


def test_program_closures(capsys):
    run_program(read_example('closures.ling'))
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['counter: 3', 'other: 1', 'twice: 21', 'Goodbye, Linger!']


def test_program_grades(capsys):
    run_program(read_example('grades.ling'))
    out = capsys.readouterr().out.strip().split('\n')
    assert out == ['65 F', '75 C', '85 B', '95 A', 'average: 80 remainder: 0']
