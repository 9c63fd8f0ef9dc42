import pytest

from zenfractal.__main__ import main
from zenfractal.complex_number import Complex
from zenfractal.fractals import iterate


def test_eval(capsys):
    assert main(['eval', 'z*z+c', '--z=1,1', '--c=0,0']) == 0
    assert capsys.readouterr().out.strip() == "(0.0, 2.0i)"


def test_eval_with_var(capsys):
    assert main(['eval', 'a*b', '--var', 'a=0,1', '--var', 'b=0,1']) == 0
    assert capsys.readouterr().out.strip() == "(-1.0, 0.0i)"


def test_eval_empty_expression(capsys):
    assert main(['eval', '  ']) == 0
    assert capsys.readouterr().out.strip() == "(0.0, 0.0i)"


def test_iterate(capsys):
    assert main(['iterate', '--start=2,2']) == 0
    assert capsys.readouterr().out.strip() == "0"

    assert main(['iterate', '--start=0,0', '-n', '17', '--expr', 'z*z+c']) == 0
    assert capsys.readouterr().out.strip() == "17"


def test_iterate_decimal(capsys):
    assert main(['--scalar', 'decimal', 'iterate', '--start=1,0']) == 0
    assert capsys.readouterr().out.strip() == "1"


def test_documented_invocations(capsys):
    assert main(['iterate', '--start=-0.5,0.5', '--fractal', 'octopus']) == 0
    expected = iterate(Complex(-0.5, 0.5), 64, 'octopus')
    assert capsys.readouterr().out.strip() == str(expected)

    assert main(['eval', 'z*z+c', '-z', '1,1']) == 0
    assert capsys.readouterr().out.strip() == "(0.0, 2.0i)"


@pytest.mark.parametrize('argv', [
    ['eval', 'z/c'],
    ['eval', 'z', '--var', 'A=1,1'],
    ['iterate', '--expr', '(z'],
    ['iterate', '-n', '-1'],
])
def test_errors_exit_with_status_2(argv, capsys):
    assert main(argv) == 2
    assert "error:" in capsys.readouterr().err
