import pytest

from zenfractal.complex_number import Complex
from zenfractal.errors import EvaluationError, ExpressionSyntaxError
from zenfractal.parser import Parser, parse
from zenfractal.syntax_tree import (
    BinaryOp, BinaryOpType, Constant, Variable, dump, evaluate, node_count,
)


def test_empty_input_has_no_tree():
    assert parse('') is None
    assert parse(' \t\n ') is None


def test_precedence():
    tree = parse('a+b*c')
    assert tree == BinaryOp(
        Variable('a'),
        BinaryOp(Variable('b'), Variable('c'), BinaryOpType.MUL),
        BinaryOpType.ADD,
    )


def test_left_associative():
    assert dump(parse('a-b-c')) == '((a - b) - c)'
    assert dump(parse('a*b*c')) == '((a * b) * c)'


def test_parentheses():
    assert dump(parse('(a+b)*c')) == '((a + b) * c)'
    assert dump(parse('((z))')) == 'z'


def test_whitespace_is_ignored():
    assert parse(' z *\tz\n+ c ') == parse('z*z+c')


def test_lookup_bakes_constants():
    values = {'z': Complex(1.0, 1.0), 'c': Complex(0.5, 0.0)}
    tree = Parser('z*z+c', values.__getitem__).parse()
    assert tree.right == Constant(Complex(0.5, 0.0))
    assert evaluate(tree) == Complex(0.5, 2.0)


def test_node_count():
    assert node_count(parse('z*z+c')) == 5


@pytest.mark.parametrize('source', [
    'z/c',
    '(z',
    'z)',
    '()',
    '2*z',
    'z+1',
    'z+',
    '*z',
    '-z',
    'z c',
    'Z*Z',
    'z**c',
    'z*(c+)',
    '(z+c',
])
def test_rejects_malformed(source):
    with pytest.raises(ExpressionSyntaxError):
        parse(source)


def test_error_position():
    with pytest.raises(ExpressionSyntaxError) as info:
        parse('z + 1')
    assert info.value.position == 4
    assert info.value.source == 'z + 1'
    assert isinstance(info.value, ValueError)


def test_unmatched_close_paren_reported():
    with pytest.raises(ExpressionSyntaxError, match=r"unexpected '\)'"):
        parse('z)')


def test_evaluate_unknown_operator():
    node = BinaryOp(Constant(Complex()), Constant(Complex()), '/')
    with pytest.raises(EvaluationError):
        evaluate(node)


def test_evaluate_unknown_node():
    with pytest.raises(EvaluationError):
        evaluate('z')


def test_variable_needs_bindings():
    with pytest.raises(EvaluationError):
        evaluate(Variable('z'))


def test_long_chain():
    chain = '+'.join(['z'] * 5000)
    tree = parse(chain)
    assert node_count(tree) == 9999
    assert dump(tree).startswith('(' * 4999 + 'z + z)')
    assert evaluate(tree, {'z': Complex(1.0, 0.5)}) == Complex(5000.0, 2500.0)

    baked = parse(chain, {'z': Complex(1.0, 0.5)}.__getitem__)
    assert evaluate(baked) == Complex(5000.0, 2500.0)


def test_long_product_chain():
    tree = parse('*'.join(['z'] * 3000))
    assert evaluate(tree, {'z': Complex(1.0, 0.0)}) == Complex(1.0, 0.0)


def test_moderate_nesting():
    source = '(' * 50 + 'z' + ')' * 50
    assert parse(source) == Variable('z')


def test_deep_nesting_is_syntax_error():
    source = '(' * 2000 + 'z' + ')' * 2000
    with pytest.raises(ExpressionSyntaxError, match='nested too deeply'):
        parse(source)
