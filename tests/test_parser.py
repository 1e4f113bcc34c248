import pytest

from equation_editor.errors import ExpressionSyntaxError
from equation_editor.expression_tree import (
  parse_expression, Tokenizer, TokenKind,
  Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)


def test_sum_of_terms():
  """1+2*x is two terms: [1] and [2, x]"""
  tree = parse_expression("1+2*x")
  assert isinstance(tree, Expression)
  assert len(tree.terms) == 2
  first, second = tree.terms
  assert isinstance(first, Term) and isinstance(second, Term)
  assert len(first.factors) == 1 and isinstance(first.factors[0], Number)
  assert first.factors[0].value == 1
  assert isinstance(second.factors[0], Number) and second.factors[0].value == 2
  assert isinstance(second.factors[1], Variable) and second.factors[1].name == 'x'


def test_divide():
  tree = parse_expression("a/b")
  divide = tree.terms[0].factors[0]
  assert isinstance(divide, Divide)
  assert isinstance(divide.children()[0], Variable) and divide.children()[0].name == 'a'
  assert isinstance(divide.children()[1], Variable) and divide.children()[1].name == 'b'


def test_divide_is_left_associative():
  divide = parse_expression("a/b/c").terms[0].factors[0]
  assert isinstance(divide.numerator, Divide)
  assert divide.denominator.name == 'c'


def test_power_is_right_associative():
  power = parse_expression("x^y^2").terms[0].factors[0]
  assert isinstance(power, Power)
  assert power.base.name == 'x'
  assert isinstance(power.exponent, Power)


def test_signed_exponent():
  power = parse_expression("x^-2").terms[0].factors[0]
  assert power.exponent.negative
  assert power.exponent.value == 2


def test_implicit_multiplication():
  term = parse_expression("2xy").terms[0]
  assert [type(f) for f in term.factors] == [Number, Variable, Variable]


def test_negative_terms():
  tree = parse_expression("-a-b+c")
  assert [t.negative for t in tree.terms] == [True, True, False]


def test_constants_and_variables():
  factors = parse_expression("e*P*i*x").terms[0].factors
  assert [type(f) for f in factors] == [Constant, Constant, Constant, Variable]


def test_imaginary_literal():
  number = parse_expression("i2").terms[0].factors[0]
  assert isinstance(number, Number)
  assert number.value == 2j


def test_number_with_exponent():
  number = parse_expression("1.5E3").terms[0].factors[0]
  assert number.value == 1500


def test_function_and_group():
  function = parse_expression("sin(x+1)").terms[0].factors[0]
  assert isinstance(function, Function)
  assert function.name == 'sin'
  assert isinstance(function.argument, Expression)
  assert len(function.argument.terms) == 2


def test_brackets_make_a_group():
  group = parse_expression("2[a+b]").terms[0].factors[1]
  assert isinstance(group, Expression)


def test_differential():
  diff = parse_expression("d/dx(x^2)").terms[0].factors[0]
  assert isinstance(diff, Differential)
  assert diff.variable == 'x'
  assert isinstance(diff.argument, Expression)


def test_whitespace_is_ignored():
  assert parse_expression(" 1 + 2 * x ").to_string() == parse_expression("1+2*x").to_string()


def test_parents_are_set():
  tree = parse_expression("a/b+sin(x)")
  divide = tree.terms[0].factors[0]
  assert divide.parent is tree.terms[0]
  assert divide.numerator.parent is divide
  assert tree.terms[0].parent is tree


def test_tokenizer_positions():
  tokens = Tokenizer("1 + x").tokenize()
  assert [t.kind for t in tokens] == [TokenKind.NUMBER, TokenKind.PLUS, TokenKind.VARIABLE,
                                      TokenKind.END]
  assert [t.position for t in tokens] == [0, 2, 4, 5]


def test_syntax_error_position():
  """1+*2 is rejected at the '*'"""
  with pytest.raises(ExpressionSyntaxError) as info:
    parse_expression("1+*2")
  assert info.value.position == 2


@pytest.mark.parametrize("text, position", [
  ("", 0),
  ("(1+2", 4),
  ("(1+2]", 4),
  ("1+2)", 3),
  ("2 # 3", 2),
  ("x^", 2),
])
def test_malformed_input(text, position):
  with pytest.raises(ExpressionSyntaxError) as info:
    parse_expression(text)
  assert info.value.position == position
