import cmath

import pytest

from equation_editor.expression_tree import (
  parse_expression, ExpressionSimplifier, Number, Variable, Power, Term, Expression, Divide
)
from equation_editor.expression_tree.utils import structure_key, ExpressionValidator


def simplified(text):
  root, _, converged = ExpressionSimplifier.simplify_tree(parse_expression(text))
  assert converged
  return root


def single_factor(root):
  assert isinstance(root, Expression) and len(root.terms) == 1
  term = root.terms[0]
  assert len(term.factors) == 1
  return term, term.factors[0]


def test_like_terms_merge():
  """x^2+x^2 -> one term [2, x^2]"""
  root = simplified("x^2+x^2")
  assert len(root.terms) == 1
  term = root.terms[0]
  assert not term.negative
  number, power = term.factors
  assert isinstance(number, Number) and number.value == 2
  assert isinstance(power, Power)
  assert isinstance(power.base, Variable) and power.base.name == 'x'
  assert isinstance(power.exponent, Number) and power.exponent.value == 2


def test_times_zero():
  term, factor = single_factor(simplified("x*0"))
  assert isinstance(factor, Number) and factor.value == 0
  assert not term.negative


def test_power_zero():
  _, factor = single_factor(simplified("x^0"))
  assert isinstance(factor, Number) and factor.value == 1


def test_power_one_and_times_one():
  _, factor = single_factor(simplified("1*x^1"))
  assert isinstance(factor, Variable) and factor.name == 'x'


def test_plus_zero():
  root = simplified("x+0")
  assert root.to_string() == "x"


def test_like_factors_merge_by_exponent_addition():
  term = simplified("x*x^2*y").terms[0]
  power = term.factors[0]
  assert isinstance(power, Power)
  assert power.exponent.value == 3
  assert isinstance(term.factors[1], Variable) and term.factors[1].name == 'y'


def test_coefficient_folds_to_front():
  term = simplified("x*2*3").terms[0]
  assert isinstance(term.factors[0], Number) and term.factors[0].value == 6
  assert term.factors[1].name == 'x'


def test_coefficients_add():
  root = simplified("2x+3x-x")
  assert root.to_string() == "4*x"


def test_cancelling_terms():
  _, factor = single_factor(simplified("x-x"))
  assert isinstance(factor, Number) and factor.value == 0


def test_literal_division():
  _, factor = single_factor(simplified("6/4"))
  assert isinstance(factor, Number) and factor.value == 1.5


def test_divide_cancels_common_factors():
  _, factor = single_factor(simplified("x^3/x"))
  assert isinstance(factor, Power)
  assert factor.exponent.value == 2


def test_divide_keeps_remaining_denominator():
  _, factor = single_factor(simplified("x/x^2"))
  assert isinstance(factor, Divide)
  assert factor.numerator.get_value() == 1
  assert isinstance(factor.denominator, Variable)


def test_nested_powers():
  _, factor = single_factor(simplified("(x^2)^3"))
  assert isinstance(factor, Power)
  assert factor.base.name == 'x'
  assert factor.exponent.value == 6


def test_numeric_power_folds():
  _, factor = single_factor(simplified("2^10"))
  assert factor.value == 1024


def test_function_folds_only_exact_results():
  assert simplified("cos(0)").to_string() == "1"
  assert simplified("sin(1)").to_string() == "sin(1)"


def test_sign_moves_to_term():
  root = simplified("2*(-3)")
  term = root.terms[0]
  assert term.negative
  assert term.factors[0].value == 6


@pytest.mark.parametrize("text", [
  "x^2+x^2", "x*0", "2x+3x", "a*b*a", "x/x", "(x^2)^3", "(a+b)(a+b)",
  "sin(x)+sin(x)", "-(x-y)", "x^3/x", "2/(4x)", "d/dx(x*x)",
])
def test_idempotent(text):
  once = simplified(text)
  key = structure_key(once)
  twice = ExpressionSimplifier.simplify_node(once)
  assert structure_key(twice) == key


@pytest.mark.parametrize("text", [
  "1+2*3", "2*3+4/2-5^2", "(1+2)*(3-4)", "2^-1", "6/4/3", "i2*i2",
  "sin(0)+cos(0)", "e*P", "(2+i3)^2", "-(4-6)*2", "2[3+4]^2", "sqrt(4)*log(1)",
  "(-2)^0.5", "(1-3)^1.5", "(-e)^(P+P^1.5)", "((1.5-2))^e",
])
def test_value_preserved(text):
  before = parse_expression(text).get_value()
  after = simplified(text).get_value()
  assert cmath.isclose(before, after, rel_tol=1e-9, abs_tol=1e-9)


@pytest.mark.parametrize("text", ["x^2+2x+1", "a/b*c", "sin(x)^2+cos(x)^2", "(a+b)/(a-b)"])
def test_result_is_well_formed(text):
  root = simplified(text)
  assert ExpressionValidator.is_valid_tree(root)
  assert root.parent is None


def test_symbolic_value_preserved_with_bindings():
  bindings = {'x': 1.5, 'y': -2.0}
  texts = [
    "x^2+x^2", "x*x^2*y", "x^3/x", "2x+3x-y", "(-x)^0.5", "(-(1)*x)^-((1.5-P))",
  ]
  for text in texts:
    before = parse_expression(text).get_value(bindings)
    after = simplified(text).get_value(bindings)
    assert cmath.isclose(before, after, rel_tol=1e-9)


def test_normalize_orders_factors():
  root = ExpressionSimplifier.normalize(parse_expression("x^2*y*3"))
  assert [type(f) for f in root.terms[0].factors] == [Number, Variable, Power]
