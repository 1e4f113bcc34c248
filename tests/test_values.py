import cmath
import math

import pytest
import sympy as sp

from equation_editor.expression_tree import parse_expression, SymPyConverter, Number
from equation_editor.expression_tree.core.operators import (
  is_zero, is_one, is_real, is_integer_value, is_negative, clean_value, format_value,
  CONSTANT_MAP, FUNCTION_MAP
)
from equation_editor.errors import EvaluationError


def test_tolerance_helpers():
  assert is_zero(1e-12)
  assert not is_zero(1e-3j)
  assert is_one(1 + 1e-12j)
  assert is_real(3 + 1e-12j)
  assert is_integer_value(4.0000000000001)
  assert not is_integer_value(2.5)
  assert is_negative(-2)
  assert is_negative(-3j)
  assert not is_negative(2 - 3j)
  assert clean_value(complex(-0.0, 1e-13)) == 0


@pytest.mark.parametrize("value, text", [
  (3, "3"),
  (2.5, "2.5"),
  (2j, "i2"),
  (1 + 2j, "(1+i2)"),
  (1e20, "1E+20"),
])
def test_format_value(value, text):
  assert format_value(value) == text


@pytest.mark.parametrize("text", ["3", "2.5", "i2", "1E+20", "0.1"])
def test_formatted_numbers_parse_back(text):
  number = parse_expression(text).terms[0].factors[0]
  assert isinstance(number, Number)
  assert format_value(number.value) == text


def test_constants():
  assert cmath.isclose(CONSTANT_MAP['e'], cmath.e)
  assert CONSTANT_MAP['P'] == CONSTANT_MAP['π']
  assert CONSTANT_MAP['i'] == 1j
  assert cmath.isclose(parse_expression("i*i").get_value(), -1)


def test_functions_are_complex():
  assert cmath.isclose(FUNCTION_MAP['sqrt'](-4), 2j)
  assert FUNCTION_MAP['log'](0).real == float('-inf')
  assert cmath.isclose(FUNCTION_MAP['exp'](1j * cmath.pi), -1, abs_tol=1e-12)


def test_to_sympy():
  converter = SymPyConverter()
  x = sp.Symbol('x')
  assert sp.simplify(converter.to_sympy(parse_expression("2x^2-x/3")) - (2 * x**2 - x / 3)) == 0
  assert converter.to_sympy(parse_expression("P")) == sp.pi
  assert converter.latex(parse_expression("x^2")) == "x^{2}"


def test_equivalent():
  converter = SymPyConverter()
  assert converter.equivalent(parse_expression("(x+1)^2"), parse_expression("x^2+2x+1"))
  assert not converter.equivalent(parse_expression("x+1"), parse_expression("x"))


def test_derivative_uses_bound_variables():
  root = parse_expression("d/dx(x*y)")
  diff = root.terms[0].factors[0]
  assert cmath.isclose(diff.get_value({'y': 5, 'x': 1}), 5)
  with pytest.raises(EvaluationError):
    diff.get_value({'x': 1})


def test_negation_keeps_positive_zero_imaginary_part():
  value = Number(2, negative=True).get_value()
  assert value == -2
  assert math.copysign(1.0, value.imag) == 1.0
  assert cmath.isclose(parse_expression("(-2)^0.5").get_value(), 2 ** 0.5 * 1j)
