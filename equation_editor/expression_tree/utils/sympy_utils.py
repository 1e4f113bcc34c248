import sympy as sp
from typing import Dict, Optional

from ..core.node import (
  Node, Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)
from ..core.operators import is_integer_value
from .tree_utils import get_variables
from ...errors import EvaluationError


class SymPyConverter:
  """Bridges equation trees to SymPy expressions"""

  CONSTANTS = {'e': sp.E, 'P': sp.pi, 'π': sp.pi, 'i': sp.I}
  FUNCTIONS = {
    'sin': sp.sin, 'cos': sp.cos, 'tan': sp.tan,
    'log': sp.log, 'exp': sp.exp, 'sqrt': sp.sqrt,
  }

  def to_sympy(self, node: Node) -> sp.Expr:
    expr = self._convert(node)
    return -expr if node.negative else expr

  def _convert(self, node: Node) -> sp.Expr:
    if isinstance(node, Number):
      return self._literal(node.value)
    if isinstance(node, Constant):
      return self.CONSTANTS[node.name]
    if isinstance(node, Variable):
      return sp.Symbol(node.name)
    if isinstance(node, Term):
      return sp.Mul(*[self.to_sympy(factor) for factor in node.factors])
    if isinstance(node, Expression):
      return sp.Add(*[self.to_sympy(term) for term in node.terms])
    if isinstance(node, Divide):
      return self.to_sympy(node.numerator) / self.to_sympy(node.denominator)
    if isinstance(node, Power):
      return self.to_sympy(node.base) ** self.to_sympy(node.exponent)
    if isinstance(node, Function):
      return self.FUNCTIONS[node.name](self.to_sympy(node.argument))
    if isinstance(node, Differential):
      return sp.Derivative(self.to_sympy(node.argument), sp.Symbol(node.variable))
    raise TypeError(f"Cannot convert {type(node).__name__} to SymPy")

  @staticmethod
  def _literal(value: complex) -> sp.Expr:
    parts = []
    for part in (value.real, value.imag):
      parts.append(sp.Integer(int(part)) if is_integer_value(part) else sp.Float(part))
    return parts[0] + sp.I * parts[1]

  def derivative_value(self, argument: Node, variable: str,
                       bindings: Optional[Dict[str, complex]] = None) -> complex:
    """Numeric value of d/d<variable> of ``argument`` at the bound values"""
    derivative = sp.diff(self.to_sympy(argument), sp.Symbol(variable))
    values = {}
    for node in get_variables(argument):
      if node.value is not None:
        values[sp.Symbol(node.name)] = node.value
    for name, value in (bindings or {}).items():
      values[sp.Symbol(name)] = value
    result = derivative.subs(values).evalf()
    if result.free_symbols:
      missing = ', '.join(sorted(str(s) for s in result.free_symbols))
      raise EvaluationError(f"Unbound variables in derivative: {missing}")
    try:
      return complex(result)
    except TypeError:
      raise EvaluationError(f"Derivative does not evaluate to a number: {result}")

  def equivalent(self, a: Node, b: Node) -> bool:
    """Symbolic equivalence check"""
    try:
      return sp.simplify(self.to_sympy(a) - self.to_sympy(b)) == 0
    except Exception:
      return False

  def latex(self, node: Node) -> str:
    return sp.latex(self.to_sympy(node))
