from typing import List, Optional, Tuple

from ..core.node import (
  Node, Number, Term, Expression, Divide, Power, Function, Differential
)
from ..core.operators import (
  NodeType, FACTOR_PRECEDENCE, ZERO_TOLERANCE,
  is_zero, is_one, is_real, is_integer_value, is_finite, is_negative, clean_value
)
from ..core.iterators import FactorIterator
from .tree_utils import structure_key

# Integer exponents beyond this are left symbolic
MAX_FOLDED_EXPONENT = 64


def make_number(value, negative: bool = False) -> Number:
  """Number literal for ``value`` with its sign moved onto the negation flag"""
  value = clean_value(value)
  if is_negative(value):
    return Number(clean_value(-value), negative=not negative)
  return Number(value, negative=negative and not is_zero(value))


def _key(node: Node, include_sign: bool = True) -> str:
  return repr(structure_key(node, include_sign))


def _product(numbers: List[Number]) -> complex:
  value = complex(1.0)
  for number in numbers:
    value *= number.get_value()
  return value


def _literal_value(expression: Expression) -> Optional[complex]:
  if len(expression.terms) == 1 and len(expression.terms[0].factors) == 1:
    factor = expression.terms[0].factors[0]
    if isinstance(factor, Number):
      return expression.get_value()
  return None


def _unwrap(node: Node) -> Node:
  """A parenthesised single factor stands for the factor itself"""
  if isinstance(node, Expression) and len(node.terms) == 1 and len(node.terms[0].factors) == 1:
    term = node.terms[0]
    inner = term.factors[0]
    inner.negative = inner.negative ^ term.negative ^ node.negative
    return inner
  return node


def _multiplicative_view(node: Node) -> Tuple[bool, List[Node]]:
  if isinstance(node, Expression) and len(node.terms) == 1:
    term = node.terms[0]
    return node.negative ^ term.negative, list(term.factors)
  return False, [node]


def _power_view(factor: Node) -> Tuple[str, Node, float]:
  """(base key, base node, real exponent) of a factor"""
  if isinstance(factor, Power) and isinstance(factor.exponent, Number):
    exponent = factor.exponent.get_value()
    if is_real(exponent):
      return _key(factor.base), factor.base, exponent.real
  return _key(factor, include_sign=False), factor, 1.0


def _raise(base: Node, exponent: float) -> Node:
  if is_one(exponent):
    return base
  return Power(base, make_number(exponent))


def _compose(factors: List[Node]) -> Node:
  if not factors:
    return Number(1)
  if len(factors) == 1:
    return factors[0]
  return Expression([Term(factors)])


def _exponent_value(exponent: Optional[Node]) -> Optional[complex]:
  if exponent is None:
    return complex(1.0)
  if isinstance(exponent, Number):
    return exponent.get_value()
  return None


def _add_exponents(first: Optional[Node], second: Optional[Node]) -> Node:
  a, b = _exponent_value(first), _exponent_value(second)
  if a is not None and b is not None:
    return make_number(a + b)
  return Expression([Term([first if first is not None else Number(1)]),
                     Term([second if second is not None else Number(1)])])


def _term_signature(term: Term) -> Tuple[tuple, complex]:
  coefficient = complex(-1.0 if term.negative else 1.0)
  keys = []
  for factor in term.factors:
    if isinstance(factor, Number):
      coefficient *= factor.get_value()
    else:
      keys.append(_key(factor))
  return tuple(sorted(keys)), coefficient


def _build_term(coefficient: complex, factors: List[Node]) -> Term:
  if is_zero(coefficient):
    return Term([Number(0)])
  number = make_number(coefficient)
  negative = number.negative
  number.negative = False
  if is_one(number.value) and factors:
    return Term(factors, negative=negative)
  return Term([number] + factors, negative=negative)


def _is_zero_term(term: Term) -> bool:
  return (len(term.factors) == 1 and isinstance(term.factors[0], Number)
          and is_zero(term.factors[0].value))


def _term_sort_key(term: Term):
  symbolic = '*'.join(f.to_string() for f in term.factors if not isinstance(f, Number))
  return (symbolic, term.to_string())


class ExpressionSimplifier:
  """Bottom-up algebraic rewriting of equation trees.

  Each rule receives a node, simplifies its children first and returns the
  node that takes its place. Rules never fail: when nothing applies the node
  itself is returned.
  """

  @staticmethod
  def simplify_node(node: Node) -> Node:
    return _RULES[node.node_type](node)

  @staticmethod
  def simplify_tree(root: Node, max_passes: int = 16) -> Tuple[Node, int, bool]:
    """Repeat passes until the tree stops changing.

    Returns:
        (new root, passes run, whether a fixed point was reached)
    """
    for passes in range(1, max_passes + 1):
      before = structure_key(root)
      root = ExpressionSimplifier.simplify_node(root)
      if structure_key(root) == before:
        return root, passes, True
    return root, max_passes, False

  @staticmethod
  def _simplify_children(node: Node, unwrap: bool = False):
    for child in node.children():
      simplified = ExpressionSimplifier.simplify_node(child)
      if unwrap:
        simplified = _unwrap(simplified)
      if simplified is not child:
        node.replace(child, simplified)

  @staticmethod
  def _simplify_leaf(node: Node) -> Node:
    return node

  @staticmethod
  def _simplify_number(node: Number) -> Node:
    value = clean_value(node.value)
    if is_negative(value):
      value = clean_value(-value)
      node.negative = not node.negative
    node.value = value
    if is_zero(value):
      node.negative = False
    return node

  @staticmethod
  def _simplify_function(node: Function) -> Node:
    ExpressionSimplifier._simplify_children(node)
    literal = _literal_value(node.argument)
    if literal is not None:
      result = node.function(literal)
      # only exact looking results replace the call, sin(0) but not sin(1)
      if is_finite(result) and is_integer_value(result.real) and is_integer_value(result.imag):
        return make_number(result, node.negative)
    return node

  @staticmethod
  def _simplify_differential(node: Differential) -> Node:
    ExpressionSimplifier._simplify_children(node)
    return node

  @staticmethod
  def _simplify_power(node: Power) -> Node:
    ExpressionSimplifier._simplify_children(node, unwrap=True)
    base, exponent = node.base, node.exponent
    exponent_value = exponent.get_value() if isinstance(exponent, Number) else None

    if exponent_value is not None:
      if is_zero(exponent_value):
        return Number(1, negative=node.negative)
      if is_one(exponent_value):
        base.negative = base.negative ^ node.negative
        return base

    if isinstance(base, Number):
      base_value = base.get_value()
      if is_one(base_value):
        return Number(1, negative=node.negative)
      if exponent_value is not None:
        if is_zero(base_value) and is_real(exponent_value) and exponent_value.real > 0:
          return Number(0)
        if (is_integer_value(exponent_value) and abs(exponent_value.real) <= MAX_FOLDED_EXPONENT
            and not is_zero(base_value)):
          try:
            result = base_value ** int(round(exponent_value.real))
          except OverflowError:
            result = None
          if result is not None and is_finite(result):
            return make_number(result, node.negative)

    if (isinstance(base, Power) and not base.negative and exponent_value is not None
        and is_integer_value(exponent_value)):
      inner = base.exponent
      if isinstance(inner, Number):
        new_exponent = make_number(inner.get_value() * exponent_value)
      else:
        new_exponent = Expression([Term([make_number(exponent_value), inner])])
      return Power(base.base, new_exponent, negative=node.negative)

    return node

  @staticmethod
  def _simplify_divide(node: Divide) -> Node:
    ExpressionSimplifier._simplify_children(node, unwrap=True)
    numerator, denominator = node.numerator, node.denominator

    if isinstance(numerator, Number) and is_zero(numerator.value):
      return Number(0)
    if isinstance(denominator, Number):
      denominator_value = denominator.get_value()
      if is_one(denominator_value):
        numerator.negative = numerator.negative ^ node.negative
        return numerator
      if isinstance(numerator, Number) and not is_zero(denominator_value):
        return make_number(numerator.get_value() / denominator_value, node.negative)

    return ExpressionSimplifier._cancel_common_factors(node)

  @staticmethod
  def _cancel_common_factors(node: Divide) -> Node:
    num_negative, numerator = _multiplicative_view(node.numerator)
    den_negative, denominator = _multiplicative_view(node.denominator)
    symbolic = [f for f in numerator + denominator if not isinstance(f, Number)]
    negative = num_negative ^ den_negative ^ node.negative
    for factor in symbolic:
      negative ^= factor.negative
    changed = False

    num_numbers = [f for f in numerator if isinstance(f, Number)]
    den_numbers = [f for f in denominator if isinstance(f, Number)]
    if num_numbers and den_numbers and not is_zero(_product(den_numbers)):
      coefficient = make_number(_product(num_numbers) / _product(den_numbers))
      negative ^= coefficient.negative
      coefficient.negative = False
      numerator = [coefficient] + [f for f in numerator if not isinstance(f, Number)]
      denominator = [f for f in denominator if not isinstance(f, Number)]
      changed = True

    for i, factor in enumerate(numerator):
      if isinstance(factor, Number):
        continue
      key, base, power = _power_view(factor)
      for j, other in enumerate(denominator):
        if other is None or isinstance(other, Number):
          continue
        other_key, other_base, other_power = _power_view(other)
        if other_key != key:
          continue
        difference = power - other_power
        numerator[i] = _raise(base, difference) if difference > ZERO_TOLERANCE else None
        denominator[j] = _raise(other_base, -difference) if difference < -ZERO_TOLERANCE else None
        changed = True
        break

    if not changed:
      return node

    for factor in symbolic:
      factor.negative = False
    numerator = [f for f in numerator if f is not None]
    denominator = [f for f in denominator if f is not None]
    if len(numerator) > 1:
      numerator = [f for f in numerator if not (isinstance(f, Number) and is_one(f.get_value()))]
    result = _compose(numerator)
    if denominator:
      result = Divide(result, _compose(denominator))
    result.negative = result.negative ^ negative
    return result

  @staticmethod
  def _simplify_term(term: Term) -> Node:
    ExpressionSimplifier._simplify_children(term)
    ExpressionSimplifier._flatten_term(term)
    ExpressionSimplifier._merge_like_factors(term)
    ExpressionSimplifier._fold_coefficient(term)
    return term

  @staticmethod
  def _flatten_term(term: Term):
    """Splice single-term groups into the term and move factor signs onto it"""
    negative = term.negative
    i = 0
    while i < len(term.factors):
      factor = term.factors[i]
      if isinstance(factor, Expression) and len(factor.terms) == 1:
        inner = factor.terms[0]
        negative ^= factor.negative ^ inner.negative
        term.splice(i, list(inner.factors))
        continue
      if factor.negative:
        factor.negative = False
        negative = not negative
      i += 1
    term.negative = negative

  @staticmethod
  def _merge_like_factors(term: Term):
    it = FactorIterator(term)
    while not it.at_end:
      if isinstance(it.factor, Number):
        it.next()
        continue
      key = _key(it.node)
      other = FactorIterator(term, it.index + 1)
      while not other.at_end:
        if isinstance(other.factor, Number) or _key(other.node) != key:
          other.next()
          continue
        exponent = _add_exponents(it.exponent, other.exponent)
        merged = ExpressionSimplifier.simplify_node(Power(it.node, exponent))
        other.erase()
        it.replace(merged)
        if merged.negative:
          merged.negative = False
          term.negative = not term.negative
        if isinstance(merged, Number):
          break
        key = _key(it.node)
      it.next()

  @staticmethod
  def _fold_coefficient(term: Term):
    numbers = [f for f in term.factors if isinstance(f, Number)]
    if not numbers:
      return
    coefficient = _product(numbers)
    if is_zero(coefficient):
      for factor in list(term.factors):
        term.remove(factor)
      term.append(Number(0))
      term.negative = False
      return

    others = [f for f in term.factors if not isinstance(f, Number)]
    leading = numbers[0]
    if (len(numbers) == 1 and term.factors[0] is leading and not leading.negative
        and (not others or not is_one(coefficient))):
      return

    for number in numbers:
      term.remove(number)
    number = make_number(coefficient)
    if number.negative:
      number.negative = False
      term.negative = not term.negative
    if not is_one(number.value) or not others:
      term.insert(0, number)

  @staticmethod
  def _simplify_expression(expression: Expression) -> Node:
    ExpressionSimplifier._simplify_children(expression)
    ExpressionSimplifier._flatten_expression(expression)
    ExpressionSimplifier._merge_like_terms(expression)
    for term in list(expression.terms):
      if len(expression.terms) > 1 and _is_zero_term(term):
        expression.remove(term)
    return expression

  @staticmethod
  def _flatten_expression(expression: Expression):
    """Lift the terms of a parenthesised sum standing alone in a term"""
    i = 0
    while i < len(expression.terms):
      term = expression.terms[i]
      if len(term.factors) == 1 and isinstance(term.factors[0], Expression):
        inner = term.factors[0]
        flip = term.negative ^ inner.negative
        moved = list(inner.terms)
        for moved_term in moved:
          moved_term.negative = moved_term.negative ^ flip
        expression.splice(i, moved)
        continue
      i += 1

  @staticmethod
  def _merge_like_terms(expression: Expression):
    i = 0
    while i < len(expression.terms):
      term = expression.terms[i]
      key, coefficient = _term_signature(term)
      merged = False
      j = i + 1
      while j < len(expression.terms):
        other = expression.terms[j]
        other_key, other_coefficient = _term_signature(other)
        if other_key == key:
          coefficient += other_coefficient
          expression.remove(other)
          merged = True
        else:
          j += 1
      if merged:
        symbolic = [f for f in term.factors if not isinstance(f, Number)]
        expression.replace(term, _build_term(coefficient, symbolic))
      i += 1

  @staticmethod
  def normalize(node: Node) -> Node:
    """Sort factors by variant precedence and terms by their symbolic part"""
    for child in node.children():
      ExpressionSimplifier.normalize(child)
    if isinstance(node, Term):
      node.items.sort(key=lambda factor: FACTOR_PRECEDENCE[factor.node_type])
    elif isinstance(node, Expression):
      node.items.sort(key=_term_sort_key)
    return node


_RULES = {
  NodeType.NUMBER: ExpressionSimplifier._simplify_number,
  NodeType.CONSTANT: ExpressionSimplifier._simplify_leaf,
  NodeType.VARIABLE: ExpressionSimplifier._simplify_leaf,
  NodeType.TERM: ExpressionSimplifier._simplify_term,
  NodeType.EXPRESSION: ExpressionSimplifier._simplify_expression,
  NodeType.DIVIDE: ExpressionSimplifier._simplify_divide,
  NodeType.POWER: ExpressionSimplifier._simplify_power,
  NodeType.FUNCTION: ExpressionSimplifier._simplify_function,
  NodeType.DIFFERENTIAL: ExpressionSimplifier._simplify_differential,
}
