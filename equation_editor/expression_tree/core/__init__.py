"""Core equation tree components."""

from .node import (
  Box, Node, NodeSequence, Binary,
  Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)
from .operators import (
  NodeType, Select, SELECT_NAMES, SELECT_BY_NAME, FACTOR_PRECEDENCE,
  CONSTANT_MAP, FUNCTION_MAP, ZERO_TOLERANCE,
  is_zero, is_one, is_real, is_integer_value, is_finite, is_negative,
  clean_value, format_value
)
from .iterators import NodeIterator, FactorIterator

__all__ = [
  'Box', 'Node', 'NodeSequence', 'Binary',
  'Number', 'Constant', 'Variable', 'Term', 'Expression', 'Divide', 'Power',
  'Function', 'Differential',
  'NodeType', 'Select', 'SELECT_NAMES', 'SELECT_BY_NAME', 'FACTOR_PRECEDENCE',
  'CONSTANT_MAP', 'FUNCTION_MAP', 'ZERO_TOLERANCE',
  'is_zero', 'is_one', 'is_real', 'is_integer_value', 'is_finite', 'is_negative',
  'clean_value', 'format_value',
  'NodeIterator', 'FactorIterator'
]
