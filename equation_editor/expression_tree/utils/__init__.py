"""Utilities for equation trees."""

from .simplifier import ExpressionSimplifier, make_number
from .sympy_utils import SymPyConverter
from .validator import ExpressionValidator
from .tree_utils import (
  get_all_nodes, find_nodes_by_type, get_variables, structure_key, trees_equal,
  get_node_path, node_at_path
)

__all__ = [
  'ExpressionSimplifier', 'make_number', 'SymPyConverter', 'ExpressionValidator',
  'get_all_nodes', 'find_nodes_by_type', 'get_variables', 'structure_key', 'trees_equal',
  'get_node_path', 'node_at_path'
]
