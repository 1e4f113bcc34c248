import pytest

from equation_editor.expression_tree import parse_expression, Expression, Term, Variable, Function
from equation_editor.expression_tree.utils import (
  get_all_nodes, find_nodes_by_type, get_variables, get_node_path, node_at_path, structure_key
)


def test_traversal_orders():
  root = parse_expression("a+b*c")
  depth = get_all_nodes(root)
  breadth = get_all_nodes(root, 'breadth_first')
  assert [type(n) for n in depth] == [Expression, Term, Variable, Term, Variable, Variable]
  assert [type(n) for n in breadth] == [Expression, Term, Term, Variable, Variable, Variable]
  with pytest.raises(ValueError):
    get_all_nodes(root, 'sideways')


def test_find_by_type():
  root = parse_expression("sin(x)+y*cos(x)")
  assert [f.name for f in find_nodes_by_type(root, Function)] == ['sin', 'cos']
  assert [v.name for v in get_variables(root)] == ['x', 'y', 'x']


def test_node_path_round_trip():
  root = parse_expression("a+b*c")
  c = root.terms[1].factors[1]
  path = get_node_path(root, c)
  assert path == (1, 1)
  assert node_at_path(root, path) is c
  assert get_node_path(root, root) == ()
  assert get_node_path(root, Variable('z')) is None
  with pytest.raises(IndexError):
    node_at_path(root, (5,))


def test_structure_key_sign_handling():
  positive = parse_expression("x").terms[0]
  negative = parse_expression("-x").terms[0]
  assert structure_key(negative) != structure_key(positive)
  assert structure_key(negative, include_sign=False) == structure_key(positive)
