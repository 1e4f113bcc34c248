from equation_editor.expression_tree import parse_expression, Box, Variable, Number, Divide
from equation_editor.expression_tree.utils import get_all_nodes
from equation_editor.layout import LayoutEngine
from equation_editor.expression_tree.core.operators import Select


def render(text, gc):
  root = parse_expression(text)
  LayoutEngine(gc).render(root)
  return root, gc.rows()


def geometry(root):
  return [(node.box.as_tuple(), node.inner.as_tuple(), node.baseline)
          for node in get_all_nodes(root)]


def test_sum_on_one_row(gc):
  root, rows = render("1+2x", gc)
  assert rows == ["1+2x"]
  assert root.box == Box(4, 1, 0, 0)


def test_explicit_dot_between_numbers(gc):
  _, rows = render("2*3", gc)
  assert rows == ["2*3"]


def test_leading_minus(gc):
  _, rows = render("-a-b", gc)
  assert rows == ["-a-b"]


def test_fraction_stacks(gc):
  root, rows = render("a/b", gc)
  assert rows == ["a", "-", "b"]
  assert root.box.height == 3
  assert root.baseline == 1


def test_fraction_centres_narrow_side(gc):
  _, rows = render("abc/d", gc)
  # implicit product: only c/d is the fraction
  assert rows == ["  c", "ab-", "  d"]


def test_power_raises_exponent(gc):
  root, rows = render("x^2", gc)
  assert rows == [" 2", "x"]
  assert root.baseline == 1


def test_sum_in_product_gets_parentheses(gc):
  _, rows = render("2(a+b)", gc)
  assert rows == ["2(a+b)"]


def test_compound_power_base_gets_parentheses(gc):
  _, rows = render("(a+b)^2", gc)
  assert rows == ["     2", "(a+b)"]


def test_function_and_differential(gc):
  _, rows = render("sin(x)+d/dx(x)", gc)
  assert rows == ["sin(x)+d/dx(x)"]


def test_negative_factor_is_grouped(gc):
  root = parse_expression("2x")
  root.terms[0].factors[1].negative = True
  LayoutEngine(gc).render(root)
  assert gc.rows() == ["2(-x)"]


def test_origin_offset(gc):
  root = parse_expression("ab")
  box = LayoutEngine(gc).layout(root, 3, 2)
  assert box == Box(2, 1, 3, 2)
  assert root.terms[0].factors[1].box.x0 == 4


def test_layout_is_deterministic(gc):
  root = parse_expression("x^2+3(a-b)/sin(y)-d/dz(z^3)")
  engine = LayoutEngine(gc)
  engine.layout(root)
  first = geometry(root)
  engine.layout(root)
  assert geometry(root) == first


def test_children_lie_inside_parent(gc):
  root = parse_expression("(a+b)^2/(c-d)+x^y^z")
  LayoutEngine(gc).layout(root)
  for node in get_all_nodes(root):
    for child in node.children():
      assert node.box.contains(child.box)


def test_find_node(gc):
  root, _ = render("1+2x", gc)
  hit = root.find_node(3, 0)
  assert isinstance(hit, Variable) and hit.name == 'x'
  hit = root.find_node(0, 0)
  assert isinstance(hit, Number)
  assert root.find_node(10, 0) is None


def test_find_node_in_fraction(gc):
  root, _ = render("a/b", gc)
  assert root.find_node(0, 2).name == 'b'
  assert isinstance(root.find_node(0, 1), Divide)


def test_find_node_box(gc):
  root, _ = render("1+2x", gc)
  term = root.terms[1]
  assert root.find_node_box(Box(2, 1, 2, 0)) is term
  assert root.find_node_box(Box(1, 1, 20, 5)) is None


def test_selection_is_highlighted(gc):
  root = parse_expression("a+b")
  root.terms[1].set_select(Select.ALL)
  engine = LayoutEngine(gc)
  engine.render(root)
  assert gc.select_boxes == [root.terms[1].box.as_tuple()]
  assert engine.selection_box(root) == root.terms[1].box
  assert gc.flushes == 1
