import pytest

from equation_editor import Equation, EditorConfig
from equation_editor.undo import EqnUndoList
from equation_editor.expression_tree import parse_expression
from equation_editor.expression_tree.utils import trees_equal


def test_undo_list_cursor():
  undo = EqnUndoList()
  undo.push("a")
  assert not undo.can_undo
  assert undo.undo() is None
  undo.push("b")
  undo.push("c")
  assert undo.undo() == "b"
  assert undo.undo() == "a"
  assert undo.undo() is None
  assert undo.redo() == "b"
  assert undo.top() == "b"
  assert undo.can_redo


def test_push_truncates_redo_tail():
  undo = EqnUndoList()
  for snapshot in "abc":
    undo.push(snapshot)
  undo.undo()
  undo.undo()
  undo.push("d")
  assert len(undo) == 2
  assert not undo.can_redo
  assert undo.undo() == "a"


def test_limit_drops_oldest():
  undo = EqnUndoList(limit=3)
  for snapshot in "abcde":
    undo.push(snapshot)
  assert len(undo) == 3
  assert undo.undo() == "d"
  assert undo.undo() == "c"
  assert undo.undo() is None


def test_clear():
  undo = EqnUndoList()
  undo.push("a")
  undo.clear()
  assert len(undo) == 0
  assert undo.top() is None


def test_bad_limit():
  with pytest.raises(ValueError):
    EqnUndoList(limit=0)


def test_pop_restores_pushed_tree():
  equation = Equation("x^2+1")
  before = parse_expression("x^2+1")
  equation.set_expression("y")
  equation.push_undo()
  assert equation.pop_undo()
  assert trees_equal(equation.root, before)


def test_pop_push_symmetry_over_many_edits():
  texts = ["a", "a+b", "a+b*c", "sin(a)/b", "d/dx(x^2)"]
  equation = Equation(texts[0])
  for text in texts[1:]:
    equation.set_expression(text)
    equation.push_undo()
  for text in reversed(texts[:-1]):
    assert equation.pop_undo()
    assert trees_equal(equation.root, parse_expression(text))
  assert not equation.pop_undo()
  for text in texts[1:]:
    assert equation.redo()
    assert trees_equal(equation.root, parse_expression(text))
  assert not equation.redo()


def test_nothing_to_undo_leaves_tree_alone():
  equation = Equation("x+1")
  root = equation.root
  assert not equation.pop_undo()
  assert equation.root is root


def test_undo_limit_from_config():
  equation = Equation("x", EditorConfig(undo_limit=2))
  for text in ["y", "z", "w"]:
    equation.set_expression(text)
    equation.push_undo()
  assert equation.pop_undo()
  assert equation.to_string() == "z"
  assert not equation.pop_undo()


def test_undo_keeps_cursor_position():
  equation = Equation("a+b")
  equation.set_expression("a+b+c")
  equation.push_undo()
  equation.set_cursor(equation.root.terms[0].factors[0])
  assert equation.pop_undo()
  assert equation.cursor is equation.root.terms[0].factors[0]


def test_undo_with_stale_cursor_falls_back():
  equation = Equation("a+b")
  equation.set_expression("a+b+c")
  equation.push_undo()
  assert equation.cursor.name == 'c'
  assert equation.pop_undo()
  assert equation.cursor.name == 'b'
