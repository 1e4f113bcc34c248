from typing import List, Optional, Set

from ..core.node import Node, NodeSequence, Term, Expression, Binary, Function, Differential
from ..core.operators import Select
from ...errors import StructuralError


class ExpressionValidator:
  """Checks the ownership and shape invariants of an equation tree"""

  @staticmethod
  def is_valid_tree(root: Node) -> bool:
    try:
      ExpressionValidator.check_tree(root)
      return True
    except StructuralError:
      return False

  @staticmethod
  def check_tree(root: Node):
    """Raise StructuralError on the first violated invariant"""
    seen: Set[int] = set()
    ExpressionValidator._check_recursive(root, root.parent, seen)
    ExpressionValidator.check_selection(root)

  @staticmethod
  def _check_recursive(node: Node, expected_parent: Optional[Node], seen: Set[int]):
    if id(node) in seen:
      raise StructuralError(f"{node!r} is reachable from more than one parent")
    seen.add(id(node))

    if node.parent is not expected_parent:
      raise StructuralError(f"{node!r} has a stale parent reference")

    if isinstance(node, NodeSequence) and not node.items:
      raise StructuralError(f"Empty {type(node).__name__}")
    if isinstance(node, Expression):
      for term in node.items:
        if not isinstance(term, Term):
          raise StructuralError(f"Expression holds a non-term {term!r}")
    elif isinstance(node, Term):
      for factor in node.items:
        if isinstance(factor, Term):
          raise StructuralError("A term cannot be a factor of a term")
    elif isinstance(node, Binary):
      for operand in (node.first, node.second):
        if operand is None or isinstance(operand, Term):
          raise StructuralError(f"{type(node).__name__} has an invalid operand")
    elif isinstance(node, (Function, Differential)):
      if not isinstance(node.argument, Expression):
        raise StructuralError(f"{type(node).__name__} argument must be an expression")

    for child in node.children():
      ExpressionValidator._check_recursive(child, node, seen)

  @staticmethod
  def check_selection(root: Node):
    """Selected nodes must be one node marked ALL, or a run of siblings
    marked START, ALL..., END."""
    selected: List[Node] = root.selected_nodes()
    if not selected:
      return
    if len(selected) == 1:
      if selected[0].select != Select.ALL:
        raise StructuralError("A single selected node must be fully selected")
      return

    parent = selected[0].parent
    if parent is None or any(node.parent is not parent for node in selected):
      raise StructuralError("Selected nodes must share one container")
    siblings = parent.children()
    indices = [next(i for i, s in enumerate(siblings) if s is node) for node in selected]
    if indices != list(range(indices[0], indices[0] + len(indices))):
      raise StructuralError("Selection is not contiguous")
    if selected[0].select != Select.START or selected[-1].select != Select.END:
      raise StructuralError("Selection range must begin with START and end with END")
    if any(node.select != Select.ALL for node in selected[1:-1]):
      raise StructuralError("Inside of a selection range must be fully selected")
