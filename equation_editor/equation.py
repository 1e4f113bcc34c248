"""
Equation document: the owned tree, its cursor and selection, undo history and
the edit operations the command layer drives.
"""

from typing import Dict, List, Optional

from .config import EditorConfig
from .errors import StructuralError
from .expression_tree.core.node import (
  Node, NodeSequence, Binary, Box, Number, Term, Expression, Function, Differential
)
from .expression_tree.core.operators import Select
from .expression_tree.core.iterators import NodeIterator, FactorIterator
from .expression_tree.parser import parse_expression
from .expression_tree.utils.simplifier import ExpressionSimplifier
from .expression_tree.utils.validator import ExpressionValidator
from .expression_tree.utils.tree_utils import get_all_nodes, get_node_path, node_at_path
from .layout.engine import LayoutEngine
from .layout.graphics import Graphics
from .serialization.eqn_xml import EquationXMLReader, EquationXMLWriter
from .undo import EqnUndoList
from .logging_system import (
  LogLevel, set_log_level, log_info, log_command, log_milestone, log_warning, log_debug
)


def _default_root() -> Expression:
  return Expression([Term([Number(0)])])


class Equation:
  """A single equation document.

  The Equation owns its root ``Expression`` outright. Parsing and loading
  build a fresh tree and swap it in only on success; edit operations check
  their preconditions and raise StructuralError before touching the tree.
  """

  def __init__(self, text: Optional[str] = None, config: Optional[EditorConfig] = None):
    if config is not None:
      set_log_level(config.log_level)
    self.config = config or EditorConfig()
    self.root: Expression = parse_expression(text) if text else _default_root()
    self.cursor: Optional[Node] = self.root.down_right()
    self.undo_list = EqnUndoList(self.config.undo_limit)
    self.push_undo()

  @classmethod
  def from_xml(cls, text: str, config: Optional[EditorConfig] = None) -> 'Equation':
    equation = cls(config=config)
    equation.load(text)
    return equation

  # -- document ---------------------------------------------------------------

  def xml_out(self) -> str:
    text = EquationXMLWriter(self.config.xml_indent).write(self.root)
    log_info(f"Serialized equation ({len(text)} characters)", LogLevel.VERBOSE)
    return text

  def load(self, text: str):
    """Replace the document with a serialized one and restart its history"""
    root = EquationXMLReader(text).read()
    self._replace_root(root)
    self.undo_list.clear()
    self.push_undo()
    log_milestone("Equation loaded")

  def set_expression(self, text: str):
    self._replace_root(parse_expression(text))
    log_command("set_expression", repr(text))

  def to_string(self) -> str:
    return self.root.to_string()

  def evaluate(self, bindings: Optional[Dict[str, complex]] = None) -> complex:
    return self.root.get_value(bindings)

  def __str__(self):
    return self.to_string()

  # -- layout -----------------------------------------------------------------

  def calculate_layout(self, gc: Graphics, x: int = 0, y: int = 0) -> Box:
    return LayoutEngine(gc).layout(self.root, x, y)

  def draw(self, gc: Graphics):
    LayoutEngine(gc).draw(self.root)

  def find_node(self, x: int, y: int) -> Optional[Node]:
    return self.root.find_node(x, y)

  # -- selection --------------------------------------------------------------

  def select(self, start: Node, end: Optional[Node] = None):
    """Select ``start`` alone, or the sibling run from ``start`` to ``end``"""
    self._require_in_tree(start)
    if end is None or end is start:
      self.root.clear_select()
      start.set_select(Select.ALL)
      return
    self._require_in_tree(end)
    parent = start.parent
    if parent is None or end.parent is not parent:
      raise StructuralError("A selection range must lie inside one container")
    siblings = parent.children()
    first = next(i for i, s in enumerate(siblings) if s is start)
    last = next(i for i, s in enumerate(siblings) if s is end)
    if first > last:
      first, last = last, first
    self.root.clear_select()
    for i in range(first, last + 1):
      siblings[i].set_select(Select.ALL)
    siblings[first].set_select(Select.START)
    siblings[last].set_select(Select.END)

  def selected_nodes(self) -> List[Node]:
    return self.root.selected_nodes()

  def clear_selection(self):
    self.root.clear_select()

  def extend_selection(self, step: int) -> bool:
    """Grow the selection by one sibling in the direction of ``step``.

    With nothing selected the cursor node is selected. At either end of a
    container the selection moves up to the container itself.
    """
    selected = self.selected_nodes()
    if not selected:
      if self.cursor is None:
        return False
      self.select(self.cursor)
      return True

    first, last = selected[0], selected[-1]
    walker = NodeIterator(last if step > 0 else first)
    neighbour = walker.next() if step > 0 else walker.prev()
    if neighbour is not None:
      if step > 0:
        self.select(first, neighbour)
      else:
        self.select(neighbour, last)
      return True
    parent = first.parent
    if parent is None:
      return False
    self.select(parent)
    return True

  def select_at(self, x: int, y: int) -> Optional[Node]:
    node = self.root.find_node(x, y)
    if node is None:
      self.clear_selection()
      return None
    self.select(node)
    self.cursor = node
    return node

  def select_box(self, box: Box) -> Optional[Node]:
    node = self.root.find_node_box(box)
    if node is None:
      self.clear_selection()
      return None
    self.select(node)
    return node

  # -- cursor -----------------------------------------------------------------

  def set_cursor(self, node: Node):
    self._require_in_tree(node)
    self.cursor = node

  def move_cursor(self, step: int) -> Node:
    """Move the cursor ``step`` leaves to the right (left when negative)"""
    leaves = [node for node in get_all_nodes(self.root) if not node.children()]
    current = self.cursor if self.cursor is not None else self.root.down_right()
    if current.children():
      current = current.down_right() if step >= 0 else current.down_left()
    index = next((i for i, leaf in enumerate(leaves) if leaf is current), len(leaves) - 1)
    index = max(0, min(len(leaves) - 1, index + step))
    self.cursor = leaves[index]
    return self.cursor

  def split_term(self, node: Optional[Node] = None, negative: bool = False) -> Term:
    """Start a new term at the factor holding ``node`` (default: cursor)"""
    factor = self._enclosing_factor(node if node is not None else self.cursor)
    term = factor.parent
    if not isinstance(term.parent, Expression):
      raise StructuralError("Only a term of an expression can be split")
    new_term = FactorIterator(term, term.index_of(factor)).split_term(negative)
    self._after_mutation("split_term")
    return new_term

  # -- edits ------------------------------------------------------------------

  def insert_factor(self, text: str, after: Optional[Node] = None) -> Node:
    """Parse ``text`` and multiply it in after ``after`` (default: cursor)"""
    parsed = parse_expression(text)
    anchor = after if after is not None else self.cursor
    if anchor is not None:
      self._require_in_tree(anchor)

    if anchor is None or isinstance(anchor, Expression) and anchor.parent is None:
      term, index = self.root.terms[-1], len(self.root.terms[-1].factors)
    elif isinstance(anchor, Term):
      term, index = anchor, len(anchor.factors)
    elif isinstance(anchor, Expression) and isinstance(anchor.parent, (Function, Differential)):
      term, index = anchor.terms[-1], len(anchor.terms[-1].factors)
    else:
      factor = self._enclosing_factor(anchor)
      term, index = factor.parent, factor.parent.index_of(factor) + 1

    if len(parsed.terms) == 1:
      source = parsed.terms[0]
      factors = [source.detach(factor) for factor in list(source.factors)]
      if source.negative:
        factors[0].negative = not factors[0].negative
    else:
      factors = [parsed]
    for offset, factor in enumerate(factors):
      term.insert(index + offset, factor)
    self.cursor = factors[-1].down_right()
    self._after_mutation("insert_factor", repr(text))
    return factors[-1]

  def insert_term(self, text: str, negative: bool = False, after: Optional[Node] = None) -> Term:
    """Parse ``text`` and add its terms after the term holding ``after``"""
    parsed = parse_expression(text)
    anchor = after if after is not None else self.cursor
    if anchor is not None:
      self._require_in_tree(anchor)

    expression, index = self.root, len(self.root.terms)
    if isinstance(anchor, Expression):
      expression, index = anchor, len(anchor.terms)
    elif anchor is not None:
      node = anchor
      while not isinstance(node, Term):
        node = node.parent
      expression, index = node.parent, node.parent.index_of(node) + 1

    terms = [parsed.detach(term) for term in list(parsed.terms)]
    for offset, term in enumerate(terms):
      if negative:
        term.negative = not term.negative
      expression.insert(index + offset, term)
    self.cursor = terms[-1].down_right()
    self._after_mutation("insert_term", repr(text))
    return terms[-1]

  def delete(self, node: Node):
    self._require_in_tree(node)
    if node is self.root:
      raise StructuralError("The root expression cannot be deleted")
    self._delete(node)
    if self.cursor is None or not self.root.is_ancestor_of(self.cursor):
      self.cursor = self.root.down_right()
    self._after_mutation("delete", repr(node))

  def _delete(self, node: Node):
    parent = node.parent
    if isinstance(parent, NodeSequence):
      if len(parent) > 1:
        parent.remove(node)
      elif parent is self.root:
        parent.replace(node, Term([Number(0)]))
      else:
        self._delete(parent)
    elif isinstance(parent, Binary):
      other = parent.second if node is parent.first else parent.first
      other.negative = other.negative ^ parent.negative
      parent.parent.replace(parent, other)
    else:
      self._delete(parent)

  def delete_selection(self):
    selected = self.selected_nodes()
    if not selected:
      raise StructuralError("Nothing is selected")
    if any(node is self.root for node in selected):
      raise StructuralError("The root expression cannot be deleted")
    for node in reversed(selected):
      if self.root.is_ancestor_of(node):
        self._delete(node)
    self.root.clear_select()
    if self.cursor is None or not self.root.is_ancestor_of(self.cursor):
      self.cursor = self.root.down_right()
    self._after_mutation("delete_selection")

  def wrap_parenthesis(self, node: Optional[Node] = None) -> Node:
    """Enclose ``node``, else the selection, else the cursor in parentheses"""
    if node is not None:
      nodes = [node]
    else:
      nodes = self.selected_nodes() or ([self.cursor] if self.cursor is not None else [])
    if not nodes:
      raise StructuralError("Nothing to wrap")
    for item in nodes:
      self._require_in_tree(item)

    if len(nodes) == 1 and nodes[0] is self.root:
      wrapped = Expression([Term([self.root])])
      self.root = wrapped
      self.root.set_parent(None)
      self._after_mutation("wrap_parenthesis")
      return wrapped

    parent = nodes[0].parent
    if len(nodes) > 1 and not isinstance(parent, NodeSequence):
      raise StructuralError("Only a run of siblings can be wrapped together")

    if isinstance(parent, NodeSequence):
      index = parent.index_of(nodes[0])
      moved = [parent.detach(item) for item in nodes]
      if isinstance(parent, Expression):
        wrapped = Term([Expression(moved)])
      else:
        wrapped = Expression([Term(moved)])
      parent.insert(index, wrapped)
    else:
      wrapped = Expression([Term([nodes[0]])])
      parent.replace(nodes[0], wrapped)
    self.root.clear_select()
    self._after_mutation("wrap_parenthesis")
    return wrapped

  def unwrap_parenthesis(self, node: Node) -> List[Node]:
    """Dissolve a parenthesised group back into its container"""
    self._require_in_tree(node)
    if isinstance(node, Term) and len(node.factors) == 1 and isinstance(node.factors[0], Expression):
      node = node.factors[0]
    if not isinstance(node, Expression) or node is self.root:
      raise StructuralError("Only a parenthesised group can be unwrapped")

    parent = node.parent
    if isinstance(parent, Term) and len(node.terms) == 1:
      inner = node.terms[0]
      factors = [inner.detach(factor) for factor in list(inner.factors)]
      if node.negative ^ inner.negative:
        factors[0].negative = not factors[0].negative
      parent.splice(parent.index_of(node), factors)
      result = factors
    elif isinstance(parent, Term) and len(parent.factors) == 1:
      flip = node.negative ^ parent.negative
      terms = [node.detach(term) for term in list(node.terms)]
      for term in terms:
        term.negative = term.negative ^ flip
      parent.parent.splice(parent.parent.index_of(parent), terms)
      result = terms
    elif (isinstance(parent, Binary) and len(node.terms) == 1
          and len(node.terms[0].factors) == 1):
      inner = node.terms[0]
      factor = inner.detach(inner.factors[0])
      factor.negative = factor.negative ^ inner.negative ^ node.negative
      parent.replace(node, factor)
      result = [factor]
    else:
      raise StructuralError("These parentheses cannot be removed")

    if self.cursor is None or not self.root.is_ancestor_of(self.cursor):
      self.cursor = self.root.down_right()
    self._after_mutation("unwrap_parenthesis")
    return result

  # -- rewriting --------------------------------------------------------------

  def simplify(self) -> bool:
    """Simplify to a fixed point; False when the pass ceiling was hit"""
    root, passes, converged = ExpressionSimplifier.simplify_tree(
      self.root, self.config.max_simplify_passes)
    if not converged:
      log_warning(f"Simplification stopped after {passes} passes without converging")
    log_debug(f"Simplified in {passes} passes")
    self._install_rewritten(root)
    self._after_mutation("simplify")
    return converged

  def normalize(self):
    self._install_rewritten(ExpressionSimplifier.normalize(self.root))
    self._after_mutation("normalize")

  def _install_rewritten(self, root: Node):
    if not isinstance(root, Expression):
      root = Expression([Term([root])])
    self.root = root
    self.root.set_parent(None)
    if self.cursor is None or not self.root.is_ancestor_of(self.cursor):
      self.cursor = self.root.down_right()

  # -- undo -------------------------------------------------------------------

  def push_undo(self):
    self.undo_list.push(self.xml_out())

  def pop_undo(self) -> bool:
    """Restore the previous snapshot; False when there is nothing to undo"""
    snapshot = self.undo_list.undo()
    if snapshot is None:
      log_debug("Nothing to undo")
      return False
    self._restore_snapshot(snapshot)
    log_milestone("Undo")
    return True

  def redo(self) -> bool:
    snapshot = self.undo_list.redo()
    if snapshot is None:
      log_debug("Nothing to redo")
      return False
    self._restore_snapshot(snapshot)
    log_milestone("Redo")
    return True

  # -- internals --------------------------------------------------------------

  def _restore_snapshot(self, snapshot: str):
    path = get_node_path(self.root, self.cursor) if self.cursor is not None else None
    self._replace_root(EquationXMLReader(snapshot).read())
    if path is None:
      return
    try:
      self.cursor = node_at_path(self.root, path)
    except IndexError:
      pass  # stale path keeps the default cursor

  def _replace_root(self, root: Expression):
    old = self.root
    self.root = root
    self.cursor = root.down_right()
    if old is not root:
      old.release()

  def _require_in_tree(self, node: Node):
    if node is None or not self.root.is_ancestor_of(node):
      raise StructuralError(f"{node!r} is not part of this equation")

  def _enclosing_factor(self, node: Optional[Node]) -> Node:
    """The ancestor of ``node`` (or node itself) that is a factor of a Term"""
    if node is None:
      raise StructuralError("No cursor is set")
    self._require_in_tree(node)
    while node is not None and not isinstance(node.parent, Term):
      node = node.parent
    if node is None:
      raise StructuralError("Node is not inside a term")
    return node

  def _after_mutation(self, name: str, detail: str = ""):
    log_command(name, detail)
    if self.config.check_invariants:
      ExpressionValidator.check_tree(self.root)
