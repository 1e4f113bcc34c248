from typing import Optional, Iterator, Union

from .node import Node, Term, Expression, Power, Number
from ...errors import StructuralError


class NodeIterator:
  """Steps through a node's siblings inside its immediate container"""

  def __init__(self, node: Node):
    self.node = node

  def _siblings(self):
    parent = self.node.parent
    return parent.children() if parent is not None else [self.node]

  @property
  def index(self) -> int:
    for i, sibling in enumerate(self._siblings()):
      if sibling is self.node:
        return i
    raise StructuralError(f"{self.node!r} is not owned by its parent")

  @property
  def is_begin(self) -> bool:
    return self.index == 0

  @property
  def is_end(self) -> bool:
    return self.index == len(self._siblings()) - 1

  def next(self) -> Optional[Node]:
    """Move to the following sibling; None (and no move) at the end"""
    siblings = self._siblings()
    index = self.index
    if index + 1 >= len(siblings):
      return None
    self.node = siblings[index + 1]
    return self.node

  def prev(self) -> Optional[Node]:
    siblings = self._siblings()
    index = self.index
    if index == 0:
      return None
    self.node = siblings[index - 1]
    return self.node

  def __iter__(self) -> Iterator[Node]:
    siblings = self._siblings()
    return iter(siblings[self.index:])


class FactorIterator:
  """Walks the factors of a Term, looking through Power nodes.

  At each position ``node`` is the factor as the caller sees it: the base of a
  Power, or the factor itself. ``power`` is the Power being looked through (or
  None) and ``exponent`` its exponent. Structural edits (``replace``,
  ``erase``, ``insert``, ``split_term``) act on the whole factor.
  """

  def __init__(self, term: Term, index: int = 0):
    if not isinstance(term, Term):
      raise StructuralError("FactorIterator needs a Term")
    self.term = term
    self.index = index

  def set_node(self, target: Union[int, Node]):
    """Position on a factor index (negative counts from the end), a factor,
    or the base of a Power factor."""
    if isinstance(target, int):
      index = target + len(self.term.factors) if target < 0 else target
      if not 0 <= index <= len(self.term.factors):
        raise IndexError(f"Factor index {target} out of range")
      self.index = index
      return
    for i, factor in enumerate(self.term.factors):
      if factor is target or (isinstance(factor, Power) and factor.base is target):
        self.index = i
        return
    raise StructuralError(f"{target!r} is not a factor of this term")

  @property
  def at_end(self) -> bool:
    return self.index >= len(self.term.factors)

  @property
  def factor(self) -> Optional[Node]:
    return None if self.at_end else self.term.factors[self.index]

  @property
  def power(self) -> Optional[Power]:
    factor = self.factor
    return factor if isinstance(factor, Power) else None

  @property
  def node(self) -> Optional[Node]:
    power = self.power
    return power.base if power is not None else self.factor

  @property
  def exponent(self) -> Optional[Node]:
    power = self.power
    return power.exponent if power is not None else None

  def exponent_value(self) -> Optional[complex]:
    """Numeric exponent of the current factor: 1 for a bare factor, None when
    the exponent is not a literal."""
    exponent = self.exponent
    if exponent is None:
      return complex(1.0)
    if isinstance(exponent, Number):
      return exponent.get_value()
    return None

  def next(self) -> Optional[Node]:
    if not self.at_end:
      self.index += 1
    return self.node

  def prev(self) -> Optional[Node]:
    if self.index == 0:
      return None
    self.index -= 1
    return self.node

  def __iter__(self) -> Iterator[Node]:
    walker = FactorIterator(self.term, self.index)
    while not walker.at_end:
      yield walker.node
      walker.next()

  def replace(self, node: Node):
    self.term.replace(self.factor, node)

  def erase(self):
    """Remove the current factor; the iterator then points at its successor"""
    if self.at_end:
      raise StructuralError("Nothing to erase at the end of a term")
    self.term.remove(self.factor)

  def insert(self, node: Node):
    """Insert before the current position and step past the new factor"""
    self.term.insert(self.index, node)
    self.index += 1

  def split_term(self, negative: bool = False) -> Term:
    """Move the current factor and everything after it into a new Term that
    follows this one in the owning Expression."""
    expression = self.term.parent
    if not isinstance(expression, Expression):
      raise StructuralError("Only a term of an expression can be split")
    if self.index == 0 or self.at_end:
      raise StructuralError("A split must leave factors on both sides")
    moved = [self.term.detach(factor) for factor in self.term.factors[self.index:]]
    new_term = Term(moved, negative=negative)
    expression.insert(expression.index_of(self.term) + 1, new_term)
    return new_term

  def merge_next_term(self):
    """Append the factors of the following term to this one and drop it"""
    expression = self.term.parent
    if not isinstance(expression, Expression):
      raise StructuralError("Only a term of an expression can be merged")
    index = expression.index_of(self.term)
    if index + 1 >= len(expression.terms):
      raise StructuralError("There is no following term to merge")
    following = expression.terms[index + 1]
    for factor in list(following.factors):
      self.term.append(following.detach(factor))
    expression.remove(following)
