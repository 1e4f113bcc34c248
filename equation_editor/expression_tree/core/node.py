import weakref
from abc import ABC, abstractmethod
from typing import Optional, Dict, List, Iterable, TYPE_CHECKING

from .operators import (
  NodeType, Select, CONSTANT_MAP, FUNCTION_MAP, format_value
)
from ...errors import EvaluationError, StructuralError

if TYPE_CHECKING:
  from ...layout.graphics import Graphics

Bindings = Optional[Dict[str, complex]]


class Box:
  """Axis aligned rectangle; half open on the right and bottom edges"""

  __slots__ = ('x0', 'y0', 'width', 'height')

  def __init__(self, width: int = 0, height: int = 0, x0: int = 0, y0: int = 0):
    self.x0 = x0
    self.y0 = y0
    self.width = width
    self.height = height

  @property
  def x1(self) -> int:
    return self.x0 + self.width

  @property
  def y1(self) -> int:
    return self.y0 + self.height

  def inside(self, x: int, y: int) -> bool:
    return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

  def contains(self, other: 'Box') -> bool:
    return (self.x0 <= other.x0 and other.x1 <= self.x1 and
            self.y0 <= other.y0 and other.y1 <= self.y1)

  def intersects(self, other: 'Box') -> bool:
    return (self.x0 < other.x1 and other.x0 < self.x1 and
            self.y0 < other.y1 and other.y0 < self.y1)

  def merge(self, other: 'Box') -> 'Box':
    x0, y0 = min(self.x0, other.x0), min(self.y0, other.y0)
    return Box(max(self.x1, other.x1) - x0, max(self.y1, other.y1) - y0, x0, y0)

  def as_tuple(self):
    return (self.x0, self.y0, self.width, self.height)

  def copy(self) -> 'Box':
    return Box(self.width, self.height, self.x0, self.y0)

  def __eq__(self, other):
    return isinstance(other, Box) and self.as_tuple() == other.as_tuple()

  def __hash__(self):
    return hash(self.as_tuple())

  def __repr__(self):
    return f"Box(x0={self.x0}, y0={self.y0}, width={self.width}, height={self.height})"


class Node(ABC):
  """Base class of every equation tree node.

  A node owns its children outright; ``parent`` is a weak back-reference to the
  owning container. Geometry (``box``, ``baseline``) is only meaningful after a
  layout pass over an unmodified tree.
  """

  __slots__ = ('negative', 'select', 'box', 'inner', 'baseline',
               '_sign_width', '_paren_width', '_group_width', '_parent', '__weakref__')

  node_type: NodeType
  precedence = 6

  def __init__(self, parent: Optional['Node'] = None, negative: bool = False,
               select: Select = Select.NONE):
    self._parent = None
    self.negative = bool(negative)
    self.select = Select(select)
    self.box = Box()
    self.inner = Box()
    self.baseline = 0
    self._sign_width = 0
    self._paren_width = 0
    self._group_width = 0
    self.set_parent(parent)

  # -- ownership ------------------------------------------------------------

  @property
  def parent(self) -> Optional['Node']:
    return self._parent() if self._parent is not None else None

  def set_parent(self, parent: Optional['Node']):
    self._parent = weakref.ref(parent) if parent is not None else None

  def adopt(self, child: 'Node') -> 'Node':
    child.set_parent(self)
    return child

  def children(self) -> List['Node']:
    return []

  def replace(self, old: 'Node', new: 'Node'):
    raise StructuralError(f"{type(self).__name__} has no children to replace")

  def _clear_children(self):
    pass

  def release(self):
    """Detach this node and every subtree it still owns.

    Children that were already moved to another container are left alone.
    """
    for child in self.children():
      if child.parent is self:
        child.release()
    self._clear_children()
    self._parent = None

  def root(self) -> 'Node':
    node = self
    while node.parent is not None:
      node = node.parent
    return node

  def is_ancestor_of(self, other: 'Node') -> bool:
    node = other
    while node is not None:
      if node is self:
        return True
      node = node.parent
    return False

  # -- values ---------------------------------------------------------------

  @abstractmethod
  def get_node_value(self, bindings: Bindings = None) -> complex:
    pass

  def get_value(self, bindings: Bindings = None) -> complex:
    value = self.get_node_value(bindings)
    # subtract from zero so a +0.0 imaginary part keeps its sign
    return 0 - value if self.negative else value

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def copy(self, parent: Optional['Node'] = None) -> 'Node':
    pass

  def key_payload(self) -> str:
    return ''

  def simplify(self) -> 'Node':
    from ..utils.simplifier import ExpressionSimplifier
    return ExpressionSimplifier.simplify_node(self)

  def __repr__(self):
    sign = '-' if self.negative else ''
    return f"{type(self).__name__}({sign}{self.to_string()!r})"

  # -- navigation and selection ---------------------------------------------

  def down_left(self) -> 'Node':
    """Leftmost descendant, used for caret placement"""
    children = self.children()
    return children[0].down_left() if children else self

  def down_right(self) -> 'Node':
    children = self.children()
    return children[-1].down_right() if children else self

  def set_select(self, state: Select):
    self.select = Select(state)

  def clear_select(self):
    self.select = Select.NONE
    for child in self.children():
      child.clear_select()

  def selected_nodes(self) -> List['Node']:
    nodes = [self] if self.select != Select.NONE else []
    for child in self.children():
      nodes.extend(child.selected_nodes())
    return nodes

  # -- layout -------------------------------------------------------------

  def sign_drawn_by_parent(self) -> bool:
    return False

  def shows_sign(self) -> bool:
    return self.negative and not self.sign_drawn_by_parent()

  def child_needs_parenthesis(self, child: 'Node') -> bool:
    return False

  def child_sign_needs_group(self, child: 'Node') -> bool:
    return False

  def needs_parenthesis(self) -> bool:
    parent = self.parent
    return parent is not None and parent.child_needs_parenthesis(self)

  def sign_needs_group(self) -> bool:
    """True when a leading minus must be enclosed together with the node"""
    parent = self.parent
    return parent is not None and parent.child_sign_needs_group(self)

  @abstractmethod
  def calc_size(self, gc: 'Graphics'):
    """Size the content of this node; returns (width, height, baseline)"""

  def calc_orig(self, gc: 'Graphics', x: int, y: int):
    pass

  @abstractmethod
  def draw_node(self, gc: 'Graphics'):
    pass

  def calculate_size(self, gc: 'Graphics'):
    width, height, baseline = self.calc_size(gc)
    self._sign_width = gc.char_length('-') if self.shows_sign() else 0
    self._paren_width = gc.parenthesis_width(height) if self.needs_parenthesis() else 0
    grouped = self._sign_width and self.sign_needs_group()
    self._group_width = gc.parenthesis_width(height) if grouped else 0
    self.inner = Box(width, height)
    self.box = Box(2 * self._group_width + self._sign_width + 2 * self._paren_width + width,
                   height)
    self.baseline = baseline

  def calculate_origin(self, gc: 'Graphics', x: int, y: int):
    self.box.x0, self.box.y0 = x, y
    self.inner.x0 = x + self._group_width + self._sign_width + self._paren_width
    self.inner.y0 = y
    self.calc_orig(gc, self.inner.x0, y)

  def draw(self, gc: 'Graphics'):
    if self.select != Select.NONE:
      gc.select_box(self.box.width, self.box.height, self.box.x0, self.box.y0)
    x = self.box.x0
    if self._group_width:
      gc.parenthesis(self.box.width, self.box.height, x, self.box.y0)
      x += self._group_width
    if self._sign_width:
      gc.at(x, self.box.y0 + self.baseline, '-')
      x += self._sign_width
    if self._paren_width:
      gc.parenthesis(self.inner.width + 2 * self._paren_width, self.inner.height, x, self.box.y0)
    self.draw_node(gc)

  def find_node(self, x: int, y: int) -> Optional['Node']:
    if not self.box.inside(x, y):
      return None
    for child in self.children():
      hit = child.find_node(x, y)
      if hit is not None:
        return hit
    return self

  def find_node_box(self, box: Box) -> Optional['Node']:
    """Largest node fully inside ``box``, else the deepest one overlapping it"""
    if not self.box.intersects(box):
      return None
    if box.contains(self.box):
      return self
    for child in self.children():
      hit = child.find_node_box(box)
      if hit is not None:
        return hit
    return self


def _operand_text(node: Node, wrap_types=()) -> str:
  text = node.to_string()
  if isinstance(node, Expression) or isinstance(node, wrap_types):
    text = f"({text})"
  if node.negative:
    text = f"(-{text})"
  return text


class Number(Node):
  __slots__ = ('value',)
  node_type = NodeType.NUMBER

  def __init__(self, value=0j, parent: Optional[Node] = None, negative: bool = False,
               select: Select = Select.NONE):
    super().__init__(parent, negative, select)
    self.value = complex(value)

  def get_node_value(self, bindings: Bindings = None) -> complex:
    return self.value

  def to_string(self) -> str:
    return format_value(self.value)

  def key_payload(self) -> str:
    return repr(self.value)

  def copy(self, parent: Optional[Node] = None) -> 'Number':
    return Number(self.value, parent, self.negative, self.select)

  def calc_size(self, gc):
    return gc.text_length(self.to_string()), gc.text_height(), 0

  def draw_node(self, gc):
    gc.at(self.inner.x0, self.inner.y0, self.to_string())


class Constant(Node):
  __slots__ = ('name', 'value')
  node_type = NodeType.CONSTANT

  def __init__(self, name: str, parent: Optional[Node] = None, negative: bool = False,
               select: Select = Select.NONE):
    if name not in CONSTANT_MAP:
      raise ValueError(f"Unknown constant: {name}")
    super().__init__(parent, negative, select)
    self.name = name
    self.value = CONSTANT_MAP[name]

  def get_node_value(self, bindings: Bindings = None) -> complex:
    return self.value

  def to_string(self) -> str:
    return self.name

  def key_payload(self) -> str:
    return self.name

  def copy(self, parent: Optional[Node] = None) -> 'Constant':
    return Constant(self.name, parent, self.negative, self.select)

  def calc_size(self, gc):
    return gc.text_length(self.name), gc.text_height(), 0

  def draw_node(self, gc):
    gc.at(self.inner.x0, self.inner.y0, self.name)


class Variable(Node):
  __slots__ = ('name', 'value')
  node_type = NodeType.VARIABLE

  def __init__(self, name: str, value: Optional[complex] = None, parent: Optional[Node] = None,
               negative: bool = False, select: Select = Select.NONE):
    super().__init__(parent, negative, select)
    self.name = name
    self.value = complex(value) if value is not None else None

  def get_node_value(self, bindings: Bindings = None) -> complex:
    if bindings and self.name in bindings:
      return complex(bindings[self.name])
    if self.value is None:
      raise EvaluationError(f"Variable '{self.name}' has no value")
    return self.value

  def to_string(self) -> str:
    return self.name

  def key_payload(self) -> str:
    return self.name if self.value is None else f"{self.name}={self.value!r}"

  def copy(self, parent: Optional[Node] = None) -> 'Variable':
    return Variable(self.name, self.value, parent, self.negative, self.select)

  def calc_size(self, gc):
    return gc.text_length(self.name), gc.text_height(), 0

  def draw_node(self, gc):
    gc.at(self.inner.x0, self.inner.y0, self.name)


class NodeSequence(Node):
  """Container owning an ordered list of child nodes"""

  __slots__ = ('items',)

  def __init__(self, items: Optional[Iterable[Node]] = None, parent: Optional[Node] = None,
               negative: bool = False, select: Select = Select.NONE):
    super().__init__(parent, negative, select)
    self.items: List[Node] = []
    for item in items or ():
      self.append(item)

  def children(self) -> List[Node]:
    return list(self.items)

  def _clear_children(self):
    self.items = []

  def __len__(self):
    return len(self.items)

  def index_of(self, node: Node) -> int:
    for i, item in enumerate(self.items):
      if item is node:
        return i
    raise StructuralError(f"{node!r} is not owned by this {type(self).__name__}")

  def append(self, node: Node) -> Node:
    self.items.append(self.adopt(node))
    return node

  def insert(self, index: int, node: Node) -> Node:
    self.items.insert(index, self.adopt(node))
    return node

  def replace(self, old: Node, new: Node):
    if new is old:
      return
    index = self.index_of(old)
    self.items[index] = self.adopt(new)
    if old.parent is self:
      old.release()

  def splice(self, index: int, nodes: List[Node]):
    """Replace the item at ``index`` with ``nodes``, releasing the old item"""
    old = self.items[index]
    self.items[index:index + 1] = [self.adopt(node) for node in nodes]
    if old.parent is self:
      old.release()

  def remove(self, node: Node):
    del self.items[self.index_of(node)]
    if node.parent is self:
      node.release()

  def detach(self, node: Node) -> Node:
    """Remove ``node`` without releasing it"""
    del self.items[self.index_of(node)]
    node.set_parent(None)
    return node


class Term(NodeSequence):
  """Implicitly multiplied sequence of factors"""

  __slots__ = ()
  node_type = NodeType.TERM
  precedence = 2

  @property
  def factors(self) -> List[Node]:
    return self.items

  def get_node_value(self, bindings: Bindings = None) -> complex:
    value = complex(1.0)
    for factor in self.items:
      value *= factor.get_value(bindings)
    return value

  def to_string(self) -> str:
    return '*'.join(_operand_text(factor) for factor in self.items)

  def copy(self, parent: Optional[Node] = None) -> 'Term':
    term = Term(parent=parent, negative=self.negative, select=self.select)
    for factor in self.items:
      term.append(factor.copy())
    return term

  def sign_drawn_by_parent(self) -> bool:
    return isinstance(self.parent, Expression)

  def child_needs_parenthesis(self, child: Node) -> bool:
    return child.precedence < self.precedence

  def child_sign_needs_group(self, child: Node) -> bool:
    return len(self.items) > 1

  def _needs_dot(self, index: int) -> bool:
    return index > 0 and isinstance(self.items[index], Number)

  def calc_size(self, gc):
    width, above, below = 0, 0, 0
    for i, factor in enumerate(self.items):
      factor.calculate_size(gc)
      if self._needs_dot(i):
        width += gc.char_length('*')
      width += factor.box.width
      above = max(above, factor.baseline)
      below = max(below, factor.box.height - factor.baseline)
    return width, above + below, above

  def calc_orig(self, gc, x, y):
    for i, factor in enumerate(self.items):
      if self._needs_dot(i):
        x += gc.char_length('*')
      factor.calculate_origin(gc, x, y + self.baseline - factor.baseline)
      x += factor.box.width

  def draw_node(self, gc):
    for i, factor in enumerate(self.items):
      if self._needs_dot(i):
        gc.at(factor.box.x0 - gc.char_length('*'), self.inner.y0 + self.baseline, '*')
      factor.draw(gc)


class Expression(NodeSequence):
  """Sum of signed terms"""

  __slots__ = ()
  node_type = NodeType.EXPRESSION
  precedence = 1

  @property
  def terms(self) -> List[Node]:
    return self.items

  def get_node_value(self, bindings: Bindings = None) -> complex:
    value = complex(0.0)
    for term in self.items:
      value += term.get_value(bindings)
    return value

  def to_string(self) -> str:
    parts = []
    for i, term in enumerate(self.items):
      text = term.to_string()
      if term.negative:
        parts.append('-' + text)
      elif i > 0:
        parts.append('+' + text)
      else:
        parts.append(text)
    return ''.join(parts)

  def copy(self, parent: Optional[Node] = None) -> 'Expression':
    expression = Expression(parent=parent, negative=self.negative, select=self.select)
    for term in self.items:
      expression.append(term.copy())
    return expression

  def _sign_glyph(self, index: int) -> Optional[str]:
    term = self.items[index]
    if term.negative:
      return '-'
    return '+' if index > 0 else None

  def calc_size(self, gc):
    width, above, below = 0, 0, 0
    for i, term in enumerate(self.items):
      term.calculate_size(gc)
      glyph = self._sign_glyph(i)
      if glyph:
        width += gc.char_length(glyph)
      width += term.box.width
      above = max(above, term.baseline)
      below = max(below, term.box.height - term.baseline)
    return width, above + below, above

  def calc_orig(self, gc, x, y):
    for i, term in enumerate(self.items):
      glyph = self._sign_glyph(i)
      if glyph:
        x += gc.char_length(glyph)
      term.calculate_origin(gc, x, y + self.baseline - term.baseline)
      x += term.box.width

  def draw_node(self, gc):
    for i, term in enumerate(self.items):
      glyph = self._sign_glyph(i)
      if glyph:
        gc.at(term.box.x0 - gc.char_length(glyph), self.inner.y0 + self.baseline, glyph)
      term.draw(gc)


def _as_expression(node: Node) -> 'Expression':
  if isinstance(node, Expression):
    return node
  if isinstance(node, Term):
    return Expression([node])
  return Expression([Term([node])])


class Binary(Node):
  """Node with exactly two operand slots"""

  __slots__ = ('first', 'second')
  precedence = 3

  def __init__(self, first: Node, second: Node, parent: Optional[Node] = None,
               negative: bool = False, select: Select = Select.NONE):
    super().__init__(parent, negative, select)
    self.first = self.adopt(first)
    self.second = self.adopt(second)

  def children(self) -> List[Node]:
    return [self.first, self.second]

  def _clear_children(self):
    self.first = None
    self.second = None

  def replace(self, old: Node, new: Node):
    if new is old:
      return
    if old is self.first:
      self.first = self.adopt(new)
    elif old is self.second:
      self.second = self.adopt(new)
    else:
      raise StructuralError(f"{old!r} is not an operand of this {type(self).__name__}")
    if old.parent is self:
      old.release()


class Divide(Binary):
  __slots__ = ()
  node_type = NodeType.DIVIDE

  @property
  def numerator(self) -> Node:
    return self.first

  @property
  def denominator(self) -> Node:
    return self.second

  def get_node_value(self, bindings: Bindings = None) -> complex:
    denominator = self.second.get_value(bindings)
    if denominator == 0:
      raise EvaluationError("Division by zero")
    return self.first.get_value(bindings) / denominator

  def to_string(self) -> str:
    return f"{_operand_text(self.first)}/{_operand_text(self.second, (Divide,))}"

  def copy(self, parent: Optional[Node] = None) -> 'Divide':
    return Divide(self.first.copy(), self.second.copy(), parent, self.negative, self.select)

  def calc_size(self, gc):
    self.first.calculate_size(gc)
    self.second.calculate_size(gc)
    line = gc.divide_line_height()
    width = max(self.first.box.width, self.second.box.width)
    height = self.first.box.height + line + self.second.box.height
    return width, height, self.first.box.height + line // 2

  def calc_orig(self, gc, x, y):
    width = self.inner.width
    line = gc.divide_line_height()
    self.first.calculate_origin(gc, x + (width - self.first.box.width) // 2, y)
    self.second.calculate_origin(gc, x + (width - self.second.box.width) // 2,
                                 y + self.first.box.height + line)

  def draw_node(self, gc):
    gc.horiz_line(self.inner.width, self.inner.x0, self.inner.y0 + self.baseline)
    self.first.draw(gc)
    self.second.draw(gc)


class Power(Binary):
  __slots__ = ()
  node_type = NodeType.POWER
  precedence = 4

  @property
  def base(self) -> Node:
    return self.first

  @property
  def exponent(self) -> Node:
    return self.second

  def get_node_value(self, bindings: Bindings = None) -> complex:
    base = self.first.get_value(bindings)
    exponent = self.second.get_value(bindings)
    try:
      return base ** exponent
    except ZeroDivisionError:
      raise EvaluationError("Zero raised to a negative or complex power")
    except OverflowError:
      raise EvaluationError("Power overflow")

  def to_string(self) -> str:
    exponent = self.second.to_string()
    if isinstance(self.second, (Expression, Divide)):
      exponent = f"({exponent})"
    if self.second.negative:
      exponent = '-' + exponent
    return f"{_operand_text(self.first, (Divide, Power))}^{exponent}"

  def copy(self, parent: Optional[Node] = None) -> 'Power':
    return Power(self.first.copy(), self.second.copy(), parent, self.negative, self.select)

  def child_needs_parenthesis(self, child: Node) -> bool:
    return child is self.first and child.precedence <= self.precedence

  def child_sign_needs_group(self, child: Node) -> bool:
    return child is self.first

  def _rise(self, gc) -> int:
    return max(self.second.box.height - gc.text_height() // 2, 0)

  def calc_size(self, gc):
    self.first.calculate_size(gc)
    self.second.calculate_size(gc)
    rise = self._rise(gc)
    width = self.first.box.width + self.second.box.width
    height = max(rise + self.first.box.height, self.second.box.height)
    return width, height, rise + self.first.baseline

  def calc_orig(self, gc, x, y):
    self.first.calculate_origin(gc, x, y + self._rise(gc))
    self.second.calculate_origin(gc, x + self.first.box.width, y)

  def draw_node(self, gc):
    self.first.draw(gc)
    self.second.draw(gc)


class Function(Node):
  """Named function applied to one argument expression"""

  __slots__ = ('name', 'function', 'argument')
  node_type = NodeType.FUNCTION
  precedence = 5

  def __init__(self, name: str, argument: Node, parent: Optional[Node] = None,
               negative: bool = False, select: Select = Select.NONE):
    if name not in FUNCTION_MAP:
      raise ValueError(f"Unknown function: {name}")
    super().__init__(parent, negative, select)
    self.name = name
    self.function = FUNCTION_MAP[name]
    self.argument = self.adopt(_as_expression(argument))

  def children(self) -> List[Node]:
    return [self.argument]

  def _clear_children(self):
    self.argument = None

  def replace(self, old: Node, new: Node):
    if new is old:
      return
    if old is not self.argument:
      raise StructuralError(f"{old!r} is not the argument of {self.name}")
    if not isinstance(new, Expression):
      raise StructuralError("A function argument must be an expression")
    self.argument = self.adopt(new)
    if old.parent is self:
      old.release()

  def get_node_value(self, bindings: Bindings = None) -> complex:
    return self.function(self.argument.get_value(bindings))

  def to_string(self) -> str:
    argument = self.argument.to_string()
    if self.argument.negative:
      argument = f"-({argument})"
    return f"{self.name}({argument})"

  def key_payload(self) -> str:
    return self.name

  def copy(self, parent: Optional[Node] = None) -> 'Function':
    return Function(self.name, self.argument.copy(), parent, self.negative, self.select)

  def child_needs_parenthesis(self, child: Node) -> bool:
    return True

  def calc_size(self, gc):
    self.argument.calculate_size(gc)
    width = gc.text_length(self.name) + self.argument.box.width
    return width, self.argument.box.height, self.argument.baseline

  def calc_orig(self, gc, x, y):
    self.argument.calculate_origin(gc, x + gc.text_length(self.name), y)

  def draw_node(self, gc):
    gc.at(self.inner.x0, self.inner.y0 + self.baseline, self.name)
    self.argument.draw(gc)


class Differential(Node):
  """Derivative d/d<variable> of the argument expression"""

  __slots__ = ('variable', 'argument')
  node_type = NodeType.DIFFERENTIAL
  precedence = 5

  def __init__(self, variable: str, argument: Node, parent: Optional[Node] = None,
               negative: bool = False, select: Select = Select.NONE):
    super().__init__(parent, negative, select)
    self.variable = variable
    self.argument = self.adopt(_as_expression(argument))

  def children(self) -> List[Node]:
    return [self.argument]

  def _clear_children(self):
    self.argument = None

  def replace(self, old: Node, new: Node):
    if new is old:
      return
    if old is not self.argument:
      raise StructuralError(f"{old!r} is not the argument of d/d{self.variable}")
    if not isinstance(new, Expression):
      raise StructuralError("A differential argument must be an expression")
    self.argument = self.adopt(new)
    if old.parent is self:
      old.release()

  def get_node_value(self, bindings: Bindings = None) -> complex:
    from ..utils.sympy_utils import SymPyConverter
    return SymPyConverter().derivative_value(self.argument, self.variable, bindings)

  def to_string(self) -> str:
    argument = self.argument.to_string()
    if self.argument.negative:
      argument = f"-({argument})"
    return f"d/d{self.variable}({argument})"

  def key_payload(self) -> str:
    return self.variable

  def copy(self, parent: Optional[Node] = None) -> 'Differential':
    return Differential(self.variable, self.argument.copy(), parent, self.negative, self.select)

  def child_needs_parenthesis(self, child: Node) -> bool:
    return True

  def calc_size(self, gc):
    self.argument.calculate_size(gc)
    d_width = gc.differential_width(self.variable)
    d_height = gc.differential_height(self.variable)
    d_base = gc.differential_base(self.variable)
    baseline = max(d_base, self.argument.baseline)
    below = max(d_height - d_base, self.argument.box.height - self.argument.baseline)
    return d_width + self.argument.box.width, baseline + below, baseline

  def calc_orig(self, gc, x, y):
    self.argument.calculate_origin(gc, x + gc.differential_width(self.variable),
                                   y + self.baseline - self.argument.baseline)

  def draw_node(self, gc):
    gc.differential(self.inner.x0,
                    self.inner.y0 + self.baseline - gc.differential_base(self.variable),
                    self.variable)
    self.argument.draw(gc)
