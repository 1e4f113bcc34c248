from typing import Optional, TYPE_CHECKING

from .graphics import Graphics
from ..logging_system import log_debug

if TYPE_CHECKING:
  from ..expression_tree.core.node import Node, Box


class LayoutEngine:
  """Whole-tree geometry: a bottom-up size pass, a top-down origin pass and a
  read-only draw pass. Geometry is recomputed from scratch on every call."""

  def __init__(self, gc: Graphics):
    self.gc = gc

  def layout(self, root: 'Node', x: int = 0, y: int = 0) -> 'Box':
    root.calculate_size(self.gc)
    root.calculate_origin(self.gc, x, y)
    log_debug(f"Layout {root.box!r}")
    return root.box.copy()

  def draw(self, root: 'Node'):
    root.draw(self.gc)
    self.gc.out()

  def render(self, root: 'Node', x: int = 0, y: int = 0) -> 'Box':
    box = self.layout(root, x, y)
    self.draw(root)
    return box

  @staticmethod
  def selection_box(root: 'Node') -> Optional['Box']:
    """Union of the boxes of every selected node"""
    box = None
    for node in root.selected_nodes():
      box = node.box.copy() if box is None else box.merge(node.box)
    return box
