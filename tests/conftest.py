import numpy as np
import pytest

from equation_editor.layout.graphics import Graphics, Attributes, Color


class FixedGraphics(Graphics):
  """Unit metric character-cell canvas backed by a numpy character grid"""

  def __init__(self, width: int = 40, height: int = 12):
    self.grid = np.full((height, width), ' ', dtype='<U1')
    self.select_boxes = []
    self.flushes = 0

  def text_height(self):
    return 1

  def text_length(self, text):
    return len(text)

  def char_length(self, char):
    return 1

  def parenthesis_width(self, height=1):
    return 1

  def divide_line_height(self):
    return 1

  def differential_width(self, variable):
    return 4

  def differential_height(self, variable):
    return 1

  def differential_base(self, variable):
    return 0

  def _put(self, x, y, char):
    rows, cols = self.grid.shape
    if 0 <= y < rows and 0 <= x < cols:
      self.grid[y, x] = char

  def at(self, x, y, text, attrs=Attributes.NONE, color=Color.BLACK):
    for i, char in enumerate(text):
      self._put(x + i, y, char)

  def horiz_line(self, width, x0, y0):
    for i in range(width):
      self._put(x0 + i, y0, '-')

  def parenthesis(self, width, height, x0, y0):
    for row in range(height):
      self._put(x0, y0 + row, '(')
      self._put(x0 + width - 1, y0 + row, ')')

  def differential(self, x0, y0, variable):
    self.at(x0, y0, f"d/d{variable}")

  def select_box(self, width, height, x0, y0):
    self.select_boxes.append((x0, y0, width, height))

  def out(self):
    self.flushes += 1

  def rows(self):
    lines = [''.join(row).rstrip() for row in self.grid]
    while lines and not lines[-1]:
      lines.pop()
    return lines


@pytest.fixture
def gc():
  return FixedGraphics()
