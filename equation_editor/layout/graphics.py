from abc import ABC, abstractmethod
from enum import IntEnum


class Color(IntEnum):
  BLACK = 0
  RED = 1
  GREEN = 2
  YELLOW = 3
  BLUE = 4
  MAGENTA = 5
  CYAN = 6
  WHITE = 7


class Attributes(IntEnum):
  NONE = 0
  BOLD = 1
  ITALIC = 2
  BOLD_ITALIC = 3


class Graphics(ABC):
  """Drawing capability consumed by the layout and draw passes.

  Coordinates are integer cells or pixels, origin at the top left. A renderer
  supplies the metrics used while sizing and the primitives used while drawing.
  """

  # -- metrics ----------------------------------------------------------------

  @abstractmethod
  def text_height(self) -> int:
    pass

  @abstractmethod
  def text_length(self, text: str) -> int:
    pass

  @abstractmethod
  def char_length(self, char: str) -> int:
    pass

  @abstractmethod
  def parenthesis_width(self, height: int = 1) -> int:
    """Width of a single parenthesis enclosing content of ``height``"""

  @abstractmethod
  def divide_line_height(self) -> int:
    pass

  @abstractmethod
  def differential_width(self, variable: str) -> int:
    pass

  @abstractmethod
  def differential_height(self, variable: str) -> int:
    pass

  @abstractmethod
  def differential_base(self, variable: str) -> int:
    """Row of the fraction bar inside the d/dx glyph"""

  # -- primitives -------------------------------------------------------------

  @abstractmethod
  def at(self, x: int, y: int, text: str, attrs: Attributes = Attributes.NONE,
         color: Color = Color.BLACK):
    pass

  @abstractmethod
  def horiz_line(self, width: int, x0: int, y0: int):
    pass

  @abstractmethod
  def parenthesis(self, width: int, height: int, x0: int, y0: int):
    """Draw a pair of parentheses whose outer extent is ``width`` x ``height``"""

  @abstractmethod
  def differential(self, x0: int, y0: int, variable: str):
    pass

  @abstractmethod
  def select_box(self, width: int, height: int, x0: int, y0: int):
    pass

  def out(self):
    """Flush everything drawn so far"""
