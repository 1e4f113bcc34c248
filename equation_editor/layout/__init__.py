"""Layout and drawing of equation trees."""

from .graphics import Graphics, Color, Attributes
from .engine import LayoutEngine

__all__ = ['Graphics', 'Color', 'Attributes', 'LayoutEngine']
