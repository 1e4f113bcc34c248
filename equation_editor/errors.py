"""Exceptions raised by the editor core.

Every error carries an optional character ``position`` so the command layer
can point at the offending input.
"""

from typing import Optional


class EditorError(Exception):
  """Base class for all editor core errors"""

  def __init__(self, message: str, position: Optional[int] = None):
    self.message = message
    self.position = position
    if position is not None:
      super().__init__(f"{message} (at position {position})")
    else:
      super().__init__(message)


class ExpressionSyntaxError(EditorError):
  """Malformed expression text"""


class DeserializationError(EditorError):
  """Malformed document, or a tag/attribute that maps to no node field"""


class StructuralError(EditorError):
  """An edit would violate the tree invariants; nothing was changed"""


class EvaluationError(EditorError):
  """Numeric evaluation failed (unbound variable, division by zero)"""
