from dataclasses import dataclass

from .logging_system import LogLevel


@dataclass
class EditorConfig:
  """Tunables for one open equation document"""
  max_simplify_passes: int = 16   # ceiling for Equation.simplify fixed-point loop
  undo_limit: int = 256           # oldest snapshots are dropped beyond this
  xml_indent: int = 2
  check_invariants: bool = True   # validate the tree after every mutation
  log_level: LogLevel = LogLevel.MINIMAL

  def __post_init__(self):
    if self.max_simplify_passes < 1:
      raise ValueError("max_simplify_passes must be at least 1")
    if self.undo_limit < 1:
      raise ValueError("undo_limit must be at least 1")
    if self.xml_indent < 0:
      raise ValueError("xml_indent must not be negative")
