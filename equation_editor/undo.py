from typing import List, Optional

from .logging_system import log_debug


class EqnUndoList:
  """Serialized snapshots of one equation with a cursor.

  The snapshot under the cursor is the state currently shown. Pushing drops
  any redo tail past the cursor; when ``limit`` is exceeded the oldest
  snapshots are discarded.
  """

  def __init__(self, limit: int = 256):
    if limit < 1:
      raise ValueError("Undo limit must be at least 1")
    self.limit = limit
    self._snapshots: List[str] = []
    self._cursor = -1

  def __len__(self):
    return len(self._snapshots)

  @property
  def cursor(self) -> int:
    return self._cursor

  @property
  def can_undo(self) -> bool:
    return self._cursor > 0

  @property
  def can_redo(self) -> bool:
    return self._cursor < len(self._snapshots) - 1

  def push(self, snapshot: str):
    del self._snapshots[self._cursor + 1:]
    self._snapshots.append(snapshot)
    overflow = len(self._snapshots) - self.limit
    if overflow > 0:
      del self._snapshots[:overflow]
    self._cursor = len(self._snapshots) - 1
    log_debug(f"Undo push: {len(self._snapshots)} snapshots")

  def undo(self) -> Optional[str]:
    """Step back one snapshot; None when already at the oldest"""
    if not self.can_undo:
      return None
    self._cursor -= 1
    log_debug(f"Undo to snapshot {self._cursor}")
    return self._snapshots[self._cursor]

  def redo(self) -> Optional[str]:
    if not self.can_redo:
      return None
    self._cursor += 1
    log_debug(f"Redo to snapshot {self._cursor}")
    return self._snapshots[self._cursor]

  def top(self) -> Optional[str]:
    return self._snapshots[self._cursor] if self._snapshots else None

  def clear(self):
    self._snapshots = []
    self._cursor = -1
