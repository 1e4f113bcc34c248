from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .equation import Equation
from .errors import EditorError
from .logging_system import log_command, log_warning


@dataclass
class CommandResult:
  ok: bool
  message: str = ""
  position: Optional[int] = None
  value: Any = None


class EditCommands:
  """Name to handler dispatch for the edit surface of one Equation.

  Every command returns a CommandResult; editor errors become a rejected
  result carrying the error position. Commands that change the tree push an
  undo snapshot once they succeed.
  """

  MUTATING = {
    'set_expression', 'insert_factor', 'insert_term', 'delete', 'delete_selection',
    'wrap', 'unwrap', 'split_term', 'simplify', 'normalize',
  }

  def __init__(self, equation: Equation):
    self.equation = equation
    self.commands: Dict[str, Callable[..., Any]] = {
      'set_expression': equation.set_expression,
      'insert_factor': equation.insert_factor,
      'insert_term': equation.insert_term,
      'delete': equation.delete,
      'delete_selection': equation.delete_selection,
      'wrap': equation.wrap_parenthesis,
      'unwrap': equation.unwrap_parenthesis,
      'set_cursor': equation.set_cursor,
      'move_cursor': equation.move_cursor,
      'split_term': equation.split_term,
      'select': equation.select,
      'extend_selection': equation.extend_selection,
      'clear_selection': equation.clear_selection,
      'select_at': equation.select_at,
      'select_box': equation.select_box,
      'simplify': equation.simplify,
      'normalize': equation.normalize,
      'undo': self._undo_command,
      'redo': self._redo_command,
      'save': equation.xml_out,
      'load': equation.load,
    }

  def execute(self, name: str, *args, **kwargs) -> CommandResult:
    handler = self.commands.get(name)
    if handler is None:
      log_warning(f"Unknown command '{name}'")
      return CommandResult(False, f"Unknown command '{name}'")

    # mutating commands are logged by the Equation once they succeed
    if name not in self.MUTATING:
      log_command(name, ' '.join(repr(arg) for arg in args))
    try:
      value = handler(*args, **kwargs)
    except EditorError as e:
      log_warning(f"Command '{name}' rejected: {e}")
      return CommandResult(False, e.message, e.position)

    if name in self.MUTATING:
      self.equation.push_undo()
    if isinstance(value, CommandResult):
      return value
    return CommandResult(True, value=value)

  def _undo_command(self) -> CommandResult:
    if not self.equation.pop_undo():
      return CommandResult(True, "Nothing to undo", value=False)
    return CommandResult(True, value=True)

  def _redo_command(self) -> CommandResult:
    if not self.equation.redo():
      return CommandResult(True, "Nothing to redo", value=False)
    return CommandResult(True, value=True)
