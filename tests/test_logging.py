import logging

import pytest

from equation_editor import Equation, EditCommands, EditorConfig, LogLevel, configure_logging, get_logger


@pytest.fixture(autouse=True)
def reset_logger():
  yield
  configure_logging(LogLevel.MINIMAL)


def messages(caplog):
  return [r.getMessage() for r in caplog.records if r.name == 'equation_editor']


def test_commands_logged_at_detailed(caplog):
  configure_logging(LogLevel.DETAILED)
  caplog.set_level(logging.DEBUG)
  commands = EditCommands(Equation("a"))
  commands.execute('insert_term', 'b')
  assert "COMMAND: insert_term 'b'" in messages(caplog)


def test_minimal_hides_commands_but_shows_rejections(caplog):
  configure_logging(LogLevel.MINIMAL)
  caplog.set_level(logging.DEBUG)
  commands = EditCommands(Equation("a"))
  commands.execute('insert_term', 'b')
  commands.execute('insert_factor', '1+*')
  logged = messages(caplog)
  assert not any(m.startswith("COMMAND") for m in logged)
  assert any("rejected" in m for m in logged)


def test_config_sets_level():
  Equation("x", EditorConfig(log_level=LogLevel.VERBOSE))
  assert get_logger().log_level == LogLevel.VERBOSE


def test_silent_has_no_console_handler():
  logger = configure_logging(LogLevel.SILENT)
  assert logger.logger.handlers == []
