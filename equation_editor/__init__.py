"""
Equation Editor Core

Symbolic expression engine for an equation editor: parsing, simplification,
layout, serialization and undo over an owned tree of typed nodes.
"""

__version__ = "0.1.0"

from .errors import (
  EditorError, ExpressionSyntaxError, DeserializationError, StructuralError, EvaluationError
)
from .config import EditorConfig
from .logging_system import LogLevel, get_logger, set_log_level, configure_logging
from .expression_tree import (
  Box, Node, Number, Constant, Variable, Term, Expression, Divide, Power, Function,
  Differential, NodeType, Select, NodeIterator, FactorIterator, Parser, parse_expression,
  ExpressionSimplifier, ExpressionValidator, SymPyConverter
)
from .layout import Graphics, Color, Attributes, LayoutEngine
from .serialization import EquationXMLWriter, EquationXMLReader, XMLScanner, XMLWriter
from .undo import EqnUndoList
from .equation import Equation
from .commands import EditCommands, CommandResult

__all__ = [
  "EditorError", "ExpressionSyntaxError", "DeserializationError", "StructuralError",
  "EvaluationError",
  "EditorConfig",
  "LogLevel", "get_logger", "set_log_level", "configure_logging",
  "Box", "Node", "Number", "Constant", "Variable", "Term", "Expression", "Divide", "Power",
  "Function", "Differential", "NodeType", "Select", "NodeIterator", "FactorIterator",
  "Parser", "parse_expression",
  "ExpressionSimplifier", "ExpressionValidator", "SymPyConverter",
  "Graphics", "Color", "Attributes", "LayoutEngine",
  "EquationXMLWriter", "EquationXMLReader", "XMLScanner", "XMLWriter",
  "EqnUndoList", "Equation", "EditCommands", "CommandResult",
]
