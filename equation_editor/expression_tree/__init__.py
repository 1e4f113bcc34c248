"""Expression Tree Module

Node hierarchy, parser, iterators and tree utilities of the equation editor.
"""

from .core.node import (
  Box, Node, NodeSequence, Binary,
  Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)
from .core.operators import NodeType, Select, CONSTANT_MAP, FUNCTION_MAP
from .core.iterators import NodeIterator, FactorIterator
from .parser import Parser, Tokenizer, Token, TokenKind, parse_expression
from .utils import ExpressionSimplifier, ExpressionValidator, SymPyConverter

__all__ = [
  "Box", "Node", "NodeSequence", "Binary",
  "Number", "Constant", "Variable", "Term", "Expression", "Divide", "Power",
  "Function", "Differential",
  "NodeType", "Select", "CONSTANT_MAP", "FUNCTION_MAP",
  "NodeIterator", "FactorIterator",
  "Parser", "Tokenizer", "Token", "TokenKind", "parse_expression",
  "ExpressionSimplifier", "ExpressionValidator", "SymPyConverter"
]
