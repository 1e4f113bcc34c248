from typing import Callable, Dict, List, Optional

from .xml_fsm import XMLScanner, XMLToken, XMLTokenKind, XMLWriter
from ..errors import DeserializationError
from ..expression_tree.core.node import (
  Node, Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)
from ..expression_tree.core.operators import NodeType, Select, SELECT_NAMES, SELECT_BY_NAME

DOCUMENT_TAG = 'document'
EQUATION_TAG = 'equation'

TAG_NAMES = {
  NodeType.EXPRESSION: 'expression',
  NodeType.TERM: 'term',
  NodeType.NUMBER: 'number',
  NodeType.CONSTANT: 'constant',
  NodeType.VARIABLE: 'variable',
  NodeType.DIVIDE: 'divide',
  NodeType.POWER: 'power',
  NodeType.FUNCTION: 'function',
  NodeType.DIFFERENTIAL: 'differential',
}

COMMON_ATTRIBUTES = {'negative', 'select'}


def _format_float(x: float) -> str:
  return repr(float(x))


class EquationXMLWriter:
  """Serializes an equation tree; the left inverse of EquationXMLReader"""

  def __init__(self, indent: int = 2):
    self.indent = indent

  def write(self, root: Node) -> str:
    writer = XMLWriter(self.indent)
    writer.open(DOCUMENT_TAG)
    writer.open(EQUATION_TAG)
    self._write_node(writer, root)
    return writer.finish()

  def _write_node(self, writer: XMLWriter, node: Node):
    tag = TAG_NAMES[node.node_type]
    attributes = self.attributes(node)
    children = node.children()
    if not children:
      writer.atom(tag, attributes)
      return
    writer.open(tag, attributes)
    for child in children:
      self._write_node(writer, child)
    writer.close()

  @staticmethod
  def attributes(node: Node) -> Dict[str, str]:
    attributes = {}
    if isinstance(node, Number):
      attributes['real'] = _format_float(node.value.real)
      attributes['imag'] = _format_float(node.value.imag)
    elif isinstance(node, (Constant, Function)):
      attributes['name'] = node.name
    elif isinstance(node, Variable):
      attributes['name'] = node.name
      if node.value is not None:
        attributes['real'] = _format_float(node.value.real)
        attributes['imag'] = _format_float(node.value.imag)
    elif isinstance(node, Differential):
      attributes['variable'] = node.variable
    if node.negative:
      attributes['negative'] = 'true'
    if node.select != Select.NONE:
      attributes['select'] = SELECT_NAMES[node.select]
    return attributes


class EquationXMLReader:
  """Builds an equation tree from scanner tokens.

  Tag names select the node variant and attribute names map to node fields.
  Any unknown tag or attribute, or a child list that does not fit the variant,
  raises DeserializationError at the offending tag's offset.
  """

  def __init__(self, text: str):
    self.text = text
    self._tokens: List[XMLToken] = []
    self._index = 0
    self._builders: Dict[str, Callable[[XMLToken, List[Node]], Node]] = {
      'expression': self._build_expression,
      'term': self._build_term,
      'number': self._build_number,
      'constant': self._build_constant,
      'variable': self._build_variable,
      'divide': self._build_divide,
      'power': self._build_power,
      'function': self._build_function,
      'differential': self._build_differential,
    }
    self._allowed = {
      'expression': set(),
      'term': set(),
      'number': {'real', 'imag'},
      'constant': {'name'},
      'variable': {'name', 'real', 'imag'},
      'divide': set(),
      'power': set(),
      'function': {'name'},
      'differential': {'variable'},
    }

  def read(self) -> Expression:
    self._tokens = XMLScanner(self.text).scan()
    self._index = 0
    self._expect_start(DOCUMENT_TAG)
    self._expect_start(EQUATION_TAG)
    root = self._read_node()
    self._expect_end(EQUATION_TAG)
    self._expect_end(DOCUMENT_TAG)
    if not isinstance(root, Expression):
      raise DeserializationError("The equation root must be an expression", 0)
    return root

  # -- token stream -----------------------------------------------------------

  def _peek(self) -> Optional[XMLToken]:
    return self._tokens[self._index] if self._index < len(self._tokens) else None

  def _next(self) -> XMLToken:
    token = self._peek()
    if token is None:
      raise DeserializationError("Unexpected end of document", len(self.text))
    self._index += 1
    return token

  def _expect_start(self, name: str):
    token = self._next()
    if token.kind != XMLTokenKind.START or token.name != name:
      raise DeserializationError(f"Expected <{name}>", token.position)
    if token.attributes:
      raise DeserializationError(f"<{name}> takes no attributes", token.position)

  def _expect_end(self, name: str):
    token = self._next()
    if token.kind != XMLTokenKind.END or token.name != name:
      raise DeserializationError(f"Expected </{name}>", token.position)

  def _read_node(self) -> Node:
    token = self._next()
    if token.kind == XMLTokenKind.TEXT:
      raise DeserializationError("Unexpected text content", token.position)
    if token.kind != XMLTokenKind.START:
      raise DeserializationError(f"Unexpected </{token.name}>", token.position)
    builder = self._builders.get(token.name)
    if builder is None:
      raise DeserializationError(f"Unknown tag <{token.name}>", token.position)
    unknown = set(token.attributes) - self._allowed[token.name] - COMMON_ATTRIBUTES
    if unknown:
      raise DeserializationError(
        f"Unknown attribute '{sorted(unknown)[0]}' on <{token.name}>", token.position)

    children = []
    while True:
      following = self._peek()
      if following is None:
        raise DeserializationError(f"Unclosed <{token.name}>", len(self.text))
      if following.kind == XMLTokenKind.END:
        self._index += 1
        break
      children.append(self._read_node())

    node = builder(token, children)
    self._apply_common(node, token)
    return node

  # -- attributes -------------------------------------------------------------

  @staticmethod
  def _apply_common(node: Node, token: XMLToken):
    negative = token.attributes.get('negative', 'false')
    if negative not in ('true', 'false'):
      raise DeserializationError(f"Bad negative value '{negative}'", token.position)
    node.negative = negative == 'true'
    select = token.attributes.get('select', 'none')
    if select not in SELECT_BY_NAME:
      raise DeserializationError(f"Bad select value '{select}'", token.position)
    node.select = SELECT_BY_NAME[select]

  @staticmethod
  def _required(token: XMLToken, name: str) -> str:
    if name not in token.attributes:
      raise DeserializationError(f"<{token.name}> requires '{name}'", token.position)
    return token.attributes[name]

  @staticmethod
  def _complex(token: XMLToken) -> complex:
    try:
      return complex(float(token.attributes.get('real', '0')),
                     float(token.attributes.get('imag', '0')))
    except ValueError:
      raise DeserializationError(f"Bad numeric value on <{token.name}>", token.position)

  @staticmethod
  def _child_count(token: XMLToken, children: List[Node], count: int):
    if len(children) != count:
      raise DeserializationError(
        f"<{token.name}> needs {count} children, got {len(children)}", token.position)

  # -- builders ---------------------------------------------------------------

  def _build_expression(self, token, children):
    if not children or not all(isinstance(child, Term) for child in children):
      raise DeserializationError("<expression> must hold one or more terms", token.position)
    return Expression(children)

  def _build_term(self, token, children):
    if not children or any(isinstance(child, Term) for child in children):
      raise DeserializationError("<term> must hold one or more factors", token.position)
    return Term(children)

  def _build_number(self, token, children):
    self._child_count(token, children, 0)
    return Number(self._complex(token))

  def _build_constant(self, token, children):
    self._child_count(token, children, 0)
    name = self._required(token, 'name')
    try:
      return Constant(name)
    except ValueError as e:
      raise DeserializationError(str(e), token.position)

  def _build_variable(self, token, children):
    self._child_count(token, children, 0)
    name = self._required(token, 'name')
    if len(name) != 1 or not name.isalpha():
      raise DeserializationError(f"Bad variable name '{name}'", token.position)
    bound = 'real' in token.attributes or 'imag' in token.attributes
    return Variable(name, self._complex(token) if bound else None)

  def _binary_operands(self, token, children):
    self._child_count(token, children, 2)
    if any(isinstance(child, Term) for child in children):
      raise DeserializationError(f"<{token.name}> operands cannot be terms", token.position)
    return children

  def _build_divide(self, token, children):
    return Divide(*self._binary_operands(token, children))

  def _build_power(self, token, children):
    return Power(*self._binary_operands(token, children))

  def _argument(self, token, children) -> Expression:
    self._child_count(token, children, 1)
    if not isinstance(children[0], Expression):
      raise DeserializationError(f"<{token.name}> argument must be an expression",
                                 token.position)
    return children[0]

  def _build_function(self, token, children):
    name = self._required(token, 'name')
    argument = self._argument(token, children)
    try:
      return Function(name, argument)
    except ValueError as e:
      raise DeserializationError(str(e), token.position)

  def _build_differential(self, token, children):
    variable = self._required(token, 'variable')
    if len(variable) != 1 or not variable.isalpha():
      raise DeserializationError(f"Bad differential variable '{variable}'", token.position)
    return Differential(variable, self._argument(token, children))


def to_xml(root: Node, indent: int = 2) -> str:
  return EquationXMLWriter(indent).write(root)


def from_xml(text: str) -> Expression:
  return EquationXMLReader(text).read()
