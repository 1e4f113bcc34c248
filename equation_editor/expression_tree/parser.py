"""
Expression text parser.

A hand written tokenizer feeds a recursive-descent parser with one production
per precedence level:

    expression := [+|-] term { (+|-) term }
    term       := factor { ['*'] factor }
    factor     := power { '/' power }
    power      := primary [ '^' [+|-] power ]
    primary    := number | constant | variable | function '(' expression ')'
                | d/dx '(' expression ')' | '(' expression ')' | '[' expression ']'

Any failure raises ExpressionSyntaxError with the character offset of the
offending token; no partial tree is returned.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .core.node import (
  Node, Number, Constant, Variable, Term, Expression, Divide, Power, Function, Differential
)
from .core.operators import CONSTANT_MAP, FUNCTION_MAP
from ..errors import ExpressionSyntaxError


class TokenKind(Enum):
  NUMBER = 'number'
  CONSTANT = 'constant'
  VARIABLE = 'variable'
  FUNCTION = 'function'
  DIFFERENTIAL = 'differential'
  PLUS = '+'
  MINUS = '-'
  TIMES = '*'
  DIVIDE = '/'
  POWER = '^'
  OPEN = '('
  CLOSE = ')'
  END = 'end'


@dataclass
class Token:
  kind: TokenKind
  text: str
  position: int
  value: Optional[object] = None


OPERATOR_TOKENS = {
  '+': TokenKind.PLUS, '-': TokenKind.MINUS, '*': TokenKind.TIMES,
  '/': TokenKind.DIVIDE, '^': TokenKind.POWER,
  '(': TokenKind.OPEN, '[': TokenKind.OPEN,
  ')': TokenKind.CLOSE, ']': TokenKind.CLOSE,
}
CLOSING_BRACKET = {'(': ')', '[': ']'}

# Longest names first so that e.g. "sqrt" is not read as "s", "q", ...
FUNCTION_NAMES = sorted(FUNCTION_MAP, key=len, reverse=True)

PRIMARY_START = (TokenKind.NUMBER, TokenKind.CONSTANT, TokenKind.VARIABLE,
                 TokenKind.FUNCTION, TokenKind.DIFFERENTIAL, TokenKind.OPEN)


class Tokenizer:
  """Splits expression text into tokens"""

  def __init__(self, text: str):
    self.text = text
    self.pos = 0

  def _peek(self, offset: int = 0) -> str:
    index = self.pos + offset
    return self.text[index] if index < len(self.text) else ''

  def tokenize(self) -> List[Token]:
    tokens = []
    while True:
      while self._peek().isspace():
        self.pos += 1
      if self.pos >= len(self.text):
        tokens.append(Token(TokenKind.END, '', self.pos))
        return tokens
      tokens.append(self._next_token())

  def _next_token(self) -> Token:
    c = self._peek()
    start = self.pos

    if c.isdigit() or (c == '.' and self._peek(1).isdigit()):
      value = self._read_number()
      return Token(TokenKind.NUMBER, self.text[start:self.pos], start, complex(value))

    if c == 'i' and (self._peek(1).isdigit() or (self._peek(1) == '.' and self._peek(2).isdigit())):
      self.pos += 1
      value = self._read_number()
      return Token(TokenKind.NUMBER, self.text[start:self.pos], start, complex(0.0, value))

    if c in OPERATOR_TOKENS:
      self.pos += 1
      return Token(OPERATOR_TOKENS[c], c, start)

    if c.isalpha():
      for name in FUNCTION_NAMES:
        end = start + len(name)
        if self.text.startswith(name, start) and self.text[end:end + 1] == '(':
          self.pos = end
          return Token(TokenKind.FUNCTION, name, start)

      if (self.text.startswith('d/d', start) and self._peek(3).isalpha()
          and self._peek(4) == '('):
        self.pos += 4
        return Token(TokenKind.DIFFERENTIAL, self.text[start:self.pos], start, self.text[start + 3])

      self.pos += 1
      kind = TokenKind.CONSTANT if c in CONSTANT_MAP else TokenKind.VARIABLE
      return Token(kind, c, start)

    raise ExpressionSyntaxError(f"Unexpected character '{c}'", start)

  def _read_number(self) -> float:
    start = self.pos
    while self._peek().isdigit():
      self.pos += 1
    if self._peek() == '.':
      self.pos += 1
      if not self._peek().isdigit() and self.pos - 1 == start:
        raise ExpressionSyntaxError("Malformed number", start)
      while self._peek().isdigit():
        self.pos += 1
    if self._peek() == 'E':
      offset = 2 if self._peek(1) in '+-' and self._peek(1) else 1
      if self._peek(offset).isdigit():
        self.pos += offset
        while self._peek().isdigit():
          self.pos += 1
    return float(self.text[start:self.pos])


class Parser:
  """Recursive-descent parser producing an Expression tree"""

  def __init__(self, text: str):
    self.text = text
    self.tokens = Tokenizer(text).tokenize()
    self.index = 0

  def peek(self) -> Token:
    return self.tokens[self.index]

  def advance(self) -> Token:
    token = self.tokens[self.index]
    if token.kind != TokenKind.END:
      self.index += 1
    return token

  def _unexpected(self, token: Token) -> ExpressionSyntaxError:
    if token.kind == TokenKind.END:
      return ExpressionSyntaxError("Unexpected end of input", token.position)
    return ExpressionSyntaxError(f"Unexpected '{token.text}'", token.position)

  def parse(self) -> Expression:
    expression = self.parse_expression()
    token = self.peek()
    if token.kind != TokenKind.END:
      raise self._unexpected(token)
    return expression

  def parse_expression(self, parent: Optional[Node] = None) -> Expression:
    expression = Expression(parent=parent)
    negative = False
    if self.peek().kind in (TokenKind.PLUS, TokenKind.MINUS):
      negative = self.advance().kind == TokenKind.MINUS
    expression.append(self.parse_term(negative))
    while self.peek().kind in (TokenKind.PLUS, TokenKind.MINUS):
      negative = self.advance().kind == TokenKind.MINUS
      expression.append(self.parse_term(negative))
    return expression

  def parse_term(self, negative: bool = False) -> Term:
    term = Term(negative=negative)
    term.append(self.parse_factor())
    while True:
      kind = self.peek().kind
      if kind == TokenKind.TIMES:
        self.advance()
        term.append(self.parse_factor())
      elif kind in PRIMARY_START:
        term.append(self.parse_factor())
      else:
        return term

  def parse_factor(self) -> Node:
    node = self.parse_power()
    while self.peek().kind == TokenKind.DIVIDE:
      self.advance()
      node = Divide(node, self.parse_power())
    return node

  def parse_power(self) -> Node:
    base = self.parse_primary()
    if self.peek().kind != TokenKind.POWER:
      return base
    self.advance()
    negative = False
    if self.peek().kind in (TokenKind.PLUS, TokenKind.MINUS):
      negative = self.advance().kind == TokenKind.MINUS
    exponent = self.parse_power()
    if negative:
      exponent.negative = not exponent.negative
    return Power(base, exponent)

  def parse_primary(self) -> Node:
    token = self.peek()
    if token.kind == TokenKind.NUMBER:
      self.advance()
      return Number(token.value)
    if token.kind == TokenKind.CONSTANT:
      self.advance()
      return Constant(token.text)
    if token.kind == TokenKind.VARIABLE:
      self.advance()
      return Variable(token.text)
    if token.kind == TokenKind.FUNCTION:
      self.advance()
      return Function(token.text, self.parse_group())
    if token.kind == TokenKind.DIFFERENTIAL:
      self.advance()
      return Differential(token.value, self.parse_group())
    if token.kind == TokenKind.OPEN:
      return self.parse_group()
    raise self._unexpected(token)

  def parse_group(self) -> Expression:
    opening = self.advance()
    if opening.kind != TokenKind.OPEN:
      raise ExpressionSyntaxError("Expected '('", opening.position)
    expression = self.parse_expression()
    closing = self.peek()
    if closing.kind != TokenKind.CLOSE:
      if closing.kind == TokenKind.END:
        raise ExpressionSyntaxError(f"Missing '{CLOSING_BRACKET[opening.text]}'", closing.position)
      raise self._unexpected(closing)
    if closing.text != CLOSING_BRACKET[opening.text]:
      raise ExpressionSyntaxError(f"Mismatched '{closing.text}'", closing.position)
    self.advance()
    return expression


def parse_expression(text: str) -> Expression:
  """Parse ``text`` into a fresh Expression tree"""
  return Parser(text).parse()
