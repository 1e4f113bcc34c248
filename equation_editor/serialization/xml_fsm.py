"""Finite-state scanner and writer for the tag-structured document format.

The scanner is a table driven state machine: ``TRANSITIONS`` maps a
``(ScanState, CharClass)`` pair to the next state and the name of the action
run on the character. Any pair missing from the table moves to ``ERROR``.
"""

import io
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

from ..errors import DeserializationError


class ScanState(IntEnum):
  OUTSIDE = 0
  TAG_OPEN = 1
  OPEN_NAME = 2
  IN_OPEN_TAG = 3
  ATTR_NAME = 4
  ATTR_EQ = 5
  ATTR_VALUE_START = 6
  ATTR_VALUE = 7
  EMPTY_TAG_END = 8
  CLOSE_NAME = 9
  CLOSE_END = 10
  TEXT = 11
  FINISHED = 12
  ERROR = 13


class CharClass(IntEnum):
  LT = 0
  GT = 1
  SLASH = 2
  EQUALS = 3
  QUOTE = 4
  SPACE = 5
  NAME = 6
  OTHER = 7
  END = 8


_SINGLE_CHAR_CLASSES = {
  '<': CharClass.LT,
  '>': CharClass.GT,
  '/': CharClass.SLASH,
  '=': CharClass.EQUALS,
  '"': CharClass.QUOTE,
  "'": CharClass.QUOTE,
}


def classify(char: Optional[str]) -> CharClass:
  """Character class of ``char``; ``None`` marks end of input"""
  if char is None:
    return CharClass.END
  if char in _SINGLE_CHAR_CLASSES:
    return _SINGLE_CHAR_CLASSES[char]
  if char.isspace():
    return CharClass.SPACE
  if char.isalnum() or char in '_-:.':
    return CharClass.NAME
  return CharClass.OTHER


S = ScanState
C = CharClass

TRANSITIONS: Dict[Tuple[ScanState, CharClass], Tuple[ScanState, Optional[str]]] = {
  (S.OUTSIDE, C.LT): (S.TAG_OPEN, 'tag_start'),
  (S.OUTSIDE, C.SPACE): (S.OUTSIDE, None),
  (S.OUTSIDE, C.END): (S.FINISHED, 'finish'),

  (S.TEXT, C.LT): (S.TAG_OPEN, 'tag_start'),
  (S.TEXT, C.END): (S.ERROR, 'unterminated'),

  (S.TAG_OPEN, C.NAME): (S.OPEN_NAME, 'name_char'),
  (S.TAG_OPEN, C.SLASH): (S.CLOSE_NAME, None),

  (S.OPEN_NAME, C.NAME): (S.OPEN_NAME, 'name_char'),
  (S.OPEN_NAME, C.SPACE): (S.IN_OPEN_TAG, None),
  (S.OPEN_NAME, C.GT): (S.OUTSIDE, 'open_end'),
  (S.OPEN_NAME, C.SLASH): (S.EMPTY_TAG_END, None),

  (S.IN_OPEN_TAG, C.SPACE): (S.IN_OPEN_TAG, None),
  (S.IN_OPEN_TAG, C.NAME): (S.ATTR_NAME, 'attr_char'),
  (S.IN_OPEN_TAG, C.GT): (S.OUTSIDE, 'open_end'),
  (S.IN_OPEN_TAG, C.SLASH): (S.EMPTY_TAG_END, None),

  (S.ATTR_NAME, C.NAME): (S.ATTR_NAME, 'attr_char'),
  (S.ATTR_NAME, C.SPACE): (S.ATTR_EQ, None),
  (S.ATTR_NAME, C.EQUALS): (S.ATTR_VALUE_START, None),

  (S.ATTR_EQ, C.SPACE): (S.ATTR_EQ, None),
  (S.ATTR_EQ, C.EQUALS): (S.ATTR_VALUE_START, None),

  (S.ATTR_VALUE_START, C.SPACE): (S.ATTR_VALUE_START, None),
  (S.ATTR_VALUE_START, C.QUOTE): (S.ATTR_VALUE, 'value_start'),

  (S.ATTR_VALUE, C.QUOTE): (S.IN_OPEN_TAG, 'value_quote'),
  (S.ATTR_VALUE, C.LT): (S.ERROR, 'bad_value'),
  (S.ATTR_VALUE, C.END): (S.ERROR, 'unterminated'),

  (S.EMPTY_TAG_END, C.GT): (S.OUTSIDE, 'empty_end'),

  (S.CLOSE_NAME, C.NAME): (S.CLOSE_NAME, 'close_char'),
  (S.CLOSE_NAME, C.SPACE): (S.CLOSE_END, None),
  (S.CLOSE_NAME, C.GT): (S.OUTSIDE, 'close_end'),

  (S.CLOSE_END, C.SPACE): (S.CLOSE_END, None),
  (S.CLOSE_END, C.GT): (S.OUTSIDE, 'close_end'),
}

for _cls in (C.GT, C.SLASH, C.EQUALS, C.QUOTE, C.NAME, C.OTHER):
  TRANSITIONS[(S.OUTSIDE, _cls)] = (S.TEXT, 'text_char')
for _cls in (C.GT, C.SLASH, C.EQUALS, C.QUOTE, C.SPACE, C.NAME, C.OTHER):
  TRANSITIONS[(S.TEXT, _cls)] = (S.TEXT, 'text_char')
for _cls in (C.GT, C.SLASH, C.EQUALS, C.SPACE, C.NAME, C.OTHER):
  TRANSITIONS[(S.ATTR_VALUE, _cls)] = (S.ATTR_VALUE, 'value_char')

del S, C


def transition(state: ScanState, char_class: CharClass) -> Tuple[ScanState, Optional[str]]:
  return TRANSITIONS.get((state, char_class), (ScanState.ERROR, None))


ENTITIES = {
  '&lt;': '<',
  '&gt;': '>',
  '&quot;': '"',
  '&apos;': "'",
  '&amp;': '&',
}


def escape(text: str) -> str:
  text = text.replace('&', '&amp;')
  for entity, char in ENTITIES.items():
    if char != '&':
      text = text.replace(char, entity)
  return text


def unescape(text: str, position: int = 0) -> str:
  out = []
  i = 0
  while i < len(text):
    if text[i] != '&':
      out.append(text[i])
      i += 1
      continue
    end = text.find(';', i)
    entity = text[i:end + 1] if end >= 0 else ''
    if entity not in ENTITIES:
      raise DeserializationError(f"Unknown entity at offset {position + i}", position + i)
    out.append(ENTITIES[entity])
    i = end + 1
  return ''.join(out)


class XMLTokenKind(Enum):
  START = 'start'
  END = 'end'
  TEXT = 'text'


@dataclass
class XMLToken:
  kind: XMLTokenKind
  name: str
  attributes: Dict[str, str] = field(default_factory=dict)
  position: int = 0
  self_closing: bool = False


class XMLScanner:
  """Streams ``XMLToken``s out of a document, checking tag nesting"""

  def __init__(self, text: str):
    self.text = text
    self.state = ScanState.OUTSIDE
    self.position = 0
    self.tokens: List[XMLToken] = []
    self._stack: List[str] = []
    self._closed_root = False
    self._tag_position = 0
    self._name: List[str] = []
    self._attributes: Dict[str, str] = {}
    self._attr_name: List[str] = []
    self._value: List[str] = []
    self._value_position = 0
    self._quote = ''
    self._text: List[str] = []
    self._text_position = 0

  def scan(self) -> List[XMLToken]:
    try:
      for self.position in range(len(self.text) + 1):
        self._step(self.text[self.position] if self.position < len(self.text) else None)
    except DeserializationError:
      self.state = ScanState.ERROR
      raise
    return self.tokens

  def _step(self, char: Optional[str]):
    state, action = transition(self.state, classify(char))
    if action is not None:
      override = getattr(self, f"_on_{action}")(char)
      if override is not None:
        state = override
    if state == ScanState.ERROR:
      self._fail(f"Unexpected {'end of input' if char is None else repr(char)}")
    self.state = state

  def _fail(self, message: str, position: Optional[int] = None):
    self.state = ScanState.ERROR
    position = self.position if position is None else position
    raise DeserializationError(f"{message} at offset {position}", position)

  def _emit(self, token: XMLToken):
    self.tokens.append(token)

  # -- actions ----------------------------------------------------------------

  def _on_tag_start(self, char):
    if self._text:
      content = ''.join(self._text).strip()
      if content:
        if not self._stack:
          self._fail("Text outside the document element", self._text_position)
        self._emit(XMLToken(XMLTokenKind.TEXT, self._stack[-1],
                            {'text': unescape(content, self._text_position)},
                            self._text_position))
      self._text = []
    self._tag_position = self.position
    self._name = []
    self._attributes = {}

  def _on_text_char(self, char):
    if not self._text:
      self._text_position = self.position
    self._text.append(char)

  def _on_name_char(self, char):
    self._name.append(char)

  def _on_attr_char(self, char):
    self._attr_name.append(char)

  def _on_value_start(self, char):
    self._quote = char
    self._value = []
    self._value_position = self.position + 1

  def _on_value_quote(self, char):
    if char != self._quote:
      self._value.append(char)
      return ScanState.ATTR_VALUE
    name = ''.join(self._attr_name)
    if name in self._attributes:
      self._fail(f"Duplicate attribute '{name}'")
    self._attributes[name] = unescape(''.join(self._value), self._value_position)
    self._attr_name = []

  def _on_value_char(self, char):
    self._value.append(char)

  def _open(self, self_closing: bool):
    if self._closed_root:
      self._fail("Content after the document element", self._tag_position)
    name = ''.join(self._name)
    self._stack.append(name)
    self._emit(XMLToken(XMLTokenKind.START, name, dict(self._attributes),
                        self._tag_position, self_closing))

  def _on_open_end(self, char):
    self._open(False)

  def _on_empty_end(self, char):
    self._open(True)
    self._close(self._stack[-1])

  def _on_close_char(self, char):
    self._name.append(char)

  def _on_close_end(self, char):
    self._close(''.join(self._name))

  def _close(self, name: str):
    if not self._stack:
      self._fail(f"Unexpected closing tag '{name}'", self._tag_position)
    if self._stack[-1] != name:
      self._fail(f"Closing tag '{name}' does not match '{self._stack[-1]}'", self._tag_position)
    self._stack.pop()
    self._emit(XMLToken(XMLTokenKind.END, name, {}, self._tag_position))
    if not self._stack:
      self._closed_root = True

  def _on_finish(self, char):
    if self._stack:
      self._fail(f"Unclosed tag '{self._stack[-1]}'")
    if not self._closed_root:
      self._fail("Empty document")

  def _on_unterminated(self, char):
    self._fail("Unexpected end of input")

  def _on_bad_value(self, char):
    self._fail("'<' inside an attribute value")


class XMLWriter:
  """Indented tag writer; closing tags are taken from an internal stack"""

  def __init__(self, indent: int = 2):
    self.indent = indent
    self._out = io.StringIO()
    self._stack: List[str] = []

  def _line(self, text: str):
    if self._out.tell():
      self._out.write('\n')
    self._out.write(' ' * (self.indent * len(self._stack)) + text)

  @staticmethod
  def _tag(name: str, attributes: Optional[Dict[str, str]]) -> str:
    parts = [name]
    for key, value in (attributes or {}).items():
      parts.append(f'{key}="{escape(str(value))}"')
    return ' '.join(parts)

  def open(self, name: str, attributes: Optional[Dict[str, str]] = None):
    self._line(f"<{self._tag(name, attributes)}>")
    self._stack.append(name)

  def atom(self, name: str, attributes: Optional[Dict[str, str]] = None):
    self._line(f"<{self._tag(name, attributes)}/>")

  def close(self):
    if not self._stack:
      raise ValueError("No open tag to close")
    name = self._stack.pop()
    self._line(f"</{name}>")

  def text(self, content: str):
    self._line(escape(content))

  def finish(self) -> str:
    while self._stack:
      self.close()
    return self.getvalue()

  def getvalue(self) -> str:
    return self._out.getvalue() + '\n'
