"""Document format: FSM scanner, writer and the equation tree mapping."""

from .xml_fsm import (
  ScanState, CharClass, TRANSITIONS, XMLScanner, XMLToken, XMLTokenKind, XMLWriter,
  classify, transition, escape, unescape
)
from .eqn_xml import EquationXMLWriter, EquationXMLReader, to_xml, from_xml

__all__ = [
  'ScanState', 'CharClass', 'TRANSITIONS', 'XMLScanner', 'XMLToken', 'XMLTokenKind',
  'XMLWriter', 'classify', 'transition', 'escape', 'unescape',
  'EquationXMLWriter', 'EquationXMLReader', 'to_xml', 'from_xml'
]
