import numpy as np
import numba
from enum import IntEnum


class NodeType(IntEnum):
  EXPRESSION = 0
  TERM = 1
  NUMBER = 2
  CONSTANT = 3
  VARIABLE = 4
  DIVIDE = 5
  POWER = 6
  FUNCTION = 7
  DIFFERENTIAL = 8


class Select(IntEnum):
  NONE = 0
  START = 1
  END = 2
  ALL = 3


# Mapping dictionaries
SELECT_NAMES = {Select.NONE: 'none', Select.START: 'start', Select.END: 'end', Select.ALL: 'all'}
SELECT_BY_NAME = {name: state for state, name in SELECT_NAMES.items()}

# Factor ordering used by normalize()
FACTOR_PRECEDENCE = {
  NodeType.NUMBER: 0,
  NodeType.CONSTANT: 1,
  NodeType.VARIABLE: 2,
  NodeType.EXPRESSION: 3,
  NodeType.FUNCTION: 4,
  NodeType.DIVIDE: 5,
  NodeType.POWER: 6,
  NodeType.DIFFERENTIAL: 7,
}

ZERO_TOLERANCE = 1e-10

# Largest float below which spacing between doubles is still < 1
_INTEGRAL_LIMIT = 4503599627370496.0


@numba.njit(cache=True)
def _is_zero_parts(real, imag, tolerance):
  return abs(real) < tolerance and abs(imag) < tolerance


@numba.njit(cache=True)
def _is_integral(x, tolerance):
  if not np.isfinite(x):
    return False
  if abs(x) >= _INTEGRAL_LIMIT:
    return True
  return abs(x - np.floor(x + 0.5)) < tolerance


def is_zero(value) -> bool:
  value = complex(value)
  return bool(_is_zero_parts(value.real, value.imag, ZERO_TOLERANCE))


def is_one(value) -> bool:
  value = complex(value)
  return bool(_is_zero_parts(value.real - 1.0, value.imag, ZERO_TOLERANCE))


def is_real(value) -> bool:
  return abs(complex(value).imag) < ZERO_TOLERANCE


def is_integer_value(value) -> bool:
  value = complex(value)
  return is_real(value) and bool(_is_integral(value.real, ZERO_TOLERANCE))


def is_finite(value) -> bool:
  value = complex(value)
  return bool(np.isfinite(value.real) and np.isfinite(value.imag))


def is_negative(value) -> bool:
  """True when the value reads as negative (negative real part, or zero real
  part and negative imaginary part)."""
  value = complex(value)
  if value.real < -ZERO_TOLERANCE:
    return True
  return abs(value.real) < ZERO_TOLERANCE and value.imag < -ZERO_TOLERANCE


def clean_value(value) -> complex:
  """Snap parts within tolerance of zero and drop negative zeros"""
  value = complex(value)
  real = 0.0 if abs(value.real) < ZERO_TOLERANCE else value.real + 0.0
  imag = 0.0 if abs(value.imag) < ZERO_TOLERANCE else value.imag + 0.0
  return complex(real, imag)


def _format_real(x: float) -> str:
  if float(x).is_integer() and abs(x) < 1e15:
    return str(int(x))
  return repr(float(x)).replace('e', 'E')


def format_value(value) -> str:
  """Text form of a Number literal; re-parses to the same value"""
  value = complex(value)
  if is_real(value):
    return _format_real(value.real)
  if abs(value.real) < ZERO_TOLERANCE:
    if value.imag < 0:
      return '-i' + _format_real(-value.imag)
    return 'i' + _format_real(value.imag)
  sign = '-' if value.imag < 0 else '+'
  return f"({_format_real(value.real)}{sign}i{_format_real(abs(value.imag))})"


CONSTANT_MAP = {
  'e': complex(np.e),
  'P': complex(np.pi),
  'π': complex(np.pi),
  'i': 1j,
}


def _complex_ufunc(ufunc):
  def apply(z: complex) -> complex:
    with np.errstate(all='ignore'):
      return complex(ufunc(np.complex128(z)))
  apply.__name__ = ufunc.__name__
  return apply


def _complex_log(z: complex) -> complex:
  if is_zero(z):
    return complex(-np.inf, 0.0)
  with np.errstate(all='ignore'):
    return complex(np.log(np.complex128(z)))


FUNCTION_MAP = {
  'sin': _complex_ufunc(np.sin),
  'cos': _complex_ufunc(np.cos),
  'tan': _complex_ufunc(np.tan),
  'log': _complex_log,
  'exp': _complex_ufunc(np.exp),
  'sqrt': _complex_ufunc(np.sqrt),
}
