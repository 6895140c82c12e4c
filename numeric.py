"""
Number representation
Arbitrary-precision reals backed by an mpmath working context
"""

from typing import Any, Dict, Callable, List, Tuple
import copyreg
import functools
import operator

import mpmath
from mpmath.libmp import prec_to_dps
from mpmath.libmp.libmpf import to_digits_exp

from error_handling import NumberParseError, DivisionByZero, DomainError
from settings import DEFAULT_PRECISION_BITS


# An mpf created by a session's MPContext
Number = Any

# Decimal digits kept beyond the working precision before display rounding
GUARD_DIGITS = 3


def create_number_context(precision_bits: int = DEFAULT_PRECISION_BITS) -> mpmath.MPContext:
  """
  mpmath context for a precision, shared by every caller asking for it.
  Rounding is round-to-nearest-even. Contexts are never reconfigured.
  """
  return _number_context(int(precision_bits))


@functools.lru_cache(maxsize=None)
def _number_context(precision_bits: int) -> mpmath.MPContext:
  mp = mpmath.MPContext()
  mp.prec = precision_bits
  # Pickle and deepcopy numbers exactly, back into this context
  copyreg.pickle(mp.mpf, reduce_number)
  return mp


def reduce_number(value: Number):
  return restore_number, (value.context.prec, value._mpf_)


def restore_number(precision_bits: int, raw: tuple) -> Number:
  return create_number_context(precision_bits).make_mpf(raw)


def parse_number(text: str, mp: mpmath.MPContext) -> Number:
  """Convert literal text to a Number at the context's precision"""
  try:
    return mp.mpf(text)
  except (ValueError, TypeError) as e:
    raise NumberParseError(text) from e


def is_real(value: Any) -> bool:
  return hasattr(value, '_mpf_')


def ensure_real(value: Any, operation: str) -> Number:
  """Reject complex results from the backend"""
  if not is_real(value):
    raise DomainError(operation)
  return value


# ============================================================================
# ARITHMETIC
# ============================================================================

BINARY_OPERATORS: Dict[str, Callable[[Number, Number], Number]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
    '^': operator.pow,
}


def apply_binary(op: str, lhs: Number, rhs: Number) -> Number:
  """Apply one of + - * / ^ to two Numbers"""
  try:
    result = BINARY_OPERATORS[op](lhs, rhs)
  except ZeroDivisionError:
    raise DivisionByZero() from None
  return ensure_real(result, op)


def negate(value: Number) -> Number:
  return -value


# ============================================================================
# DECIMAL DECOMPOSITION
# ============================================================================

def working_digits(mp: mpmath.MPContext) -> int:
  """Decimal digits carried by the raw decomposition"""
  return prec_to_dps(mp.prec) + GUARD_DIGITS


def is_finite(value: Number, mp: mpmath.MPContext) -> bool:
  return not (mp.isinf(value) or mp.isnan(value))


def decimal_parts(value: Number, mp: mpmath.MPContext) -> Tuple[bool, List[int], int]:
  """
  Decompose a finite nonzero Number as (negative, digits, exponent)
  with value == sign * 0.d1d2d3... * 10^exponent
  """
  sign, digits, sci_exponent = to_digits_exp(mp.mpf(value)._mpf_, working_digits(mp))
  # to_digits_exp reports d1.d2d3... * 10^sci_exponent
  return sign == '-', [int(d) for d in digits], sci_exponent + 1
