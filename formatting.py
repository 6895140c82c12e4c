"""
Decimal formatter
Rounds a decimal digit mantissa to a fixed number of significant digits
and renders it in plain or scientific notation
"""

from typing import List, Optional, Tuple

import mpmath

from numeric import Number, decimal_parts, is_finite
from settings import DEFAULT_DISPLAY_DIGITS, DEFAULT_SCI_THRESHOLD


ZERO_CODE = ord('0')


# ============================================================================
# ROUNDING
# ============================================================================

def add_one_to_digits(digits: List[int]) -> List[int]:
  """
  Add 1 at the last position with carry propagation.
  A carry off the front prepends a new leading 1.

  Examples:
    [0, 0, 0, 0, 9] -> [0, 0, 0, 1, 0]
    [9, 9, 9] -> [1, 0, 0, 0]
  """
  digits = list(digits)
  i = len(digits) - 1
  digits[i] += 1

  while digits[i] == 10:
    digits[i] = 0
    if i == 0:
      digits.insert(0, 1)
      break
    digits[i - 1] += 1
    i -= 1

  return digits


def round_to_digit(exponent: int, mantissa: List[int], precision: int) -> Optional[Tuple[int, List[int]]]:
  """
  Round mantissa to `precision` significant decimal digits.

  Args:
    exponent: decimal exponent, value == 0.d1d2d3... * 10^exponent
    mantissa: big-endian decimal digits
    precision: significant digits to keep

  Returns:
    (new_exponent, rounded_digits), or None if the mantissa has no nonzero digit
  """
  first = next((i for i, digit in enumerate(mantissa) if digit != 0), None)
  if first is None:
    return None

  cut = first + precision
  if cut >= len(mantissa):
    return exponent, list(mantissa)

  kept = list(mantissa[:cut])
  if mantissa[cut] >= 5:
    rounded = add_one_to_digits(kept)
    if len(rounded) > len(kept):
      exponent += 1
    return exponent, rounded

  return exponent, kept


# ============================================================================
# RENDERING
# ============================================================================

def _digits_to_text(digits: List[int]) -> str:
  return ''.join(chr(d + ZERO_CODE) for d in digits)


def format_num(negative: bool, mantissa: List[int], exponent: int,
               sci_threshold: int = DEFAULT_SCI_THRESHOLD) -> str:
  """
  Render 0.d1d2d3... * 10^exponent as text.

  Scientific notation is used when abs(exponent) > sci_threshold,
  plain notation otherwise. The mantissa must contain a nonzero digit.
  """
  digits = list(mantissa)
  while digits and digits[-1] == 0:
    digits.pop()
  if not digits:
    raise ValueError("cannot format an all-zero mantissa")

  sign = '-' if negative else ''

  if abs(exponent) > sci_threshold:
    # d1.d2d3... * 10^(exponent - 1)
    expt = exponent - 1
    fraction = _digits_to_text(digits[1:]) if len(digits) > 1 else '0'
    return f"{sign}{_digits_to_text(digits[:1])}.{fraction}e{expt}"

  if exponent >= len(digits):
    return sign + _digits_to_text(digits) + '0' * (exponent - len(digits))
  elif exponent <= 0:
    return sign + '0.' + '0' * abs(exponent) + _digits_to_text(digits)
  else:
    return sign + _digits_to_text(digits[:exponent]) + '.' + _digits_to_text(digits[exponent:])


def number_to_string(value: Number, mp: mpmath.MPContext,
                     digits: int = DEFAULT_DISPLAY_DIGITS,
                     sci_threshold: int = DEFAULT_SCI_THRESHOLD) -> str:
  """Full display pipeline: decompose, round to `digits`, render"""
  if mp.isnan(value):
    return "nan"
  if not is_finite(value, mp):
    return "-inf" if value < 0 else "inf"
  if not value:
    return "0"

  negative, mantissa, exponent = decimal_parts(value, mp)
  exponent, mantissa = round_to_digit(exponent, mantissa, digits)
  return format_num(negative, mantissa, exponent, sci_threshold)
