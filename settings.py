"""
Calculator configuration
"""

from dataclasses import dataclass, replace


DEFAULT_PRECISION_BITS = 128
DEFAULT_DISPLAY_DIGITS = 15
DEFAULT_SCI_THRESHOLD = 3


@dataclass(frozen=True)
class CalcSettings:
  """Working precision, display rules and diagnostics for one session"""
  precision_bits: int = DEFAULT_PRECISION_BITS
  display_digits: int = DEFAULT_DISPLAY_DIGITS
  sci_threshold: int = DEFAULT_SCI_THRESHOLD
  debug: bool = False

  def validate(self) -> 'CalcSettings':
    """Return self, or raise ValueError if any field is out of range"""
    if self.precision_bits < 2:
      raise ValueError(f"precision must be at least 2 bits, got {self.precision_bits}")
    if self.display_digits < 1:
      raise ValueError(f"display digits must be at least 1, got {self.display_digits}")
    if self.sci_threshold < 0:
      raise ValueError(f"scientific threshold must not be negative, got {self.sci_threshold}")
    return self

  def with_changes(self, **changes) -> 'CalcSettings':
    return replace(self, **changes).validate()
