"""
Calculator standard library
Builtin functions, exposed as an immutable registry
"""

from types import MappingProxyType
from typing import Callable, List, Mapping
from dataclasses import dataclass

import mpmath

from numeric import Number, ensure_real


@dataclass(frozen=True)
class BuiltinFunction:
  """Native operation with a fixed arity"""
  name: str
  arity: int
  impl: Callable[[List[Number]], Number]

  def __call__(self, args: List[Number]) -> Number:
    return ensure_real(self.impl(args), self.name)


# Unary functions, by registry name and mpmath context attribute
UNARY_FUNCTIONS = {
    'sqrt': 'sqrt',
    'sin': 'sin',
    'cos': 'cos',
    'tan': 'tan',
    'asin': 'asin',
    'acos': 'acos',
    'atan': 'atan',
    'exp': 'exp',
    'ln': 'ln',
    'abs': 'fabs',
}


def unary_builtin(name: str, func: Callable[[Number], Number]) -> BuiltinFunction:
  """Wrap a one-argument numeric function"""
  return BuiltinFunction(name, 1, lambda args: func(args[0]))


def create_builtin_registry(mp: mpmath.MPContext) -> Mapping[str, BuiltinFunction]:
  """Build the read-only builtin table for a number context"""
  table = {
      name: unary_builtin(name, getattr(mp, attr))
      for name, attr in UNARY_FUNCTIONS.items()
  }
  return MappingProxyType(table)
