"""
Evaluation context
A chain of scope frames, innermost first, in front of a builtin registry
"""

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import copy

import mpmath

from error_handling import NameNotFound, NameAlreadyBound
from numeric import Number, create_number_context
from stdlib import create_builtin_registry


class Frame:
  """One layer of value and function bindings"""

  __slots__ = ('values', 'functions', 'parent')

  def __init__(self, parent: Optional['Frame'] = None, values: Optional[Dict[str, Number]] = None):
    self.values: Dict[str, Number] = dict(values or {})
    self.functions: Dict[str, Any] = {}
    self.parent = parent

  def chain(self) -> Iterator['Frame']:
    """Yield this frame and its ancestors, innermost first"""
    frame: Optional[Frame] = self
    while frame is not None:
      yield frame
      frame = frame.parent


class Context:
  """
  Handle on the innermost frame of a scope chain.

  Binding mutates the innermost frame. push_scope returns a new handle
  whose extra frame disappears with the handle; the receiver is unchanged.
  A Context pickles as its frame chain and precision; the builtin
  registry is rebuilt on load.
  """

  def __init__(self, mp: Optional[mpmath.MPContext] = None, frame: Optional[Frame] = None,
               builtins: Optional[Mapping[str, Any]] = None):
    self.mp = mp if mp is not None else create_number_context()
    self.builtins = builtins if builtins is not None else create_builtin_registry(self.mp)
    self.frame = frame if frame is not None else Frame()

  # ==================== LOOKUP ====================

  def lookup_value(self, name: str) -> Number:
    for frame in self.frame.chain():
      if name in frame.values:
        return frame.values[name]
    raise NameNotFound(name)

  def lookup_function(self, name: str) -> Any:
    """User bindings innermost-first, then the builtin registry"""
    for frame in self.frame.chain():
      if name in frame.functions:
        return frame.functions[name]
    if name in self.builtins:
      return self.builtins[name]
    raise NameNotFound(name)

  # ==================== BINDING ====================

  def bind_value(self, name: str, value: Number) -> Number:
    if name in self.frame.values:
      raise NameAlreadyBound(name)
    self.frame.values[name] = value
    return value

  def bind_function(self, name: str, func: Any) -> None:
    if name in self.builtins or name in self.frame.functions:
      raise NameAlreadyBound(name)
    self.frame.functions[name] = func

  # ==================== SCOPES ====================

  def push_scope(self, initial_values: Optional[Dict[str, Number]] = None) -> 'Context':
    """New handle with a fresh innermost frame holding `initial_values`"""
    return Context(self.mp, Frame(self.frame, initial_values), self.builtins)

  def clone(self) -> 'Context':
    """Independent copy of the whole chain; the builtin registry is shared"""
    return copy.deepcopy(self)

  def __deepcopy__(self, memo):
    copied = Context.__new__(Context)
    memo[id(self)] = copied
    copied.mp = self.mp
    copied.builtins = self.builtins
    copied.frame = copy.deepcopy(self.frame, memo)
    return copied

  def depth(self) -> int:
    return sum(1 for _ in self.frame.chain())

  def user_bindings(self) -> Tuple[List[Tuple[str, Number]], List[Tuple[str, Any]]]:
    """Visible (values, functions), innermost binding of each name only"""
    values: Dict[str, Number] = {}
    functions: Dict[str, Any] = {}
    for frame in self.frame.chain():
      for name, value in frame.values.items():
        values.setdefault(name, value)
      for name, func in frame.functions.items():
        functions.setdefault(name, func)
    return sorted(values.items()), sorted(functions.items())

  # ==================== SERIALIZATION ====================

  def __getstate__(self) -> Dict[str, Any]:
    return {'precision_bits': self.mp.prec, 'frame': self.frame}

  def __setstate__(self, state: Dict[str, Any]) -> None:
    self.mp = create_number_context(state['precision_bits'])
    self.builtins = create_builtin_registry(self.mp)
    self.frame = state['frame']
