"""
Calculator session
Host-facing facade: source text in, display strings out, one threaded Context
"""

from typing import List, Optional

from ast_nodes import FunctionDefinition, Statement, signature
from context import Context
from error_handling import CalcError, RecursionLimit
from formatting import number_to_string
from interpreter import evaluate
from numeric import Number, create_number_context
from parsing import create_parser
from settings import CalcSettings


class CalcSession:
  """One interactive session: settings, number context, parser and scope"""

  def __init__(self, settings: Optional[CalcSettings] = None, context: Optional[Context] = None):
    self.settings = (settings or CalcSettings()).validate()
    # A supplied context keeps its own precision
    if context is None:
      context = Context(create_number_context(self.settings.precision_bits))
    self.context = context
    self.mp = context.mp
    self.parser = create_parser(self.mp, debug=self.settings.debug)

  @property
  def debug(self) -> bool:
    return self.settings.debug

  def format(self, number: Number) -> str:
    return number_to_string(number, self.mp, self.settings.display_digits, self.settings.sci_threshold)

  def execute(self, stmt: Statement) -> Optional[Number]:
    """Evaluate a parsed statement against the session scope; raises CalcError"""
    try:
      return evaluate(stmt, self.context, self.debug)
    except RecursionError:
      raise RecursionLimit() from None

  def _result_text(self, stmt: Statement) -> str:
    value = self.execute(stmt)
    if isinstance(stmt, FunctionDefinition):
      return signature(stmt)
    return self.format(value)

  def run(self, text: str) -> str:
    """Parse and evaluate one statement; errors come back as their message"""
    try:
      stmt = self.parser.parse_statement(text)
      return self._result_text(stmt)
    except CalcError as e:
      return str(e)

  def run_all(self, text: str) -> List[str]:
    """
    Parse a statement list, then evaluate each statement in order.
    A parse failure yields one error string; an evaluation failure only
    aborts its own statement.
    """
    try:
      statements = self.parser.parse_statement_list(text)
    except CalcError as e:
      return [str(e)]

    results = []
    for stmt in statements:
      try:
        results.append(self._result_text(stmt))
      except CalcError as e:
        results.append(str(e))
    return results

  def fork(self) -> 'CalcSession':
    """New session with the same settings over a cloned scope"""
    return CalcSession(self.settings, self.context.clone())


def create_session(settings: Optional[CalcSettings] = None) -> CalcSession:
  return CalcSession(settings)
