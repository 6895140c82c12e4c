"""
Calculator interpreter
Tree-walking evaluation of statements and expressions against a Context
"""

from typing import List, Optional, Tuple, Union
from dataclasses import dataclass

from ast_nodes import (
  NEGATE, Atom, Num, AtomExpr, UnaryExpr, BinaryExpr, FunctionCall, BlockExpr,
  Expression, Statement, Assignment, FunctionDefinition, ExpressionStatement,
)
from context import Context
from error_handling import CalcError, IncorrectArity, NameAlreadyBound
from numeric import Number, apply_binary, negate
from stdlib import BuiltinFunction


# ============================================================================
# USER FUNCTIONS
# ============================================================================

@dataclass(frozen=True)
class UserFunction:
  """Function defined in the language; closes over its defining scope"""
  name: str
  params: Tuple[str, ...]
  body: Expression
  scope: Context

  @property
  def arity(self) -> int:
    return len(self.params)


CalcCallable = Union[BuiltinFunction, UserFunction]


def apply_function(func: CalcCallable, args: List[Number], debug: bool = False) -> Number:
  """Invoke a callable on already-evaluated arguments of the right arity"""
  if isinstance(func, BuiltinFunction):
    return func(args)

  # Parameters bind in a fresh frame on top of the defining scope
  call_scope = func.scope.push_scope(dict(zip(func.params, args)))
  if debug:
    print(f"Calling {func.name} with {len(args)} arguments")
  return eval_expr(func.body, call_scope, debug)


# ============================================================================
# EVALUATION
# ============================================================================

def eval_atom(atom: Atom, ctx: Context, debug: bool = False) -> Number:
  """Evaluate symbol by lookup, number as itself"""
  if isinstance(atom, Num):
    return atom.value
  return ctx.lookup_value(atom.name)


def eval_expr(expr: Expression, ctx: Context, debug: bool = False) -> Number:
  """Reduce an expression to a Number; nothing it binds escapes"""
  if debug:
    print(f"Evaluating: {type(expr).__name__}")

  if isinstance(expr, AtomExpr):
    return eval_atom(expr.atom, ctx, debug)

  elif isinstance(expr, UnaryExpr):
    operand = eval_expr(expr.operand, ctx, debug)
    if expr.op == NEGATE:
      return negate(operand)
    raise CalcError(f"Unknown unary operator: {expr.op}")

  elif isinstance(expr, BinaryExpr):
    lhs = eval_expr(expr.lhs, ctx, debug)
    rhs = eval_expr(expr.rhs, ctx, debug)
    return apply_binary(expr.op, lhs, rhs)

  elif isinstance(expr, FunctionCall):
    return eval_function_call(expr, ctx, debug)

  elif isinstance(expr, BlockExpr):
    return eval_block(expr, ctx, debug)

  raise CalcError(f"Unknown expression node: {type(expr).__name__}")


def eval_function_call(expr: FunctionCall, ctx: Context, debug: bool = False) -> Number:
  """Resolve, evaluate arguments left to right, check arity, apply"""
  func = ctx.lookup_function(expr.name)
  args = [eval_expr(arg, ctx, debug) for arg in expr.args]

  if len(args) != func.arity:
    raise IncorrectArity(func.arity, len(args), expr.name)

  return apply_function(func, args, debug)


def eval_block(expr: BlockExpr, ctx: Context, debug: bool = False) -> Number:
  """Run statements in a fresh frame, then evaluate the final expression there"""
  block_scope = ctx.push_scope()
  if debug:
    print(f"Entering block at depth {block_scope.depth()}")
  for stmt in expr.statements:
    eval_stmt(stmt, block_scope, debug)
  return eval_expr(expr.final, block_scope, debug)


def eval_stmt(stmt: Statement, ctx: Context, debug: bool = False) -> Optional[Number]:
  """
  Evaluate a statement, binding into the context's innermost frame.
  Returns the value for assignments and expressions, None for definitions.
  """
  if isinstance(stmt, Assignment):
    value = eval_expr(stmt.value, ctx, debug)
    return ctx.bind_value(stmt.name, value)

  elif isinstance(stmt, FunctionDefinition):
    seen = set()
    for param in stmt.params:
      if param in seen:
        raise NameAlreadyBound(param)
      seen.add(param)

    ctx.bind_function(stmt.name, UserFunction(stmt.name, stmt.params, stmt.body, ctx))
    if debug:
      print(f"Defined function: {stmt.name}")
    return None

  elif isinstance(stmt, ExpressionStatement):
    return eval_expr(stmt.expr, ctx, debug)

  raise CalcError(f"Unknown statement node: {type(stmt).__name__}")


def evaluate(stmt: Statement, ctx: Context, debug: bool = False) -> Optional[Number]:
  """Host entry point: evaluate one parsed statement against `ctx`"""
  return eval_stmt(stmt, ctx, debug)
