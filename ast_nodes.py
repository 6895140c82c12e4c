"""
Abstract syntax tree for the calculator language
Strict tree: every node owns its children, nothing is shared
"""

from typing import Any, Tuple, Union
from dataclasses import dataclass, field


NEGATE = 'neg'


# ============================================================================
# ATOMS
# ============================================================================

@dataclass(frozen=True)
class Symbol:
  name: str


@dataclass(frozen=True)
class Num:
  value: Any


Atom = Union[Symbol, Num]


# ============================================================================
# EXPRESSIONS
# ============================================================================

@dataclass(frozen=True)
class AtomExpr:
  atom: Atom


@dataclass(frozen=True)
class UnaryExpr:
  op: str
  operand: 'Expression'


@dataclass(frozen=True)
class BinaryExpr:
  """op is one of + - * / ^"""
  op: str
  lhs: 'Expression'
  rhs: 'Expression'


@dataclass(frozen=True)
class FunctionCall:
  name: str
  args: Tuple['Expression', ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BlockExpr:
  """Statements run in a fresh scope, then `final` gives the block's value"""
  statements: Tuple['Statement', ...]
  final: 'Expression'


Expression = Union[AtomExpr, UnaryExpr, BinaryExpr, FunctionCall, BlockExpr]


# ============================================================================
# STATEMENTS
# ============================================================================

@dataclass(frozen=True)
class Assignment:
  name: str
  value: Expression


@dataclass(frozen=True)
class FunctionDefinition:
  name: str
  params: Tuple[str, ...]
  body: Expression


@dataclass(frozen=True)
class ExpressionStatement:
  expr: Expression


Statement = Union[Assignment, FunctionDefinition, ExpressionStatement]


# ============================================================================
# HELPERS
# ============================================================================

def number_literal(value: Any) -> AtomExpr:
  return AtomExpr(Num(value))


def symbol_ref(name: str) -> AtomExpr:
  return AtomExpr(Symbol(name))


def signature(definition: FunctionDefinition) -> str:
  """Render `name(p1, p2)` for a function definition"""
  return f"{definition.name}({', '.join(definition.params)})"


def pretty_print_ast(node: Any, indent: int = 0) -> str:
  """Pretty print an AST node for debugging"""
  pad = "  " * indent

  if isinstance(node, AtomExpr):
    return pretty_print_ast(node.atom, indent)
  if isinstance(node, Symbol):
    return f"{pad}Symbol({node.name})\n"
  if isinstance(node, Num):
    return f"{pad}Num({node.value})\n"
  if isinstance(node, UnaryExpr):
    return f"{pad}UnaryExpr({node.op})\n" + pretty_print_ast(node.operand, indent + 1)
  if isinstance(node, BinaryExpr):
    return (f"{pad}BinaryExpr({node.op})\n"
            + pretty_print_ast(node.lhs, indent + 1)
            + pretty_print_ast(node.rhs, indent + 1))
  if isinstance(node, FunctionCall):
    result = f"{pad}FunctionCall({node.name})\n"
    for arg in node.args:
      result += pretty_print_ast(arg, indent + 1)
    return result
  if isinstance(node, BlockExpr):
    result = f"{pad}BlockExpr\n"
    for stmt in node.statements:
      result += pretty_print_ast(stmt, indent + 1)
    return result + pretty_print_ast(node.final, indent + 1)
  if isinstance(node, Assignment):
    return f"{pad}Assignment({node.name})\n" + pretty_print_ast(node.value, indent + 1)
  if isinstance(node, FunctionDefinition):
    return f"{pad}FunctionDefinition({signature(node)})\n" + pretty_print_ast(node.body, indent + 1)
  if isinstance(node, ExpressionStatement):
    return f"{pad}ExpressionStatement\n" + pretty_print_ast(node.expr, indent + 1)
  return f"{pad}UNKNOWN({node!r})\n"
