"""
Tests for the calculator grammar
"""

import pytest

from ast_nodes import (
  NEGATE, Symbol, Num, AtomExpr, UnaryExpr, BinaryExpr, FunctionCall, BlockExpr,
  Assignment, FunctionDefinition, ExpressionStatement, number_literal, symbol_ref,
)
from error_handling import ParseError
from numeric import create_number_context
from parsing import CalcGrammar, parse_statement


class TestExpressions:
  """Expression structure, precedence and associativity"""

  @pytest.fixture
  def mp(self):
    return create_number_context()

  @pytest.fixture
  def grammar(self, mp):
    return CalcGrammar(mp)

  def num(self, mp, text):
    return number_literal(mp.mpf(text))

  def expr(self, grammar, text):
    stmt = grammar.parse_statement(text)
    assert isinstance(stmt, ExpressionStatement)
    return stmt.expr

  def test_number(self, mp, grammar):
    assert self.expr(grammar, "42;") == self.num(mp, "42")

  def test_number_forms(self, mp, grammar):
    assert self.expr(grammar, "1.5e3;") == self.num(mp, "1500")
    assert self.expr(grammar, ".25;") == self.num(mp, "0.25")
    assert self.expr(grammar, "+5;") == self.num(mp, "5")

  def test_symbol(self, grammar):
    assert self.expr(grammar, "x1_y';") == AtomExpr(Symbol("x1_y'"))

  def test_operator_characters_join_symbols(self, grammar):
    """Without spaces an operator is part of the name"""
    assert self.expr(grammar, "a+b;") == symbol_ref("a+b")

  def test_addition(self, mp, grammar):
    assert self.expr(grammar, "1 + 2;") == BinaryExpr('+', self.num(mp, "1"), self.num(mp, "2"))

  def test_precedence(self, mp, grammar):
    expected = BinaryExpr('+', self.num(mp, "1"), BinaryExpr('*', self.num(mp, "2"), self.num(mp, "3")))
    assert self.expr(grammar, "1 + 2 * 3;") == expected

  def test_left_associative(self, mp, grammar):
    expected = BinaryExpr('-', BinaryExpr('-', self.num(mp, "8"), self.num(mp, "3")), self.num(mp, "2"))
    assert self.expr(grammar, "8 - 3 - 2;") == expected

  def test_power_right_associative(self, mp, grammar):
    expected = BinaryExpr('^', self.num(mp, "2"), BinaryExpr('^', self.num(mp, "3"), self.num(mp, "2")))
    assert self.expr(grammar, "2 ^ 3 ^ 2;") == expected

  def test_power_binds_tighter_than_product(self, mp, grammar):
    expected = BinaryExpr('*', self.num(mp, "2"), BinaryExpr('^', self.num(mp, "3"), self.num(mp, "2")))
    assert self.expr(grammar, "2 * 3 ^ 2;") == expected

  def test_parentheses(self, mp, grammar):
    expected = BinaryExpr('*', BinaryExpr('+', self.num(mp, "1"), self.num(mp, "2")), self.num(mp, "3"))
    assert self.expr(grammar, "(1 + 2) * 3;") == expected

  def test_negation(self, mp, grammar):
    assert self.expr(grammar, "-x;") == UnaryExpr(NEGATE, symbol_ref("x"))
    assert self.expr(grammar, "-5;") == UnaryExpr(NEGATE, self.num(mp, "5"))

  def test_subtract_negative(self, mp, grammar):
    expected = BinaryExpr('-', self.num(mp, "1"), UnaryExpr(NEGATE, self.num(mp, "2")))
    assert self.expr(grammar, "1 - -2;") == expected

  def test_function_call(self, mp, grammar):
    expected = FunctionCall("f", (self.num(mp, "1"), symbol_ref("x")))
    assert self.expr(grammar, "f(1, x);") == expected

  def test_function_call_without_arguments(self, grammar):
    assert self.expr(grammar, "g();") == FunctionCall("g", ())

  def test_nested_calls(self, mp, grammar):
    expected = FunctionCall("sqrt", (FunctionCall("sqrt", (self.num(mp, "16"),)),))
    assert self.expr(grammar, "sqrt(sqrt(16));") == expected

  def test_block(self, mp, grammar):
    expected = BlockExpr(
        (Assignment("a", self.num(mp, "2")),),
        BinaryExpr('*', symbol_ref("a"), self.num(mp, "3"))
    )
    assert self.expr(grammar, "{ a = 2; a * 3 };") == expected

  def test_block_without_statements(self, mp, grammar):
    assert self.expr(grammar, "{ 5 };") == BlockExpr((), self.num(mp, "5"))

  def test_whitespace(self, mp, grammar):
    expected = BinaryExpr('+', self.num(mp, "1"), self.num(mp, "2"))
    assert self.expr(grammar, "  1   +\n 2 ;  ") == expected


class TestStatements:
  """Statement forms and statement lists"""

  @pytest.fixture
  def mp(self):
    return create_number_context()

  @pytest.fixture
  def grammar(self, mp):
    return CalcGrammar(mp)

  def test_assignment(self, mp, grammar):
    stmt = grammar.parse_statement("a = 1 + 2;")
    assert stmt == Assignment("a", BinaryExpr('+', number_literal(mp.mpf(1)), number_literal(mp.mpf(2))))

  def test_function_definition(self, grammar):
    stmt = grammar.parse_statement("f(x, y) = x + y;")
    assert stmt == FunctionDefinition("f", ("x", "y"), BinaryExpr('+', symbol_ref("x"), symbol_ref("y")))

  def test_function_definition_without_parameters(self, mp, grammar):
    stmt = grammar.parse_statement("f() = 42;")
    assert stmt == FunctionDefinition("f", (), number_literal(mp.mpf(42)))

  def test_call_is_not_definition(self, grammar):
    stmt = grammar.parse_statement("sqrt(sqrt);")
    assert stmt == ExpressionStatement(FunctionCall("sqrt", (symbol_ref("sqrt"),)))

  def test_statement_list(self, grammar):
    statements = grammar.parse_statement_list("a = 1; a + 1;\nf(x) = x;")
    assert [type(s) for s in statements] == [Assignment, ExpressionStatement, FunctionDefinition]

  def test_module_level_parse(self):
    stmt = parse_statement("7;")
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expr.atom, Num)


class TestParseErrors:
  """Grammar mismatches surface as ParseError"""

  @pytest.fixture
  def grammar(self):
    return CalcGrammar()

  @pytest.mark.parametrize("text", [
      "1 + 2",
      "1 + ;",
      "(1 + 2;",
      "1 + 2; 3;",
      "",
      "f(x, 1) = x;",
  ])
  def test_rejected(self, grammar, text):
    with pytest.raises(ParseError):
      grammar.parse_statement(text)

  def test_message(self, grammar):
    with pytest.raises(ParseError) as exc_info:
      grammar.parse_statement("1 +;")
    assert str(exc_info.value).startswith("ERROR: Parsing error")
    assert exc_info.value.line == 1

  def test_empty_program(self, grammar):
    with pytest.raises(ParseError):
      grammar.parse_statement_list("")

  def test_error_line_in_program(self, grammar):
    with pytest.raises(ParseError) as exc_info:
      grammar.parse_statement_list("a = 1;\nb = ;")
    assert exc_info.value.line == 2
