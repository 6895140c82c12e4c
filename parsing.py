"""
Calculator language parser
Precedence-climbing grammar built with pyparsing, producing ast_nodes trees
"""

from typing import List, Optional

import mpmath

# Import pyparsing with error handling
try:
    from pyparsing import (
        Forward, Group, Literal, OneOrMore, Optional as PyParsingOptional,
        ParseBaseException, ParserElement, Regex, StringEnd, Suppress, ZeroOrMore,
    )
    # Enable packrat parsing for performance
    ParserElement.enable_packrat()
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from ast_nodes import (
    NEGATE, AtomExpr, Symbol, Num, UnaryExpr, BinaryExpr, FunctionCall, BlockExpr,
    Assignment, FunctionDefinition, ExpressionStatement, Expression, Statement,
    pretty_print_ast,
)
from error_handling import enhance_parse_exception
from numeric import create_number_context, parse_number


# Optional sign, integer and/or fraction digits, optional exponent suffix
NUMBER_PATTERN = r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?'

# Maximal run of symbol characters whose first character is not a digit
SYMBOL_EXCLUDED = r'(){}";,\s'
SYMBOL_PATTERN = rf'[^{SYMBOL_EXCLUDED}\d][^{SYMBOL_EXCLUDED}]*'


def fold_left(tokens) -> Expression:
    """[e0, op, e1, op, e2] -> ((e0 op e1) op e2)"""
    items = list(tokens)
    result = items[0]
    for i in range(1, len(items), 2):
        result = BinaryExpr(items[i], result, items[i + 1])
    return result


def make_power(tokens) -> Expression:
    """Right operand is itself an exponent, so a ^ b ^ c nests to the right"""
    items = list(tokens)
    if len(items) == 1:
        return items[0]
    return BinaryExpr('^', items[0], items[2])


class CalcGrammar:
    """Calculator grammar definition using pyparsing"""

    def __init__(self, mp: Optional[mpmath.MPContext] = None, debug: bool = False):
        self.mp = mp if mp is not None else create_number_context()
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup expression, statement and program parsers"""

        # Forward declarations for recursive structures
        expression = Forward()
        exponent = Forward()
        statement = Forward()

        lparen = Suppress("(")
        rparen = Suppress(")")
        comma = Suppress(",")
        equals = Suppress("=")
        semicolon = Suppress(";")

        # Literals
        number = Regex(NUMBER_PATTERN).set_parse_action(
            lambda t: AtomExpr(Num(parse_number(t[0], self.mp)))
        )
        symbol_name = Regex(SYMBOL_PATTERN)
        symbol = symbol_name.copy().set_parse_action(lambda t: AtomExpr(Symbol(t[0])))

        # Operators
        add_op = Literal("+") | Literal("-")
        mul_op = Literal("*") | Literal("/")
        pow_op = Literal("^")

        # Function calls: name(arg, ...)
        arguments = Group(PyParsingOptional(expression + ZeroOrMore(comma + expression)))
        function_call = (symbol_name + lparen + arguments + rparen).set_parse_action(
            lambda t: FunctionCall(t[0], tuple(t[1]))
        )

        # Blocks: { stmt; stmt; final }
        block = (
            Suppress("{") + Group(ZeroOrMore(statement)) + expression + Suppress("}")
        ).set_parse_action(lambda t: BlockExpr(tuple(t[0]), t[1]))

        parenthesized = lparen + expression + rparen

        # Parenthesized expressions first, then function calls, then atoms
        parens = parenthesized | block | function_call | number | symbol

        # Negation is tried before a signed literal so -x and -(...) parse
        negation = (Suppress("-") + exponent).set_parse_action(
            lambda t: UnaryExpr(NEGATE, t[0])
        )

        exponent <<= negation | (parens + PyParsingOptional(pow_op + exponent)).set_parse_action(make_power)
        term = (exponent + ZeroOrMore(mul_op + exponent)).set_parse_action(fold_left)
        expression <<= (term + ZeroOrMore(add_op + term)).set_parse_action(fold_left)

        # Statements: definition before assignment before bare expression
        parameters = Group(PyParsingOptional(symbol_name + ZeroOrMore(comma + symbol_name)))
        function_definition = (
            symbol_name + lparen + parameters + rparen + equals + expression
        ).set_parse_action(lambda t: FunctionDefinition(t[0], tuple(t[1]), t[2]))

        assignment = (symbol_name + equals + expression).set_parse_action(
            lambda t: Assignment(t[0], t[1])
        )

        expression_statement = Group(expression).set_parse_action(
            lambda t: ExpressionStatement(t[0][0])
        )

        statement <<= (function_definition | assignment | expression_statement) + semicolon

        # Store the main parsers
        self.single_statement = statement + StringEnd()
        self.program = OneOrMore(statement) + StringEnd()

    def parse_statement(self, text: str) -> Statement:
        """Parse exactly one `;`-terminated statement"""
        try:
            result = self.single_statement.parse_string(text, parse_all=True)
        except ParseBaseException as e:
            raise enhance_parse_exception(e, text) from None

        stmt = result[0]
        if self.debug:
            print(f"Parsed statement:\n{pretty_print_ast(stmt)}", end='')
        return stmt

    def parse_statement_list(self, text: str) -> List[Statement]:
        """Parse one or more `;`-terminated statements"""
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseBaseException as e:
            raise enhance_parse_exception(e, text) from None

        statements = list(result)
        if self.debug:
            print(f"Parsed {len(statements)} statements")
        return statements


# Factory functions for creating parsers
def create_parser(mp: Optional[mpmath.MPContext] = None, debug: bool = False) -> CalcGrammar:
    """Create a calculator grammar"""
    return CalcGrammar(mp, debug=debug)


def parse_statement(text: str, grammar: Optional[CalcGrammar] = None) -> Statement:
    """Parse one statement with a default-precision grammar unless one is given"""
    return (grammar or create_parser()).parse_statement(text)


def parse_statement_list(text: str, grammar: Optional[CalcGrammar] = None) -> List[Statement]:
    """Parse a statement list with a default-precision grammar unless one is given"""
    return (grammar or create_parser()).parse_statement_list(text)
