"""
Error types for the calculator language
Every failure aborts the statement being processed and surfaces as a CalcError
"""

from typing import List, Optional, Dict
from pyparsing import ParseBaseException
import re


# ============================================================================
# ERROR HIERARCHY
# ============================================================================

class CalcError(Exception):
    """Base class for every error a statement can fail with"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"ERROR: {self.message}"


class NameNotFound(CalcError):
    """Symbol has no binding in any frame or in the builtin registry"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Name not found: "{name}"')


class NameAlreadyBound(CalcError):
    """Rebinding in the same frame, or shadowing a builtin function"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Name already bound: "{name}"')


class IncorrectArity(CalcError):
    def __init__(self, expected: int, found: int, function: Optional[str] = None):
        self.expected = expected
        self.found = found
        self.function = function
        super().__init__(f"Expected {expected} arguments, found {found}")


class NumberParseError(CalcError):
    """Literal matched the grammar but the numeric backend rejected it"""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f'Number parsing error: "{text}"')


class CalcIOError(CalcError):
    """Host I/O failure (reading a script, reading the terminal)"""

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(f"IO error: {detail}" if detail else "IO error")


class DivisionByZero(CalcError):
    def __init__(self):
        super().__init__("Division by zero")


class DomainError(CalcError):
    """Numeric operation produced a value off the real line"""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f'Result of "{operation}" is not a real number')


class RecursionLimit(CalcError):
    """Nested calls exhausted the interpreter stack"""

    def __init__(self):
        super().__init__("Recursion limit reached")


class ParseError(CalcError):
    """Grammar mismatch or unconsumed trailing input"""

    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None):
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context
        )
        return format_parse_error(error_dict)


# ============================================================================
# PARSE ERROR ENRICHMENT
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"ERROR: Parsing error at line {error['line']}, column {error['column']}"

    if error['expected']:
        error_msg += f"\n  Expected: {', '.join(error['expected'])}"

    if error['got']:
        error_msg += f"\n  Got: {error['got']}"

    if error['context']:
        error_msg += f"\n{error['context']}"

    return error_msg


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around the error with a caret under the column"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract expected token description from a pyparsing exception"""
    msg = exc.msg or ""
    match = re.match(r"Expected\s+(.+)$", msg)
    if match:
        return [match.group(1)]
    return [msg] if msg else ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        start = max(0, col_num - 1)
        got_text = error_line[start:start + 10].strip()
        if got_text:
            return f"'{got_text}'"
        return "end of input"
    return "unknown"


def enhance_parse_exception(exc: ParseBaseException, source_text: str) -> ParseError:
    """Convert a pyparsing exception into a ParseError for the given source"""
    line_num = exc.lineno
    col_num = exc.column

    return ParseError(
        message=exc.msg or "Parsing error",
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=extract_expected(exc),
        got=extract_got(source_text, line_num, col_num),
        context=get_context_lines(source_text, line_num, col_num)
    )
