"""
Calculator language - Main Entry Point
Runs script files or an interactive read-eval-print loop
"""

import sys
import argparse
import os
from pathlib import Path

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ast_nodes import pretty_print_ast, signature
from error_handling import CalcError, CalcIOError
from session import CalcSession
from settings import CalcSettings, DEFAULT_PRECISION_BITS, DEFAULT_DISPLAY_DIGITS, DEFAULT_SCI_THRESHOLD
from stdlib import UNARY_FUNCTIONS


VERSION = "calclang 0.1.0"
HISTORY_FILE = "~/.calclang_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Arbitrary-precision calculator language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.calc            # Run a script, one result per statement
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse script.calc    # Parse and show the AST
  %(prog)s --digits 30 -i         # Show 30 significant digits
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Script file of ;-terminated statements'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the AST (for debugging)'
  )

  parser.add_argument(
      '--precision',
      type=int,
      default=DEFAULT_PRECISION_BITS,
      help=f'Working precision in bits (default {DEFAULT_PRECISION_BITS})'
  )

  parser.add_argument(
      '--digits',
      type=int,
      default=DEFAULT_DISPLAY_DIGITS,
      help=f'Significant digits shown (default {DEFAULT_DISPLAY_DIGITS})'
  )

  parser.add_argument(
      '--sci-threshold',
      type=int,
      default=DEFAULT_SCI_THRESHOLD,
      help=f'Use scientific notation when |exponent| exceeds this (default {DEFAULT_SCI_THRESHOLD})'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def settings_from_args(args: argparse.Namespace) -> CalcSettings:
  return CalcSettings().with_changes(
      precision_bits=args.precision,
      display_digits=args.digits,
      sci_threshold=args.sci_threshold,
      debug=args.debug
  )


def read_script(script_path: str) -> str:
  try:
    return Path(script_path).read_text(encoding='utf-8')
  except (OSError, UnicodeDecodeError) as e:
    raise CalcIOError(f"cannot read '{script_path}': {e}") from e


def parse_file(script_path: str, settings: CalcSettings) -> int:
  """Parse a script file and show the AST of each statement"""
  session = CalcSession(settings)
  try:
    statements = session.parser.parse_statement_list(read_script(script_path))
  except CalcError as e:
    print(e)
    return 1

  print(f"Parsed {len(statements)} statements:")
  print("=" * 50)
  for i, stmt in enumerate(statements, 1):
    print(f"\nStatement {i}:")
    print(pretty_print_ast(stmt), end='')
  return 0


def run_script_file(script_path: str, settings: CalcSettings) -> int:
  """Run a script file, printing one result line per statement"""
  session = CalcSession(settings)
  try:
    text = read_script(script_path)
  except CalcIOError as e:
    print(e)
    return 1

  try:
    statements = session.parser.parse_statement_list(text)
  except CalcError as e:
    print(f"In '{script_path}':")
    print(e)
    return 1

  status = 0
  for stmt in statements:
    try:
      value = session.execute(stmt)
    except CalcError as e:
      print(e)
      status = 1
      continue
    if value is None:
      print(f"Defined function: {signature(stmt)}")
    else:
      print(session.format(value))
  return status


def setup_readline(session: CalcSession) -> None:
  """Setup readline with history and completion of builtin and bound names"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First run, no history yet
  readline.set_history_length(1000)

  commands = [":parse", ":env", ":help", "exit"]

  def completer(text, state):
    values, functions = session.context.user_bindings()
    names = commands + list(UNARY_FUNCTIONS) + [n for n, _ in values] + [n for n, _ in functions]
    options = [name for name in names if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(save_history, history_file)


def save_history(history_file: str) -> None:
  try:
    readline.write_history_file(history_file)
  except OSError as e:
    print(f"Could not save history: {e}", file=sys.stderr)


def show_env(session: CalcSession) -> None:
  values, functions = session.context.user_bindings()
  if not values and not functions:
    print("  (no user-defined bindings)")
    return
  for name, value in values:
    print(f"  {name} = {session.format(value)}")
  for name, func in functions:
    print(f"  {name}({', '.join(func.params)})")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <stmt>     - Show parsed AST")
  print("  :env              - Show current bindings")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  x = 5             - Value binding (once per scope)")
  print("  f(x, y) = x * y   - Function definition")
  print("  f(2, 3) ^ 2       - Call and exponentiation")
  print("  { a = 2; a * a }  - Block with its own scope")
  print(f"  Builtins: {', '.join(UNARY_FUNCTIONS)}")
  print("  Separate operators from names with spaces: a + b, not a+b")


def terminate(code: str) -> str:
  code = code.strip()
  return code if code.endswith(';') else code + ';'


def run_interactive_mode(settings: CalcSettings) -> None:
  """Read a line, parse, evaluate, print, repeat until end of input"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if settings.debug:
    print("Debug mode enabled")
  print()

  session = CalcSession(settings)
  setup_readline(session)

  while True:
    try:
      code = input("calc> ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped in ("exit", "exit;"):
      break
    if not stripped:
      continue

    if stripped == ":help":
      show_help()
      continue

    if stripped == ":env":
      show_env(session)
      continue

    if stripped.startswith(":parse "):
      try:
        stmt = session.parser.parse_statement(terminate(stripped[len(":parse "):]))
        print(pretty_print_ast(stmt), end='')
      except CalcError as e:
        print(e)
      continue

    try:
      print(session.run(terminate(stripped)))
    except Exception as e:
      print(f"Unexpected error: {e}")
      if settings.debug:
        import traceback
        traceback.print_exc()


def main() -> None:
  """Main entry point"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  try:
    settings = settings_from_args(args)
  except ValueError as e:
    arg_parser.error(str(e))

  if args.script and not args.interactive:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      sys.exit(parse_file(args.script, settings))
    sys.exit(run_script_file(args.script, settings))

  run_interactive_mode(settings)


if __name__ == "__main__":
  main()
