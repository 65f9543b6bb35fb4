"""
Blisp Programming Language - Main Entry Point
A small Lisp with S-expressions, Q-expressions and integer arithmetic
"""

import sys
import argparse
from typing import List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import BlispRuntimeError
from interpreter import Interpreter, create_debug_interpreter, create_interpreter
from parsing import BlispParseError, create_debug_parser, create_parser, pretty_print_cst
from values import render


VERSION = "Blisp 0.0.1"
PROMPT = "blisp> "
REPL_COMMANDS = [":parse", ":env", ":help"]


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='blisp',
      description='Blisp - a small Lisp with S-expressions and Q-expressions',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                              # Interactive mode
  %(prog)s -e "+ 1 2 3"                 # Evaluate and print
  %(prog)s -e "head {1 2 3}" -e "len {}" # Several inputs, one environment
  %(prog)s --parse -e "(+ 1 {2 3})"     # Show the syntax tree
  %(prog)s -i --debug                   # Interactive mode with evaluation trace
        """
  )

  parser.add_argument(
      '-e', '--eval',
      action='append',
      dest='expressions',
      metavar='EXPR',
      help='Evaluate EXPR and print the result (repeatable)'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='With -e, show the syntax tree instead of evaluating'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Print an evaluation trace'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def parse_expressions(expressions: List[str], debug: bool = False) -> int:
  """Print the syntax tree of each expression; returns the exit status"""
  parser = create_debug_parser() if debug else create_parser()
  status = 0
  for code in expressions:
    try:
      print(pretty_print_cst(parser.parse_string(code)), end='')
    except BlispParseError as e:
      print(e)
      status = 1
  return status


def run_line(interpreter: Interpreter, code: str) -> str:
  """Evaluate one input and return the rendered result, or the error report"""
  try:
    return render(interpreter.run(code))
  except BlispParseError as e:
    return str(e)
  except BlispRuntimeError as e:
    return f"Runtime error: {e.message}"


def eval_expressions(expressions: List[str], debug: bool = False) -> int:
  """Evaluate each expression in one environment and print the results"""
  interpreter = create_debug_interpreter() if debug else create_interpreter()
  status = 0
  for code in expressions:
    try:
      print(render(interpreter.run(code)))
    except BlispParseError as e:
      print(e)
      status = 1
    except BlispRuntimeError as e:
      print(f"Runtime error: {e.message}")
      status = 1
  return status


def setup_readline(interpreter: Interpreter) -> None:
  """Setup readline with in-memory history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  readline.set_history_length(1000)

  def completer(text, state):
    options = [name for name in interpreter.environment.names() + REPL_COMMANDS
               if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.set_completer_delims(" (){}")
  readline.parse_and_bind("tab: complete")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show the syntax tree")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  Ctrl+c / Ctrl+d   - Exit REPL")
  print()
  print("Language features:")
  print("  + 1 2 3                   - Arithmetic: + - * / % ^ min max")
  print("  (- 5)                     - Unary negation")
  print("  {1 2 3}                   - Quoted list (data)")
  print("  head {1 2 3}              - List ops: list head tail init join cons len")
  print("  eval {+ 1 2}              - Evaluate a quoted list as code")


def show_env(interpreter: Interpreter) -> None:
  print("Current environment:")
  for name in interpreter.environment.names():
    print(f"  {name} = {render(interpreter.environment.get(name))}")


def run_interactive_mode(debug: bool = False) -> None:
  """Run the read-eval-print loop until Ctrl+c or end of input"""
  print(VERSION)
  print("Press Ctrl+c to exit\n")
  if debug:
    print("Debug mode enabled")

  interpreter = create_debug_interpreter() if debug else create_interpreter()
  setup_readline(interpreter)

  while True:
    try:
      code = input(PROMPT)

      if not code.strip():
        continue

      if code.startswith(":parse "):
        try:
          print(pretty_print_cst(interpreter.parser.parse_string(code[7:])), end='')
        except BlispParseError as e:
          print(e)
        continue

      if code.strip() == ":env":
        show_env(interpreter)
        continue

      if code.strip() == ":help":
        show_help()
        continue

      print(run_line(interpreter, code))

    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break
    except Exception as e:
      print(f"Unexpected error: {e}")
      if debug:
        import traceback
        traceback.print_exc()


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for Blisp"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.expressions:
    if args.parse:
      status = parse_expressions(args.expressions, args.debug)
    else:
      status = eval_expressions(args.expressions, args.debug)
    if args.interactive:
      run_interactive_mode(args.debug)
    return status

  if args.parse:
    arg_parser.error("--parse needs at least one -e EXPR")

  run_interactive_mode(args.debug)
  return 0


if __name__ == "__main__":
  sys.exit(main())
