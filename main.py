"""
Lispy Programming Language - Main Entry Point
A small Lisp with Q-Expressions, curried closures and variadic functions
"""

import sys
import os
import argparse
from pathlib import Path

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser, pretty_print_tree
from error_handling import LispyParseError
from interpreter import LispyInterpreter, create_interpreter, create_debug_interpreter, builtin_names
from values import Error, render


VERSION = "Lispy Version 0.0.0.0.2"
PROMPT = "lispy> "
HISTORY_FILE = "~/.lispy_history"
RECURSION_LIMIT = 10000
RECURSION_MESSAGE = "Error: maximum recursion depth exceeded (no tail-call elimination)"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Lispy - a small Lisp with Q-Expressions and curried closures',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                       # Interactive mode
  %(prog)s script.lspy           # Run a Lispy script
  %(prog)s --parse script.lspy   # Parse and show the parse tree
  %(prog)s --debug script.lspy   # Run with evaluation tracing
  %(prog)s -i --debug            # Interactive mode with tracing
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Lispy script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode (after running the script, if given)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the parse tree (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Trace every evaluation step'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Lispy script file and show the parse tree"""
  parser = create_debug_parser() if debug else create_parser()
  try:
    tree = parser.parse_file(script_path)
  except LispyParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    sys.exit(1)
  except OSError as e:
    print(f"Error: Cannot read '{script_path}': {e.strerror or e}")
    sys.exit(1)

  print(pretty_print_tree(tree), end='')


def run_script_file(interpreter: LispyInterpreter, script_path: str) -> int:
  """Run every top-level expression of a script, printing each result. Returns the exit status."""
  try:
    results = interpreter.run_file(script_path)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print("  Hint: Make sure you have read permissions for this file")
    return 1
  except OSError as e:
    print(f"Error: Cannot read '{script_path}': {e.strerror or e}")
    return 1
  except LispyParseError as e:
    print(f"Parse error in '{script_path}': {e}")
    return 1
  except RecursionError:
    print(RECURSION_MESSAGE)
    return 1

  status = 0
  for result in results:
    print(render(result))
    if isinstance(result, Error):
      status = 1
  return status


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First run, no history yet

  readline.set_history_length(1000)

  completions = builtin_names() + [":env", ":parse", ":help", "exit"]

  def completer(text, state):
    options = [name for name in completions if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.set_completer_delims(" (){}")
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(write_history, history_file)


def write_history(history_file: str) -> None:
  try:
    readline.write_history_file(history_file)
  except OSError as e:
    print(f"Warning: could not save history to '{history_file}': {e}")


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show the parse tree")
  print("  :env              - Show global bindings")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL (or Ctrl+C / Ctrl+D)")
  print()
  print("Language features:")
  print("  + 1 2                         - Application (outer parens optional)")
  print("  {1 2 3}                       - Q-Expression, never evaluated")
  print("  def {x} 5                     - Global binding")
  print("  def {add} (\\ {a b} {+ a b})   - Function definition")
  print("  (add 1)                       - Partial application")
  print("  \\ {x & xs} {xs}               - Variadic formals")
  print("  if (> x 3) {1} {2}            - Conditional")


def show_env(interpreter: LispyInterpreter) -> None:
  builtins = set(builtin_names())
  user_bindings = [name for name in interpreter.global_env.names() if name not in builtins]
  if not user_bindings:
    print("  (no user-defined bindings)")
    return
  for name in user_bindings:
    val_str = render(interpreter.global_env.get(name))
    if len(val_str) > 60:
      val_str = val_str[:57] + "..."
    print(f"  {name} = {val_str}")


def run_interactive_mode(interpreter: LispyInterpreter) -> None:
  """Read, evaluate and print one line at a time until exit"""
  print(VERSION)
  print("Press Ctrl+c to Exit\n")
  if interpreter.debug:
    print("Debug mode enabled")

  setup_readline()

  while True:
    try:
      code = input(PROMPT)
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped == "exit":
      break
    if not stripped:
      continue

    if stripped == ":help":
      show_help()
      continue

    if stripped == ":env":
      show_env(interpreter)
      continue

    try:
      if stripped.startswith(":parse "):
        print(pretty_print_tree(interpreter.parser.parse_string(stripped[7:])), end='')
        continue

      print(render(interpreter.eval_string(code, "<stdin>")))
    except LispyParseError as e:
      print(e)
    except RecursionError:
      print(RECURSION_MESSAGE)


def main() -> None:
  """Main entry point for Lispy"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  if args.parse and not args.script:
    arg_parser.error("--parse requires a script file")

  # Each Lispy call level costs several Python frames
  sys.setrecursionlimit(RECURSION_LIMIT)

  interpreter = create_debug_interpreter() if args.debug else create_interpreter()

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.parse:
      parse_file(args.script, debug=args.debug)
      return

    status = run_script_file(interpreter, args.script)
    if not args.interactive:
      sys.exit(status)

  run_interactive_mode(interpreter)


if __name__ == "__main__":
  main()
