"""
Lispy Interpreter
Tree-walking evaluator, closure application, and the builtins that need the environment
Errors are Values: nothing in here raises for a language-level fault
"""

from typing import Callable, Dict, List, Optional

from values import (
  Value, Number, Error, Symbol, SExpr, QExpr, Builtin, Lambda,
  VARIADIC_MARKER, is_function, type_name, render,
)
from environment import Environment
from parsing import LispyParser, create_parser
from reader import read_node
from stdlib import BUILTIN_FUNCTIONS
from utilities import (
  check_min_arity,
  check_type,
  validate_function_args,
  validate_symbol_list,
)


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_value(env: Environment, value: Value) -> Value:
  """
  Reduce a value to its result.
  Symbols are looked up, S-Expressions are applied, everything else evaluates to itself.
  """
  if env.tracing():
    print(f"Evaluating: {render(value)}")

  if isinstance(value, Symbol):
    return env.get(value.name)
  elif isinstance(value, SExpr):
    return eval_sexpr(env, value)
  return value


def eval_sexpr(env: Environment, sexpr: SExpr) -> Value:
  """Evaluate every cell, then report the first error or apply the head"""
  # Every cell runs even when an earlier one failed
  cells = [eval_value(env, cell) for cell in sexpr.cells]

  for cell in cells:
    if isinstance(cell, Error):
      return cell

  if not cells:
    return sexpr
  if len(cells) == 1:
    return cells[0]

  func = cells[0]
  if not is_function(func):
    return Error(
      "S-Expression starts with incorrect type. "
      f"Got {type_name(func)}, expected {type_name(Builtin)}."
    )
  return call_function(env, func, cells[1:])


# ============================================================================
# FUNCTION APPLICATION
# ============================================================================

def variadic_format_error() -> Error:
  return Error("Function format invalid. Symbol '&' not followed by single symbol.")


def call_function(env: Environment, func: Value, args: List[Value]) -> Value:
  """
  Apply a builtin or closure to already evaluated arguments.

  Closures bind formals left to right into a copy of their frame. Running out
  of arguments early returns a new closure awaiting the rest; once every formal
  is bound the frame is parented to the caller and the body is evaluated there.
  The callee value itself is never modified.
  """
  if isinstance(func, Builtin):
    return func.func(env, args)

  given = len(args)
  total = len(func.formals.cells)
  formals = list(func.formals.cells)
  remaining = list(args)
  frame = func.env.copy()

  while remaining:
    if not formals:
      return Error(f"Function passed too many arguments. Got {given}, expected {total}.")

    formal = formals.pop(0)

    if formal.name == VARIADIC_MARKER:
      if len(formals) != 1:
        return variadic_format_error()
      rest = formals.pop(0)
      frame.put(rest.name, QExpr(remaining))
      remaining = []
      break

    frame.put(formal.name, remaining.pop(0))

  # Arguments ran out right at the marker: the rest list is empty
  if formals and formals[0].name == VARIADIC_MARKER:
    if len(formals) != 2:
      return variadic_format_error()
    frame.put(formals[1].name, QExpr())
    formals = []

  if formals:
    return Lambda(QExpr(formals), func.body.copy(), frame)

  frame.attach(env)
  return eval_value(frame, SExpr(func.body.copy().cells))


# ============================================================================
# ENVIRONMENT BUILTINS
# ============================================================================

def builtin_eval(env: Environment, args: List[Value]) -> Value:
  """Evaluate a Q-Expression as if it were an S-Expression"""
  error = validate_function_args("eval", args, [QExpr])
  if error:
    return error
  return eval_value(env, SExpr(args[0].cells))


def builtin_if(env: Environment, args: List[Value]) -> Value:
  """Evaluate only the branch selected by the condition"""
  error = validate_function_args("if", args, [Number, QExpr, QExpr])
  if error:
    return error

  branch = args[1] if args[0].value != 0 else args[2]
  return eval_value(env, SExpr(branch.cells))


def builtin_var(env: Environment, args: List[Value], func_name: str) -> Value:
  """Shared body of def and =: bind a list of symbols to the following values"""
  error = check_min_arity(func_name, args, 1) or check_type(func_name, args, 0, QExpr)
  if error:
    return error

  symbols = args[0]
  error = validate_symbol_list(func_name, symbols)
  if error:
    return error

  values = args[1:]
  if len(symbols.cells) != len(values):
    return Error(
      f"Function '{func_name}' passed incorrect number of values for symbols. "
      f"Got {len(values)}, expected {len(symbols.cells)}."
    )

  for symbol, value in zip(symbols.cells, values):
    if func_name == "def":
      env.define_global(symbol.name, value)
    else:
      env.put(symbol.name, value)

  return SExpr()


def builtin_def(env: Environment, args: List[Value]) -> Value:
  """Bind in the root frame"""
  return builtin_var(env, args, "def")


def builtin_put(env: Environment, args: List[Value]) -> Value:
  """Bind in the current frame"""
  return builtin_var(env, args, "=")


def builtin_lambda(env: Environment, args: List[Value]) -> Value:
  """Build a closure from a formals list and a body"""
  error = validate_function_args("\\", args, [QExpr, QExpr])
  if error:
    return error

  error = validate_symbol_list("\\", args[0])
  if error:
    return error

  return Lambda(args[0].copy(), args[1].copy(), Environment())


ENV_BUILTINS: Dict[str, Callable] = {
    "eval": builtin_eval,
    "if": builtin_if,
    "def": builtin_def,
    "=": builtin_put,
    "\\": builtin_lambda,
}


def create_builtin_runtime_env(debug: bool = False) -> Environment:
  """Create a root environment with every builtin registered"""
  env = Environment(debug=debug)
  for name, func in {**BUILTIN_FUNCTIONS, **ENV_BUILTINS}.items():
    env.put(name, Builtin(name, func))
  return env


def builtin_names() -> List[str]:
  return list(BUILTIN_FUNCTIONS) + list(ENV_BUILTINS)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def eval_program(program: SExpr, env: Environment) -> List[Value]:
  """Evaluate each top-level expression in turn, collecting the results"""
  return [eval_value(env, expression) for expression in program.cells]


class LispyInterpreter:
  """A parser and a root environment kept together for a session"""

  def __init__(self, debug: bool = False, parser: Optional[LispyParser] = None):
    self.debug = debug
    self.parser = parser or create_parser(debug)
    self.global_env = create_builtin_runtime_env(debug)

  def read(self, text: str, filename: str = "<input>") -> Value:
    return read_node(self.parser.parse_string(text, filename))

  def eval_string(self, text: str, filename: str = "<input>") -> Value:
    """Evaluate a line the way the REPL does: the whole input is one S-Expression"""
    return eval_value(self.global_env, self.read(text, filename))

  def run_string(self, text: str, filename: str = "<input>") -> List[Value]:
    """Evaluate a script: every top-level expression separately"""
    return eval_program(self.read(text, filename), self.global_env)

  def run_file(self, filepath: str) -> List[Value]:
    return eval_program(read_node(self.parser.parse_file(filepath)), self.global_env)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False) -> LispyInterpreter:
  """Factory function returning an interpreter"""
  return LispyInterpreter(debug=debug)


def create_debug_interpreter() -> LispyInterpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
