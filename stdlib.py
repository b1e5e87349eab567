"""
Lispy Standard Library
Builtins that only look at their arguments
Every builtin takes (env, args) and returns a Value; faults come back as Error values
"""

from typing import Callable, Dict, List
import operator

from values import (
  Value, Number, Error, QExpr,
  values_equal, wrap_int64,
)
from utilities import (
  check_arity,
  check_min_arity,
  check_all_types,
  check_not_empty,
  validate_function_args,
)


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient


def arithmetic_op(op_name: str, op: Callable[[int, int], int]) -> Callable:
  """
  Factory for left-folding arithmetic builtins

  Args:
    op_name: Symbol the builtin is registered under, used in error messages
    op: Binary integer operation

  Returns:
    Builtin implementation taking (env, args)
  """
  def arithmetic(env, args: List[Value]) -> Value:
    error = check_min_arity(op_name, args, 1) or check_all_types(op_name, args, Number)
    if error:
      return error

    result = args[0].value
    if op_name == "-" and len(args) == 1:
      return Number(wrap_int64(-result))

    for arg in args[1:]:
      if op_name == "/" and arg.value == 0:
        return Error("Division by zero.")
      result = wrap_int64(op(result, arg.value))
    return Number(result)

  arithmetic.__name__ = f"builtin_{op.__name__}"
  return arithmetic


builtin_add = arithmetic_op("+", operator.add)
builtin_sub = arithmetic_op("-", operator.sub)
builtin_mul = arithmetic_op("*", operator.mul)
builtin_div = arithmetic_op("/", truncating_div)


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def builtin_list(env, args: List[Value]) -> Value:
  """Turn the argument list into a Q-Expression"""
  return QExpr([arg.copy() for arg in args])


def builtin_head(env, args: List[Value]) -> Value:
  """Q-Expression holding only the first element"""
  error = validate_function_args("head", args, [QExpr]) or check_not_empty("head", args, 0)
  if error:
    return error
  return QExpr([cell.copy() for cell in args[0].cells[:1]])


def builtin_tail(env, args: List[Value]) -> Value:
  """Q-Expression with the first element removed"""
  error = validate_function_args("tail", args, [QExpr]) or check_not_empty("tail", args, 0)
  if error:
    return error
  return QExpr([cell.copy() for cell in args[0].cells[1:]])


def builtin_join(env, args: List[Value]) -> Value:
  """Concatenate Q-Expressions in argument order"""
  error = check_all_types("join", args, QExpr)
  if error:
    return error

  joined = QExpr()
  for arg in args:
    joined.cells.extend(cell.copy() for cell in arg.cells)
  return joined


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

def ordering_op(op_name: str, op: Callable[[int, int], bool]) -> Callable:
  """Factory for numeric ordering builtins returning 1 or 0"""
  def ordering(env, args: List[Value]) -> Value:
    error = validate_function_args(op_name, args, [Number, Number])
    if error:
      return error
    return Number(int(op(args[0].value, args[1].value)))

  ordering.__name__ = f"builtin_{op.__name__}"
  return ordering


builtin_gt = ordering_op(">", operator.gt)
builtin_lt = ordering_op("<", operator.lt)
builtin_ge = ordering_op(">=", operator.ge)
builtin_le = ordering_op("<=", operator.le)


def builtin_eq(env, args: List[Value]) -> Value:
  """Structural equality of any two values"""
  error = check_arity("==", args, 2)
  if error:
    return error
  return Number(int(values_equal(args[0], args[1])))


def builtin_ne(env, args: List[Value]) -> Value:
  error = check_arity("!=", args, 2)
  if error:
    return error
  return Number(int(not values_equal(args[0], args[1])))


# ============================================================================
# BUILTIN REGISTRY
# ============================================================================

BUILTIN_FUNCTIONS: Dict[str, Callable] = {
    # List functions
    "list": builtin_list,
    "head": builtin_head,
    "tail": builtin_tail,
    "join": builtin_join,

    # Arithmetic
    "+": builtin_add,
    "-": builtin_sub,
    "*": builtin_mul,
    "/": builtin_div,

    # Comparison
    ">": builtin_gt,
    "<": builtin_lt,
    ">=": builtin_ge,
    "<=": builtin_le,
    "==": builtin_eq,
    "!=": builtin_ne,
}


def list_builtin_functions() -> List[str]:
  """List all names registered in this module"""
  return list(BUILTIN_FUNCTIONS.keys())
