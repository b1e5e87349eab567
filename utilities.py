"""
Utilities module for the Lispy interpreter
Shared argument checks used by every builtin
Checks return an Error value on failure and None on success
"""

from typing import List, Optional, Type

from values import Value, Error, QExpr, Symbol, type_name


# ==================== ERROR MESSAGE BUILDERS ====================

def arity_error(func_name: str, got: int, expected) -> Error:
  """
  Generate arity mismatch error

  Args:
    func_name: Function name
    got: Actual number of arguments
    expected: Expected number of arguments (or a description like "at least 1")

  Returns:
    Error value with formatted message
  """
  return Error(
    f"Function '{func_name}' passed incorrect number of arguments. "
    f"Got {got}, expected {expected}."
  )


def type_mismatch_error(func_name: str, index: int, actual: Value, expected: Type) -> Error:
  """
  Generate type mismatch error

  Args:
    func_name: Function name
    index: Zero-based argument position
    actual: The offending value
    expected: Expected value class

  Returns:
    Error value with formatted message
  """
  return Error(
    f"Function '{func_name}' passed incorrect type for argument {index}. "
    f"Got {type_name(actual)}, expected {type_name(expected)}."
  )


def empty_list_error(func_name: str, index: int) -> Error:
  return Error(f"Function '{func_name}' passed {{}} for argument {index}.")


# ==================== VALIDATION UTILITIES ====================

def check_arity(func_name: str, args: List[Value], expected: int) -> Optional[Error]:
  if len(args) != expected:
    return arity_error(func_name, len(args), expected)
  return None


def check_min_arity(func_name: str, args: List[Value], minimum: int) -> Optional[Error]:
  if len(args) < minimum:
    return arity_error(func_name, len(args), f"at least {minimum}")
  return None


def check_type(func_name: str, args: List[Value], index: int, expected: Type) -> Optional[Error]:
  if not isinstance(args[index], expected):
    return type_mismatch_error(func_name, index, args[index], expected)
  return None


def check_all_types(func_name: str, args: List[Value], expected: Type) -> Optional[Error]:
  """Check every argument has the expected type, reporting the first that does not"""
  for index in range(len(args)):
    error = check_type(func_name, args, index, expected)
    if error:
      return error
  return None


def check_not_empty(func_name: str, args: List[Value], index: int) -> Optional[Error]:
  if not args[index].cells:
    return empty_list_error(func_name, index)
  return None


def validate_function_args(
  func_name: str,
  args: List[Value],
  expected_types: List[Type]
) -> Optional[Error]:
  """
  Validate arguments match expected count and types

  Args:
    func_name: Function name for error messages
    args: List of argument values
    expected_types: List of expected value classes, one per argument

  Returns:
    The first Error found, or None when the arguments are valid
  """
  error = check_arity(func_name, args, len(expected_types))
  if error:
    return error

  for index, expected in enumerate(expected_types):
    error = check_type(func_name, args, index, expected)
    if error:
      return error
  return None


def validate_symbol_list(func_name: str, symbols: QExpr) -> Optional[Error]:
  """Check that every element of a formals or binding list is a Symbol"""
  for cell in symbols.cells:
    if not isinstance(cell, Symbol):
      return Error(
        f"Function '{func_name}' cannot define non-symbol. "
        f"Got {type_name(cell)}, expected {type_name(Symbol)}."
      )
  return None
