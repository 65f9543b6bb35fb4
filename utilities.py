"""
Utilities module for the Blisp interpreter
Precondition checks shared by the builtins. Every check returns None when
the precondition holds, or the Error value the builtin must return instead.
"""

from typing import Optional, Sequence, Type

from values import Error, Expr, Value


# ==================== ERROR MESSAGE BUILDERS ====================

def too_many_args_error(func_name: str, expected: int, got: int) -> Error:
  """
  Generate too-many-arguments error

  Args:
    func_name: Builtin name
    expected: Maximum number of arguments
    got: Actual number of arguments

  Returns:
    Error value with formatted message
  """
  return Error(
    f"Function '{func_name}' passed too many arguments! Got {got}, expected {expected}."
  )


def too_few_args_error(func_name: str, expected: int, got: int) -> Error:
  """
  Generate too-few-arguments error

  Args:
    func_name: Builtin name
    expected: Minimum number of arguments
    got: Actual number of arguments

  Returns:
    Error value with formatted message
  """
  return Error(
    f"Function '{func_name}' passed too few arguments! Got {got}, expected {expected}."
  )


def type_mismatch_error(func_name: str, position: int, expected: str, actual: Value) -> Error:
  """
  Generate type mismatch error

  Args:
    func_name: Builtin name
    position: 1-based argument position
    expected: Expected type name
    actual: The offending value

  Returns:
    Error value with formatted message
  """
  return Error(
    f"Function '{func_name}' passed incorrect type for argument {position}! "
    f"Got {actual.type_name}, expected {expected}."
  )


def empty_list_error(func_name: str) -> Error:
  return Error(f"Function '{func_name}' passed {{}}!")


# ==================== VALIDATION UTILITIES ====================

def check_arg_count(func_name: str, args: Expr, expected: int) -> Optional[Error]:
  """Exact arity check"""
  got = len(args.cells)
  if got > expected:
    return too_many_args_error(func_name, expected, got)
  if got < expected:
    return too_few_args_error(func_name, expected, got)
  return None


def check_min_arg_count(func_name: str, args: Expr, minimum: int) -> Optional[Error]:
  got = len(args.cells)
  if got < minimum:
    return too_few_args_error(func_name, minimum, got)
  return None


def check_arg_type(func_name: str, args: Expr, index: int, expected: Type) -> Optional[Error]:
  """Check that the argument at `index` is an instance of `expected`"""
  arg = args.cells[index]
  if not isinstance(arg, expected):
    return type_mismatch_error(func_name, index + 1, expected.type_name, arg)
  return None


def check_not_empty(func_name: str, args: Expr, index: int) -> Optional[Error]:
  """Check that the list argument at `index` has at least one cell"""
  if not args.cells[index].cells:
    return empty_list_error(func_name)
  return None


def validate_function_args(
  func_name: str,
  args: Expr,
  expected_types: Sequence[Type],
  non_empty: Sequence[int] = ()
) -> Optional[Error]:
  """
  Validate arity, argument types and non-empty lists in that order

  Args:
    func_name: Builtin name for error messages
    args: The argument list the builtin received
    expected_types: One expected class per argument (object accepts anything)
    non_empty: Positions of list arguments that must not be empty

  Returns:
    None if every precondition holds, otherwise the first violation as an Error
  """
  error = check_arg_count(func_name, args, len(expected_types))
  if error is not None:
    return error

  for i, expected in enumerate(expected_types):
    if expected is object:
      continue
    error = check_arg_type(func_name, args, i, expected)
    if error is not None:
      return error

  for i in non_empty:
    error = check_not_empty(func_name, args, i)
    if error is not None:
      return error

  return None


def validate_all_args(func_name: str, args: Expr, expected: Type) -> Optional[Error]:
  """Check that every argument is an instance of `expected`"""
  for i in range(len(args.cells)):
    error = check_arg_type(func_name, args, i, expected)
    if error is not None:
      return error
  return None
