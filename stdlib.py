"""
Blisp Standard Library
Builtin functions registered in every environment. Each builtin receives
the environment and an Expr of already-evaluated arguments, validates
everything before touching it, and returns a single value.
"""

from typing import Callable, Dict

from environment import Environment
from utilities import (
  check_min_arg_count,
  validate_all_args,
  validate_function_args,
)
from values import Error, Expr, Number, Quoted, Value, add_cell, fits_long, pop_at, take_at


DIVISION_BY_ZERO = "Division By Zero!"
NON_NUMBER = "Cannot operate on non-number!"
NEGATIVE_EXPONENT = "Negative exponent!"
INTEGER_OVERFLOW = "Integer overflow!"


# ============================================================================
# LIST FUNCTIONS
# ============================================================================

def builtin_list(env: Environment, a: Expr) -> Value:
  """Relabel the argument list as a Q-expression (quote)"""
  return Quoted(a.cells)


def builtin_head(env: Environment, a: Expr) -> Value:
  """Q-expression holding only the first element"""
  error = validate_function_args("head", a, [Quoted], non_empty=[0])
  if error is not None:
    return error

  v = take_at(a, 0)
  del v.cells[1:]
  return v


def builtin_tail(env: Environment, a: Expr) -> Value:
  """Q-expression without its first element"""
  error = validate_function_args("tail", a, [Quoted], non_empty=[0])
  if error is not None:
    return error

  v = take_at(a, 0)
  pop_at(v, 0)
  return v


def builtin_init(env: Environment, a: Expr) -> Value:
  """Q-expression without its last element"""
  error = validate_function_args("init", a, [Quoted], non_empty=[0])
  if error is not None:
    return error

  v = take_at(a, 0)
  pop_at(v, len(v.cells) - 1)
  return v


def builtin_eval(env: Environment, a: Expr) -> Value:
  """Evaluate a Q-expression as code"""
  error = validate_function_args("eval", a, [Quoted])
  if error is not None:
    return error

  # Deferred: interpreter imports this module to register builtins
  from interpreter import eval_value

  x = take_at(a, 0)
  return eval_value(env, Expr(x.cells), env.debug)


def join_lists(x: Quoted, y: Quoted) -> Quoted:
  """Move every cell of `y` onto the end of `x`"""
  while y.cells:
    add_cell(x, pop_at(y, 0))
  return x


def builtin_join(env: Environment, a: Expr) -> Value:
  """Concatenate Q-expressions left to right"""
  error = check_min_arg_count("join", a, 1) or validate_all_args("join", a, Quoted)
  if error is not None:
    return error

  x = pop_at(a, 0)
  while a.cells:
    x = join_lists(x, pop_at(a, 0))
  return x


def builtin_cons(env: Environment, a: Expr) -> Value:
  """Prepend a value to a Q-expression"""
  error = validate_function_args("cons", a, [object, Quoted])
  if error is not None:
    return error

  v = pop_at(a, 0)
  q = take_at(a, 0)
  return join_lists(Quoted([v]), q)


def builtin_len(env: Environment, a: Expr) -> Value:
  """Number of elements in a Q-expression"""
  error = validate_function_args("len", a, [Quoted])
  if error is not None:
    return error

  return Number(len(take_at(a, 0).cells))


# ============================================================================
# ARITHMETIC
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero"""
  q = abs(x) // abs(y)
  return q if (x < 0) == (y < 0) else -q


def truncating_mod(x: int, y: int) -> int:
  """Remainder taking the sign of the dividend"""
  return x - y * truncating_div(x, y)


def _divide(x: int, y: int):
  if y == 0:
    return Error(DIVISION_BY_ZERO)
  return truncating_div(x, y)


def _modulo(x: int, y: int):
  if y == 0:
    return Error(DIVISION_BY_ZERO)
  return truncating_mod(x, y)


def _power(x: int, y: int):
  if y < 0:
    return Error(NEGATIVE_EXPONENT)
  if x in (-1, 0, 1):
    return x ** y

  # |x| >= 2 leaves the 64-bit range within 64 steps
  result = 1
  for _ in range(y):
    result *= x
    if not fits_long(result):
      return Error(INTEGER_OVERFLOW)
  return result


# Each operator folds the accumulator with the next argument; returning an
# Error stops the fold, as does a result outside the 64-bit range.
ARITHMETIC_OPERATORS: Dict[str, Callable] = {
    '+': lambda x, y: x + y,
    '-': lambda x, y: x - y,
    '*': lambda x, y: x * y,
    '/': _divide,
    '%': _modulo,
    '^': _power,
    'max': lambda x, y: y if x <= y else x,
    'min': lambda x, y: x if x <= y else y,
}

OPERATOR_ALIASES = {
    'add': '+',
    'sub': '-',
    'mul': '*',
    'div': '/',
    'mod': '%',
    'pow': '^',
}


def builtin_op(env: Environment, a: Expr, op: str) -> Value:
  """Left fold of integer operator `op` over the arguments"""
  for cell in a.cells:
    if not isinstance(cell, Number):
      return Error(NON_NUMBER)

  error = check_min_arg_count(op, a, 1)
  if error is not None:
    return error

  symbol = OPERATOR_ALIASES.get(op, op)
  apply_op = ARITHMETIC_OPERATORS[symbol]
  x = pop_at(a, 0)

  # Unary minus
  if symbol == "-" and not a.cells:
    if not fits_long(-x.num):
      return Error(INTEGER_OVERFLOW)
    return Number(-x.num)

  while a.cells:
    y = pop_at(a, 0)
    result = apply_op(x.num, y.num)
    if isinstance(result, Error):
      return result
    if not fits_long(result):
      return Error(INTEGER_OVERFLOW)
    x = Number(result)

  return x


def make_operator_builtin(op: str) -> Callable[[Environment, Expr], Value]:
  """Bind `op` into a builtin with the standard (env, args) signature"""
  def operator_builtin(env: Environment, a: Expr) -> Value:
    return builtin_op(env, a, op)

  operator_builtin.__name__ = f"builtin_op_{op}"
  return operator_builtin


# ============================================================================
# REGISTRATION
# ============================================================================

LIST_BUILTINS: Dict[str, Callable[[Environment, Expr], Value]] = {
    'list': builtin_list,
    'head': builtin_head,
    'tail': builtin_tail,
    'join': builtin_join,
    'len': builtin_len,
    'eval': builtin_eval,
    'init': builtin_init,
    'cons': builtin_cons,
}


def add_builtins(env: Environment) -> Environment:
  """Register the whole builtin catalog in `env`"""
  for name, func in LIST_BUILTINS.items():
    env.add_builtin(name, func)

  for op in ARITHMETIC_OPERATORS:
    env.add_builtin(op, make_operator_builtin(op))

  for alias in OPERATOR_ALIASES:
    env.add_builtin(alias, make_operator_builtin(alias))

  return env
