"""
Blisp Interpreter
Reduces Value trees against an environment. Symbols are looked up,
S-expressions evaluate their cells then apply the first to the rest,
everything else is already in normal form. Errors are values and the
first one found in an S-expression becomes its result.
"""

from typing import Iterable, List, Optional

from environment import Environment
from error_handling import NESTING_TOO_DEEP, BlispRuntimeError
from parsing import create_parser
from reader import read_program
from stdlib import add_builtins
from values import Error, Expr, Function, Symbol, Value, pop_at, render, take_at


NOT_A_FUNCTION = "first element is not a function"


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_value(env: Environment, v: Value, debug: bool = False) -> Value:
  """Evaluate a value to normal form"""
  if debug:
    print(f"Evaluating: {render(v)}")

  if isinstance(v, Symbol):
    return env.get(v.name)

  if isinstance(v, Expr):
    return eval_expr(env, v, debug)

  return v


def eval_expr(env: Environment, v: Expr, debug: bool = False) -> Value:
  """Evaluate an S-expression, consuming it"""
  for i, cell in enumerate(v.cells):
    v.cells[i] = eval_value(env, cell, debug)

  for i, cell in enumerate(v.cells):
    if isinstance(cell, Error):
      return take_at(v, i)

  if not v.cells:
    return v

  if len(v.cells) == 1:
    return take_at(v, 0)

  f = pop_at(v, 0)
  if not isinstance(f, Function):
    v.cells.clear()
    return Error(NOT_A_FUNCTION)

  if debug:
    print(f"Calling builtin: {f.name} {render(v)}")
  return f.func(env, v)


# ============================================================================
# ENVIRONMENT SETUP
# ============================================================================

def create_builtin_env(debug: bool = False) -> Environment:
  """Create an environment holding every builtin"""
  return add_builtins(Environment(debug))


# ============================================================================
# SESSIONS
# ============================================================================

class Interpreter:
  """Evaluates successive top-level inputs against one shared environment"""

  def __init__(self, environment: Optional[Environment] = None, debug: bool = False):
    if environment is None:
      environment = create_builtin_env(debug)
    elif debug:
      environment.debug = True
    self.environment = environment
    self.parser = create_parser(self.debug)

  @property
  def debug(self) -> bool:
    """Debug flag, shared with the environment"""
    return self.environment.debug

  def eval(self, value: Value) -> Value:
    """Evaluate an already-read value"""
    return eval_value(self.environment, value, self.debug)

  def run(self, text: str) -> Value:
    """Parse, read and evaluate one input line"""
    try:
      return self.eval(read_program(text, self.parser, self.debug))
    except RecursionError as e:
      raise BlispRuntimeError(NESTING_TOO_DEEP) from e

  def run_all(self, texts: Iterable[str]) -> List[Value]:
    """Run each input in order, sharing the environment between them"""
    return [self.run(text) for text in texts]


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_interpreter(debug: bool = False) -> Interpreter:
  """Factory function returning an interpreter"""
  return Interpreter(debug=debug)


def create_debug_interpreter() -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True)
