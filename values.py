"""
Blisp runtime values
Every runtime entity is one of six variants: Number, Error, Symbol, Function,
Expr (evaluatable S-expression) and Quoted (Q-expression, data only).
A list value owns its cells exclusively; the structure is always a tree.
"""

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Callable, ClassVar, List, Union

from error_handling import BlispRuntimeError


# Range of the C `long` the literal reader accepts
LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1


# ============================================================================
# VARIANTS
# ============================================================================

@dataclass
class Number:
  """Signed integer"""
  num: int

  type_name: ClassVar[str] = "Number"

  def __str__(self) -> str:
    return str(self.num)


@dataclass
class Error:
  """First-class error payload; poisons the expression it appears in"""
  message: str

  type_name: ClassVar[str] = "Error"

  def __str__(self) -> str:
    return f"Error: {self.message}"


@dataclass
class Symbol:
  """Identifier, resolved against the environment"""
  name: str

  type_name: ClassVar[str] = "Symbol"

  def __str__(self) -> str:
    return self.name


@dataclass
class Function:
  """Native builtin taking (environment, argument Expr) and returning a value"""
  name: str
  func: Callable

  type_name: ClassVar[str] = "Function"

  def __str__(self) -> str:
    return "<function>"


@dataclass
class Expr:
  """S-expression: evaluating it applies the first cell to the rest"""
  cells: List["Value"] = field(default_factory=list)

  type_name: ClassVar[str] = "S-Expression"

  def __str__(self) -> str:
    return render_cells(self.cells, "(", ")")


@dataclass
class Quoted:
  """Q-expression: same shape as Expr, but never applied"""
  cells: List["Value"] = field(default_factory=list)

  type_name: ClassVar[str] = "Q-Expression"

  def __str__(self) -> str:
    return render_cells(self.cells, "{", "}")


Value = Union[Number, Error, Symbol, Function, Expr, Quoted]

ListValue = Union[Expr, Quoted]


# ============================================================================
# VALUE OPERATIONS
# ============================================================================

def render_cells(cells: List[Value], open_char: str, close_char: str) -> str:
  """Render list cells space-separated between the given delimiters"""
  return open_char + " ".join(str(cell) for cell in cells) + close_char


def render(value: Value) -> str:
  """Textual form of a value, as printed by the REPL"""
  return str(value)


def copy_value(value: Value) -> Value:
  """Deep copy sharing no list with the source; builtin callables are shared"""
  return deepcopy(value)


def fits_long(x: int) -> bool:
  """True when `x` is representable as a signed 64-bit integer"""
  return LONG_MIN <= x <= LONG_MAX


def is_list_value(value: Value) -> bool:
  return isinstance(value, (Expr, Quoted))


def add_cell(container: ListValue, value: Value) -> ListValue:
  """Append `value` to `container`, which takes ownership of it"""
  container.cells.append(value)
  return container


def pop_at(container: ListValue, index: int) -> Value:
  """
  Remove and return the cell at `index`, shifting later cells down.

  Args:
    container: Expr or Quoted to remove from
    index: position of the cell

  Returns:
    The removed cell; the container keeps every other cell in order

  Raises:
    BlispRuntimeError if `container` is not a list or `index` is out of range
  """
  if not is_list_value(container):
    raise BlispRuntimeError(f"Cannot pop from {container.type_name}")
  if not 0 <= index < len(container.cells):
    raise BlispRuntimeError(
      f"Index {index} out of range for list of {len(container.cells)} cells"
    )
  return container.cells.pop(index)


def take_at(container: ListValue, index: int) -> Value:
  """Pop the cell at `index` and discard the rest of the container"""
  value = pop_at(container, index)
  container.cells.clear()
  return value


def walk(value: Value):
  """Yield every node of a value tree, parents before children"""
  yield value
  if is_list_value(value):
    for cell in value.cells:
      yield from walk(cell)
