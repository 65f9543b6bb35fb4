"""
Blisp Reader
Lowers the concrete syntax tree produced by the parser into an unevaluated
Value tree: numbers, symbols, S-expressions and Q-expressions.
"""

from typing import Optional

from error_handling import BlispRuntimeError
from parsing import CHAR, NUMBER, QEXPR, ROOT, SEXPR, SYMBOL, CSTNode, BlispParser, create_parser
from values import Error, Expr, Number, Quoted, Symbol, Value, add_cell, fits_long, walk


INVALID_NUMBER = "invalid number"

# Structural tokens that carry no value
SKIPPED_NODE_TYPES = {CHAR}


def read_number(cst_node: CSTNode, debug: bool = False) -> Value:
  """Numeric literal, or an error if it does not fit a signed 64-bit integer"""
  try:
    x = int(cst_node.value)
  except ValueError:
    return Error(INVALID_NUMBER)
  if not fits_long(x):
    return Error(INVALID_NUMBER)
  return Number(x)


def read_symbol(cst_node: CSTNode, debug: bool = False) -> Value:
  return Symbol(cst_node.value)


def read_cells(cst_node: CSTNode, container, debug: bool = False):
  """Lower every non-punctuation child into `container`, in source order"""
  for child in cst_node.children:
    if child.type in SKIPPED_NODE_TYPES:
      continue
    add_cell(container, read_cst(child, debug))
  return container


def read_sexpr(cst_node: CSTNode, debug: bool = False) -> Value:
  return read_cells(cst_node, Expr(), debug)


def read_qexpr(cst_node: CSTNode, debug: bool = False) -> Value:
  return read_cells(cst_node, Quoted(), debug)


READERS = {
    NUMBER: read_number,
    SYMBOL: read_symbol,
    SEXPR: read_sexpr,
    ROOT: read_sexpr,
    QEXPR: read_qexpr,
}


def read_cst(cst_node: CSTNode, debug: bool = False) -> Value:
  """Lower a single CST node into a Value"""
  if debug:
    print(f"Reading CST node: {cst_node.type} with value: {cst_node.value!r}")

  reader = READERS.get(cst_node.type)
  if reader is None:
    raise BlispRuntimeError(f"Cannot read CST node of type '{cst_node.type}'")
  return reader(cst_node, debug)


def read_program(text: str, parser: Optional[BlispParser] = None, debug: bool = False) -> Expr:
  """Parse and lower a whole input line into its top-level S-expression"""
  if parser is None:
    parser = create_parser(debug)

  program = read_cst(parser.parse_string(text), debug)
  if debug:
    print(f"Read {sum(1 for _ in walk(program))} nodes")
  return program
