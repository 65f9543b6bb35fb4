"""
Blisp Programming Language Parser
Turns source text into a concrete syntax tree with source spans.

Grammar:
    number : /-?[0-9]+/ ;
    symbol : /[a-zA-Z0-9_+\\-*\\/\\\\=<>!&^%]+/ ;
    sexpr  : '(' <expr>* ')' ;
    qexpr  : '{' <expr>* '}' ;
    expr   : <number> | <symbol> | <sexpr> | <qexpr> ;
    blisp  : /^/ <expr>* /$/ ;
"""

from typing import List, Any, Optional
from dataclasses import dataclass, field

# Import pyparsing with error handling
try:
    from pyparsing import (
        Forward, Literal, ParseBaseException, ParserElement, Regex,
        StringEnd, ZeroOrMore, col, lineno
    )
    # Enable packrat parsing for performance
    ParserElement.enable_packrat()
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")

from error_handling import BlispErrorHandler, BlispParseError


NUMBER_PATTERN = r'-?[0-9]+'
SYMBOL_PATTERN = r'[a-zA-Z0-9_+\-*/\\=<>!&^%]+'

# Node types produced by the grammar
NUMBER = "number"
SYMBOL = "symbol"
SEXPR = "sexpr"
QEXPR = "qexpr"
CHAR = "char"
ROOT = ">"


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for preserving CST"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""
    start: int = 0
    end: int = 0

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class CSTNode:
    """Concrete Syntax Tree node preserving all source information"""
    type: str
    value: Any
    children: List['CSTNode'] = field(default_factory=list)
    span: Optional[SourceSpan] = None

    def __str__(self) -> str:
        if self.children:
            children_str = ", ".join(str(child) for child in self.children)
            return f"{self.type}({self.value!r}, [{children_str}])"
        return f"{self.type}({self.value!r})"


class BlispGrammar:
    """Blisp grammar definition using pyparsing"""

    def __init__(self, filename: str = "<input>", debug: bool = False):
        self.filename = filename
        self.debug = debug
        self._setup_grammar()

    def _span(self, s: str, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            self.filename,
            lineno(start, s), col(start, s),
            lineno(end, s), col(end, s),
            s[start:end], start, end
        )

    def _leaf(self, node_type: str):
        """Parse action building a leaf node from the matched text"""
        def action(s, loc, tokens):
            text = tokens[0]
            return CSTNode(node_type, text, [], self._span(s, loc, loc + len(text)))
        return action

    def _group(self, node_type: str):
        """Parse action building a list node; punctuation stays as children"""
        def action(s, loc, tokens):
            children = list(tokens)
            end = children[-1].span.end if children else loc
            return CSTNode(node_type, s[loc:end], children, self._span(s, loc, end))
        return action

    def _setup_grammar(self):
        """Setup the Blisp grammar"""

        expression = Forward()

        number = Regex(NUMBER_PATTERN).set_parse_action(self._leaf(NUMBER))
        symbol = Regex(SYMBOL_PATTERN).set_parse_action(self._leaf(SYMBOL))

        lparen = Literal("(").set_parse_action(self._leaf(CHAR))
        rparen = Literal(")").set_parse_action(self._leaf(CHAR))
        lbrace = Literal("{").set_parse_action(self._leaf(CHAR))
        rbrace = Literal("}").set_parse_action(self._leaf(CHAR))

        sexpr = (lparen + ZeroOrMore(expression) + rparen).set_parse_action(self._group(SEXPR))
        qexpr = (lbrace + ZeroOrMore(expression) + rbrace).set_parse_action(self._group(QEXPR))

        # Order matters: '-5' is a number, '-' alone is a symbol
        expression <<= number | symbol | sexpr | qexpr

        def make_root(s, loc, tokens):
            children = list(tokens)
            return CSTNode(ROOT, s, children, self._span(s, 0, len(s)))

        program = (ZeroOrMore(expression) + StringEnd()).set_parse_action(make_root)

        # Store the main parsers
        self.program = program
        self.expression = expression
        self.single_expression = expression + StringEnd()
        self.number = number
        self.symbol = symbol
        self.sexpr = sexpr
        self.qexpr = qexpr

    def _parse(self, element, text: str, filename: Optional[str]):
        if filename is not None:
            self.filename = filename
        handler = BlispErrorHandler(text, self.filename)
        try:
            return element.parse_string(text, parse_all=True)
        except ParseBaseException as e:
            raise handler.enhance_parse_exception(e) from e
        except RecursionError as e:
            raise handler.nesting_error() from e

    def parse_program(self, text: str, filename: Optional[str] = None) -> CSTNode:
        """Parse a complete input line into a root node"""
        result = self._parse(self.program, text, filename)

        root = result[0]
        if self.debug:
            print(f"Parsed {len(root.children)} top-level expressions")
        return root

    def parse_expression(self, text: str, filename: Optional[str] = None) -> CSTNode:
        """Parse exactly one expression"""
        return self._parse(self.single_expression, text, filename)[0]


class BlispParser:
    """Main Blisp parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = BlispGrammar(debug=debug)

    def parse_string(self, text: str, filename: str = "<input>") -> CSTNode:
        """Parse Blisp source code from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> CSTNode:
        """Parse a single Blisp expression"""
        return self.grammar.parse_expression(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> BlispParser:
    """Create a Blisp parser"""
    return BlispParser(debug=debug)


def create_debug_parser() -> BlispParser:
    """Create a Blisp parser with debug enabled"""
    return BlispParser(debug=True)


# Utility functions for working with CST
def pretty_print_cst(cst: CSTNode, indent: int = 0) -> str:
    """Pretty print a CST node for debugging"""
    result = "  " * indent + f"{cst.type}"
    if not cst.children and cst.value is not None:
        result += f"({repr(cst.value)})"
    result += "\n"

    for child in cst.children:
        result += pretty_print_cst(child, indent + 1)

    return result
