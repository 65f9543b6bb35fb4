"""
Error handling for Blisp
Parse errors from pyparsing are enriched with context and suggestions;
runtime errors cover misuse of the host API, never language-level errors
(those are ordinary Error values).
"""

from typing import List, Optional
from pyparsing import ParseBaseException


NESTING_TOO_DEEP = "expression nested too deeply"


# ============================================================================
# SOURCE INSPECTION
# ============================================================================

def source_excerpt(source_text: str, line_num: int, col_num: int, radius: int = 2) -> str:
    """Numbered source lines around `line_num` with a caret under `col_num`"""
    lines = source_text.split('\n')
    first = max(1, line_num - radius)
    last = min(len(lines), line_num + radius)

    excerpt = []
    for n in range(first, last + 1):
        excerpt.append(f"{n:4d} | {lines[n - 1]}")
        if n == line_num:
            excerpt.append("     | " + " " * (col_num - 1) + "^")
    return '\n'.join(excerpt)


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract the expected element from a pyparsing exception"""
    msg = getattr(exc, 'msg', '') or ''
    if msg.startswith("Expected "):
        return [msg[len("Expected "):]]
    return ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of input"
    return "unknown"


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    if source_text.count('(') != source_text.count(')'):
        suggestions.append("Unbalanced parentheses - every '(' needs a matching ')'")

    if source_text.count('{') != source_text.count('}'):
        suggestions.append("Unbalanced braces - every '{' needs a matching '}'")

    if '[' in got or ']' in got:
        suggestions.append("Blisp has no [] lists - use {} for quoted lists")

    if '"' in got:
        suggestions.append("Blisp has no string literals")

    if '.' in got:
        suggestions.append("Numbers are integers only")

    return suggestions


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class BlispParseError(Exception):
    """Syntax error raised while turning source text into a syntax tree"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        report = [
            f"Parse error at line {self.line}, column {self.column}:",
            f"  {self.message}",
        ]
        if self.expected:
            report.append(f"  Expected: {', '.join(self.expected)}")
        if self.got:
            report.append(f"  Got: {self.got}")
        if self.context:
            report.append(f"  Context:\n{self.context}")
        if self.suggestions:
            report.append("  Suggestions:")
            report.extend(f"    - {suggestion}" for suggestion in self.suggestions)
        return '\n'.join(report)


class BlispRuntimeError(Exception):
    """Host-level failure: misuse of the value or reader API"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BlispErrorHandler:
    """Binds a source text so parse failures can be reported against it"""
    def __init__(self, source_text: str, filename: str = "<input>"):
        self.source_text = source_text
        self.filename = filename

    def enhance_parse_exception(self, exc: ParseBaseException) -> BlispParseError:
        """Convert pyparsing exception to an enhanced Blisp error"""
        got = extract_got(self.source_text, exc.lineno, exc.column)
        return BlispParseError(
            message=str(exc),
            location=exc.loc,
            line=exc.lineno,
            column=exc.column,
            expected=extract_expected(exc),
            got=got,
            context=source_excerpt(self.source_text, exc.lineno, exc.column),
            suggestions=generate_suggestions(self.source_text, got),
            filename=self.filename
        )

    def nesting_error(self) -> BlispParseError:
        """Error for input whose nesting exhausts the parser's recursion"""
        return BlispParseError(
            message=NESTING_TOO_DEEP,
            line=1,
            column=1,
            suggestions=["Split the expression into smaller ones"],
            filename=self.filename
        )
