"""
Parse error reporting for Lispy
Turns pyparsing failures into LispyParseError with a source excerpt and fix hints
"""

from typing import List, Optional
from pyparsing import ParseException
import re


TOKEN_PATTERN = re.compile(r'\S+?(?=[\s(){}]|$)|[(){}]')
COMMENT_PATTERN = re.compile(r';[^\n]*')


# ============================================================================
# SOURCE INSPECTION
# ============================================================================

def source_excerpt(source_text: str, line: int, column: int, before: int = 1) -> str:
    """The failing line plus a few lines before it, with a caret under the column"""
    lines = source_text.splitlines() or [""]
    if line > len(lines):
        lines.append("")

    first = max(1, line - before)
    excerpt = []
    for number in range(first, line + 1):
        excerpt.append(f"{number:4d}| {lines[number - 1]}")
    excerpt.append(" " * (column + 5) + "^ Error here")
    return "\n".join(excerpt)


def expected_from(exc: ParseException) -> List[str]:
    """What pyparsing was looking for, as far as its message says"""
    match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(at|$)", exc.msg or str(exc))
    if match:
        return [match.group(1)]
    return []


def found_at(source_text: str, loc: int) -> str:
    """The offending token, or a marker when the input just ran out"""
    rest = source_text[loc:].lstrip(" \t")
    if not rest:
        return "end of input"
    if rest[0] == "\n":
        return "end of line"
    token = TOKEN_PATTERN.match(rest)
    return repr(token.group(0) if token else rest[0])


def count_unbalanced(source_text: str, open_char: str, close_char: str) -> int:
    """Opening minus closing delimiters, ignoring ; comments"""
    code = COMMENT_PATTERN.sub('', source_text)
    return code.count(open_char) - code.count(close_char)


def delimiter_hints(source_text: str, open_char: str, close_char: str) -> List[str]:
    balance = count_unbalanced(source_text, open_char, close_char)
    if balance > 0:
        return [f"Missing {balance} closing '{close_char}'"]
    if balance < 0:
        return [f"Found {-balance} '{close_char}' without a matching '{open_char}'"]
    return []


def generate_suggestions(found: str, source_text: str = "") -> List[str]:
    """Likely fixes for the failure, checked against the whole input and the offending token"""
    suggestions = delimiter_hints(source_text, '(', ')') + delimiter_hints(source_text, '{', '}')

    if '"' in found:
        suggestions.append("Strings are not supported - use symbols or numbers")
    if "[" in found or "]" in found:
        suggestions.append("Use {} for lists and () for expressions")
    if re.search(r'\d\.\d', found):
        suggestions.append("Only integers are supported")

    return suggestions


# ============================================================================
# EXCEPTIONS
# ============================================================================

class LispyParseError(Exception):
    """Syntax error raised by the parser"""
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

    @classmethod
    def from_parse_exception(cls, exc: ParseException, source_text: str,
                             filename: str = "<input>") -> 'LispyParseError':
        found = found_at(source_text, exc.loc)
        return cls(
            message=exc.msg or "Invalid syntax",
            location=exc.loc,
            line=exc.lineno,
            column=exc.column,
            expected=expected_from(exc),
            got=found,
            context=source_excerpt(source_text, exc.lineno, exc.column),
            suggestions=generate_suggestions(found, source_text),
            filename=filename,
        )

    def __str__(self) -> str:
        if not self.line:
            return f"{self.filename}: {self.message}"

        parts = [f"{self.filename}: Parse error at line {self.line}, column {self.column}: {self.message}"]
        if self.expected:
            parts.append(f"  Expected {' or '.join(self.expected)}, got {self.got}")
        elif self.got:
            parts.append(f"  Got {self.got}")
        if self.context:
            parts.append(self.context)
        parts.extend(f"  Hint: {suggestion}" for suggestion in self.suggestions)
        return "\n".join(parts)
