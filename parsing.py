"""
Lispy Programming Language Parser
pyparsing grammar producing a generic tagged parse tree

Tags follow the combinator convention the reader relies on:
  >                  root of a parsed input
  expr|number|regex  integer literal
  expr|symbol|regex  symbol
  expr|sexpr|>       ( ... )
  expr|qexpr|>       { ... }
  char               a delimiter, contents is the character
  regex              start/end anchors of the root, contents is empty
"""

from typing import List, Tuple, Callable
from dataclasses import dataclass, field

from pyparsing import (
    Literal, Forward, ZeroOrMore, Regex, ParseException, ParserElement,
    StringStart, StringEnd, lineno, col
)

from error_handling import LispyParseError

# Enable packrat parsing for performance
ParserElement.enable_packrat()


ROOT_TAG = ">"
NUMBER_TAG = "expr|number|regex"
SYMBOL_TAG = "expr|symbol|regex"
SEXPR_TAG = "expr|sexpr|>"
QEXPR_TAG = "expr|qexpr|>"
CHAR_TAG = "char"
REGEX_TAG = "regex"

NUMBER_PATTERN = r'-?[0-9]+'
SYMBOL_PATTERN = r'[a-zA-Z0-9_+\-*/\\=<>!&]+'
COMMENT_PATTERN = r';[^\n]*'


@dataclass(frozen=True)
class ParseNode:
    """Immutable parse tree node"""
    tag: str
    contents: str = ""
    children: Tuple['ParseNode', ...] = field(default_factory=tuple)
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        if self.children:
            children_str = ", ".join(str(child) for child in self.children)
            return f"{self.tag}([{children_str}])"
        return f"{self.tag}({self.contents!r})"


def leaf_action(tag: str) -> Callable:
    """Parse action turning a matched token into a leaf node"""
    def action(s, loc, tokens):
        return ParseNode(tag, tokens[0], (), lineno(loc, s), col(loc, s))
    return action


def branch_action(tag: str) -> Callable:
    """Parse action wrapping the matched child nodes"""
    def action(s, loc, tokens):
        return ParseNode(tag, "", tuple(tokens), lineno(loc, s), col(loc, s))
    return action


def root_action(s, loc, tokens):
    anchor_start = ParseNode(REGEX_TAG, "", (), 1, 1)
    anchor_end = ParseNode(REGEX_TAG, "", (), lineno(len(s), s), col(len(s), s))
    return ParseNode(ROOT_TAG, "", (anchor_start,) + tuple(tokens) + (anchor_end,), 1, 1)


class LispyGrammar:
    """Lispy grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        expression = Forward()

        number = Regex(NUMBER_PATTERN).set_parse_action(leaf_action(NUMBER_TAG))
        symbol = Regex(SYMBOL_PATTERN).set_parse_action(leaf_action(SYMBOL_TAG))

        def delimiter(char: str) -> ParserElement:
            return Literal(char).set_parse_action(leaf_action(CHAR_TAG))

        sexpr = (delimiter("(") + ZeroOrMore(expression) + delimiter(")")).set_parse_action(
            branch_action(SEXPR_TAG))
        qexpr = (delimiter("{") + ZeroOrMore(expression) + delimiter("}")).set_parse_action(
            branch_action(QEXPR_TAG))

        # Order matters: "-5" is a number, "-" alone falls through to symbol
        expression <<= number | symbol | sexpr | qexpr

        program = (StringStart() + ZeroOrMore(expression) + StringEnd()).set_parse_action(root_action)
        program.ignore(Regex(COMMENT_PATTERN))

        self.program = program
        self.expression = expression
        self.number = number
        self.symbol = symbol
        self.sexpr = sexpr
        self.qexpr = qexpr

    def parse_program(self, text: str, filename: str = "<input>") -> ParseNode:
        """Parse a complete input into a root node"""
        try:
            result = self.program.parse_string(text, parse_all=True)
        except ParseException as e:
            raise LispyParseError.from_parse_exception(e, text, filename) from e

        if self.debug:
            print(pretty_print_tree(result[0]))
        return result[0]

    def parse_expression(self, text: str, filename: str = "<input>") -> ParseNode:
        """Parse exactly one expression"""
        try:
            result = self.expression.parse_string(text, parse_all=True)
        except ParseException as e:
            raise LispyParseError.from_parse_exception(e, text, filename) from e
        return result[0]


class LispyParser:
    """Main Lispy parser: grammar plus file handling"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = LispyGrammar(debug)

    def parse_file(self, filepath: str) -> ParseNode:
        """Parse a Lispy source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise LispyParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise LispyParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        return self.grammar.parse_program(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> ParseNode:
        """Parse Lispy source code from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> ParseNode:
        return self.grammar.parse_expression(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> LispyParser:
    """Create a Lispy parser"""
    return LispyParser(debug=debug)


def create_debug_parser() -> LispyParser:
    """Create a Lispy parser with debug enabled"""
    return LispyParser(debug=True)


# Utility functions for working with parse trees
def find_nodes_by_tag(tree: ParseNode, fragment: str) -> List[ParseNode]:
    """Find all nodes whose tag contains the fragment"""
    result = []

    def search(node: ParseNode):
        if fragment in node.tag:
            result.append(node)
        for child in node.children:
            search(child)

    search(tree)
    return result


def pretty_print_tree(tree: ParseNode, indent: int = 0) -> str:
    """Pretty print a parse tree for debugging"""
    result = "  " * indent + tree.tag
    if tree.contents:
        result += f" '{tree.contents}'"
    result += "\n"

    for child in tree.children:
        result += pretty_print_tree(child, indent + 1)

    return result
