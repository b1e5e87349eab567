"""
Lispy Reader
Converts parse tree nodes into Values
"""

from typing import Optional

from values import Value, Number, Error, Symbol, SExpr, QExpr, INT64_MIN, INT64_MAX
from parsing import ParseNode, LispyParser, ROOT_TAG, REGEX_TAG


SKIPPED_CONTENTS = {"(", ")", "{", "}"}


def read_number(node: ParseNode) -> Value:
  """Read an integer literal, rejecting anything outside 64 bits"""
  try:
    number = int(node.contents, 10)
  except ValueError:
    return Error("invalid number")
  if number < INT64_MIN or number > INT64_MAX:
    return Error("invalid number")
  return Number(number)


def read_node(node: ParseNode) -> Value:
  """Convert one parse tree node (and its children) to a Value"""
  if "number" in node.tag:
    return read_number(node)
  if "symbol" in node.tag:
    return Symbol(node.contents)

  if node.tag == ROOT_TAG or "sexpr" in node.tag:
    result = SExpr()
  elif "qexpr" in node.tag:
    result = QExpr()
  else:
    return Error(f"Unknown parse node '{node.tag}'")

  for child in node.children:
    if child.contents in SKIPPED_CONTENTS or child.tag == REGEX_TAG:
      continue
    result.cells.append(read_node(child))
  return result


def read_string(text: str, parser: Optional[LispyParser] = None, filename: str = "<input>") -> Value:
  """Parse and read source text; raises LispyParseError on bad syntax"""
  if parser is None:
    parser = LispyParser()
  return read_node(parser.parse_string(text, filename))
