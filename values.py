"""
Lispy Value Model
Every runtime entity is one of the dataclasses below
Copies are explicit: stores and returns go through copy()
"""

from typing import Callable, List, Union, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
  from environment import Environment


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

VARIADIC_MARKER = "&"


def wrap_int64(n: int) -> int:
  """Wrap a host integer into the signed 64-bit range"""
  n &= 0xFFFFFFFFFFFFFFFF
  return n - 2 ** 64 if n > INT64_MAX else n


# ============================================================================
# VALUE VARIANTS
# ============================================================================

@dataclass
class Number:
  """64-bit signed integer"""
  value: int

  def copy(self) -> 'Number':
    return Number(self.value)


@dataclass
class Error:
  """Error carried as data; evaluates to itself"""
  message: str

  def copy(self) -> 'Error':
    return Error(self.message)


@dataclass
class Symbol:
  """Name resolved through the environment chain"""
  name: str

  def copy(self) -> 'Symbol':
    return Symbol(self.name)


@dataclass
class SExpr:
  """Evaluable expression list"""
  cells: List['Value'] = field(default_factory=list)

  def copy(self) -> 'SExpr':
    return SExpr([cell.copy() for cell in self.cells])


@dataclass
class QExpr:
  """Quoted list, never evaluated unless handed to eval"""
  cells: List['Value'] = field(default_factory=list)

  def copy(self) -> 'QExpr':
    return QExpr([cell.copy() for cell in self.cells])


@dataclass
class Builtin:
  """Native operation, equal only to the same operation reference"""
  name: str = field(compare=False)
  func: Callable[['Environment', List['Value']], 'Value']

  def copy(self) -> 'Builtin':
    return Builtin(self.name, self.func)


@dataclass
class Lambda:
  """User closure; the captured frame takes no part in equality"""
  formals: QExpr
  body: QExpr
  env: 'Environment' = field(compare=False, repr=False)

  def copy(self) -> 'Lambda':
    return Lambda(self.formals.copy(), self.body.copy(), self.env.copy())


Value = Union[Number, Error, Symbol, SExpr, QExpr, Builtin, Lambda]
FUNCTION_TYPES = (Builtin, Lambda)


# ============================================================================
# TYPE NAMES
# ============================================================================

TYPE_NAMES = {
    Number: "Number",
    Error: "Error",
    Symbol: "Symbol",
    SExpr: "S-Expression",
    QExpr: "Q-Expression",
    Builtin: "Function",
    Lambda: "Function",
}


def type_name(value_or_type) -> str:
  """Name of a value's kind as shown in diagnostics"""
  kind = value_or_type if isinstance(value_or_type, type) else type(value_or_type)
  return TYPE_NAMES.get(kind, "Unknown")


def is_function(value: 'Value') -> bool:
  return isinstance(value, FUNCTION_TYPES)


# ============================================================================
# EQUALITY AND RENDERING
# ============================================================================

def values_equal(x: 'Value', y: 'Value') -> bool:
  """
  Structural equality

  Different kinds never compare equal; lists compare element-wise;
  closures compare formals and body only.
  """
  if type(x) is not type(y):
    return False
  return x == y


def render(value: 'Value') -> str:
  """Render a value as source-like text"""
  if isinstance(value, Number):
    return str(value.value)
  elif isinstance(value, Error):
    return f"Error: {value.message}"
  elif isinstance(value, Symbol):
    return value.name
  elif isinstance(value, SExpr):
    return render_cells(value.cells, "(", ")")
  elif isinstance(value, QExpr):
    return render_cells(value.cells, "{", "}")
  elif isinstance(value, Builtin):
    return "<function>"
  elif isinstance(value, Lambda):
    return f"(\\ {render(value.formals)} {render(value.body)})"
  return f"<{type_name(value)}>"


def render_cells(cells: List['Value'], open_char: str, close_char: str) -> str:
  return open_char + " ".join(render(cell) for cell in cells) + close_char
