"""
Lispy Environment
A chain of binding frames; every store and every lookup copies
"""

from typing import Dict, List, Optional

from values import Value, Error


class Environment:
  """One frame of bindings with an optional parent frame"""

  def __init__(self, parent: Optional['Environment'] = None, debug: bool = False):
    self.parent = parent
    self.bindings: Dict[str, Value] = {}
    self.debug = debug or (parent is not None and parent.debug)

  def __repr__(self) -> str:
    return f"Environment({list(self.bindings)}, parent={'yes' if self.parent else 'no'})"

  def get(self, name: str) -> Value:
    """Look a symbol up from this frame to the root, returning a copy"""
    frame = self
    while frame is not None:
      if name in frame.bindings:
        return frame.bindings[name].copy()
      frame = frame.parent
    return Error(f"Unbound Symbol '{name}'")

  def put(self, name: str, value: Value) -> None:
    """Bind in this frame only, replacing any existing local binding"""
    self.bindings[name] = value.copy()

  def root(self) -> 'Environment':
    frame = self
    while frame.parent is not None:
      frame = frame.parent
    return frame

  def define_global(self, name: str, value: Value) -> None:
    """Bind in the root frame regardless of call depth"""
    self.root().put(name, value)

  def copy(self) -> 'Environment':
    """Independent frame sharing the parent reference"""
    clone = Environment(self.parent, self.debug)
    for name, value in self.bindings.items():
      clone.bindings[name] = value.copy()
    return clone

  def names(self) -> List[str]:
    return list(self.bindings)

  def attach(self, parent: 'Environment') -> None:
    """Parent this frame to a caller, taking over its tracing flag"""
    self.parent = parent
    self.debug = parent.debug

  def tracing(self) -> bool:
    return self.debug
