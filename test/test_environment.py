"""
Tests for environment frames
"""

import pytest
from environment import Environment
from values import Number, Error, QExpr


class TestEnvironment:

  @pytest.fixture
  def chain(self):
    root = Environment()
    middle = Environment(root)
    leaf = Environment(middle)
    return root, middle, leaf

  def test_unbound_symbol_is_error(self):
    result = Environment().get("nope")
    assert isinstance(result, Error)
    assert result.message == "Unbound Symbol 'nope'"

  def test_lookup_walks_parents(self, chain):
    root, middle, leaf = chain
    root.put("x", Number(1))
    assert leaf.get("x") == Number(1)

  def test_local_binding_shadows(self, chain):
    root, middle, leaf = chain
    root.put("x", Number(1))
    middle.put("x", Number(2))
    assert leaf.get("x") == Number(2)
    assert root.get("x") == Number(1)

  def test_put_replaces_locally(self, chain):
    root, _, leaf = chain
    leaf.put("x", Number(1))
    leaf.put("x", Number(2))
    assert leaf.get("x") == Number(2)
    assert isinstance(root.get("x"), Error)

  def test_define_global_reaches_root(self, chain):
    root, middle, leaf = chain
    leaf.define_global("g", Number(9))
    assert "g" in root.names()
    assert "g" not in leaf.names()

  def test_get_returns_copy(self):
    env = Environment()
    env.put("xs", QExpr([Number(1)]))
    fetched = env.get("xs")
    fetched.cells.append(Number(2))
    assert env.get("xs") == QExpr([Number(1)])

  def test_put_stores_copy(self):
    env = Environment()
    value = QExpr([Number(1)])
    env.put("xs", value)
    value.cells.clear()
    assert env.get("xs") == QExpr([Number(1)])

  def test_copy_is_independent(self, chain):
    root, middle, _ = chain
    middle.put("x", QExpr([Number(1)]))
    clone = middle.copy()
    assert clone.parent is root
    clone.put("x", Number(5))
    assert middle.get("x") == QExpr([Number(1)])

  def test_tracing_inherited_from_parent(self):
    root = Environment(debug=True)
    assert Environment(Environment(root)).tracing()
    assert not Environment().tracing()

  def test_attach_takes_caller_flag(self):
    root = Environment(debug=True)
    frame = Environment()
    frame.attach(root)
    assert frame.parent is root
    assert frame.tracing()
    quiet = Environment()
    quiet.attach(Environment())
    assert not quiet.tracing()
