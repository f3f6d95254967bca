from pluglisp.types.environment import Environment
from pluglisp.types.values import Module, Number


def test_lookup_walks_outer_scopes():
    root = Environment()
    root.set("a", Number(1))
    child = root.new_child()
    child.set("b", Number(2))
    assert child.get("a") == (Number(1), True)
    assert child.get("b") == (Number(2), True)
    assert root.get("b") == (None, False)
    assert "a" in child and "b" not in root


def test_set_binds_locally_and_shadows():
    root = Environment()
    root.set("x", Number(1))
    child = root.new_child()
    child.set("x", Number(2))
    assert child.get("x") == (Number(2), True)
    assert root.get("x") == (Number(1), True)
    assert child.find("x") is child


def test_rebinding_in_same_frame_replaces():
    env = Environment()
    env.set("x", Number(1))
    env.set("x", Number(5))
    assert env.get("x") == (Number(5), True)


def test_modules_shared_across_scopes():
    root = Environment()
    grandchild = root.new_child().new_child()
    mod = Module("geo", {"pi": Number(3)})
    grandchild.set_module("geo", mod)
    assert root.get_module("geo") == (mod, True)
    assert root.get_module("nope") == (None, False)
    assert grandchild.loaded_files is root.loaded_files
    assert grandchild.root() is root


def test_update_and_string_forms():
    env = Environment()
    env.update({"a": Number(1), "b": Number(2)})
    assert str(env) == "{a: 1, b: 2}"
    child = env.new_child()
    assert str(child) == "{} -> ..."
    assert repr(child) == "<Environment chain: {} -> {a: 1, b: 2}>"
