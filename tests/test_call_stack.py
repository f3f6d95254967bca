import pytest

from pluglisp.errors import PlugLispError
from pluglisp.evaluation.call_stack import CallStack
from pluglisp.interpreter import Interpreter
from pluglisp.repl import format_error
from pluglisp.types.expr import Position


@pytest.fixture
def traced():
    interpreter = Interpreter(trace=True)
    yield interpreter
    interpreter.shutdown()


def test_error_carries_call_trace(traced):
    traced.eval(
        """
        (defn inner [x] (undefined-thing x))
        (defn outer [x] (+ 1 (inner x)))
        """
    )
    with pytest.raises(PlugLispError) as info:
        traced.eval("(outer 1)")
    names = [frame.function_name for frame in info.value.trace]
    assert names == ["outer", "inner"]
    assert "Call stack (most recent call last):" in format_error(info.value)


def test_tail_calls_do_not_grow_the_trace(traced):
    traced.eval("(defn spin [n] (if (= n 0) (boom) (spin (- n 1))))")
    with pytest.raises(PlugLispError) as info:
        traced.eval("(spin 1000)")
    assert [f.function_name for f in info.value.trace] == ["spin"]


def test_stack_is_empty_after_success(traced):
    traced.eval("(defn f [x] (* x 2))")
    assert str(traced.eval("(f 4)")) == "8"
    assert len(traced.evaluator.call_stack) == 0


def test_untraced_errors_have_no_trace(interp):
    with pytest.raises(PlugLispError) as info:
        interp.eval("((fn [] (nope)))")
    assert info.value.trace is None
    assert format_error(info.value) == "Error: undefined symbol: nope"


def test_format_stack_trace():
    stack = CallStack()
    assert stack.format_stack_trace() == "  (no function calls)"
    for depth, name in enumerate(["a", "b", "c"]):
        stack.enter(depth, name, Position(depth + 1, 1))
    assert stack.format_stack_trace(max_frames=2).splitlines() == [
        "  ... (1 more frames)",
        "  b at 2:1",
        "    c at 3:1",
    ]
    stack.enter(1, "d")
    assert [f.function_name for f in stack.snapshot()] == ["a", "d"]
    stack.truncate(0)
    assert len(stack) == 0
