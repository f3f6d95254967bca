import pytest

from pluglisp.errors import PlugLispRuntimeFault


def test_deep_tail_recursion_in_if(run):
    src = """
    (defn count-down [n] (if (= n 0) :done (count-down (- n 1))))
    (count-down 100000)
    """
    assert run(src) == ":done"


def test_accumulator_loop(run):
    src = """
    (defn sum-to [n acc] (if (= n 0) acc (sum-to (- n 1) (+ acc n))))
    (sum-to 50000 0)
    """
    assert run(src) == "1250025000"


@pytest.mark.parametrize(
    "body",
    [
        "(do (+ 1 1) (loop (- n 1)))",
        "(cond (= n 0) :done :else (loop (- n 1)))",
        "(let [m (- n 1)] (loop m))",
        "(when (> n -1) (loop (- n 1)))",
        "(when-not (< n 0) (loop (- n 1)))",
    ],
)
def test_tail_positions(run, body):
    src = f"""
    (defn loop [n] (if (= n 0) :done {body}))
    (loop 30000)
    """
    assert run(src) == ":done"


def test_mutual_recursion(run):
    src = """
    (defn even? [n] (if (= n 0) true (odd? (- n 1))))
    (defn odd? [n] (if (= n 0) false (even? (- n 1))))
    (even? 40001)
    """
    assert run(src) == "false"


def test_macro_expansion_in_tail_position(run):
    src = """
    (defmacro unless [c body] `(if ~c false ~body))
    (defn spin [n] (if (= n 0) :done (unless false (spin (- n 1)))))
    (spin 20000)
    """
    assert run(src) == ":done"


def test_non_tail_recursion_is_fine_at_moderate_depth(run):
    src = """
    (defn depth [n] (if (= n 0) 0 (+ 1 (depth (- n 1)))))
    (depth 300)
    """
    assert run(src) == "300"


def test_runaway_non_tail_recursion_is_reported(interp):
    interp.eval("(defn down [n] (+ 1 (down (- n 1))))")
    with pytest.raises(PlugLispRuntimeFault, match="maximum recursion depth"):
        interp.eval("(down 1)")


def test_accumulating_count_to_one_hundred_thousand(run):
    src = """
    (def f (fn [n acc] (if (= n 0) acc (f (- n 1) (+ acc 1)))))
    (f 100000 0)
    """
    assert run(src) == "100000"
