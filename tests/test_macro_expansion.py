import pytest

from pluglisp.errors import PlugLispSyntaxError


@pytest.fixture
def macros(interp):
    interp.eval(
        """
        (defmacro unless [c then else] `(if ~c ~else ~then))
        (defmacro my-when [c & body] `(if ~c (do ~@body) nil))
        (defmacro swap-args [form] (list (first form) (nth form 2) (nth form 1)))
        """
    )
    return interp


def test_basic_macro(macros):
    assert str(macros.eval('(unless false "yes" "no")')) == "yes"
    assert str(macros.eval('(unless true "yes" "no")')) == "no"


def test_macro_arguments_are_not_evaluated(macros):
    # the unused branch would fail if it were evaluated
    assert str(macros.eval("(unless true undefined-thing 1)")) == "1"


def test_rest_body_splicing(macros):
    assert str(macros.eval("(my-when true (def side 1) (+ side 1))")) == "2"
    assert str(macros.eval("(my-when false (undefined))")) == "nil"


def test_macro_built_with_list_functions(macros):
    assert str(macros.eval("(swap-args (- 1 10))")) == "9"


def test_macroexpand(macros):
    assert str(macros.eval("(macroexpand '(unless c a b))")) == "(if c b a)"
    assert str(macros.eval("(macroexpand (unless c a b))")) == "(if c b a)"
    assert str(macros.eval("(macroexpand '(+ 1 2))")) == "(+ 1 2)"


def test_macro_expansion_happens_in_caller_scope(macros):
    src = """
    (defmacro double [x] `(* 2 ~x))
    (let [v 21] (double v))
    """
    assert str(macros.eval(src)) == "42"


def test_macro_generating_a_function_definition(run):
    src = """
    (defmacro defsquare [name] `(defn ~name [x] (* x x)))
    (defsquare sq)
    (sq 12)
    """
    assert run(src) == "144"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("`(1 2 3)", "(1 2 3)"),
        ("(def x 5) `(a ~x)", "(a 5)"),
        ("(def xs (list 1 2)) `(0 ~@xs 3)", "(0 1 2 3)"),
        ("(def xs [1 2]) `[~@xs]", "[1 2]"),
        ("`(a `(b ~(c ~(+ 1 2))))", "(a (quasiquote (b (unquote (c 3)))))"),
        ("'(a b)", "(a b)"),
        ("(first '(a b))", "a"),
    ],
)
def test_quasiquote(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize("source", ["~x", "~@xs", "(unquote 1)"])
def test_unquote_outside_quasiquote(interp, source):
    with pytest.raises(PlugLispSyntaxError, match="outside of quasiquote"):
        interp.eval(source)


def test_macro_display(run):
    assert run("(defmacro m [a & rest] a)") == "#<macro(a & rest)>"
