import pytest

from pluglisp.errors import PlugLispArityError, PlugLispSyntaxError, PlugLispTypeError, PlugLispUnboundSymbol


def test_closure_captures_defining_scope(run):
    src = """
    (defn make-adder [n] (fn [x] (+ x n)))
    (def add5 (make-adder 5))
    (add5 10)
    """
    assert run(src) == "15"


def test_closure_sees_redefinition(run):
    src = """
    (def x 1)
    (defn get-x [] x)
    (def x 2)
    (get-x)
    """
    assert run(src) == "2"


def test_let_bindings_are_sequential(run):
    assert run("(let [a 2 b (* a 10)] (+ a b))") == "22"


def test_let_does_not_leak(interp):
    interp.eval("(let [hidden 1] hidden)")
    with pytest.raises(PlugLispUnboundSymbol, match="undefined symbol: hidden"):
        interp.eval("hidden")


def test_let_shadows_without_overwriting(run):
    assert run("(def x 1) (let [x 2] x)") == "2"
    assert run("x") == "1"


def test_let_star_binds_in_order(run):
    assert run("(let* [a 1 b (+ a 1) c (* b 3)] (list a b c))") == "(1 2 6)"
    assert run("(let* [] 5)") == "5"


def test_letfn_allows_mutual_recursion(interp):
    src = """
    (letfn [[ev? [n] (if (= n 0) true (od? (- n 1)))]
            [od? [n] (if (= n 0) false (ev? (- n 1)))]]
      (list (ev? 10) (od? 7)))
    """
    assert str(interp.eval(src)) == "(true true)"
    with pytest.raises(PlugLispUnboundSymbol, match="undefined symbol: ev\\?"):
        interp.eval("ev?")


def test_letfn_rejects_malformed_binding(interp):
    with pytest.raises(PlugLispTypeError, match="letfn function binding"):
        interp.eval("(letfn [[f [x]]] 1)")


def test_def_inside_function_is_local(interp):
    interp.eval("(defn f [] (def inner 3))")
    assert str(interp.eval("(f)")) == "3"
    with pytest.raises(PlugLispUnboundSymbol):
        interp.eval("inner")


def test_def_names_anonymous_function(run):
    assert run("(def sq (fn [x] (* x x))) (help sq)") == "sq: user-defined function #<function(x)>"


def test_rest_parameter(run):
    assert run("(defn f [a & more] more) (f 1 2 3)") == "(2 3)"
    assert run("(f 1)") == "()"


def test_parameters_may_be_a_list(run):
    assert run("((fn (a b) (- a b)) 5 3)") == "2"


@pytest.mark.parametrize(
    "source, error, message",
    [
        ("((fn [a b] a) 1)", PlugLispArityError, "expected 2 argument"),
        ("((fn [a & r] a))", PlugLispArityError, "at least 1"),
        ("(defn f [x] x) (f 1 2)", PlugLispArityError, "f: expected 1"),
        ("(fn [a &] a)", PlugLispSyntaxError, "rest parameter"),
        ("(fn [& a b] a)", PlugLispSyntaxError, "rest parameter"),
        ("(fn [1] 1)", PlugLispTypeError, "parameter must be a symbol"),
        ("(fn x x)", PlugLispTypeError, "parameters must be a vector"),
        ("(fn [x])", PlugLispArityError, "fn requires exactly 2"),
        ("(def 1 2)", PlugLispTypeError, "expected a symbol"),
    ],
)
def test_function_errors(interp, source, error, message):
    with pytest.raises(error, match=message):
        interp.eval(source)


def test_functions_are_values(run):
    src = """
    (def ops [+ -])
    ((first ops) 1 2)
    """
    assert run(src) == "3"


def test_immediately_invoked_function(run):
    assert run("((fn [x] (* x x)) 7)") == "49"


def test_parameter_shadows_only_inside_call(run):
    assert run("(def x 1) ((fn [x] x) 2)") == "2"
    assert run("x") == "1"


def test_arithmetic_operator_stored_in_variable(run):
    assert run("(def op +) (op 1 2)") == "3"
    assert run("(map + (list 1 2))") == "(1 2)"
