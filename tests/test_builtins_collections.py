import pytest

from pluglisp.errors import PlugLispError, PlugLispTypeError


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(list 1 2 3)", "(1 2 3)"),
        ("(list)", "()"),
        ("(cons 0 (list 1 2))", "(0 1 2)"),
        ("(cons 0 [1 2])", "(0 1 2)"),
        ("(cons 1 nil)", "(1)"),
        ("(length (list 1 2 3))", "3"),
        ('(length "hello")', "5"),
        ("(append (list 1) [2] (list 3 4))", "(1 2 3 4)"),
        ("(concat (list 1) (list 2))", "(1 2)"),
        ("(first (list 1 2))", "1"),
        ("(first (list))", "nil"),
        ('(first "abc")', "a"),
        ("(second [1 2 3])", "2"),
        ("(second [1])", "nil"),
        ("(rest (list 1 2 3))", "(2 3)"),
        ("(rest (list))", "()"),
        ("(last (list 1 2 3))", "3"),
        ("(nth (list 10 20 30) 1)", "20"),
        ("(empty? (list))", "true"),
        ('(empty? "")', "true"),
        ("(empty? [1])", "false"),
        ("(take 2 (list 1 2 3))", "(1 2)"),
        ("(take 5 [1 2])", "[1 2]"),
        ("(drop 1 [1 2 3])", "[2 3]"),
        ("(reverse (list 1 2 3))", "(3 2 1)"),
        ('(reverse "abc")', "cba"),
        ("(distinct (list 1 2 1 3 2))", "(1 2 3)"),
        ("(sort (list 3 1 2))", "(1 2 3)"),
        ('(sort ["b" "a"])', "[a b]"),
        ("(list? (list))", "true"),
        ("(list? [])", "false"),
        ("(nil? nil)", "true"),
        ("(nil? false)", "false"),
        ("(count {:a 1 :b 2})", "2"),
        ("(count nil)", "0"),
    ],
)
def test_list_functions(run, source, expected):
    assert run(source) == expected


def test_nth_out_of_bounds(interp):
    with pytest.raises(PlugLispError, match="out of bounds"):
        interp.eval("(nth (list 1) 3)")


def test_lists_are_immutable(run):
    src = """
    (def xs (list 1 2))
    (def ys (cons 0 xs))
    (list xs ys)
    """
    assert run(src) == "((1 2) (0 1 2))"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(vector 1 2)", "[1 2]"),
        ("(vec (list 1 2))", "[1 2]"),
        ("(vector? [1])", "true"),
        ("(conj [1 2] 3 4)", "[1 2 3 4]"),
        ("(conj (list 1 2) 3 4)", "(4 3 1 2)"),
        ("(conj nil 1)", "(1)"),
        ("(into [] (list 1 2))", "[1 2]"),
        ("(into (list) [1 2])", "(2 1)"),
        ("(range 4)", "(0 1 2 3)"),
        ("(range 2 5)", "(2 3 4)"),
        ("(range 10 0 -3)", "(10 7 4 1)"),
        ("(range 0)", "()"),
        ("(seq [1 2])", "(1 2)"),
        ('(seq "ab")', "(a b)"),
        ("(seq [])", "nil"),
        ("(seq nil)", "nil"),
        ("(coll? {:a 1})", "true"),
        ("(coll? (list))", "true"),
        ('(coll? "s")', "false"),
        ("(sequential? [1])", "true"),
        ("(sequential? {:a 1})", "false"),
        ("(map (constantly 7) [1 2])", "[7 7]"),
        ("((constantly :k))", ":k"),
        ("((constantly 1) 2 3)", "1"),
    ],
)
def test_sequence_functions(run, source, expected):
    assert run(source) == expected


def test_range_zero_step(interp):
    with pytest.raises(PlugLispError, match="step cannot be zero"):
        interp.eval("(range 0 5 0)")


@pytest.mark.parametrize(
    "source, expected",
    [
        ('(hash-map-get (hash-map "a" 1) "a")', "1"),
        ('(hash-map-get {:a 1} :a)', "1"),
        ('(hash-map-get {:a 1} "missing")', "nil"),
        ('(hash-map-get {:a 1} :b 0)', "0"),
        ('(hash-map-put {:a 1} :b 2)', '{"a" 1 "b" 2}'),
        ('(hash-map-remove {:a 1 :b 2} :a)', '{"b" 2}'),
        ('(hash-map-contains? {:a 1} "a")', "true"),
        ('(hash-map-keys {:a 1 :b 2})', "(a b)"),
        ('(hash-map-values {:a 1 :b 2})', "(1 2)"),
        ('(hash-map-size {:a 1 :b 2})', "2"),
        ('(hash-map-empty? {})', "true"),
        ('(assoc {:a 1} :b 2 :a 3)', '{"a" 3 "b" 2}'),
        ('(dissoc {:a 1 :b 2 :c 3} :a :c)', '{"b" 2}'),
        ('(get {:a 1} :a)', "1"),
        ('(get [10 20] 1)', "20"),
        ('(get [10 20] 5 :none)', ":none"),
        ('(get nil :a)', "nil"),
    ],
)
def test_hash_map_functions(run, source, expected):
    assert run(source) == expected


def test_hash_maps_are_immutable(run):
    src = """
    (def m {:a 1})
    (def m2 (hash-map-put m :b 2))
    (list (hash-map-size m) (hash-map-size m2))
    """
    assert run(src) == "(1 2)"


def test_hash_map_key_types(interp):
    with pytest.raises(PlugLispTypeError, match="keys must be strings or keywords"):
        interp.eval("(hash-map 1 2)")
    with pytest.raises(PlugLispError, match="key/value pairs"):
        interp.eval("(hash-map :a)")


@pytest.mark.parametrize(
    "source, expected",
    [
        ('(keyword "name")', ":name"),
        ('(keyword ":name")', ":name"),
        ("(keyword :k)", ":k"),
        ("(keyword? :k)", "true"),
        ('(keyword? "k")', "false"),
    ],
)
def test_keywords(run, source, expected):
    assert run(source) == expected


@pytest.mark.parametrize(
    "source, expected",
    [
        ('(str "a" 1 :k nil)', "a1:knil"),
        ('(string? "x")', "true"),
        ('(string-length "hello")', "5"),
        ('(string-upper "abc")', "ABC"),
        ('(string-lower "ABC")', "abc"),
        ('(string-trim "  x  ")', "x"),
        ('(string-split "a,b,c" ",")', "(a b c)"),
        ('(string-split "abc" "")', "(a b c)"),
        ('(string-join (list "a" "b") "-")', "a-b"),
        ('(string-contains? "hello" "ell")', "true"),
        ('(string-starts-with? "hello" "he")', "true"),
        ('(string-ends-with? "hello" "lo")', "true"),
        ('(string-replace "a-b-c" "-" "+")', "a+b+c"),
        ('(string-index-of "hello" "l")', "2"),
        ('(string-index-of "hello" "z")', "-1"),
        ('(substring "hello" 1 3)', "el"),
        ('(substring "hello" 2)', "llo"),
        ('(string-repeat "ab" 3)', "ababab"),
        ('(string->number "42")', "42"),
        ('(string->number " 2.5 ")', "2.5"),
        ('(string->number "12345678901234567890")', "12345678901234567890"),
        ('(string->number "abc")', "nil"),
        ("(number->string 3.5)", "3.5"),
        ('(string-char-at "hello" 1)', "e"),
        ('(string-empty? "")', "true"),
        ('(string-empty? "a")', "false"),
        ('(string-regex-match? "hello" "h.*o")', "true"),
        ('(string-regex-match? "hello" "^x")', "false"),
        ('(string-regex-find-all "abc123def456" "[0-9]+")', "(123 456)"),
        ('(string-regex-find-all "abc" "[0-9]+")', "()"),
        ('(subs "hello" 1 4)', "ell"),
        ('(split "a,b" ",")', "(a b)"),
        ('(join (list "a" "b") ",")', "a,b"),
        ('(replace "hello" "l" "x")', "hexxo"),
        ('(trim " x ")', "x"),
        ('(upper-case "ab")', "AB"),
        ('(lower-case "AB")', "ab"),
    ],
)
def test_string_functions(run, source, expected):
    assert run(source) == expected


def test_substring_bounds(interp):
    with pytest.raises(PlugLispError, match="out of bounds"):
        interp.eval('(substring "abc" 2 10)')


def test_char_at_bounds(interp):
    with pytest.raises(PlugLispError, match="index 3 out of bounds"):
        interp.eval('(string-char-at "abc" 3)')


def test_invalid_regex(interp):
    with pytest.raises(PlugLispError, match="invalid regex"):
        interp.eval('(string-regex-match? "abc" "[")')


def test_string_aliases_belong_to_string_plugin(interp):
    aliases = {"subs", "split", "join", "replace", "trim", "upper-case", "lower-case"}
    assert aliases <= set(interp.plugin_manager.get_plugin_functions("string"))
    interp.plugin_manager.unload_plugin("string")
    assert not any(interp.registry.has(name) for name in aliases)
    assert not interp.registry.has("string-upper")


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(sqrt 16)", "4"),
        ("(pow 2 10)", "1024"),
        ("(abs -3)", "3"),
        ("(abs -10000000000000000)", "10000000000000000"),
        ("(floor 2.7)", "2"),
        ("(ceil 2.1)", "3"),
        ("(round 2.5)", "3"),
        ("(round -2.5)", "-3"),
        ("(trunc -2.7)", "-2"),
        ("(sign -4)", "-1"),
        ("(min 3 1 2)", "1"),
        ("(max 3 1 2)", "3"),
        ("(mod -7 3)", "2"),
        ("(exp 0)", "1"),
        ("(log10 100)", "2"),
        ("(< 3.14 (pi) 3.15)", "true"),
        ("(< 89.99 (degrees (asin 1)) 90.01)", "true"),
        ("(acos 1)", "0"),
        ("(atan 0)", "0"),
        ("(< 0.78 (atan2 1 1) 0.79)", "true"),
        ("(atan2 0 1)", "0"),
        ("(sinh 0)", "0"),
        ("(cosh 0)", "1"),
        ("(tanh 0)", "0"),
        ("(log2 8)", "3"),
        ("(< 179.99 (degrees (pi)) 180.01)", "true"),
        ("(< 3.14 (radians 180) 3.15)", "true"),
    ],
)
def test_math_functions(run, source, expected):
    assert run(source) == expected


def test_math_domain_error(interp):
    with pytest.raises(PlugLispError, match="sqrt"):
        interp.eval("(sqrt -1)")


def test_random(interp):
    for _ in range(20):
        value = interp.eval("(random 5)").value
        assert 0 <= value < 5 and value == int(value)
    assert 0 <= interp.eval("(random)").value < 1


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(deref (atom 1))", "1"),
        ("(def a (atom 0)) (swap! a + 5) (swap! a + 1) (deref a)", "6"),
        ("(def a (atom 0)) (reset! a 9)", "9"),
        ("(def a (atom (list))) (swap! a (fn [xs x] (cons x xs)) 1) (deref a)", "(1)"),
    ],
)
def test_atoms(run, source, expected):
    assert run(source) == expected


def test_deref_requires_atom(interp):
    with pytest.raises(PlugLispTypeError, match="expects an atom"):
        interp.eval("(deref 1)")


def test_help_and_env(run):
    assert run("(help +)") == "+ [arithmetic, arity variadic]: Add numbers: (+ 1 2 3)"
    assert run("(help nothing)") == "no help available for nothing"
    assert "arithmetic: % * + - /" in run("(help)")
    assert run('(def v 1) (hash-map-get (env) "v")') == "1"
