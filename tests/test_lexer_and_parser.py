import pytest
from hypothesis import given, strategies as st

from pluglisp.errors import PlugLispSyntaxError
from pluglisp.reader.parser import lex, read_all, read_one, TokenStream
from pluglisp.types.expr import (
    BigNumberExpr,
    BooleanExpr,
    BracketExpr,
    HashMapExpr,
    KeywordExpr,
    ListExpr,
    NumberExpr,
    Position,
    StringExpr,
    SymbolExpr,
)


def _kinds(source):
    return [(t.kind, t.text) for t in lex(source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a", [("atom", "a")]),
        ("'a", [("quote", "'"), ("atom", "a")]),
        ("(a b)", [("lparen", "("), ("atom", "a"), ("atom", "b"), ("rparen", ")")]),
        ("[1 2]", [("lbracket", "["), ("atom", "1"), ("atom", "2"), ("rbracket", "]")]),
        ("{:a 1}", [("lbrace", "{"), ("atom", ":a"), ("atom", "1"), ("rbrace", "}")]),
        ('"hello"', [("string", '"hello"')]),
        ('"say \\"hi\\""', [("string", '"say \\"hi\\""')]),
        (" ; comment\n a b", [("atom", "a"), ("atom", "b")]),
        ("`(a ~b ~@c)", [
            ("quasiquote", "`"), ("lparen", "("), ("atom", "a"),
            ("unquote", "~"), ("atom", "b"),
            ("unquote_splicing", "~@"), ("atom", "c"), ("rparen", ")"),
        ]),
        ("a, b", [("atom", "a"), ("atom", "b")]),
    ],
)
def test_lexer_basic(source, expected):
    assert _kinds(source) == expected


def test_lexer_positions():
    tokens = list(lex("(a\n  b)"))
    assert tokens[0].position == Position(1, 1)
    assert tokens[2].position == Position(2, 3)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("123", NumberExpr(123.0)),
        ("-45", NumberExpr(-45.0)),
        ("3.14", NumberExpr(3.14)),
        ("1e3", NumberExpr(1000.0)),
        ("1234567890123456789", BigNumberExpr("1234567890123456789")),
        ("123456789012345", NumberExpr(123456789012345.0)),
        ('"hi\\nthere"', StringExpr("hi\nthere")),
        ("true", BooleanExpr(True)),
        ("false", BooleanExpr(False)),
        (":name", KeywordExpr("name")),
        ("nil", SymbolExpr("nil")),
        ("-", SymbolExpr("-")),
        ("math.square", SymbolExpr("math.square")),
        ("'a", ListExpr((SymbolExpr("quote"), SymbolExpr("a")))),
        ("(a b c)", ListExpr((SymbolExpr("a"), SymbolExpr("b"), SymbolExpr("c")))),
        ("[x (f)]", BracketExpr((SymbolExpr("x"), ListExpr((SymbolExpr("f"),))))),
        ("{:a 1}", HashMapExpr((KeywordExpr("a"), NumberExpr(1.0)))),
        ("()", ListExpr(())),
        ("~@xs", ListExpr((SymbolExpr("unquote-splicing"), SymbolExpr("xs")))),
    ],
)
def test_parser(source, expected):
    assert read_one(source) == expected


def test_nested_lists():
    expr = read_one("((a b) (c d))")
    assert str(expr) == "((a b) (c d))"
    assert len(expr.elements) == 2


def test_token_stream_is_lazy():
    stream = TokenStream(lex("(+ 1 2) (oops"))
    assert str(stream.parse_expr()) == "(+ 1 2)"
    with pytest.raises(PlugLispSyntaxError):
        stream.parse_expr()


def test_read_all_ignores_comments():
    exprs = read_all("; heading\n(def x 1) ; trailing\nx")
    assert [str(e) for e in exprs] == ["(def x 1)", "x"]


@pytest.mark.parametrize("source", ["(a b", "[1 2", "{:a", '"abc', "'"])
def test_incomplete_input(source):
    with pytest.raises(PlugLispSyntaxError) as err:
        read_all(source)
    assert err.value.incomplete


@pytest.mark.parametrize("source", [")", "(a]", "{:a}", ":", '"bad \\q"'])
def test_malformed_input(source):
    with pytest.raises(PlugLispSyntaxError) as err:
        read_all(source)
    assert not err.value.incomplete


symbols = st.from_regex(r"[a-z][a-z0-9\-]{0,8}", fullmatch=True).filter(
    lambda s: s not in ("true", "false")
)
atoms = st.one_of(
    st.integers(min_value=-10**12, max_value=10**12).map(str),
    symbols,
)
forms = st.recursive(
    atoms,
    lambda children: st.lists(children, max_size=5).map(lambda xs: "(" + " ".join(xs) + ")"),
    max_leaves=20,
)


@given(forms)
def test_printed_form_reads_back_identically(source):
    expr = read_one(source)
    assert read_one(str(expr)) == expr


@given(st.integers(min_value=-10**30, max_value=10**30))
def test_integer_literals(n):
    expr = read_one(str(n))
    if len(str(abs(n))) > 15:
        assert expr == BigNumberExpr(str(n))
    else:
        assert expr == NumberExpr(float(n))


@given(st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=30))
def test_string_literals_round_trip(text):
    assert read_one(str(StringExpr(text))) == StringExpr(text)
