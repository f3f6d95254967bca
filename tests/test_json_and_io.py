import json

import pytest

from pluglisp.errors import PlugLispError


@pytest.mark.parametrize(
    "source, expected",
    [
        ('(json-parse "{\\"a\\": [1, 2.5, true, null]}")', '{"a" (1 2.5 true nil)}'),
        ('(json-parse "12345678901234567")', "12345678901234567"),
        ('(json-stringify {:name "x" :tags [1 2]})', '{"name":"x","tags":[1,2]}'),
        ("(json-stringify (list 1.5 nil false :k))", '[1.5,null,false,"k"]'),
        ('(json-path (json-parse "{\\"a\\": {\\"b\\": [10, 20]}}") "a.b.1")', "20"),
        ('(json-path (json-parse "{\\"a\\": 1}") "a.missing")', "nil"),
        ('(json-path (json-parse "[1, 2]") "x")', "nil"),
    ],
)
def test_json(run, source, expected):
    assert run(source) == expected


def test_json_pretty(run):
    assert json.loads(run('(json-stringify-pretty {:a [1 2]})')) == {"a": [1, 2]}
    assert "\n  " in run('(json-stringify-pretty {:a 1})')


def test_json_errors(interp):
    with pytest.raises(PlugLispError, match="json-parse"):
        interp.eval('(json-parse "{bad")')
    with pytest.raises(PlugLispError, match="cannot convert"):
        interp.eval("(json-stringify (atom 1))")


def test_println_and_print(interp, capsys):
    interp.eval('(println! "hello" 42)')
    interp.eval('(print! "no newline")')
    assert capsys.readouterr().out == "hello 42\nno newline"


def test_file_round_trip(interp, tmp_path):
    target = tmp_path / "out.txt"
    path = json.dumps(str(target))
    assert str(interp.eval(f'(file-exists? {path})')) == "false"
    assert str(interp.eval(f'(write-file {path} "line one")')) == "true"
    assert str(interp.eval(f'(file-exists? {path})')) == "true"
    assert str(interp.eval(f"(read-file {path})")) == "line one"
    assert target.read_text(encoding="utf-8") == "line one"


def test_read_missing_file(interp, tmp_path):
    path = json.dumps(str(tmp_path / "absent.txt"))
    with pytest.raises(PlugLispError, match="read-file"):
        interp.eval(f"(read-file {path})")
