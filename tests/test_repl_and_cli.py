import io

import pytest

from pluglisp import __version__
from pluglisp.errors import PlugLispError, PlugLispUnboundSymbol
from pluglisp.repl import PROMPT, main, run_repl


def session(interp, text):
    out = io.StringIO()
    run_repl(interp, io.StringIO(text), out)
    return out.getvalue()


def test_repl_prints_results(interp):
    output = session(interp, "(+ 1 2)\n(def x 5)\nx\n")
    assert "3\n" in output
    assert output.count(PROMPT) == 4


def test_repl_multiline_input(interp):
    output = session(interp, "(+ 1\n   2)\nexit\n")
    assert "......... " in output
    assert "3\n" in output


def test_repl_reports_errors_and_continues(interp):
    output = session(interp, "(undefined)\n(* 2 3)\n")
    assert "Error: undefined symbol: undefined" in output
    assert "6\n" in output


def test_repl_reports_syntax_errors(interp):
    output = session(interp, ")\n1\n")
    assert "Error: unexpected ')'" in output
    assert "1\n" in output


def test_repl_stops_on_exit(interp):
    output = session(interp, "quit\n(+ 1 1)\n")
    assert "2" not in output


def test_cli_eval(capsys):
    assert main(["-e", "(+ 1 2 3)"]) == 0
    assert capsys.readouterr().out.strip() == "6"


def test_cli_runs_file(tmp_path, capsys):
    script = tmp_path / "hello.lisp"
    script.write_text('(println! "hi from file")', encoding="utf-8")
    assert main([str(script)]) == 0
    assert "hi from file" in capsys.readouterr().out


def test_cli_error_exit_code(capsys):
    assert main(["-e", "(nope)"]) == 1
    assert "Error: undefined symbol: nope" in capsys.readouterr().err


def test_cli_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_eval_file_wraps_errors(interp, tmp_path):
    script = tmp_path / "broken.lisp"
    script.write_text("(def ok 1)\n(missing-fn)", encoding="utf-8")
    with pytest.raises(PlugLispUnboundSymbol, match="in file .*broken.lisp"):
        interp.eval_file(script)
    assert str(interp.eval("ok")) == "1"


def test_eval_file_missing(interp, tmp_path):
    with pytest.raises(PlugLispError, match="cannot read file"):
        interp.eval_file(tmp_path / "nope.lisp")
