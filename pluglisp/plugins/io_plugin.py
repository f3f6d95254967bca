from __future__ import annotations

from pathlib import Path

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import eval_args, expect_args, to_string
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.nil import NIL
from pluglisp.types.values import TRUE, String, boolean


def print_builtin(evaluator, args: list[Expression]) -> LispValue:
    """(print! a b ...) writes the arguments separated by spaces, no newline."""
    print(" ".join(str(v) for v in eval_args(evaluator, args)), end="", flush=True)
    return NIL


def println_builtin(evaluator, args: list[Expression]) -> LispValue:
    print(" ".join(str(v) for v in eval_args(evaluator, args)), flush=True)
    return NIL


def read_file(evaluator, args: list[Expression]) -> LispValue:
    expect_args("read-file", args, 1)
    path = Path(to_string("read-file", evaluator.eval(args[0])))
    try:
        return String(path.read_text(encoding="utf-8"))
    except OSError as err:
        raise PlugLispError(f"read-file: {err}") from err


def write_file(evaluator, args: list[Expression]) -> LispValue:
    """(write-file path content) replaces the file's contents."""
    expect_args("write-file", args, 2)
    path_value, content = eval_args(evaluator, args)
    path = Path(to_string("write-file", path_value))
    try:
        path.write_text(to_string("write-file", content), encoding="utf-8")
    except OSError as err:
        raise PlugLispError(f"write-file: {err}") from err
    return TRUE


def file_exists(evaluator, args: list[Expression]) -> LispValue:
    expect_args("file-exists?", args, 1)
    return boolean(Path(to_string("file-exists?", evaluator.eval(args[0]))).exists())


class IoPlugin(Plugin):
    name = "io"
    description = "Console output and file access"
    category = Category.IO

    def functions(self):
        return [
            ("print!", VARIADIC, "Print without newline: (print! a b)", print_builtin),
            ("println!", VARIADIC, "Print with newline: (println! a b)", println_builtin),
            ("read-file", 1, "Read a text file: (read-file path)", read_file),
            ("write-file", 2, "Write a text file: (write-file path content)", write_file),
            ("file-exists?", 1, "True if the path exists: (file-exists? path)", file_exists),
        ]
