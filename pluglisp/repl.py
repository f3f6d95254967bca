"""Command-line entry point: run a file, evaluate an expression or start a REPL."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

from pluglisp import __version__
from pluglisp.config import get_log_level
from pluglisp.errors import PlugLispError, PlugLispSyntaxError
from pluglisp.interpreter import Interpreter
from pluglisp.reader.parser import read_all

PROMPT = "pluglisp> "
CONTINUATION_PROMPT = "......... "
EXIT_COMMANDS = {"exit", "quit", "(exit)", "(quit)"}


def format_error(err: PlugLispError) -> str:
    message = f"Error: {err}"
    trace = err.format_trace()
    return f"{message}\n{trace}" if trace else message


def run_repl(interp: Interpreter, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    """Read-eval-print loop. Errors are reported and the session continues."""
    buffer: list[str] = []
    while True:
        stdout.write(CONTINUATION_PROMPT if buffer else PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            stdout.write("\n")
            return
        if not buffer and line.strip() in EXIT_COMMANDS:
            return
        buffer.append(line)
        source = "".join(buffer)
        if not source.strip():
            buffer.clear()
            continue
        try:
            exprs = read_all(source)
        except PlugLispSyntaxError as err:
            if err.incomplete:
                continue
            buffer.clear()
            stdout.write(format_error(err) + "\n")
            continue
        buffer.clear()
        for expr in exprs:
            try:
                stdout.write(f"{interp.eval_expr(expr)}\n")
            except PlugLispError as err:
                stdout.write(format_error(err) + "\n")
                break


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pluglisp",
        description="PlugLisp interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                       # Start the REPL
  %(prog)s program.lisp          # Run a file
  %(prog)s -e "(+ 1 2 3)"        # Evaluate an expression
        """
    )
    parser.add_argument('file', nargs='?', help='Source file to run')
    parser.add_argument('--eval', '-e', dest='expression', help='Evaluate an expression and print the result')
    parser.add_argument('--trace', action='store_true', help='Attach call-stack traces to errors')
    parser.add_argument('--log-level', default=None,
                        help='Logging level (default: PLUGLISP_LOG_LEVEL or WARNING)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    args = parser.parse_args(argv)

    level = logging.getLevelName(args.log_level.upper()) if args.log_level else get_log_level()
    logging.basicConfig(level=level if isinstance(level, int) else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    interp = Interpreter(trace=args.trace)
    try:
        if args.file:
            interp.eval_file(args.file)
        if args.expression:
            print(interp.eval(args.expression))
        if not args.file and not args.expression:
            print(f"PlugLisp {__version__}. Type exit or Ctrl-D to leave.")
            run_repl(interp)
    except PlugLispError as err:
        print(format_error(err), file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        interp.shutdown()

    return 0
