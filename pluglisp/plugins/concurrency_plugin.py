"""Goroutine-style concurrency: go blocks, channels and wait groups.

`go` evaluates its expression on a daemon thread against the caller's scope
and returns a Future. Any unexpected exception in the background evaluation
is recovered and surfaced from go-wait as a runtime fault.
"""

from __future__ import annotations

import logging
import threading

from pluglisp import Expression, LispValue
from pluglisp.errors import PlugLispError, PlugLispRuntimeFault, PlugLispTypeError
from pluglisp.plugins.base import Plugin
from pluglisp.plugins.helpers import (
    eval_args,
    expect_args,
    expect_args_range,
    to_int,
    to_number,
    to_sequence,
)
from pluglisp.registry import VARIADIC, Category
from pluglisp.types.concurrency import Channel, Future, WaitGroup
from pluglisp.types.nil import NIL
from pluglisp.types.values import TRUE, ListValue, boolean, type_name


def _expect(name: str, value: LispValue, kind: type):
    if not isinstance(value, kind):
        raise PlugLispTypeError(f"{name} expects a {kind.type_name}, got {type_name(value)}")
    return value


def _timeout(name: str, values: list, index: int) -> float | None:
    if len(values) <= index:
        return None
    seconds = float(to_number(name, values[index]))
    if seconds < 0:
        raise PlugLispError(f"{name}: timeout cannot be negative")
    return seconds


class ConcurrencyPlugin(Plugin):
    name = "concurrency"
    description = "Go blocks, channels and wait groups"
    category = Category.CONCURRENCY

    def __init__(self):
        self._logger = logging.getLogger("ConcurrencyPlugin")

    def go(self, evaluator, args: list[Expression]) -> LispValue:
        """(go expr) evaluates expr in the background and returns a future."""
        expect_args("go", args, 1)
        future = Future()
        worker = evaluator.fork()
        expr = args[0]

        def run() -> None:
            try:
                future.set_result(worker.eval(expr))
            except PlugLispError as err:
                future.set_error(err)
            except Exception as err:  # noqa: BLE001
                self._logger.warning("recovered fault in go block: %s", err)
                future.set_error(PlugLispRuntimeFault(f"goroutine panic: {err}"))
            except BaseException as err:
                # SystemExit and KeyboardInterrupt still complete the future
                future.set_error(PlugLispRuntimeFault(f"goroutine panic: {err!r}"))

        threading.Thread(target=run, name="pluglisp-go", daemon=True).start()
        return future

    @staticmethod
    def go_wait(evaluator, args: list[Expression]) -> LispValue:
        """(go-wait future [timeout-seconds])"""
        expect_args_range("go-wait", args, 1, 2)
        values = eval_args(evaluator, args)
        future = _expect("go-wait", values[0], Future)
        return future.wait(_timeout("go-wait", values, 1))

    @staticmethod
    def go_wait_all(evaluator, args: list[Expression]) -> LispValue:
        expect_args("go-wait-all", args, 1)
        futures = to_sequence("go-wait-all", evaluator.eval(args[0]))
        return ListValue(tuple(_expect("go-wait-all", f, Future).wait() for f in futures))

    @staticmethod
    def chan(evaluator, args: list[Expression]) -> LispValue:
        """(chan) or (chan size)"""
        expect_args_range("chan", args, 0, 1)
        size = to_int("chan", evaluator.eval(args[0])) if args else 0
        if size < 0:
            raise PlugLispError("chan: buffer size cannot be negative")
        return Channel(size)

    @staticmethod
    def chan_send(evaluator, args: list[Expression]) -> LispValue:
        expect_args("chan-send!", args, 2)
        ch, value = eval_args(evaluator, args)
        _expect("chan-send!", ch, Channel).send(value)
        return TRUE

    @staticmethod
    def chan_recv(evaluator, args: list[Expression]) -> LispValue:
        """(chan-recv! ch [timeout-seconds]); nil once the channel is closed and drained."""
        expect_args_range("chan-recv!", args, 1, 2)
        values = eval_args(evaluator, args)
        value, _ = _expect("chan-recv!", values[0], Channel).receive(
            _timeout("chan-recv!", values, 1)
        )
        return value

    @staticmethod
    def chan_try_recv(evaluator, args: list[Expression]) -> LispValue:
        expect_args("chan-try-recv!", args, 1)
        value, _ = _expect("chan-try-recv!", evaluator.eval(args[0]), Channel).try_receive()
        return value

    @staticmethod
    def chan_close(evaluator, args: list[Expression]) -> LispValue:
        expect_args("chan-close!", args, 1)
        _expect("chan-close!", evaluator.eval(args[0]), Channel).close()
        return NIL

    @staticmethod
    def chan_closed(evaluator, args: list[Expression]) -> LispValue:
        expect_args("chan-closed?", args, 1)
        return boolean(_expect("chan-closed?", evaluator.eval(args[0]), Channel).is_closed())

    @staticmethod
    def wait_group(evaluator, args: list[Expression]) -> LispValue:
        expect_args("wait-group", args, 0)
        return WaitGroup()

    @staticmethod
    def wait_group_add(evaluator, args: list[Expression]) -> LispValue:
        expect_args("wait-group-add!", args, 2)
        wg, delta = eval_args(evaluator, args)
        _expect("wait-group-add!", wg, WaitGroup).add(to_int("wait-group-add!", delta))
        return NIL

    @staticmethod
    def wait_group_done(evaluator, args: list[Expression]) -> LispValue:
        expect_args("wait-group-done!", args, 1)
        _expect("wait-group-done!", evaluator.eval(args[0]), WaitGroup).done()
        return NIL

    @staticmethod
    def wait_group_wait(evaluator, args: list[Expression]) -> LispValue:
        """(wait-group-wait! wg [timeout-seconds])"""
        expect_args_range("wait-group-wait!", args, 1, 2)
        values = eval_args(evaluator, args)
        _expect("wait-group-wait!", values[0], WaitGroup).wait(
            _timeout("wait-group-wait!", values, 1)
        )
        return TRUE

    def functions(self):
        return [
            ("go", 1, "Evaluate in the background: (go expr)", self.go),
            ("go-wait", VARIADIC, "Wait for a future: (go-wait f [timeout])", self.go_wait),
            ("go-wait-all", 1, "Wait for every future: (go-wait-all futures)", self.go_wait_all),
            ("chan", VARIADIC, "Create a channel: (chan) or (chan size)", self.chan),
            ("chan-send!", 2, "Send a value, blocking while full: (chan-send! ch v)", self.chan_send),
            ("chan-recv!", VARIADIC, "Receive a value, blocking: (chan-recv! ch [timeout])",
             self.chan_recv),
            ("chan-try-recv!", 1, "Receive without blocking: (chan-try-recv! ch)", self.chan_try_recv),
            ("chan-close!", 1, "Close a channel: (chan-close! ch)", self.chan_close),
            ("chan-closed?", 1, "True once closed: (chan-closed? ch)", self.chan_closed),
            ("wait-group", 0, "Create a wait group: (wait-group)", self.wait_group),
            ("wait-group-add!", 2, "Add to the counter: (wait-group-add! wg n)", self.wait_group_add),
            ("wait-group-done!", 1, "Decrement the counter: (wait-group-done! wg)",
             self.wait_group_done),
            ("wait-group-wait!", VARIADIC, "Block until zero: (wait-group-wait! wg [timeout])",
             self.wait_group_wait),
        ]
