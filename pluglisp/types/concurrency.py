"""Thread-safe runtime values used by the atom and concurrency plugins."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, ClassVar

from pluglisp import LispValue
from pluglisp.errors import (
    PlugLispError,
    PlugLispRuntimeFault,
    PlugLispTimeoutError,
)
from pluglisp.types.nil import NIL


class Atom:
    """Mutable single-slot box."""

    __slots__ = ("_value", "_lock")
    type_name: ClassVar[str] = "atom"

    def __init__(self, value: LispValue):
        self._value = value
        # Re-entrant so a swap! function may deref the same atom
        self._lock = threading.RLock()

    def deref(self) -> LispValue:
        with self._lock:
            return self._value

    def reset(self, value: LispValue) -> LispValue:
        with self._lock:
            self._value = value
            return value

    def swap(self, update: Callable[[LispValue], LispValue]) -> LispValue:
        with self._lock:
            self._value = update(self._value)
            return self._value

    def __str__(self) -> str:
        return f"#<atom:{self.deref()}>"


class Future:
    """Handle to an expression being evaluated on a background thread."""

    __slots__ = ("_done", "_result", "_error")
    type_name: ClassVar[str] = "future"

    def __init__(self):
        self._done = threading.Event()
        self._result: LispValue = NIL
        self._error: BaseException | None = None

    def set_result(self, value: LispValue) -> None:
        self._result = value
        self._done.set()

    def set_error(self, error: BaseException) -> None:
        self._error = error
        self._done.set()

    def is_done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> LispValue:
        if not self._done.wait(timeout):
            raise PlugLispTimeoutError(f"future not completed within {timeout} seconds")
        if self._error is not None:
            if isinstance(self._error, PlugLispError):
                raise self._error
            raise PlugLispRuntimeFault(f"goroutine panic: {self._error}") from self._error
        return self._result

    def __str__(self) -> str:
        return "#<future:done>" if self.is_done() else "#<future:pending>"


class Channel:
    """FIFO channel with blocking send/receive.

    Unbuffered channels (size 0) hold at most one in-flight value.
    """

    __slots__ = ("size", "_buffer", "_closed", "_cond")
    type_name: ClassVar[str] = "channel"

    def __init__(self, size: int = 0):
        self.size = size
        self._buffer: deque[Any] = deque()
        self._closed = False
        self._cond = threading.Condition()

    @property
    def capacity(self) -> int:
        return max(self.size, 1)

    def send(self, value: LispValue, timeout: float | None = None) -> None:
        with self._cond:
            if not self._cond.wait_for(
                lambda: self._closed or len(self._buffer) < self.capacity, timeout
            ):
                raise PlugLispTimeoutError(f"channel send timed out after {timeout} seconds")
            if self._closed:
                raise PlugLispError("cannot send to closed channel")
            self._buffer.append(value)
            self._cond.notify_all()

    def receive(self, timeout: float | None = None) -> tuple[LispValue, bool]:
        """Block for a value; returns (NIL, False) once closed and drained."""
        with self._cond:
            if not self._cond.wait_for(lambda: self._closed or self._buffer, timeout):
                raise PlugLispTimeoutError(f"channel receive timed out after {timeout} seconds")
            return self._pop()

    def try_receive(self) -> tuple[LispValue, bool]:
        with self._cond:
            return self._pop()

    def _pop(self) -> tuple[LispValue, bool]:
        if not self._buffer:
            return NIL, False
        value = self._buffer.popleft()
        self._cond.notify_all()
        return value, True

    def close(self) -> None:
        with self._cond:
            if self._closed:
                raise PlugLispError("channel already closed")
            self._closed = True
            self._cond.notify_all()

    def is_closed(self) -> bool:
        with self._cond:
            return self._closed

    def __str__(self) -> str:
        state = "closed" if self.is_closed() else "open"
        return f"#<channel:{state}:size={self.size}>"


class WaitGroup:
    __slots__ = ("_count", "_cond")
    type_name: ClassVar[str] = "wait-group"

    def __init__(self):
        self._count = 0
        self._cond = threading.Condition()

    def add(self, delta: int) -> None:
        with self._cond:
            if self._count + delta < 0:
                raise PlugLispError("negative wait group counter")
            self._count += delta
            if self._count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> None:
        with self._cond:
            if not self._cond.wait_for(lambda: self._count == 0, timeout):
                raise PlugLispTimeoutError(f"wait group not released within {timeout} seconds")

    def __str__(self) -> str:
        return "#<wait-group>"
