"""Call stack tracking for traced error reports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from pluglisp.types.expr import Position


@dataclass(frozen=True)
class CallFrame:
    """A single active user-function call."""
    function_name: str
    position: Position | None = None

    def __str__(self) -> str:
        where = f" at {self.position}" if self.position is not None else ""
        return f"{self.function_name}{where}"


class CallStack:
    """
    Stack of active calls. A tail call replaces the frame of its caller, so
    the depth matches the trampoline nesting rather than the recursion count.
    """

    def __init__(self) -> None:
        self.frames: List[CallFrame] = []

    def __len__(self) -> int:
        return len(self.frames)

    def enter(self, depth: int, function_name: str, position: Position | None = None) -> None:
        """
        Record a call at trampoline `depth`, dropping any frame it replaces.

        Args:
            depth: Stack depth when the owning trampoline started
            function_name: Name of the function being called
            position: Source position of the call expression
        """
        del self.frames[depth:]
        self.frames.append(CallFrame(function_name, position))

    def truncate(self, depth: int) -> None:
        del self.frames[depth:]

    def snapshot(self) -> List[CallFrame]:
        return list(self.frames)

    def format_stack_trace(self, max_frames: int = 10) -> str:
        if not self.frames:
            return "  (no function calls)"
        lines = []
        shown = self.frames[-max_frames:]
        if len(self.frames) > max_frames:
            lines.append(f"  ... ({len(self.frames) - max_frames} more frames)")
        for i, frame in enumerate(shown):
            lines.append("  " + "  " * i + str(frame))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"CallStack(depth={len(self.frames)})"
