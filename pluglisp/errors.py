from __future__ import annotations


class PlugLispError(Exception):
    """ Base class for all PlugLisp errors"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message
        # Filled in by a tracing evaluator: list of CallFrame
        self.trace: list | None = None

    def format_trace(self) -> str:
        if not self.trace:
            return ""
        lines = ["Call stack (most recent call last):"]
        lines.extend(f"  {frame}" for frame in self.trace)
        return "\n".join(lines)


class PlugLispSyntaxError(PlugLispError):
    """ Raised for malformed source text or literals"""

    def __init__(self, message: str = "", incomplete: bool = False):
        super().__init__(message)
        self.incomplete = incomplete


class PlugLispNameError(PlugLispError):
    """ Raised when a module or module member cannot be resolved"""


class PlugLispUnboundSymbol(PlugLispNameError):
    """ Raised when a symbol is used before it is bound"""


class PlugLispArityError(PlugLispError):
    """ Raised when the number of arguments passed to a function is incorrect"""


class PlugLispTypeError(PlugLispError):
    """ Raised when a value of the wrong kind is used"""


class PlugLispRegistrationError(PlugLispError):
    """ Raised on registry or plugin lifecycle conflicts"""


class PlugLispRuntimeFault(PlugLispError):
    """ Raised when background evaluation fails unexpectedly"""


class PlugLispTimeoutError(PlugLispError):
    """ Raised when a blocking operation exceeds its timeout"""
