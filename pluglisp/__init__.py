# Core type aliases for the PlugLisp data model.
#
# Naming guidance:
# - Expression: use in reader/macro code to denote syntax trees (pluglisp.types.expr).
# - LispValue:  use in evaluator/plugin code to denote evaluated values (pluglisp.types.values).
# Both resolve to `Any` so that the leaf modules can import them without cycles.

from typing import Any, Callable

__version__ = "0.1.0"

# Runtime value alias
LispValue = Any
# Syntax tree alias
Expression = Any

# Builtin handler: receives the evaluator and the raw, unevaluated argument expressions
Handler = Callable[[Any, list], LispValue]
