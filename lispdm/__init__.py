# Core type aliases for LispDM's data model.
# Values are plain Python objects: int, float, bool and the classes under
# lispdm.types (Symbol, MString, Char, List, Void, procedures, Port).
# The same objects represent parsed code and runtime values.
#
# Naming guidance:
# - SExpression: use in reader/macro code for syntactic forms (code-as-data).
# - LispValue:  use in evaluator/runtime code for evaluated values.
# Both aliases resolve to `Any` and are interchangeable.

from typing import Any, Callable

# Runtime value alias
LispValue = Any
SExpression = LispValue

# Evaluator function type: (expr, env) -> value, handed to the application engine
EvaluatorFn = Callable[..., LispValue]
