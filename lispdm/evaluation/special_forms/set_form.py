from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.errors import LispDMSyntaxError
from lispdm.types.environment import Environment
from lispdm.types.expr import kind
from lispdm.types.symbol import Symbol
from lispdm.types.values import Void


def set_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """
    (set! name value)
    Updates the nearest scope that already binds `name`; never creates a binding.
    """
    name, val_expr = tail
    if not isinstance(name, Symbol):
        raise LispDMSyntaxError(f"expected symbol as first argument of set!, got {kind(name)}")
    env.set(name, evaluate_fn(val_expr, env))
    return Void
