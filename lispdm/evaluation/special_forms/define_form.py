from __future__ import annotations

from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.errors import LispDMSyntaxError
from lispdm.types.environment import Environment
from lispdm.types.expr import create_procedure, kind
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.values import Void


def split_signature(signature: List, form: str) -> tuple[Symbol, SExpression]:
    """Split ``(name . params)`` into the name and the parameter pattern.

    The remainder of ``(f . args)`` collapses to the bare symbol ``args``, so
    the pattern comes back as a symbol, a proper list or a dotted list.
    """
    if signature.is_empty():
        raise LispDMSyntaxError(f"expected at least 1 argument for {form} formals list, got 0")
    name, params = signature.split_first()
    if not isinstance(name, Symbol):
        raise LispDMSyntaxError(f"expected symbol as the name for {form}, got {kind(name)}")
    return name, params


def define_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """
    (define name value)
    (define (name . params) body...)
    Binds in the current scope only; re-definition silently replaces.
    """
    target = tail[0]

    if isinstance(target, Symbol):
        if len(tail) != 2:
            raise LispDMSyntaxError(
                f"expected exactly 1 value expression for define of {target}, got {len(tail) - 1}"
            )
        env.define(target, evaluate_fn(tail[1], env))
        return Void

    if not isinstance(target, List):
        raise LispDMSyntaxError(
            f"expected symbol or list as the first argument for define, got {kind(target)}"
        )

    name, params = split_signature(target, "define")
    env.define(name, create_procedure(name.id, params, tail[1:], env, "define"))
    return Void
