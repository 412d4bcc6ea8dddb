"""Core evaluator and trampoline for the LispDM interpreter.

Implements call-site macro expansion, special-form dispatch, and tail-call
aware application via a simple trampoline using TailCall objects.
"""

from __future__ import annotations

import logging
from typing import Iterable

from lispdm import LispValue, SExpression
from lispdm.errors import (
    LispDMEmptyListError,
    LispDMEvalError,
    LispDMRecursionError,
    LispDMSyntaxError,
    LispDMTypeError,
)
from lispdm.evaluation.apply import apply
from lispdm.types.environment import Environment
from lispdm.types.expr import is_self_evaluating, kind
from lispdm.types.lisp_list import List
from lispdm.types.procedure import Procedure
from lispdm.types.symbol import Symbol
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Void

logger = logging.getLogger(__name__)


def evaluate(expr: SExpression, env: Environment) -> LispValue:
    """
    Trampoline evaluator: steps until a value comes out instead of a TailCall.
    """
    result = evaluate_step(expr, env)
    while isinstance(result, TailCall):
        result = evaluate_step(result.expr, result.env)
    return result


def run_trampoline(result: LispValue | TailCall) -> LispValue:
    """Drive a step result (value or TailCall) to a final value."""
    while isinstance(result, TailCall):
        result = evaluate_step(result.expr, result.env)
    return result


def call_procedure(proc: Procedure, args: list[LispValue], env: Environment) -> LispValue:
    """Apply a procedure to already-evaluated arguments and return its value.

    For native code (macro expansion, `apply`, higher-order primitives) that
    needs a finished value rather than a step result.
    """
    try:
        return run_trampoline(apply(proc, args, env, evaluate))
    except RecursionError as e:
        raise LispDMRecursionError() from e


def evaluate_all(exprs: Iterable[SExpression], env: Environment) -> LispValue:
    """Evaluate each expression in order; the last value, or Void when there are none."""
    result = Void
    try:
        for expr in exprs:
            result = evaluate(expr, env)
    except RecursionError as e:
        raise LispDMRecursionError() from e
    return result


def expand_macro(macro: Procedure, operands: Iterable[SExpression], env: Environment) -> SExpression:
    """Run a macro procedure over its unevaluated operands, yielding the expansion."""
    expansion = call_procedure(macro, list(operands), env)
    logger.debug("expanded macro %s into %s", macro.name, expansion)
    return expansion


def evaluate_step(expr: SExpression, env: Environment) -> LispValue | TailCall:
    """
    Single-step evaluation. Returns either a value or a TailCall.
    """
    if isinstance(expr, Symbol):
        return env.lookup(expr)

    if isinstance(expr, List):
        if expr.is_empty():
            raise LispDMEmptyListError("empty list cannot be evaluated")
        if expr.is_dotted():
            raise LispDMSyntaxError("dotted list cannot be evaluated")

        head, *operands = expr.elements()

        # Macros shadow value bindings at call position
        if isinstance(head, Symbol):
            macro = env.get_macro(head)
            if macro is not None:
                return TailCall(expand_macro(macro, operands, env), env)

        proc = evaluate(head, env)
        if not isinstance(proc, Procedure):
            raise LispDMTypeError(
                f"expected procedure as first element of call, got {kind(proc)}", proc
            )

        if proc.is_special_form:
            args = operands
        else:
            args = [evaluate(arg, env) for arg in operands]
        return apply(proc, args, env, evaluate)

    if is_self_evaluating(expr):
        return expr

    raise LispDMEvalError(f"{kind(expr)} object cannot be evaluated")
