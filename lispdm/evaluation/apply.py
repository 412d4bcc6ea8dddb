"""Application engine for LispDM.

This module centralizes procedure application for the interpreter:
- Atomic procedures have their arity checked here, then their native
  operation is called with the caller's environment and the argument list.
- Compound procedures get a fresh scope chained to their captured
  environment, parameters bound per their pattern, and the body run with the
  final expression handed back as a TailCall for the trampoline.

The evaluator is passed in as `evaluate_fn` so that this module never
imports it; special forms and primitives share the same entry point.
"""

from __future__ import annotations

from typing import Sequence

from lispdm import EvaluatorFn, LispValue, SExpression
from lispdm.errors import LispDMArityError
from lispdm.types.environment import Environment
from lispdm.types.lisp_list import List
from lispdm.types.procedure import AtomicProcedure, CompoundProcedure, ParamsKind, Procedure
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Void


def bind_arguments(proc: CompoundProcedure, args: Sequence[LispValue]) -> Environment:
    """Create the call scope for `proc` with its parameters bound to `args`.

    - FIXED: exactly one argument per parameter.
    - VARIADIC: every argument collected into one proper list.
    - MIXED: at least the fixed parameters; the remainder as a proper list.
    """
    params = proc.params
    required = len(params.required)
    provided = len(args)
    call_env = proc.env.extend()

    match params.kind:
        case ParamsKind.FIXED:
            if provided != required:
                raise LispDMArityError(
                    f"expected {required} arguments for {proc.name}, got {provided}"
                )
        case ParamsKind.MIXED:
            if provided < required:
                raise LispDMArityError(
                    f"expected at least {required} arguments for {proc.name}, got {provided}"
                )

    for name, value in zip(params.required, args):
        call_env.define(name, value)
    if params.rest is not None:
        call_env.define(params.rest, List.proper(args[required:]))
    return call_env


def eval_sequence(
    body: Sequence[SExpression], env: Environment, evaluate_fn: EvaluatorFn
) -> LispValue | TailCall:
    """Evaluate all but the last expression for effect; return the last as a TailCall."""
    if not body:
        return Void
    for expr in body[:-1]:
        evaluate_fn(expr, env)
    return TailCall(body[-1], env)


def apply(
    proc: Procedure,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    """Apply `proc` to `args` on behalf of code running in `env`.

    Special forms receive their operands unevaluated; everything else
    receives evaluated arguments. The result may be a TailCall, which the
    caller's trampoline must drive to a value.
    """
    if isinstance(proc, AtomicProcedure):
        proc.arity.check(proc.name, len(args))
        return proc.fn(env, args)
    return eval_sequence(proc.body, bind_arguments(proc, args), evaluate_fn)
