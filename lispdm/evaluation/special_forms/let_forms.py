"""Binding special forms: let (plain and named), let* and letrec."""

from __future__ import annotations

from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.errors import LispDMSyntaxError
from lispdm.evaluation.apply import apply, eval_sequence
from lispdm.printer import to_write
from lispdm.types.environment import Environment
from lispdm.types.expr import create_procedure, kind
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Void


def parse_bindings(bindings: SExpression, form: str) -> list[tuple[Symbol, SExpression]]:
    """Read ``((name init) ...)`` into (name, init) pairs."""
    if not isinstance(bindings, List) or bindings.is_dotted():
        raise LispDMSyntaxError(f"expected list of bindings for {form}, got {kind(bindings)}")
    pairs = []
    for binding in bindings:
        if (
            not isinstance(binding, List)
            or binding.is_dotted()
            or len(binding) != 2
            or not isinstance(binding.car(), Symbol)
        ):
            raise LispDMSyntaxError(f"expected (name value) binding in {form}, got {to_write(binding)}")
        name, init = binding.elements()
        pairs.append((name, init))
    return pairs


def _named_let(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    # (let name ((var init) ...) body...)
    name, bindings, *body = tail
    if not body:
        raise LispDMSyntaxError(f"expected at least one body expression for named let {name}")
    pairs = parse_bindings(bindings, "let")

    # The procedure sees itself through a scope of its own, so the name
    # never leaks into (or clobbers) the caller's scope
    loop_env = env.extend()
    params = List.proper(var for var, _ in pairs)
    proc = create_procedure(name.id, params, body, loop_env, "let")
    loop_env.define(name, proc)

    args = [evaluate_fn(init, env) for _, init in pairs]
    return apply(proc, args, env, evaluate_fn)


def let_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    """
    (let ((var init) ...) body...)
    Inits are evaluated in the enclosing scope, then bound together in one new scope.
    """
    if isinstance(tail[0], Symbol):
        return _named_let(env, tail, evaluate_fn)

    pairs = parse_bindings(tail[0], "let")
    values = [evaluate_fn(init, env) for _, init in pairs]

    scope = env.extend()
    for (var, _), value in zip(pairs, values):
        scope.define(var, value)
    return eval_sequence(tail[1:], scope, evaluate_fn)


def let_star_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    # Each binding gets its own scope and sees the ones before it
    scope = env.extend()
    for var, init in parse_bindings(tail[0], "let*"):
        value = evaluate_fn(init, scope)
        scope = scope.extend()
        scope.define(var, value)
    return eval_sequence(tail[1:], scope, evaluate_fn)


def letrec_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    """
    (letrec ((var init) ...) body...)
    Every name is bound (to void) before any init runs, so inits can refer
    to each other; they are then evaluated in order inside the new scope.
    """
    pairs = parse_bindings(tail[0], "letrec")

    scope = env.extend()
    for var, _ in pairs:
        scope.define(var, Void)
    for var, init in pairs:
        scope.define(var, evaluate_fn(init, scope))
    return eval_sequence(tail[1:], scope, evaluate_fn)
