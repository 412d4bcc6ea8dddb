"""Special form: cond.

Clauses are tried in order. Besides ``(test body...)`` a clause may be a
bare ``(test)``, whose value is the test's value, or ``(test => receiver)``,
which applies a one-argument receiver to the test's value.
"""

from __future__ import annotations

from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.errors import LispDMSyntaxError
from lispdm.evaluation.apply import apply, eval_sequence
from lispdm.printer import to_write
from lispdm.types.environment import Environment
from lispdm.types.expr import into_procedure, is_truthy
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Void

ELSE = Symbol("else")
ARROW = Symbol("=>")


def _is_else(test: SExpression) -> bool:
    return isinstance(test, Symbol) and test == ELSE


def _check_clauses(clauses: list[SExpression]) -> None:
    """Reject malformed clauses before any test runs."""
    last = len(clauses) - 1
    for i, clause in enumerate(clauses):
        if not isinstance(clause, List) or clause.is_empty() or clause.is_dotted():
            raise LispDMSyntaxError(f"expected non-empty list as cond clause, got {to_write(clause)}")
        if _is_else(clause.car()) and i != last:
            raise LispDMSyntaxError("else clause must be the last clause of cond")


def _apply_receiver(
    env: Environment,
    body: tuple,
    value: LispValue,
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    if len(body) != 2:
        raise LispDMSyntaxError("expected exactly one receiver expression after => in cond")
    receiver = into_procedure(evaluate_fn(body[1], env), "=>")
    if receiver.is_special_form or not receiver.arity.accepts(1):
        raise LispDMSyntaxError(
            f"expected procedure of one argument after => in cond, got {receiver} "
            f"taking {receiver.arity} arguments"
        )
    return apply(receiver, [value], env, evaluate_fn)


def cond_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    _check_clauses(tail)

    for clause in tail:
        test, *body = clause.elements()
        if _is_else(test):
            return eval_sequence(body, env, evaluate_fn)

        value = evaluate_fn(test, env)
        if not is_truthy(value):
            continue
        if not body:
            return value
        if isinstance(body[0], Symbol) and body[0] == ARROW:
            return _apply_receiver(env, tuple(body), value, evaluate_fn)
        return eval_sequence(body, env, evaluate_fn)

    return Void
