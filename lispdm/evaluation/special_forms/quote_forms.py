"""Special forms: quote, quasiquote, unquote and unquote-splicing.

Quasiquote walks its template once. ``(unquote x)`` is replaced by the value
of ``x`` and ``(unquote-splicing x)`` by the elements of the list ``x``.
Nested quasiquotes are walked like any other list, so their unquotes fire at
the outermost level as well.
"""

from __future__ import annotations

from lispdm import SExpression, LispValue, EvaluatorFn
from lispdm.errors import LispDMSyntaxError, LispDMTypeError
from lispdm.types.environment import Environment
from lispdm.types.expr import kind
from lispdm.types.lisp_list import List, make_list
from lispdm.types.symbol import Symbol

UNQUOTE = Symbol("unquote")
UNQUOTE_SPLICING = Symbol("unquote-splicing")


def _is_form(expr: SExpression, head: Symbol) -> bool:
    return (
        isinstance(expr, List)
        and expr.is_proper()
        and not expr.is_empty()
        and isinstance(expr.car(), Symbol)
        and expr.car() == head
    )


def _operand(expr: List) -> SExpression:
    if len(expr) != 2:
        raise LispDMSyntaxError(f"expected exactly one expression after {expr.car()}, got {len(expr) - 1}")
    return expr.nth(1)


def eval_quasiquote(template: SExpression, env: Environment, evaluate_fn: EvaluatorFn) -> LispValue:
    if not isinstance(template, List):
        return template
    if _is_form(template, UNQUOTE):
        return evaluate_fn(_operand(template), env)
    if _is_form(template, UNQUOTE_SPLICING):
        raise LispDMSyntaxError("unquote-splicing is only valid inside a list template")

    elements = template.elements()
    items: list[LispValue] = []
    last = template.tail
    if last is not None:
        last = eval_quasiquote(last, env, evaluate_fn)

    for i, item in enumerate(elements):
        # `(a . ,b) reads as (a unquote b): the unquote sits in tail position
        if (
            template.is_proper()
            and isinstance(item, Symbol)
            and item == UNQUOTE
            and i == len(elements) - 2
            and i > 0
        ):
            last = evaluate_fn(elements[i + 1], env)
            break
        if _is_form(item, UNQUOTE_SPLICING):
            spliced = evaluate_fn(_operand(item), env)
            if not isinstance(spliced, List) or spliced.is_dotted():
                raise LispDMTypeError(
                    f"expected list after unquote-splicing, got {kind(spliced)}", spliced
                )
            items.extend(spliced.elements())
        else:
            items.append(eval_quasiquote(item, env, evaluate_fn))

    return make_list(items, last)


def quote_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue:
    return tail[0]


def quasiquote_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue:
    # Quasiquote returns the constructed data structure; it is not evaluated again
    return eval_quasiquote(tail[0], env, evaluate_fn)


def unquote_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue:
    raise LispDMSyntaxError("unquote is not valid outside of quasiquote")


def unquote_splice_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue:
    raise LispDMSyntaxError("unquote-splicing is not valid outside of quasiquote")
