"""Registry of special forms for the LispDM evaluator.

Maps Symbols to handler functions that implement non-standard evaluation
rules, paired with the arity each form accepts. Handlers take
``(env, tail, evaluate_fn)`` where `tail` holds the unevaluated operands;
they are bound into the root environment as special-form procedures, so the
evaluator hands them their operands as-is.
"""

from typing import Callable

from lispdm import EvaluatorFn, LispValue, SExpression
from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.symbol import Symbol
from lispdm.evaluation.special_forms.define_form import define_form
from lispdm.evaluation.special_forms.set_form import set_form
from lispdm.evaluation.special_forms.lambda_form import lambda_form
from lispdm.evaluation.special_forms.if_form import if_form
from lispdm.evaluation.special_forms.cond_form import cond_form
from lispdm.evaluation.special_forms.logic_forms import and_form, or_form
from lispdm.evaluation.special_forms.let_forms import let_form, let_star_form, letrec_form
from lispdm.evaluation.special_forms.progn_form import begin_form
from lispdm.evaluation.special_forms.do_loop_forms import do_loop_form
from lispdm.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, unquote_form, unquote_splice_form
from lispdm.evaluation.special_forms.defmacro_form import defmacro_form

SpecialFormFn = Callable[[Environment, list[SExpression], EvaluatorFn], LispValue]

SPECIAL_FORMS: dict[Symbol, tuple[SpecialFormFn, Arity]] = {
    Symbol("define"): (define_form, Arity.at_least(2)),
    Symbol("set!"): (set_form, Arity.exact(2)),
    Symbol("lambda"): (lambda_form, Arity.at_least(2)),
    Symbol("if"): (if_form, Arity.range(2, 3)),
    Symbol("cond"): (cond_form, Arity.any()),
    Symbol("and"): (and_form, Arity.any()),
    Symbol("or"): (or_form, Arity.any()),
    Symbol("let"): (let_form, Arity.at_least(2)),
    Symbol("let*"): (let_star_form, Arity.at_least(2)),
    Symbol("letrec"): (letrec_form, Arity.at_least(2)),
    Symbol("begin"): (begin_form, Arity.any()),
    Symbol("do"): (do_loop_form, Arity.at_least(2)),
    Symbol("quote"): (quote_form, Arity.exact(1)),
    Symbol("quasiquote"): (quasiquote_form, Arity.exact(1)),
    Symbol("unquote"): (unquote_form, Arity.any()),
    Symbol("unquote-splicing"): (unquote_splice_form, Arity.any()),
    Symbol("define-macro"): (defmacro_form, Arity.at_least(2)),
}
