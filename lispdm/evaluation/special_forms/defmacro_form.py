"""Special form: define-macro.

Stores a compound procedure in the macro table of the current scope. At a
call site headed by the macro's name, the procedure receives the operands
unevaluated and its result is evaluated in place of the call.
"""

from __future__ import annotations

import logging

from lispdm import EvaluatorFn, SExpression, LispValue
from lispdm.errors import LispDMSyntaxError
from lispdm.evaluation.special_forms.define_form import split_signature
from lispdm.types.environment import Environment
from lispdm.types.expr import create_procedure, kind
from lispdm.types.lisp_list import List
from lispdm.types.values import Void

logger = logging.getLogger(__name__)


def defmacro_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """(define-macro (name . params) body...)"""
    signature, *body = tail
    if not isinstance(signature, List):
        raise LispDMSyntaxError(
            f"expected list as the first argument for define-macro, got {kind(signature)}"
        )

    name, params = split_signature(signature, "define-macro")
    macro = create_procedure(name.id, params, body, env, "define-macro")
    env.define_macro(name, macro)
    logger.debug("defined macro %s", name)
    return Void
