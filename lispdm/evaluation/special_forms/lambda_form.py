from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.types.environment import Environment
from lispdm.types.expr import create_procedure


def lambda_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    # (lambda params body...): params is a list (fixed), a symbol (variadic)
    # or a dotted list (mixed). The body is an implicit begin.
    params, *body = tail
    return create_procedure(None, params, body, env)
