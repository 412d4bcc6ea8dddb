from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.types.environment import Environment
from lispdm.types.expr import is_truthy
from lispdm.types.tail_call import TailCall


def and_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue | TailCall:
    """Short-circuiting logical AND special form.

    (and a b c ...) evaluates each operand left-to-right until #f is found,
    which is returned immediately. Otherwise the last operand is evaluated in
    tail position and its value is the result. With zero operands, returns #t.
    """
    if not tail:
        return True

    for expr in tail[:-1]:
        if not is_truthy(evaluate_fn(expr, env)):
            return False
    return TailCall(tail[-1], env)


def or_form(env: Environment, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> LispValue | TailCall:
    """Short-circuiting logical OR special form.

    (or a b c ...) evaluates operands left-to-right and returns the first
    value that is not #f. The last operand is evaluated in tail position.
    With zero operands, returns #f.
    """
    if not tail:
        return False

    for expr in tail[:-1]:
        val = evaluate_fn(expr, env)
        if is_truthy(val):
            return val
    return TailCall(tail[-1], env)
