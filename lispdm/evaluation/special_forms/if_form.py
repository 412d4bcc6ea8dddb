from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.types.environment import Environment
from lispdm.types.expr import is_truthy
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Void


def if_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    cond = evaluate_fn(tail[0], env)

    if is_truthy(cond):
        return TailCall(tail[1], env)
    elif len(tail) > 2:
        return TailCall(tail[2], env)
    else:
        return Void
