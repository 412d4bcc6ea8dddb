from lispdm import EvaluatorFn
from lispdm import SExpression, LispValue
from lispdm.evaluation.apply import eval_sequence
from lispdm.types.environment import Environment
from lispdm.types.tail_call import TailCall


def begin_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    # (begin) is void; otherwise the last form is in tail position
    return eval_sequence(tail, env, evaluate_fn)
