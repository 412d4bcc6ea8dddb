"""Looping special form: do.

(do ((var init step) ...) (test result...) body...)

Each iteration runs in a fresh scope holding that iteration's bindings, so
closures captured by the body keep the values they saw.
"""

from __future__ import annotations

from typing import Optional

from lispdm import SExpression, LispValue, EvaluatorFn
from lispdm.errors import LispDMSyntaxError
from lispdm.evaluation.apply import eval_sequence
from lispdm.printer import to_write
from lispdm.types.environment import Environment
from lispdm.types.expr import is_truthy, kind
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.tail_call import TailCall


class DoLoopEval:
    """Implements the (do ...) loop.

    varspecs: [(var, init, step or None) ...]
    end_clause: [test expr*]
    body: repeated forms executed each iteration
    """

    def __init__(
        self,
        varspecs: list[tuple[Symbol, SExpression, Optional[SExpression]]],
        end_clause: tuple,
        body: list[SExpression],
        evaluate_fn: EvaluatorFn,
    ):
        self.varspecs = varspecs
        self.end_clause = end_clause
        self.body = body
        self.evaluate_fn: EvaluatorFn = evaluate_fn

    @classmethod
    def parse(cls, tail: list[SExpression], evaluate_fn: EvaluatorFn) -> DoLoopEval:
        specs, end_clause, *body = tail
        if not isinstance(specs, List) or specs.is_dotted():
            raise LispDMSyntaxError(f"expected list of variable specs for do, got {kind(specs)}")
        varspecs = []
        for spec in specs:
            if (
                not isinstance(spec, List)
                or spec.is_dotted()
                or len(spec) not in (2, 3)
                or not isinstance(spec.car(), Symbol)
            ):
                raise LispDMSyntaxError(f"expected (var init [step]) in do, got {to_write(spec)}")
            var, init, *step = spec.elements()
            varspecs.append((var, init, step[0] if step else None))
        if not isinstance(end_clause, List) or end_clause.is_empty() or end_clause.is_dotted():
            raise LispDMSyntaxError(f"expected (test result...) end clause for do, got {to_write(end_clause)}")
        return cls(varspecs, end_clause.elements(), body, evaluate_fn)

    def eval(self, env: Environment) -> LispValue | TailCall:
        """Evaluate the do loop by stepping until the end test is true."""
        evaluate_fn = self.evaluate_fn

        # 1: inits are evaluated in the enclosing scope
        scope = env.extend()
        for var, init, _ in self.varspecs:
            scope.define(var, evaluate_fn(init, env))

        test_expr, *exit_exprs = self.end_clause

        # 2: loop
        while not is_truthy(evaluate_fn(test_expr, scope)):
            for expr in self.body:
                evaluate_fn(expr, scope)

            # 3: steps see the old bindings and populate a fresh scope
            next_scope = env.extend()
            for var, _, step in self.varspecs:
                value = scope.lookup(var) if step is None else evaluate_fn(step, scope)
                next_scope.define(var, value)
            scope = next_scope

        # 4: result expressions run with the final bindings; none means void
        return eval_sequence(exit_exprs, scope, evaluate_fn)


def do_loop_form(
    env: Environment,
    tail: list[SExpression],
    evaluate_fn: EvaluatorFn,
) -> LispValue | TailCall:
    """Special form (do ...): evaluate a general iteration construct."""
    return DoLoopEval.parse(tail, evaluate_fn).eval(env)
