"""Built-in procedures for the LispDM runtime environment.

This module defines core arithmetic, comparison, list processing,
equivalence, type predicates and evaluation helpers exposed to Lisp code.
Every native operation takes ``(env, args)``; argument counts are checked
centrally from the arity each procedure registers with.
"""

from __future__ import annotations

from itertools import count
from typing import Callable

from lispdm import LispValue
from lispdm.builtin.registry import ProcedureSpec, define_procedures
from lispdm.errors import LispDMEvalError, LispDMTypeError
from lispdm.evaluation.apply import apply as apply_engine
from lispdm.evaluation.evaluator import evaluate
from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.expr import (
    into_integer,
    into_list,
    into_number,
    into_procedure,
    into_proper_list,
    is_eqv,
    is_integer,
    is_number,
    kind,
    values_equal,
)
from lispdm.types.lisp_list import List, make_list
from lispdm.types.procedure import Procedure
from lispdm.types.symbol import Symbol
from lispdm.types.tail_call import TailCall
from lispdm.types.values import Char, MString, Port

_gensym_counter = count(1)


def _numbers(name: str, args: list[LispValue]) -> list[int | float]:
    return [into_number(a, name) for a in args]


def _integers(name: str, args: list[LispValue]) -> list[int]:
    return [into_integer(a, name) for a in args]


def _truncate_div(n: int, d: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(n) // abs(d)
    return q if (n < 0) == (d < 0) else -q


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the numeric sum of all arguments; (+) is 0."""
    result = 0
    for x in _numbers("+", args):
        result += x
    return result


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract all subsequent numbers from the first; unary negation for one arg."""
    nums = _numbers("-", args)
    if len(nums) == 1:
        return -nums[0]
    result = nums[0]
    for x in nums[1:]:
        result -= x
    return result


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Return the product of all arguments; (*) is 1."""
    result = 1
    for x in _numbers("*", args):
        result *= x
    return result


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """Divide left-to-right; with one arg returns the reciprocal.

    Two integers divide to an integer, truncated toward zero.
    """
    nums = _numbers("/", args)
    if len(nums) == 1:
        nums = [1, nums[0]]
    result = nums[0]
    try:
        for x in nums[1:]:
            if is_integer(result) and is_integer(x):
                result = _truncate_div(result, x)
            else:
                result = result / x
    except ZeroDivisionError as e:
        raise LispDMEvalError("division by zero") from e
    return result


def quotient(env: Environment, args: list[LispValue]) -> LispValue:
    n, d = _integers("quotient", args)
    if d == 0:
        raise LispDMEvalError("division by zero in quotient")
    return _truncate_div(n, d)


def remainder(env: Environment, args: list[LispValue]) -> LispValue:
    """(remainder n d): sign follows the dividend."""
    n, d = _integers("remainder", args)
    if d == 0:
        raise LispDMEvalError("division by zero in remainder")
    return n - d * _truncate_div(n, d)


def modulo(env: Environment, args: list[LispValue]) -> LispValue:
    """(modulo n d): sign follows the divisor."""
    n, d = _integers("modulo", args)
    if d == 0:
        raise LispDMEvalError("division by zero in modulo")
    return n % d


def absolute(env: Environment, args: list[LispValue]) -> LispValue:
    return abs(into_number(args[0], "abs"))


def minimum(env: Environment, args: list[LispValue]) -> LispValue:
    return min(_numbers("min", args))


def maximum(env: Environment, args: list[LispValue]) -> LispValue:
    return max(_numbers("max", args))


# -------------------------------
# Comparison
# -------------------------------
def _chain(name: str, args: list[LispValue], op: Callable[[LispValue, LispValue], bool]) -> bool:
    nums = _numbers(name, args)
    return all(op(a, b) for a, b in zip(nums, nums[1:]))


def num_eq(env: Environment, args: list[LispValue]) -> bool:
    """Chainable numeric equality: #t if a0 = a1 = a2 ..."""
    return _chain("=", args, lambda a, b: a == b)


def lt(env: Environment, args: list[LispValue]) -> bool:
    """Chainable less-than: #t if a0 < a1 < a2 ... holds for all pairs."""
    return _chain("<", args, lambda a, b: a < b)


def lte(env: Environment, args: list[LispValue]) -> bool:
    """Chainable less-or-equal: #t if a0 <= a1 <= a2 ... holds for all pairs."""
    return _chain("<=", args, lambda a, b: a <= b)


def gt(env: Environment, args: list[LispValue]) -> bool:
    """Chainable greater-than: #t if a0 > a1 > a2 ... holds for all pairs."""
    return _chain(">", args, lambda a, b: a > b)


def gte(env: Environment, args: list[LispValue]) -> bool:
    """Chainable greater-or-equal: #t if a0 >= a1 >= a2 ... holds for all pairs."""
    return _chain(">=", args, lambda a, b: a >= b)


# -------------------------------
# Lists
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> List:
    """Prepend head to tail.

    A list tail gives a list one longer (proper or dotted as the tail is);
    any other tail gives the dotted pair (head . tail).
    """
    head, tail = args
    return List.cons(head, tail)


def car(env: Environment, args: list[LispValue]) -> LispValue:
    return into_list(args[0], "car").car()


def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    """Everything after the first element; the cdr of (a . b) is b."""
    return into_list(args[0], "cdr").cdr()


def list_builtin(env: Environment, args: list[LispValue]) -> List:
    """Construct a proper list from the provided arguments."""
    return List.proper(args)


def length(env: Environment, args: list[LispValue]) -> int:
    return len(into_proper_list(args[0], "length"))


def append(env: Environment, args: list[LispValue]) -> LispValue:
    """
    Concatenate lists. Every argument but the last must be a proper list;
    the last may be anything and becomes the tail of the result.
    """
    if not args:
        return List.empty()
    items: list[LispValue] = []
    for arg in args[:-1]:
        items.extend(into_proper_list(arg, "append").elements())
    return make_list(items, args[-1])


def reverse(env: Environment, args: list[LispValue]) -> List:
    return List.proper(reversed(into_proper_list(args[0], "reverse").elements()))


def list_tail(env: Environment, args: list[LispValue]) -> LispValue:
    """(list-tail lst k): the list left after dropping k elements."""
    lst = into_list(args[0], "list-tail")
    k = into_integer(args[1], "list-tail")
    if k < 0:
        raise LispDMTypeError(f"expected non-negative index for list-tail, got {k}", k)
    rest: LispValue = lst
    for _ in range(k):
        if not isinstance(rest, List) or rest.is_empty():
            raise LispDMEvalError(f"index {k} out of range for list-tail")
        rest = rest.cdr()
    return rest


def list_ref(env: Environment, args: list[LispValue]) -> LispValue:
    lst = into_list(args[0], "list-ref")
    k = into_integer(args[1], "list-ref")
    elements = lst.elements()
    if not 0 <= k < len(elements):
        raise LispDMEvalError(f"index {k} out of range for list-ref")
    return elements[k]


def is_null(env: Environment, args: list[LispValue]) -> bool:
    """Predicate: #t for the empty list only."""
    x = args[0]
    return isinstance(x, List) and x.is_empty()


def is_pair(env: Environment, args: list[LispValue]) -> bool:
    x = args[0]
    return isinstance(x, List) and not x.is_empty()


def is_list(env: Environment, args: list[LispValue]) -> bool:
    x = args[0]
    return isinstance(x, List) and x.is_proper()


# -------------------------------
# Equivalence
# -------------------------------
def eqv(env: Environment, args: list[LispValue]) -> bool:
    """Atoms by type and value; strings, lists, procedures and ports by identity."""
    a, b = args
    return is_eqv(a, b)


def equal(env: Environment, args: list[LispValue]) -> bool:
    """Deep equality: lists element-wise, strings by content."""
    a, b = args
    return values_equal(a, b)


# -------------------------------
# Predicates
# -------------------------------
def logical_not(env: Environment, args: list[LispValue]) -> bool:
    """Logical NOT; only #f is false."""
    return args[0] is False


def _predicate(test: Callable[[LispValue], bool]) -> Callable[[Environment, list[LispValue]], bool]:
    def predicate(env: Environment, args: list[LispValue]) -> bool:
        return test(args[0])

    return predicate


is_boolean = _predicate(lambda x: isinstance(x, bool))
is_number_p = _predicate(is_number)
is_integer_p = _predicate(is_integer)
is_float = _predicate(lambda x: isinstance(x, float))
is_symbol = _predicate(lambda x: isinstance(x, Symbol))
is_string = _predicate(lambda x: isinstance(x, MString))
is_char = _predicate(lambda x: isinstance(x, Char))
is_procedure = _predicate(lambda x: isinstance(x, Procedure))
is_port = _predicate(lambda x: isinstance(x, Port))


# -------------------------------
# Evaluation
# -------------------------------
def eval_builtin(env: Environment, args: list[LispValue]) -> TailCall:
    """(eval expr): evaluate a datum as code in the caller's scope, in tail position."""
    return TailCall(args[0], env)


def apply(env: Environment, args: list[LispValue]) -> LispValue | TailCall:
    """(apply f a ... lst): call f with the a's followed by the elements of lst.

    Delegates to the central application engine, so a compound procedure's
    body continues on the caller's trampoline.
    """
    proc = into_procedure(args[0], "apply")
    spread = into_proper_list(args[-1], "apply")
    call_args = list(args[1:-1]) + list(spread.elements())
    return apply_engine(proc, call_args, env, evaluate)


def gensym(env: Environment, args: list[LispValue]) -> Symbol:
    """(gensym) or (gensym prefix): a symbol no reader-produced code uses."""
    prefix = "gensym"
    if args:
        p = args[0]
        if isinstance(p, (Symbol, MString)):
            prefix = str(p)
        else:
            raise LispDMTypeError(f"expected symbol or string as gensym prefix, got {kind(p)}", p)
    return Symbol(f"{prefix}-{next(_gensym_counter)}")


BUILTINS: list[ProcedureSpec] = [
    ("+", add, Arity.any()),
    ("-", sub, Arity.at_least(1)),
    ("*", mul, Arity.any()),
    ("/", div, Arity.at_least(1)),
    ("quotient", quotient, Arity.exact(2)),
    ("remainder", remainder, Arity.exact(2)),
    ("modulo", modulo, Arity.exact(2)),
    ("abs", absolute, Arity.exact(1)),
    ("min", minimum, Arity.at_least(1)),
    ("max", maximum, Arity.at_least(1)),
    ("=", num_eq, Arity.at_least(2)),
    ("<", lt, Arity.at_least(2)),
    ("<=", lte, Arity.at_least(2)),
    (">", gt, Arity.at_least(2)),
    (">=", gte, Arity.at_least(2)),
    ("cons", cons, Arity.exact(2)),
    ("car", car, Arity.exact(1)),
    ("cdr", cdr, Arity.exact(1)),
    ("list", list_builtin, Arity.any()),
    ("length", length, Arity.exact(1)),
    ("append", append, Arity.any()),
    ("reverse", reverse, Arity.exact(1)),
    ("list-tail", list_tail, Arity.exact(2)),
    ("list-ref", list_ref, Arity.exact(2)),
    ("null?", is_null, Arity.exact(1)),
    ("pair?", is_pair, Arity.exact(1)),
    ("list?", is_list, Arity.exact(1)),
    ("eq?", eqv, Arity.exact(2)),
    ("eqv?", eqv, Arity.exact(2)),
    ("equal?", equal, Arity.exact(2)),
    ("not", logical_not, Arity.exact(1)),
    ("boolean?", is_boolean, Arity.exact(1)),
    ("number?", is_number_p, Arity.exact(1)),
    ("integer?", is_integer_p, Arity.exact(1)),
    ("float?", is_float, Arity.exact(1)),
    ("symbol?", is_symbol, Arity.exact(1)),
    ("string?", is_string, Arity.exact(1)),
    ("char?", is_char, Arity.exact(1)),
    ("procedure?", is_procedure, Arity.exact(1)),
    ("port?", is_port, Arity.exact(1)),
    ("eval", eval_builtin, Arity.exact(1)),
    ("apply", apply, Arity.at_least(2)),
    ("gensym", gensym, Arity.range(0, 1)),
]


def register(env: Environment) -> None:
    """Register all builtin procedures into the given environment."""
    define_procedures(env, BUILTINS)
