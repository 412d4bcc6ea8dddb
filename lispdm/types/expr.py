"""Helpers over the closed set of LispDM value kinds.

`kind` names a value for diagnostics, the `into_*` functions are typed
extraction (they raise LispDMTypeError carrying the value), and the
equivalence predicates back `eq?`, `eqv?` and `equal?`.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from lispdm import LispValue, SExpression
from lispdm.errors import LispDMSyntaxError, LispDMTypeError
from lispdm.types.environment import Environment
from lispdm.types.lisp_list import List
from lispdm.types.procedure import CompoundProcedure, Procedure, ProcedureParams
from lispdm.types.symbol import Symbol
from lispdm.types.values import Char, MString, Port, VoidType

logger = logging.getLogger(__name__)


def kind(value: LispValue) -> str:
    # bool before int: True is an int in Python
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, Symbol):
        return "symbol"
    if isinstance(value, MString):
        return "string"
    if isinstance(value, Char):
        return "char"
    if isinstance(value, List):
        return "dotted list" if value.is_dotted() else "list"
    if isinstance(value, VoidType):
        return "void"
    if isinstance(value, Procedure):
        return "procedure"
    if isinstance(value, Port):
        return "port"
    return type(value).__name__


def is_truthy(value: LispValue) -> bool:
    """Only #f is false; the empty list, 0 and "" are all true."""
    return value is not False


def is_number(value: LispValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_integer(value: LispValue) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_self_evaluating(value: LispValue) -> bool:
    return isinstance(value, (int, float, bool, MString, Char))


# -------------------------------
# Typed extraction
# -------------------------------
def _mismatch(expected: str, value: LispValue, who: Optional[str]) -> LispDMTypeError:
    where = f" for {who}" if who else ""
    return LispDMTypeError(f"expected {expected}{where}, got {kind(value)}", value)


def into_symbol(value: LispValue, who: Optional[str] = None) -> Symbol:
    if not isinstance(value, Symbol):
        raise _mismatch("symbol", value, who)
    return value


def into_list(value: LispValue, who: Optional[str] = None) -> List:
    if not isinstance(value, List):
        raise _mismatch("list", value, who)
    return value


def into_proper_list(value: LispValue, who: Optional[str] = None) -> List:
    if not isinstance(value, List) or value.is_dotted():
        raise _mismatch("proper list", value, who)
    return value


def into_procedure(value: LispValue, who: Optional[str] = None) -> Procedure:
    if not isinstance(value, Procedure):
        raise _mismatch("procedure", value, who)
    return value


def into_string(value: LispValue, who: Optional[str] = None) -> MString:
    if not isinstance(value, MString):
        raise _mismatch("string", value, who)
    return value


def into_char(value: LispValue, who: Optional[str] = None) -> Char:
    if not isinstance(value, Char):
        raise _mismatch("char", value, who)
    return value


def into_integer(value: LispValue, who: Optional[str] = None) -> int:
    if not is_integer(value):
        raise _mismatch("integer", value, who)
    return value


def into_number(value: LispValue, who: Optional[str] = None) -> int | float:
    if not is_number(value):
        raise _mismatch("number", value, who)
    return value


def into_port(value: LispValue, who: Optional[str] = None) -> Port:
    if not isinstance(value, Port):
        raise _mismatch("port", value, who)
    return value


# -------------------------------
# Equivalence
# -------------------------------
def is_eqv(a: LispValue, b: LispValue) -> bool:
    """Atoms compare by type and value; strings, lists, procedures and ports by identity.

    Empty lists are all the same object as far as Lisp code can tell.
    """
    if a is b:
        return True
    if isinstance(a, (bool, int, float, Symbol, Char)):
        return type(a) is type(b) and a == b
    if isinstance(a, List) and isinstance(b, List):
        return a.is_empty() and b.is_empty()
    return False


def values_equal(a: LispValue, b: LispValue) -> bool:
    """Structural equality: lists element-wise, strings by content.

    Nested lists are walked with an explicit stack, so depth is bounded by
    memory rather than the host recursion limit.
    """
    pending = [(a, b)]
    while pending:
        x, y = pending.pop()
        if isinstance(x, List) and isinstance(y, List):
            if len(x) != len(y) or x.kind is not y.kind:
                return False
            pending.extend(zip(x, y))
        elif isinstance(x, MString) and isinstance(y, MString):
            if x != y:
                return False
        elif not is_eqv(x, y):
            return False
    return True


# -------------------------------
# Procedure construction
# -------------------------------
def parse_params(params: SExpression, form: str = "lambda") -> ProcedureParams:
    """Read a parameter pattern as written in `lambda`, `define` or `define-macro`.

    ``(a b)`` is fixed, a bare symbol is variadic and ``(a b . rest)`` is mixed.
    """
    if isinstance(params, Symbol):
        return ProcedureParams.variadic(params)
    if not isinstance(params, List):
        raise LispDMSyntaxError(
            f"expected list, symbol or dotted list as parameters for {form}, got {kind(params)}"
        )
    names = []
    for position, param in enumerate(params, start=1):
        if not isinstance(param, Symbol):
            raise LispDMSyntaxError(
                f"expected symbols in {form} parameters, got {kind(param)} at position {position}"
            )
        names.append(param)
    if params.is_dotted():
        rest = names.pop()
        return ProcedureParams.mixed(names, rest)
    return ProcedureParams.fixed(names)


def create_procedure(
    name: Optional[str],
    params: SExpression,
    body: Sequence[SExpression],
    env: Environment,
    form: str = "lambda",
) -> CompoundProcedure:
    proc = CompoundProcedure(name, parse_params(params, form), body, env)
    logger.debug("created %s with arity %s", proc, proc.arity)
    return proc
