"""Procedure values: native (atomic) procedures and user closures (compound)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from lispdm import LispValue, SExpression
from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.symbol import Symbol

# (env, args) -> value or TailCall
NativeFn = Callable[[Environment, list], LispValue]


class ProcedureKind(Enum):
    # Operands are passed unevaluated
    SPECIAL_FORM = "special form"
    # Operands are evaluated left to right before the call
    PROCEDURE = "procedure"


class ParamsKind(Enum):
    FIXED = "fixed"
    VARIADIC = "variadic"
    MIXED = "mixed"


@dataclass(frozen=True)
class ProcedureParams:
    """Parameter pattern of a compound procedure.

    ``(a b)`` is FIXED, a bare symbol ``args`` is VARIADIC and the dotted
    ``(a b . rest)`` is MIXED.
    """

    required: tuple[Symbol, ...] = ()
    rest: Optional[Symbol] = None

    @classmethod
    def fixed(cls, names: Sequence[Symbol]) -> ProcedureParams:
        return cls(tuple(names), None)

    @classmethod
    def variadic(cls, name: Symbol) -> ProcedureParams:
        return cls((), name)

    @classmethod
    def mixed(cls, names: Sequence[Symbol], rest: Symbol) -> ProcedureParams:
        return cls(tuple(names), rest)

    @property
    def kind(self) -> ParamsKind:
        if self.rest is None:
            return ParamsKind.FIXED
        return ParamsKind.MIXED if self.required else ParamsKind.VARIADIC

    @property
    def arity(self) -> Arity:
        if self.rest is None:
            return Arity.exact(len(self.required))
        return Arity.at_least(len(self.required))


class Procedure:
    """Common surface of atomic and compound procedures."""

    __slots__ = ("_name",)

    def __init__(self, name: Optional[str]):
        self._name = name

    @property
    def name(self) -> str:
        return self._name if self._name is not None else "anon"

    @property
    def is_special_form(self) -> bool:
        return False

    @property
    def arity(self) -> Arity:
        raise NotImplementedError


class AtomicProcedure(Procedure):
    """A procedure implemented natively in Python."""

    __slots__ = ("proc_kind", "fn", "_arity")

    def __init__(self, name: str, proc_kind: ProcedureKind, fn: NativeFn, arity: Arity):
        super().__init__(name)
        self.proc_kind = proc_kind
        self.fn = fn
        self._arity = arity

    @property
    def is_special_form(self) -> bool:
        return self.proc_kind is ProcedureKind.SPECIAL_FORM

    @property
    def arity(self) -> Arity:
        return self._arity

    def __str__(self) -> str:
        if self.is_special_form:
            return f"#<special form '{self.name}'>"
        return f"#<atomic procedure '{self.name}'>"

    __repr__ = __str__


class CompoundProcedure(Procedure):
    """A closure: parameters, body and the environment it was created in."""

    __slots__ = ("params", "body", "env")

    def __init__(
        self,
        name: Optional[str],
        params: ProcedureParams,
        body: Sequence[SExpression],
        env: Environment,
    ):
        super().__init__(name)
        self.params = params
        self.body: tuple = tuple(body)
        self.env = env

    @property
    def arity(self) -> Arity:
        return self.params.arity

    def __str__(self) -> str:
        return f"#<compound procedure '{self.name}'>"

    __repr__ = __str__
