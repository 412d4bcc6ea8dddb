"""Helpers for binding native procedures into an environment."""

from __future__ import annotations

from typing import Iterable

from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.procedure import AtomicProcedure, NativeFn, ProcedureKind
from lispdm.types.symbol import Symbol

# (name, native operation, arity)
ProcedureSpec = tuple[str, NativeFn, Arity]


def define_procedures(
    env: Environment,
    specs: Iterable[ProcedureSpec],
    kind: ProcedureKind = ProcedureKind.PROCEDURE,
) -> None:
    """Bind each spec in `env` as an atomic procedure of the given kind."""
    env.update({Symbol(name): AtomicProcedure(name, kind, fn, arity) for name, fn, arity in specs})
