from __future__ import annotations

from typing import TYPE_CHECKING

from lispdm import SExpression

if TYPE_CHECKING:
    from lispdm.types.environment import Environment


class TailCall:
    """Step result asking the trampoline to continue with `expr` in `env`."""

    __slots__ = ("expr", "env")

    def __init__(self, expr: SExpression, env: Environment):
        self.expr = expr
        self.env = env

    def __repr__(self):
        return f"TailCall({self.expr!r})"
