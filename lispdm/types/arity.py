from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lispdm.errors import LispDMArityError


@dataclass(frozen=True)
class Arity:
    """Argument-count contract: exact N, at least N, any count, or [min, max]."""

    minimum: int = 0
    maximum: Optional[int] = None  # None means unbounded

    @classmethod
    def exact(cls, n: int) -> Arity:
        return cls(n, n)

    @classmethod
    def at_least(cls, n: int) -> Arity:
        return cls(n, None)

    @classmethod
    def any(cls) -> Arity:
        return cls(0, None)

    @classmethod
    def range(cls, lo: int, hi: int) -> Arity:
        if hi < lo:
            raise ValueError(f"empty arity range {lo}..{hi}")
        return cls(lo, hi)

    def accepts(self, count: int) -> bool:
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def check(self, name: str, count: int) -> None:
        if not self.accepts(count):
            raise LispDMArityError(f"expected {self} arguments for {name}, got {count}")

    def __str__(self) -> str:
        if self.maximum is None:
            return "any" if self.minimum == 0 else f"at least {self.minimum}"
        if self.minimum == self.maximum:
            return str(self.minimum)
        return f"{self.minimum} to {self.maximum}"
