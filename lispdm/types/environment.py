"""Runtime environment for LispDM.

An Environment is one scope: a mapping of Symbols to values, a separate
mapping of macro names to macro procedures, and an optional `outer` link.
Scopes are shared by reference; a closure keeps its defining scope alive
for as long as the closure itself is reachable.
"""

from __future__ import annotations

from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from lispdm import LispValue
from lispdm.errors import LispDMTypeError, LispDMUnboundAssignment, LispDMUnboundSymbol
from lispdm.types.symbol import Symbol

if TYPE_CHECKING:
    from lispdm.types.procedure import CompoundProcedure


class Environment:
    """Hierarchical mapping from Symbols to Lisp values and macros."""

    __slots__ = ("vars", "macros", "outer", "_cwd")

    def __init__(self, outer: Optional[Environment] = None, cwd: Optional[Path] = None):
        self.vars: dict[Symbol, LispValue] = {}
        self.macros: dict[Symbol, CompoundProcedure] = {}
        self.outer: Environment | None = outer
        # Only meaningful on the root scope; see `cwd`
        self._cwd: Path | None = Path(cwd) if cwd is not None else None

    def extend(self) -> Environment:
        """Create an empty scope whose parent is this one."""
        return Environment(outer=self)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def is_root(self) -> bool:
        return self.outer is None

    @property
    def cwd(self) -> Path:
        """Directory that relative `load` paths resolve against."""
        root = self.root()
        return root._cwd if root._cwd is not None else Path.cwd()

    @cwd.setter
    def cwd(self, path: Path) -> None:
        self.root()._cwd = Path(path)

    # --- Value bindings ---

    def define(self, name: Symbol, value: LispValue) -> None:
        """Bind `name` in this scope, replacing any existing binding here."""
        if not isinstance(name, Symbol):
            raise LispDMTypeError(f"cannot bind {name!r}: not a symbol", name)
        self.vars[name] = value

    def find(self, name: Symbol) -> Optional[Environment]:
        """Find the nearest scope in the chain that binds `name`."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env
            env = env.outer
        return None

    def has(self, name: Symbol) -> bool:
        """True if this scope (not its parents) binds `name`."""
        return name in self.vars

    def get(self, name: Symbol) -> Optional[LispValue]:
        """Innermost binding of `name`, or None when no scope binds it."""
        env = self.find(name)
        return None if env is None else env.vars[name]

    def lookup(self, name: Symbol) -> LispValue:
        env = self.find(name)
        if env is None:
            raise LispDMUnboundSymbol(f"undefined symbol: {name}")
        return env.vars[name]

    def set(self, name: Symbol, value: LispValue) -> None:
        """Update the nearest existing binding of `name`; never creates one."""
        env = self.find(name)
        if env is None:
            raise LispDMUnboundAssignment(f"symbol '{name}' is not defined")
        env.vars[name] = value

    def update(self, mapping: dict[Symbol, LispValue]) -> None:
        """Bulk-define a mapping of Symbol -> value in the current scope."""
        for k, v in mapping.items():
            self.define(k, v)

    # --- Macro bindings ---

    def define_macro(self, name: Symbol, macro: CompoundProcedure) -> None:
        self.macros[name] = macro

    def get_macro(self, name: Symbol) -> Optional[CompoundProcedure]:
        env: Optional[Environment] = self
        while env is not None:
            macro = env.macros.get(name)
            if macro is not None:
                return macro
            env = env.outer
        return None

    def has_macro(self, name: Symbol) -> bool:
        return self.get_macro(name) is not None

    # --- Debugging ---

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(str(k) for k in self.vars))
        buffer.write("}")

    def __str__(self) -> str:
        """Single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")
            return buffer.getvalue()

    def __repr__(self) -> str:
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"<Environment {len(self.vars)} bindings, depth {depth}>"
