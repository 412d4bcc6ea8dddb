"""Atomic runtime values that have no direct Python counterpart.

Integers, floats and booleans are plain ``int``/``float``/``bool``. The
classes here cover the remaining members of the value union: the void
marker, mutable strings, characters and ports.
"""

from __future__ import annotations

from typing import IO, Iterable, Optional

from lispdm.errors import LispDMEvalError


class VoidType:
    """The unspecified value produced by evaluation (define, set!, ...)."""

    __slots__ = ()

    def __repr__(self):
        return "#<void>"


Void = VoidType()


class MString:
    """A mutable string buffer shared by reference.

    Binding a string to a variable or passing it as an argument shares the
    buffer, so ``string-set!`` through one alias is visible through all.
    ``==`` compares contents; identity is what ``eq?``/``eqv?`` look at.
    """

    __slots__ = ("chars",)

    def __init__(self, text: str | Iterable[str] = ""):
        self.chars: list[str] = list(text)

    def __str__(self) -> str:
        return "".join(self.chars)

    def __repr__(self) -> str:
        return f"MString({str(self)!r})"

    def __len__(self) -> int:
        return len(self.chars)

    def __getitem__(self, index: int) -> str:
        return self.chars[index]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MString) and self.chars == other.chars

    __hash__ = None  # mutable

    def set(self, index: int, ch: str) -> None:
        self.chars[index] = ch

    def fill(self, ch: str) -> None:
        self.chars[:] = [ch] * len(self.chars)

    def copy(self) -> MString:
        return MString(self.chars)


class Char:
    __slots__ = ("value",)

    def __init__(self, value: str):
        if len(value) != 1:
            raise ValueError(f"character must be a single code point, got {value!r}")
        self.value = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Char) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("char", self.value))

    def __repr__(self) -> str:
        return f"Char({self.value!r})"

    def __str__(self) -> str:
        return self.value


class Port:
    """Opaque I/O handle wrapping a Python text stream.

    A closed port refuses further I/O. Only ports that own their stream
    (file ports) close it; the standard streams stay open for the host.
    """

    __slots__ = ("name", "stream", "is_input", "owns_stream", "closed")

    def __init__(self, name: str, stream: IO[str], is_input: bool, owns_stream: bool = False):
        self.name = name
        self.stream = stream
        self.is_input = is_input
        self.owns_stream = owns_stream
        self.closed = False

    def _check_open(self) -> None:
        if self.closed:
            raise LispDMEvalError(f"port {self.name} is closed")

    def read_line(self) -> Optional[str]:
        self._check_open()
        line = self.stream.readline()
        if line == "":
            return None
        return line[:-1] if line.endswith("\n") else line

    def read_char(self) -> Optional[str]:
        self._check_open()
        return self.stream.read(1) or None

    def read_string(self, k: Optional[int] = None) -> Optional[str]:
        """The next `k` characters, or everything left when `k` is None."""
        self._check_open()
        text = self.stream.read() if k is None else self.stream.read(k)
        return text or None

    def write(self, text: str) -> None:
        self._check_open()
        self.stream.write(text)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.owns_stream:
            self.stream.close()

    def __enter__(self) -> Port:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"#<port {self.name}>"
