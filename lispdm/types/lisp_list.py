"""List representation shared by proper and dotted lists.

A list is stored as the sequence of its leading elements plus an optional
boxed tail. Construction flattens: when the tail is itself a list, its
elements are spliced in and its own tail takes over, until the tail is not
a list. After normalization the tail is either absent (proper list) or a
non-list value (dotted list), which makes ``kind`` and ``is_empty`` O(1).

Element storage is an immutable tuple plus a start offset, so ``cdr`` and
``split_first`` return views that share the tuple instead of copying it.
"""

from __future__ import annotations

from enum import Enum
from itertools import islice
from typing import Iterable, Iterator

from lispdm import LispValue
from lispdm.errors import LispDMEmptyListError, LispDMTypeError


class ListKind(Enum):
    PROPER = "proper"
    DOTTED = "dotted"


def _same(a: LispValue, b: LispValue) -> bool:
    # bool is an int subclass; 1 and #t must not compare equal
    return type(a) is type(b) and a == b


class List:
    __slots__ = ("_items", "_start", "_last")

    def __init__(self, items: Iterable[LispValue] = (), last: LispValue = None):
        items = tuple(items)
        while isinstance(last, List):
            items += last._items[last._start:]
            last = last._last
        if last is not None and not items:
            raise ValueError("a dotted list needs at least one element before its tail")
        self._items: tuple = items
        self._start: int = 0
        # None means "no tail"; no Lisp value is represented by None
        self._last: LispValue = last

    @classmethod
    def _view(cls, items: tuple, start: int, last: LispValue) -> List:
        lst = cls.__new__(cls)
        lst._items = items
        lst._start = start
        lst._last = last
        return lst

    # --- Constructors ---

    @classmethod
    def empty(cls) -> List:
        return cls()

    @classmethod
    def proper(cls, items: Iterable[LispValue] = ()) -> List:
        return cls(items)

    @classmethod
    def dotted(cls, items: Iterable[LispValue]) -> List:
        """Build a list whose final item becomes the tail.

        An empty sequence gives the empty list and a single list item gives
        that list back (flattened). A single non-list item cannot form a
        list on its own and is rejected.
        """
        items = tuple(items)
        if not items:
            return cls()
        result = make_list(items[:-1], items[-1])
        if not isinstance(result, List):
            raise ValueError("dotted list must have at least 2 elements")
        return result

    @classmethod
    def new(cls, items: Iterable[LispValue], last: LispValue = None) -> LispValue:
        """Flattening constructor; see `make_list`."""
        return make_list(items, last)

    @classmethod
    def cons(cls, head: LispValue, tail: LispValue) -> List:
        return cls((head,), tail)

    # --- Shape ---

    @property
    def kind(self) -> ListKind:
        return ListKind.PROPER if self._last is None else ListKind.DOTTED

    def is_empty(self) -> bool:
        return self._start == len(self._items) and self._last is None

    def is_proper(self) -> bool:
        return self._last is None

    def is_dotted(self) -> bool:
        return self._last is not None

    def __len__(self) -> int:
        n = len(self._items) - self._start
        return n + 1 if self._last is not None else n

    def __bool__(self) -> bool:
        # Lists are never falsy in Lisp; keep Python truthiness out of it
        return True

    # --- Access ---

    @property
    def tail(self) -> LispValue:
        """The dotted tail, or None for a proper list."""
        return self._last

    def elements(self) -> tuple:
        """The leading elements, excluding any dotted tail."""
        return self._items[self._start:]

    def car(self) -> LispValue:
        if self._start == len(self._items):
            raise LispDMEmptyListError("expected non-empty list for car")
        return self._items[self._start]

    def cdr(self) -> LispValue:
        """Everything after the first element.

        A remainder that holds only a dotted tail collapses to the bare tail,
        so the cdr of ``(1 . 2)`` is ``2``.
        """
        if self._start == len(self._items):
            raise LispDMEmptyListError("expected non-empty list for cdr")
        start = self._start + 1
        if start == len(self._items) and self._last is not None:
            return self._last
        return List._view(self._items, start, self._last)

    def split_first(self) -> tuple[LispValue, LispValue]:
        return self.car(), self.cdr()

    def pop_front(self) -> LispValue:
        """Remove and return the first element of this list object in place.

        Only the view is advanced; other lists sharing the storage are
        unaffected. Raises LispDMEmptyListError on the empty list, and
        LispDMTypeError on a single dotted pair such as ``(1 . 2)``, because
        a List object cannot turn into its bare tail. Use ``split_first``
        there.
        """
        first = self.car()
        if self._start + 1 == len(self._items) and self._last is not None:
            raise LispDMTypeError("cannot pop the head off a dotted pair", self)
        self._start += 1
        return first

    def nth(self, n: int) -> LispValue:
        if n < 0 or n >= len(self):
            raise IndexError(f"list index {n} out of range")
        idx = self._start + n
        if idx < len(self._items):
            return self._items[idx]
        return self._last

    def last(self) -> LispValue:
        if self.is_empty():
            raise LispDMEmptyListError("expected non-empty list")
        if self._last is not None:
            return self._last
        return self._items[-1]

    def but_last(self) -> Iterator[LispValue]:
        return islice(self, len(self) - 1) if len(self) else iter(())

    def __iter__(self) -> Iterator[LispValue]:
        yield from islice(self._items, self._start, None)
        if self._last is not None:
            yield self._last

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, List):
            return NotImplemented
        if len(self) != len(other) or self.kind is not other.kind:
            return False
        return all(_same(a, b) for a, b in zip(self, other))

    __hash__ = None  # structural equality, not hashable

    def __repr__(self) -> str:
        return f"List({str(self)})"

    def __str__(self) -> str:
        from lispdm.printer import to_write
        return to_write(self)


def make_list(items: Iterable[LispValue], last: LispValue = None) -> LispValue:
    """Build a normalized list, collapsing a tail with no elements before it.

    ``make_list((), 5)`` is the bare value ``5``; everything else is a List.
    """
    items = tuple(items)
    while isinstance(last, List):
        items += last.elements()
        last = last.tail
    if last is not None and not items:
        return last
    return List(items, last)
