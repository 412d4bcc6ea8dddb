"""External representations of LispDM values.

`to_display` is what `display` prints: strings and characters appear raw.
`to_write` is what `write` and the REPL-style echo print: strings are quoted
with escapes and characters use the ``#\\x`` syntax, so the output reads
back as the same value.
"""

from __future__ import annotations

import math

from lispdm import LispValue
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.values import Char, MString

# Two-element forms printed with their reader shorthand
QUOTE_SUGAR = {
    "quote": "'",
    "quasiquote": "`",
    "unquote": ",",
    "unquote-splicing": ",@",
}

CHAR_NAMES = {" ": "space", "\n": "newline", "\t": "tab"}

STRING_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _format_float(x: float) -> str:
    if math.isnan(x):
        return "+nan.0"
    if math.isinf(x):
        return "+inf.0" if x > 0 else "-inf.0"
    return repr(x)


def _format_list(lst: List, write: bool) -> str:
    items = lst.elements()
    if lst.is_proper() and len(items) == 2 and isinstance(items[0], Symbol):
        prefix = QUOTE_SUGAR.get(items[0].id)
        if prefix is not None:
            return prefix + _format(items[1], write)
    body = " ".join(_format(x, write) for x in items)
    if lst.is_dotted():
        body += " . " + _format(lst.tail, write)
    return f"({body})"


def _format(value: LispValue, write: bool) -> str:
    if value is True:
        return "#t"
    if value is False:
        return "#f"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, List):
        return _format_list(value, write)
    if isinstance(value, MString):
        if not write:
            return str(value)
        return '"' + "".join(STRING_ESCAPES.get(c, c) for c in value.chars) + '"'
    if isinstance(value, Char):
        if not write:
            return value.value
        return "#\\" + CHAR_NAMES.get(value.value, value.value)
    if isinstance(value, Symbol):
        return value.id
    # int, Void, procedures and ports carry their own printed form
    return str(value) if isinstance(value, int) else repr(value)


def to_display(value: LispValue) -> str:
    return _format(value, write=False)


def to_write(value: LispValue) -> str:
    return _format(value, write=True)
