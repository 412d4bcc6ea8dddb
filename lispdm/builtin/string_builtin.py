"""String, character and conversion procedures.

Strings are MString buffers shared by reference: `string-set!`,
`string-fill!` and `string-copy!` mutate in place and every alias sees the
change, while `string-copy`, `substring` and `string-append` always return
new buffers.
"""

from __future__ import annotations

from lispdm import LispValue
from lispdm.builtin.registry import ProcedureSpec, define_procedures
from lispdm.errors import LispDMEvalError, LispDMTypeError
from lispdm.printer import to_display
from lispdm.reader.parser import parse_number
from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.expr import into_char, into_integer, into_number, into_proper_list, into_string, into_symbol
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.values import Char, MString, Void

RADIX_DIGITS = {2: "b", 8: "o", 16: "x"}


def _index(name: str, value: LispValue, size: int, inclusive: bool = False) -> int:
    """Validate an index into a sequence of `size`; `inclusive` allows size itself."""
    k = into_integer(value, name)
    upper = size if inclusive else size - 1
    if not 0 <= k <= upper:
        raise LispDMEvalError(f"index {k} out of range for {name}")
    return k


def _bounds(name: str, s: MString, args: list[LispValue]) -> tuple[int, int]:
    """Optional (start end) arguments following a string."""
    start = _index(name, args[0], len(s), inclusive=True) if args else 0
    end = _index(name, args[1], len(s), inclusive=True) if len(args) > 1 else len(s)
    if start > end:
        raise LispDMEvalError(f"start {start} is after end {end} for {name}")
    return start, end


def _radix(name: str, args: list[LispValue]) -> int:
    if not args:
        return 10
    radix = into_integer(args[0], name)
    if radix not in (2, 8, 10, 16):
        raise LispDMEvalError(f"unsupported radix {radix} for {name}")
    return radix


# -------------------------------
# Strings
# -------------------------------
def string_length(env: Environment, args: list[LispValue]) -> int:
    return len(into_string(args[0], "string-length"))


def string_ref(env: Environment, args: list[LispValue]) -> Char:
    s = into_string(args[0], "string-ref")
    return Char(s[_index("string-ref", args[1], len(s))])


def string_set(env: Environment, args: list[LispValue]) -> LispValue:
    """(string-set! s k ch): mutate the shared buffer in place."""
    s = into_string(args[0], "string-set!")
    k = _index("string-set!", args[1], len(s))
    s.set(k, into_char(args[2], "string-set!").value)
    return Void


def string_fill(env: Environment, args: list[LispValue]) -> LispValue:
    s = into_string(args[0], "string-fill!")
    s.fill(into_char(args[1], "string-fill!").value)
    return Void


def make_string(env: Environment, args: list[LispValue]) -> MString:
    k = into_integer(args[0], "make-string")
    if k < 0:
        raise LispDMTypeError(f"expected non-negative length for make-string, got {k}", k)
    fill = into_char(args[1], "make-string").value if len(args) > 1 else " "
    return MString(fill * k)


def string_builtin(env: Environment, args: list[LispValue]) -> MString:
    """(string ch ...): a new string from characters."""
    return MString(into_char(a, "string").value for a in args)


def string_append(env: Environment, args: list[LispValue]) -> MString:
    return MString("".join(str(into_string(a, "string-append")) for a in args))


def substring(env: Environment, args: list[LispValue]) -> MString:
    s = into_string(args[0], "substring")
    start, end = _bounds("substring", s, args[1:])
    return MString(s.chars[start:end])


def string_copy(env: Environment, args: list[LispValue]) -> MString:
    s = into_string(args[0], "string-copy")
    if len(args) == 1:
        return s.copy()
    start, end = _bounds("string-copy", s, args[1:])
    return MString(s.chars[start:end])


def string_upcase(env: Environment, args: list[LispValue]) -> MString:
    return MString(str(into_string(args[0], "string-upcase")).upper())


def string_downcase(env: Environment, args: list[LispValue]) -> MString:
    return MString(str(into_string(args[0], "string-downcase")).lower())


def string_foldcase(env: Environment, args: list[LispValue]) -> MString:
    return MString(str(into_string(args[0], "string-foldcase")).casefold())


def string_copy_into(env: Environment, args: list[LispValue]) -> LispValue:
    """(string-copy! to at from [start end]): overwrite `to` in place from position `at`."""
    to = into_string(args[0], "string-copy!")
    at = _index("string-copy!", args[1], len(to), inclusive=True)
    source = into_string(args[2], "string-copy!")
    start, end = _bounds("string-copy!", source, args[3:])
    if at + (end - start) > len(to):
        raise LispDMEvalError(f"{end - start} characters do not fit at index {at} for string-copy!")
    # slice first: `to` and `from` may be the same buffer
    to.chars[at:at + end - start] = source.chars[start:end]
    return Void


def _string_compare(name: str, args: list[LispValue]) -> tuple[str, str]:
    a, b = (str(into_string(x, name)) for x in args)
    return a, b


def string_eq(env: Environment, args: list[LispValue]) -> bool:
    a, b = _string_compare("string=?", args)
    return a == b


def string_lt(env: Environment, args: list[LispValue]) -> bool:
    a, b = _string_compare("string<?", args)
    return a < b


def string_gt(env: Environment, args: list[LispValue]) -> bool:
    a, b = _string_compare("string>?", args)
    return a > b


def string_le(env: Environment, args: list[LispValue]) -> bool:
    a, b = _string_compare("string<=?", args)
    return a <= b


def string_ge(env: Environment, args: list[LispValue]) -> bool:
    a, b = _string_compare("string>=?", args)
    return a >= b


# -------------------------------
# Characters
# -------------------------------
def _recase(c: str, changed: str) -> Char:
    # Case mappings that expand to several code points leave the char alone
    return Char(changed if len(changed) == 1 else c)


def char_upcase(env: Environment, args: list[LispValue]) -> Char:
    c = into_char(args[0], "char-upcase").value
    return _recase(c, c.upper())


def char_downcase(env: Environment, args: list[LispValue]) -> Char:
    c = into_char(args[0], "char-downcase").value
    return _recase(c, c.lower())


def is_char_alphabetic(env: Environment, args: list[LispValue]) -> bool:
    return into_char(args[0], "char-alphabetic?").value.isalpha()


def is_char_numeric(env: Environment, args: list[LispValue]) -> bool:
    return into_char(args[0], "char-numeric?").value.isdigit()


def char_foldcase(env: Environment, args: list[LispValue]) -> Char:
    c = into_char(args[0], "char-foldcase").value
    return _recase(c, c.casefold())


def is_char_whitespace(env: Environment, args: list[LispValue]) -> bool:
    return into_char(args[0], "char-whitespace?").value.isspace()


def is_char_upper_case(env: Environment, args: list[LispValue]) -> bool:
    return into_char(args[0], "char-upper-case?").value.isupper()


def is_char_lower_case(env: Environment, args: list[LispValue]) -> bool:
    return into_char(args[0], "char-lower-case?").value.islower()


def digit_value(env: Environment, args: list[LispValue]) -> LispValue:
    """(digit-value ch) -> the value of a decimal digit, or #f"""
    c = into_char(args[0], "digit-value").value
    return int(c) if c.isdecimal() else False


# -------------------------------
# Conversion
# -------------------------------
def string_to_symbol(env: Environment, args: list[LispValue]) -> Symbol:
    """(string->symbol s) -> Symbol named by the contents of s"""
    return Symbol(str(into_string(args[0], "string->symbol")))


def symbol_to_string(env: Environment, args: list[LispValue]) -> MString:
    """(symbol->string x) -> a fresh string holding the symbol's name"""
    return MString(into_symbol(args[0], "symbol->string").id)


def number_to_string(env: Environment, args: list[LispValue]) -> MString:
    n = into_number(args[0], "number->string")
    radix = _radix("number->string", args[1:])
    if radix == 10:
        return MString(to_display(n))
    if not isinstance(n, int):
        raise LispDMTypeError(f"expected integer for number->string in radix {radix}, got float", n)
    digits = format(abs(n), RADIX_DIGITS[radix])
    return MString(("-" if n < 0 else "") + digits)


def string_to_number(env: Environment, args: list[LispValue]) -> LispValue:
    """(string->number s [radix]) -> the number, or #f when s is not one"""
    text = str(into_string(args[0], "string->number"))
    radix = _radix("string->number", args[1:])
    if radix == 10:
        number = parse_number(text)
        return False if number is None else number
    try:
        return int(text, radix)
    except ValueError:
        return False


def string_to_list(env: Environment, args: list[LispValue]) -> List:
    return List.proper(Char(c) for c in into_string(args[0], "string->list").chars)


def list_to_string(env: Environment, args: list[LispValue]) -> MString:
    lst = into_proper_list(args[0], "list->string")
    return MString(into_char(c, "list->string").value for c in lst)


def char_to_integer(env: Environment, args: list[LispValue]) -> int:
    return ord(into_char(args[0], "char->integer").value)


def integer_to_char(env: Environment, args: list[LispValue]) -> Char:
    n = into_integer(args[0], "integer->char")
    try:
        return Char(chr(n))
    except (ValueError, OverflowError) as e:
        raise LispDMEvalError(f"{n} is not a valid character code") from e


BUILTINS: list[ProcedureSpec] = [
    ("string-length", string_length, Arity.exact(1)),
    ("string-ref", string_ref, Arity.exact(2)),
    ("string-set!", string_set, Arity.exact(3)),
    ("string-fill!", string_fill, Arity.exact(2)),
    ("make-string", make_string, Arity.range(1, 2)),
    ("string", string_builtin, Arity.any()),
    ("string-append", string_append, Arity.any()),
    ("substring", substring, Arity.range(2, 3)),
    ("string-copy", string_copy, Arity.range(1, 3)),
    ("string-upcase", string_upcase, Arity.exact(1)),
    ("string-downcase", string_downcase, Arity.exact(1)),
    ("string-foldcase", string_foldcase, Arity.exact(1)),
    ("string-copy!", string_copy_into, Arity.range(3, 5)),
    ("string=?", string_eq, Arity.exact(2)),
    ("string<?", string_lt, Arity.exact(2)),
    ("string>?", string_gt, Arity.exact(2)),
    ("string<=?", string_le, Arity.exact(2)),
    ("string>=?", string_ge, Arity.exact(2)),
    ("char-upcase", char_upcase, Arity.exact(1)),
    ("char-downcase", char_downcase, Arity.exact(1)),
    ("char-foldcase", char_foldcase, Arity.exact(1)),
    ("char-alphabetic?", is_char_alphabetic, Arity.exact(1)),
    ("char-numeric?", is_char_numeric, Arity.exact(1)),
    ("char-whitespace?", is_char_whitespace, Arity.exact(1)),
    ("char-upper-case?", is_char_upper_case, Arity.exact(1)),
    ("char-lower-case?", is_char_lower_case, Arity.exact(1)),
    ("digit-value", digit_value, Arity.exact(1)),
    ("string->symbol", string_to_symbol, Arity.exact(1)),
    ("symbol->string", symbol_to_string, Arity.exact(1)),
    ("number->string", number_to_string, Arity.range(1, 2)),
    ("string->number", string_to_number, Arity.range(1, 2)),
    ("string->list", string_to_list, Arity.exact(1)),
    ("list->string", list_to_string, Arity.exact(1)),
    ("char->integer", char_to_integer, Arity.exact(1)),
    ("integer->char", integer_to_char, Arity.exact(1)),
]


def register(env: Environment) -> None:
    """Register string and character procedures into the given environment."""
    define_procedures(env, BUILTINS)
