"""
  LispDM Reader, Lexer and Parser

- Streaming, lazy parsing
- Emits LispDM values directly; code and data share one representation:

    - integers (incl. #x / #o / #b radix) -> int
    - decimals and exponents -> float
    - #t / #f / #true / #false -> bool
    - #\\a, #\\space, #\\newline, #\\tab -> Char
    - "strings" -> MString (fresh buffer per literal read)
    - symbols -> Symbol
    - lists and dotted lists -> List (normalized on construction)
    - 'x `x ,x ,@x -> (quote x) (quasiquote x) (unquote x) (unquote-splicing x)
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from lispdm import SExpression
from lispdm.errors import LispDMParseError
from lispdm.types.lisp_list import List
from lispdm.types.symbol import Symbol
from lispdm.types.values import Char, MString


TOKEN_RE = re.compile(
    r"\s*("
    r"(?P<quote>[\'`])"  # ' and `
    r"|(?P<unquote>,@|,)"  # , and ,@
    r"|(?P<lparen>\()"  # (
    r"|(?P<rparen>\))"  # )
    r'|(?P<string>"(?:\\.|[^\\"])*")'  # double-quoted strings
    r"|(?P<char>#\\(?:newline|space|tab|return|.))"  # character literals, named or single-char
    r"|(?P<boolean>#true|#false|#t|#f)(?![^\s()\'\"`,;])"  # booleans
    r"|(?P<radix>#b[+-]?[01]+|#o[+-]?[0-7]+|#x[+-]?[0-9A-Fa-f]+)(?![^\s()\'\"`,;])"  # binary, octal, hex
    r'|(?P<symbol>[^\s()\'"`,;]+)'  # fallback: symbols and numbers
    r")",
    re.DOTALL,
)

NAMED_CHARS: dict[str, str] = {
    "space": " ",
    "newline": "\n",
    "tab": "\t",
    "return": "\r",
}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
}

QUOTE_FORMS: dict[str, Symbol] = {
    "'": Symbol("quote"),
    "`": Symbol("quasiquote"),
    ",": Symbol("unquote"),
    ",@": Symbol("unquote-splicing"),
}

RADIX: dict[str, int] = {"b": 2, "o": 8, "x": 16}

INT_RE = re.compile(r"[+-]?\d+")
FLOAT_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?")
SPECIAL_FLOATS: dict[str, float] = {
    "+inf.0": float("inf"),
    "-inf.0": float("-inf"),
    "+nan.0": float("nan"),
    "-nan.0": float("nan"),
}


def parse_number(text: str) -> Optional[int | float]:
    """Read `text` as a number literal, or None when it is not one."""
    if INT_RE.fullmatch(text):
        return int(text)
    if FLOAT_RE.fullmatch(text):
        return float(text)
    if text in SPECIAL_FLOATS:
        return SPECIAL_FLOATS[text]
    if len(text) > 2 and text[0] == "#" and text[1] in RADIX:
        try:
            return int(text[2:], RADIX[text[1]])
        except ValueError:
            return None
    return None


def unescape_string(token: str) -> str:
    """Decode the body of a string token (quotes included) into its text."""
    body = token[1:-1]
    out: list[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\":
            i += 1
            esc = body[i]
            if esc not in STRING_ESCAPES:
                raise LispDMParseError(f"unknown string escape: \\{esc}")
            out.append(STRING_ESCAPES[esc])
        else:
            out.append(c)
        i += 1
    return "".join(out)


def lex(source: str) -> Iterator[tuple[str, str]]:
    """Token generator: yields (token_type, token_value) tuples."""
    pos = 0
    n = len(source)

    def skip_whitespace_and_comments():
        nonlocal pos
        while pos < n:
            if source[pos].isspace():
                pos += 1
                continue
            if source[pos] == ";":
                end = source.find("\n", pos)
                pos = n if end == -1 else end + 1
            elif source.startswith("#|", pos):
                pos += 2
                depth = 1
                while depth > 0:
                    if pos >= n:
                        raise LispDMParseError("unterminated block comment")
                    if source.startswith("#|", pos):
                        depth += 1
                        pos += 2
                    elif source.startswith("|#", pos):
                        depth -= 1
                        pos += 2
                    else:
                        pos += 1
            else:
                break

    while pos < n:
        skip_whitespace_and_comments()
        if pos >= n:
            break

        m = TOKEN_RE.match(source, pos)
        if not m:
            if source[pos] == '"':
                raise LispDMParseError("unterminated string literal")
            raise LispDMParseError(f"unexpected character at {pos}: {source[pos]!r}")
        for nm in TOKEN_RE.groupindex:
            if m.group(nm):
                yield nm, m.group(nm)
                pos = m.end()
                break


class TokenStream:
    def __init__(self, token_iter: Iterator[tuple[str, str]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str]] = []

    def peek(self) -> tuple[Optional[str], Optional[str]]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str]]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None))

    def parse_expr(self) -> Optional[SExpression]:
        """Parse the next expression, or return None at the end of input."""
        tok_type, tok_val = self.peek()
        if tok_type is None:
            return None

        if tok_type == "symbol":
            self.advance()
            if tok_val == ".":
                raise LispDMParseError("unexpected '.' outside of a list")
            number = parse_number(tok_val)
            return Symbol(tok_val) if number is None else number

        # Quote forms
        if tok_type in ("quote", "unquote"):
            self.advance()
            expr = self.parse_expr()
            if expr is None:
                raise LispDMParseError(f"expected expression after {tok_val}")
            return List.proper((QUOTE_FORMS[tok_val], expr))

        # List or dotted list
        if tok_type == "lparen":
            self.advance()
            return self._parse_list()

        if tok_type == "rparen":
            raise LispDMParseError("unexpected ')'")

        if tok_type == "boolean":
            self.advance()
            return tok_val in ("#t", "#true")

        if tok_type == "char":
            self.advance()
            val = tok_val[2:]  # strip off "#\"
            if len(val) == 1:
                return Char(val)
            return Char(NAMED_CHARS[val])

        # String
        if tok_type == "string":
            self.advance()
            return MString(unescape_string(tok_val))

        # Radix numbers
        if tok_type == "radix":
            self.advance()
            return int(tok_val[2:], RADIX[tok_val[1]])

        raise LispDMParseError(f"unknown token: {tok_type} {tok_val}")

    def _parse_list(self) -> List:
        items: list[SExpression] = []
        while True:
            tok_type, tok_val = self.peek()
            if tok_type is None:
                raise LispDMParseError("unmatched '('")
            if tok_type == "rparen":
                self.advance()
                return List.proper(items)
            if tok_type == "symbol" and tok_val == ".":
                self.advance()
                if not items:
                    raise LispDMParseError("expected expression before '.' in dotted list")
                cdr_expr = self.parse_expr()
                if cdr_expr is None:
                    raise LispDMParseError("unmatched '('")
                if self.peek()[0] != "rparen":
                    raise LispDMParseError("expected ')' after dotted cdr")
                self.advance()
                return List(items, cdr_expr)
            items.append(self.parse_expr())

    def parse_all(self) -> Iterator[SExpression]:
        while True:
            tok_type, _ = self.peek()
            if tok_type is None:
                break
            yield self.parse_expr()


def parse_str(source: str) -> list[SExpression]:
    """Parse every top-level form in `source`."""
    return list(TokenStream(lex(source)).parse_all())
