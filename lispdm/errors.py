from __future__ import annotations

from typing import Any


class LispDMError(Exception):
    """ Base class for all LispDM errors"""
    pass


class LispDMParseError(LispDMError):
    """ Raised when source text cannot be read into expressions"""
    pass


class LispDMEvalError(LispDMError):
    """ Raised when evaluation fails; the single runtime error kind"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"runtime error: {self.message}"


class LispDMUnboundSymbol(LispDMEvalError):
    """ Raised when a symbol is used before it is bound"""


class LispDMUnboundAssignment(LispDMEvalError):
    """ Raised when set! targets a name no scope defines"""


class LispDMArityError(LispDMEvalError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""


class LispDMTypeError(LispDMEvalError):
    """ Raised when a value of the wrong kind is supplied"""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        # The offending value, kept for callers that want to report it
        self.value = value


class LispDMSyntaxError(LispDMEvalError):
    """ Raised when a special form is malformed"""


class LispDMEmptyListError(LispDMEvalError):
    """ Raised when car/cdr-style access hits the empty list"""


class LispDMRecursionError(LispDMEvalError):
    """ Raised when nested non-tail calls exhaust the host stack"""

    def __init__(self, message: str = "maximum recursion depth exceeded"):
        super().__init__(message)
