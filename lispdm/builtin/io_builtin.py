"""Input/output and system procedures.

Output procedures write to an optional port argument, defaulting to the
process's current stdout at call time; input procedures read from an
optional port, defaulting to stdin. File ports own their stream; the
`call-with-*` and `with-*` procedures close it once the procedure returns.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager, redirect_stdout
from io import StringIO
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO

from lispdm import LispValue
from lispdm.builtin.registry import ProcedureSpec, define_procedures
from lispdm.errors import LispDMEvalError, LispDMParseError, LispDMTypeError
from lispdm.evaluation.evaluator import call_procedure
from lispdm.modules.loader import load_file
from lispdm.printer import to_display, to_write
from lispdm.reader.parser import parse_str
from lispdm.types.arity import Arity
from lispdm.types.environment import Environment
from lispdm.types.expr import into_char, into_integer, into_port, into_procedure, into_string, kind
from lispdm.types.values import Char, MString, Port, Void


def _stdin_port() -> Port:
    return Port("stdin", sys.stdin, is_input=True)


def _stdout_port() -> Port:
    return Port("stdout", sys.stdout, is_input=False)


def _output_port(name: str, args: list[LispValue]) -> Port:
    if not args:
        return _stdout_port()
    port = into_port(args[0], name)
    if port.is_input:
        raise LispDMTypeError(f"expected output port for {name}, got input port", port)
    return port


def _input_port(name: str, args: list[LispValue]) -> Port:
    if not args:
        return _stdin_port()
    port = into_port(args[0], name)
    if not port.is_input:
        raise LispDMTypeError(f"expected input port for {name}, got output port", port)
    return port


def _read_from(read: Callable[..., Optional[str]], *args) -> Optional[str]:
    try:
        return read(*args)
    except OSError as e:
        raise LispDMEvalError(f"could not read input: {e}") from e


def _open_file_port(name: str, env: Environment, value: LispValue, is_input: bool) -> Port:
    """Open a file relative to the working directory as a port owning the stream."""
    path = env.cwd / Path(str(into_string(value, name))).expanduser()
    try:
        stream = open(path, "r" if is_input else "w", encoding="utf-8")
    except OSError as e:
        raise LispDMEvalError(f"could not open file {path}: {e}") from e
    return Port(str(path), stream, is_input, owns_stream=True)


@contextmanager
def _redirect_stdin(stream: TextIO) -> Iterator[TextIO]:
    saved = sys.stdin
    sys.stdin = stream
    try:
        yield stream
    finally:
        sys.stdin = saved


# -------------------------------
# Output
# -------------------------------
def display(env: Environment, args: list[LispValue]) -> LispValue:
    """(display x [port]): strings and chars are written raw."""
    _output_port("display", args[1:]).write(to_display(args[0]))
    return Void


def write(env: Environment, args: list[LispValue]) -> LispValue:
    """(write x [port]): machine-readable form, strings quoted."""
    _output_port("write", args[1:]).write(to_write(args[0]))
    return Void


def newline(env: Environment, args: list[LispValue]) -> LispValue:
    _output_port("newline", args).write("\n")
    return Void


def write_char(env: Environment, args: list[LispValue]) -> LispValue:
    ch = into_char(args[0], "write-char")
    _output_port("write-char", args[1:]).write(ch.value)
    return Void


def write_string(env: Environment, args: list[LispValue]) -> LispValue:
    """(write-string s [port [start [end]]]): the characters of s between start and end."""
    s = into_string(args[0], "write-string")
    port = _output_port("write-string", args[1:2])
    start = into_integer(args[2], "write-string") if len(args) > 2 else 0
    end = into_integer(args[3], "write-string") if len(args) > 3 else len(s)
    if not 0 <= start <= end <= len(s):
        raise LispDMEvalError(f"range {start}..{end} out of bounds for write-string")
    port.write("".join(s.chars[start:end]))
    return Void


# -------------------------------
# Input
# -------------------------------
def read_line(env: Environment, args: list[LispValue]) -> LispValue:
    """(read-line [port]) -> the next line without its newline, or #f at end of input"""
    port = _input_port("read-line", args)
    line = _read_from(port.read_line)
    return False if line is None else MString(line)


def read_char(env: Environment, args: list[LispValue]) -> LispValue:
    """(read-char [port]) -> the next character, or #f at end of input"""
    port = _input_port("read-char", args)
    c = _read_from(port.read_char)
    return False if c is None else Char(c)


def read_string(env: Environment, args: list[LispValue]) -> LispValue:
    """(read-string [k] [port]) -> the next k characters, or all that is left"""
    k = None
    if args and not isinstance(args[0], Port):
        k = into_integer(args[0], "read-string")
        if k < 0:
            raise LispDMTypeError(f"expected non-negative count for read-string, got {k}", k)
        args = args[1:]
    if len(args) > 1:
        raise LispDMTypeError(f"expected port for read-string, got {kind(args[1])}", args[1])
    port = _input_port("read-string", args)
    text = _read_from(port.read_string, k)
    return False if text is None else MString(text)


def read(env: Environment, args: list[LispValue]) -> LispValue:
    """(read [port]) -> the first datum on the next line of input"""
    port = _input_port("read", args)
    line = _read_from(port.read_line)
    if line is None:
        raise LispDMEvalError("could not parse input: end of input")
    try:
        exprs = parse_str(line)
    except LispDMParseError as e:
        raise LispDMEvalError(f"could not parse input: {e}") from e
    if not exprs:
        raise LispDMEvalError("could not parse input: empty input")
    return exprs[0]


# -------------------------------
# Ports
# -------------------------------
def current_input_port(env: Environment, args: list[LispValue]) -> Port:
    return _stdin_port()


def current_output_port(env: Environment, args: list[LispValue]) -> Port:
    return _stdout_port()


def open_input_string(env: Environment, args: list[LispValue]) -> Port:
    text = str(into_string(args[0], "open-input-string"))
    return Port("string", StringIO(text), is_input=True)


def open_output_string(env: Environment, args: list[LispValue]) -> Port:
    return Port("string", StringIO(), is_input=False)


def get_output_string(env: Environment, args: list[LispValue]) -> MString:
    port = into_port(args[0], "get-output-string")
    if port.is_input or not isinstance(port.stream, StringIO):
        raise LispDMTypeError(f"expected string output port for get-output-string, got {port!r}", port)
    return MString(port.stream.getvalue())


def open_input_file(env: Environment, args: list[LispValue]) -> Port:
    return _open_file_port("open-input-file", env, args[0], is_input=True)


def open_output_file(env: Environment, args: list[LispValue]) -> Port:
    """(open-output-file path): create or truncate the file."""
    return _open_file_port("open-output-file", env, args[0], is_input=False)


def _close(port: Port) -> LispValue:
    try:
        port.close()
    except OSError as e:
        raise LispDMEvalError(f"could not close port {port.name}: {e}") from e
    return Void


def close_input_port(env: Environment, args: list[LispValue]) -> LispValue:
    return _close(_input_port("close-input-port", args))


def close_output_port(env: Environment, args: list[LispValue]) -> LispValue:
    return _close(_output_port("close-output-port", args))


def call_with_input_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(call-with-input-file path proc): call proc with an input port on the file."""
    proc = into_procedure(args[1], "call-with-input-file")
    with _open_file_port("call-with-input-file", env, args[0], is_input=True) as port:
        return call_procedure(proc, [port], env)


def call_with_output_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(call-with-output-file path proc): call proc with an output port on the file."""
    proc = into_procedure(args[1], "call-with-output-file")
    with _open_file_port("call-with-output-file", env, args[0], is_input=False) as port:
        return call_procedure(proc, [port], env)


def with_input_from_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(with-input-from-file path thunk): the file is the current input port during thunk."""
    thunk = into_procedure(args[1], "with-input-from-file")
    with _open_file_port("with-input-from-file", env, args[0], is_input=True) as port, \
            _redirect_stdin(port.stream):
        return call_procedure(thunk, [], env)


def with_output_to_file(env: Environment, args: list[LispValue]) -> LispValue:
    """(with-output-to-file path thunk): the file is the current output port during thunk."""
    thunk = into_procedure(args[1], "with-output-to-file")
    with _open_file_port("with-output-to-file", env, args[0], is_input=False) as port, \
            redirect_stdout(port.stream):
        return call_procedure(thunk, [], env)


def is_input_port(env: Environment, args: list[LispValue]) -> bool:
    return isinstance(args[0], Port) and args[0].is_input


def is_output_port(env: Environment, args: list[LispValue]) -> bool:
    return isinstance(args[0], Port) and not args[0].is_input


# -------------------------------
# System
# -------------------------------
def load(env: Environment, args: list[LispValue]) -> LispValue:
    """(load "file"): evaluate a source file in the root scope; the last value"""
    return load_file(str(into_string(args[0], "load")), env)


def exit_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(exit [code]): #t or no argument exits 0, #f exits 1, an integer exits with it."""
    code = args[0] if args else 0
    if code is True:
        code = 0
    elif code is False:
        code = 1
    elif not isinstance(code, int):
        raise LispDMTypeError(f"expected integer or boolean for exit, got {kind(code)}", code)
    raise SystemExit(code)


BUILTINS: list[ProcedureSpec] = [
    ("display", display, Arity.range(1, 2)),
    ("write", write, Arity.range(1, 2)),
    ("newline", newline, Arity.range(0, 1)),
    ("write-char", write_char, Arity.range(1, 2)),
    ("write-string", write_string, Arity.range(1, 4)),
    ("read-line", read_line, Arity.range(0, 1)),
    ("read-char", read_char, Arity.range(0, 1)),
    ("read-string", read_string, Arity.range(0, 2)),
    ("read", read, Arity.range(0, 1)),
    ("current-input-port", current_input_port, Arity.exact(0)),
    ("current-output-port", current_output_port, Arity.exact(0)),
    ("open-input-string", open_input_string, Arity.exact(1)),
    ("open-output-string", open_output_string, Arity.exact(0)),
    ("get-output-string", get_output_string, Arity.exact(1)),
    ("open-input-file", open_input_file, Arity.exact(1)),
    ("open-output-file", open_output_file, Arity.exact(1)),
    ("close-input-port", close_input_port, Arity.exact(1)),
    ("close-output-port", close_output_port, Arity.exact(1)),
    ("call-with-input-file", call_with_input_file, Arity.exact(2)),
    ("call-with-output-file", call_with_output_file, Arity.exact(2)),
    ("with-input-from-file", with_input_from_file, Arity.exact(2)),
    ("with-output-to-file", with_output_to_file, Arity.exact(2)),
    ("input-port?", is_input_port, Arity.exact(1)),
    ("output-port?", is_output_port, Arity.exact(1)),
    ("load", load, Arity.exact(1)),
    ("exit", exit_builtin, Arity.range(0, 1)),
]


def register(env: Environment) -> None:
    """Register I/O and system procedures into the given environment."""
    define_procedures(env, BUILTINS)
