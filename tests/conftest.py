import pytest

from lispdm.builtin import new_root_env
from lispdm.interpreter import Interpreter
from lispdm.printer import to_write


@pytest.fixture
def env():
    return new_root_env()


@pytest.fixture
def interp():
    """Interpreter with primitives and special forms only."""
    return Interpreter(prelude=None)


@pytest.fixture
def lisp():
    """Interpreter with the Scheme prelude loaded."""
    return Interpreter()


@pytest.fixture
def run(interp):
    """Evaluate source and return the `write` form of the result."""
    def _run(code: str) -> str:
        return to_write(interp.eval(code))
    return _run


@pytest.fixture
def run_prelude(lisp):
    def _run(code: str) -> str:
        return to_write(lisp.eval(code))
    return _run
