"""Root environment construction.

`new_root_env` returns one scope holding every special form and primitive
procedure; the interpreter layers the Scheme prelude on top of it.
"""

from __future__ import annotations

import logging
import sys
from functools import partial
from pathlib import Path
from typing import Optional

from lispdm.builtin import env_builtin, io_builtin, string_builtin
from lispdm.config import get_recursion_limit
from lispdm.evaluation.evaluator import evaluate
from lispdm.evaluation.special_forms import SPECIAL_FORMS
from lispdm.types.environment import Environment
from lispdm.types.procedure import AtomicProcedure, ProcedureKind

logger = logging.getLogger(__name__)


def register_special_forms(env: Environment) -> None:
    """Bind each special form with the evaluator injected into its handler."""
    for name, (handler, arity) in SPECIAL_FORMS.items():
        form = AtomicProcedure(name.id, ProcedureKind.SPECIAL_FORM, partial(handler, evaluate_fn=evaluate), arity)
        env.define(name, form)


def raise_recursion_limit() -> None:
    """Make room on the host stack for nested non-tail calls; never lowers the limit."""
    limit = get_recursion_limit()
    if sys.getrecursionlimit() < limit:
        logger.debug("raising recursion limit to %d", limit)
        sys.setrecursionlimit(limit)


def new_root_env(cwd: Optional[Path] = None) -> Environment:
    raise_recursion_limit()
    env = Environment(cwd=cwd)
    register_special_forms(env)
    env_builtin.register(env)
    string_builtin.register(env)
    io_builtin.register(env)
    return env
