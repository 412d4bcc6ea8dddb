"""Source file loading: `load`, and the prelude evaluated at interpreter start.

Relative names passed to `load` resolve against the environment's working
directory first, then each directory listed in LISPDM_LOAD_PATH.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from lispdm import LispValue
from lispdm.config import get_load_roots, get_prelude_root
from lispdm.errors import LispDMEvalError, LispDMParseError
from lispdm.evaluation.evaluator import evaluate_all
from lispdm.reader.parser import parse_str
from lispdm.types.environment import Environment

logger = logging.getLogger(__name__)

PRELUDE_FILE = 'core.scm'


class _HasEvalPrelude(Protocol):
    def eval_prelude(self, code: str) -> None: ...


def resolve_load_path(name: str, cwd: Path) -> Optional[Path]:
    """Find the file `name` refers to, or None when no candidate exists."""
    path = Path(name).expanduser()
    if path.is_absolute():
        return path if path.is_file() else None
    for root in [cwd, *get_load_roots()]:
        candidate = root / path
        if candidate.is_file():
            return candidate.resolve()
    return None


def load_file(name: str, env: Environment) -> LispValue:
    """Evaluate every form of a source file in the root scope of `env`.

    Returns the value of the last form.
    """
    path = resolve_load_path(name, env.cwd)
    if path is None:
        raise LispDMEvalError(f"cannot load {name}: file not found")
    try:
        source = path.read_text(encoding='utf-8')
    except OSError as e:
        raise LispDMEvalError(f"failed to read file {path}: {e}") from e
    try:
        exprs = parse_str(source)
    except LispDMParseError as e:
        raise LispDMEvalError(f"failed to parse file {path}: {e}") from e

    logger.debug("loading %s (%d forms)", path, len(exprs))
    return evaluate_all(exprs, env.root())


def load_prelude(itp: _HasEvalPrelude) -> None:
    """Evaluate core.scm from the prelude directory, if it exists."""
    core = get_prelude_root() / PRELUDE_FILE
    if not core.exists():
        logger.debug("no prelude at %s", core)
        return
    logger.debug("loading prelude %s", core)
    itp.eval_prelude(core.read_text(encoding='utf-8'))
