from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List


# Resolve installation dir (lispdm package directory)
_LISPDM_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_PRELUDE_DIR = _LISPDM_DIR / 'prelude'

LOAD_PATH_VAR = 'LISPDM_LOAD_PATH'
PRELUDE_PATH_VAR = 'LISPDM_PRELUDE_PATH'
RECURSION_LIMIT_VAR = 'LISPDM_RECURSION_LIMIT'

# Each nested non-tail Lisp call costs about three Python frames
DEFAULT_RECURSION_LIMIT = 25000


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    """Read an os.pathsep-separated list of directories, or fall back to `defaults`."""
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    return [Path(p.strip()) for p in raw.split(os.pathsep) if p.strip()]


def get_load_roots() -> List[Path]:
    """Extra directories `load` searches after the working directory."""
    return paths_from_env(LOAD_PATH_VAR, [])


def get_prelude_root() -> Path:
    roots = paths_from_env(PRELUDE_PATH_VAR, [_DEFAULT_PRELUDE_DIR])
    # treat as single directory; if a file path is set, return its parent
    p = roots[0]
    return p if p.is_dir() else p.parent


def get_recursion_limit() -> int:
    raw = os.environ.get(RECURSION_LIMIT_VAR, '').strip()
    return int(raw) if raw else DEFAULT_RECURSION_LIMIT
