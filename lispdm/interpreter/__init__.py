from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal, Optional

from lispdm import LispValue
from lispdm.builtin import new_root_env
from lispdm.evaluation.evaluator import evaluate_all
from lispdm.modules.loader import load_file, load_prelude
from lispdm.reader.parser import lex, TokenStream
from lispdm.types.environment import Environment

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading and evaluating LispDM code.
    Maintains one root Environment across calls.
    """

    def __init__(
        self,
        prelude: str | None | Literal['auto'] = 'auto',
        cwd: Optional[Path | str] = None,
    ):
        self.env: Environment = new_root_env(Path(cwd) if cwd is not None else None)

        if prelude is None:
            pass  # explicit: no prelude
        elif prelude == 'auto':
            load_prelude(self)
        elif prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        """Evaluate source for its effect on the root environment."""
        evaluate_all(TokenStream(lex(code)).parse_all(), self.env)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in `code`; the value of the last one, or Void if none."""
        return evaluate_all(TokenStream(lex(code)).parse_all(), self.env)

    def load_file(self, path: Path | str) -> LispValue:
        """Evaluate a source file in the root environment."""
        logger.debug("interpreter loading %s", path)
        return load_file(str(path), self.env)
