"""Evaluation log for a session."""

from __future__ import annotations

import logging
from typing import Callable

from .config import GPTEvalConfig
from .editor import GPTEvalExpression

logger = logging.getLogger(__name__)


class EvalHistory:
    """Counts evaluations and echoes their results to the output channel."""

    def __init__(
        self,
        config: GPTEvalConfig,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config
        self.on_output = on_output
        self._eval_count = 0

    @property
    def eval_count(self) -> int:
        return self._eval_count

    def log(self, expression: GPTEvalExpression) -> None:
        """Record one evaluation."""
        self._eval_count += 1
        logger.info("Evaluation %d: %r", self._eval_count, expression.expression[:80])
        if not self.on_output:
            return
        if self.config.show_eval_count:
            self.on_output(f"{self.config.eval_count_prefix}{self._eval_count} ")
        if expression.result:
            self.on_output(expression.result)
