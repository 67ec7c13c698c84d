"""Interactive evaluation session for one document."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Callable

from .config import GPTEvalConfig, compile_expression_pattern
from .conversation import ConversationState
from .document import Document, Position, Range
from .editor import ExpressionEditor, GPTEvalExpression
from .errors import GPTEvalError, NoExpressionFound
from .gpt import GPT
from .history import EvalHistory
from .prompts import resolve_prompt_path
from .providers import ProviderBase, create_provider

logger = logging.getLogger(__name__)


class Repl:
    """Evaluates the expression under the cursor and writes the reply back.

    Evaluations are serialized: a trigger that arrives while another
    evaluation is in flight is ignored.
    """

    def __init__(
        self,
        gpt: GPT,
        document: Document,
        history: EvalHistory,
        pattern: re.Pattern[str],
        on_feedback: Callable[[Range], None] | None = None,
        on_output: Callable[[str], None] | None = None,
    ):
        """
        Args:
            gpt: Completion link owning this session's conversation state.
            document: The document being edited.
            history: Evaluation log.
            pattern: Compiled delimiter pattern.
            on_feedback: Called with the block range when it is sent.
            on_output: Called with user-visible error messages.
        """
        self.gpt = gpt
        self.document = document
        self.history = history
        self.pattern = pattern
        self.on_feedback = on_feedback
        self.on_output = on_output
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def kill(self) -> None:
        """Record a no-op evaluation.

        An in-flight completion is not cancelled.
        """
        self.history.log(GPTEvalExpression(Range(Position(0, 0), Position(0, 0)), "kill"))

    async def evaluate(self, multiline: bool = True) -> GPTEvalExpression | None:
        """Evaluate the block under the cursor.

        Returns the evaluated expression (with its new result) or None when
        nothing was evaluated.
        """
        if self._lock.locked():
            logger.info("Evaluation already in progress; ignoring trigger")
            return None
        async with self._lock:
            editor = ExpressionEditor(self.document, self.pattern)
            block = editor.get_expression_under_cursor(multiline)
            return await self.evaluate_expression(block)

    async def evaluate_expression(
        self, block: GPTEvalExpression | None
    ) -> GPTEvalExpression | None:
        try:
            if block is None:
                raise NoExpressionFound("No expression under the cursor")
            if self.on_feedback:
                self.on_feedback(block.range)
            completion = await self.gpt.complete(block.expression, block.result)
        except NoExpressionFound as e:
            logger.debug("%s", e)
            return None
        except GPTEvalError as e:
            logger.error("Evaluation failed: %s", e)
            if self.on_output:
                self.on_output(f"Error: {e}")
            return None

        editor = ExpressionEditor(self.document, self.pattern)
        editor.insert_or_replace_result(block, completion.reply)
        self.gpt.commit(completion)
        block.result = completion.reply
        self.history.log(block)
        return block


def create_repl(
    config: GPTEvalConfig,
    document: Document,
    workspace_roots: list[Path] | None = None,
    provider: ProviderBase | None = None,
    on_output: Callable[[str], None] | None = None,
    on_feedback: Callable[[Range], None] | None = None,
) -> Repl:
    """Wire up a session for ``document`` from configuration.

    Raises:
        ConfigError: If the delimiter pattern is invalid.
    """
    pattern = compile_expression_pattern(config)
    conversation = ConversationState(
        pattern,
        resolve_prompt_path=lambda: resolve_prompt_path(
            config.prompt_path,
            config.use_prompt_in_current_directory,
            workspace_roots,
        ),
        on_output=on_output,
    )
    gpt = GPT(provider or create_provider(config), conversation, config.get_model())
    history = EvalHistory(config, on_output)
    return Repl(
        gpt,
        document,
        history,
        pattern,
        on_feedback=on_feedback,
        on_output=on_output,
    )
