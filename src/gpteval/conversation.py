"""Conversation state: chat history, prompt reloads, and turn preparation."""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Callable

from .errors import GPTEvalError, NoWorkspaceForTemplate
from .prompts import (
    ChatMessage,
    ChatPrompt,
    format_prompt,
    load_prompt_file,
)

logger = logging.getLogger(__name__)

CONTEXT_TEMPLATE = "Given the following:\n```\n{context}\n```\n"

_CONTEXT_WRAPPER = re.compile(r"\AGiven the following:\n```\n.*?\n```\n", re.DOTALL)


def wrap_context(context: str, expression: str) -> str:
    return CONTEXT_TEMPLATE.format(context=context) + expression


def strip_context(content: str) -> str:
    """Remove a leading context wrapper from a submitted user turn."""
    return _CONTEXT_WRAPPER.sub("", content, count=1)


class ConversationState:
    """Owns the active prompt and the chat history for one session.

    History changes only in ``commit``: it is appended to, or replaced in a
    single assignment when a turn built on a changed template succeeds.
    """

    def __init__(
        self,
        pattern: re.Pattern[str],
        resolve_prompt_path: Callable[[], Path | None] | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        """
        Args:
            pattern: Delimiter pattern used to parse prompt templates.
            resolve_prompt_path: Returns the template file to load on each
                evaluation, or None when templates are disabled.
            on_output: Optional callback for user-visible messages.
        """
        self.pattern = pattern
        self.resolve_prompt_path = resolve_prompt_path
        self.on_output = on_output
        self.prompt = ChatPrompt()
        self.history: list[ChatMessage] = []

    def _output(self, text: str) -> None:
        if self.on_output:
            self.on_output(text)

    async def refresh_prompt(self) -> ChatPrompt | None:
        """Reload the template file.

        Returns the loaded prompt when it differs from the active one, else
        None. Nothing is changed here; a new prompt becomes active only when
        a turn built on it is committed. Failures are logged and reported.
        """
        if self.resolve_prompt_path is None:
            return None
        try:
            path = self.resolve_prompt_path()
        except NoWorkspaceForTemplate as e:
            logger.warning("%s", e)
            self._output(f"Warning: {e}")
            return None
        if path is None:
            return None

        loop = asyncio.get_running_loop()
        try:
            prompt = await loop.run_in_executor(
                None, load_prompt_file, path, self.pattern
            )
        except GPTEvalError as e:
            logger.error("%s", e)
            self._output(f"Error: {e}")
            return None

        if prompt.same_as(self.prompt):
            return None
        return prompt

    def set_prompt(self, prompt: ChatPrompt) -> bool:
        """Make ``prompt`` active if it differs; returns True on reset."""
        if prompt.same_as(self.prompt):
            return False
        self.prompt = prompt
        self.history = prompt.to_history()
        logger.info("Loaded prompt with %d scripted turns", len(prompt.messages))
        self._output("Loaded prompt\n" + format_prompt(self.history))
        return True

    def strip_overlap(
        self, expression: str, history: list[ChatMessage] | None = None
    ) -> str:
        """Drop the part of ``expression`` the previous user turn already sent."""
        if history is None:
            history = self.history
        if len(history) < 2 or history[-2].role != "user":
            return expression
        previous = strip_context(history[-2].content).strip()
        if not previous or not expression.startswith(previous):
            return expression
        remainder = expression[len(previous) :].strip()
        if not remainder:
            return expression
        logger.debug("Stripped %d overlapping chars from expression", len(previous))
        return remainder

    def last_reply(self, history: list[ChatMessage] | None = None) -> str | None:
        if history is None:
            history = self.history
        if history and history[-1].role == "assistant":
            return history[-1].content
        return None

    def inject_context(
        self,
        expression: str,
        context: str | None,
        history: list[ChatMessage] | None = None,
    ) -> str:
        """Prepend ``context`` unless it is exactly the assistant's last reply."""
        if not context or context == self.last_reply(history):
            return expression
        return wrap_context(context, expression)

    def prepare_turn(
        self,
        expression: str,
        context: str | None = None,
        prompt: ChatPrompt | None = None,
    ) -> list[ChatMessage]:
        """Return the messages to submit for ``expression``.

        With a pending ``prompt`` the turn is built on that template's
        history instead of the active one. The new user turn is last;
        history itself is not modified.
        """
        history = prompt.to_history() if prompt is not None else self.history
        content = self.inject_context(
            self.strip_overlap(expression, history), context, history
        )
        return [*history, ChatMessage("user", content)]

    def commit(
        self, user_content: str, reply: str, prompt: ChatPrompt | None = None
    ) -> None:
        """Record a completed exchange. An empty reply records nothing.

        A pending ``prompt`` the turn was built on is activated first.
        """
        if not reply:
            return
        if prompt is not None:
            self.set_prompt(prompt)
        self.history.append(ChatMessage("user", user_content))
        self.history.append(ChatMessage("assistant", reply))
