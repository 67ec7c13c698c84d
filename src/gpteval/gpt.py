"""Sends expressions to the completion provider on top of the conversation
state."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .conversation import ConversationState
from .errors import CompletionFailure, MissingCredential
from .prompts import ChatPrompt
from .providers import ProviderBase

logger = logging.getLogger(__name__)


@dataclass
class Completion:
    """A successful reply that has not been recorded in history yet.

    Attributes:
        user_content: The user turn as submitted
        reply: The assistant's reply
        prompt: Changed template the turn was built on, if any
    """

    user_content: str
    reply: str
    prompt: ChatPrompt | None = None


class GPT:
    """One session's link to the completion service.

    Owns the session's ``ConversationState``; history is only updated when a
    successful, non-empty reply is committed.
    """

    def __init__(
        self,
        provider: ProviderBase,
        conversation: ConversationState,
        model: str | None = None,
    ):
        self.provider = provider
        self.conversation = conversation
        self.model = model or provider.default_model

    async def complete(self, expression: str, context: str | None = None) -> Completion:
        """Submit ``expression`` without touching the conversation.

        Raises:
            MissingCredential: If no API key is configured.
            CompletionFailure: If the call failed or the reply was empty.
        """
        if not self.provider.has_credentials:
            raise MissingCredential("Could not find an API key for the completion provider")

        prompt = await self.conversation.refresh_prompt()
        messages = self.conversation.prepare_turn(expression, context, prompt)
        submitted = messages[-1].content
        logger.info(
            "Sending expression (%d chars, %d messages)", len(submitted), len(messages)
        )
        logger.debug("Expression text: %s", submitted[:200])

        response = await self.provider.send([m.to_dict() for m in messages], self.model)
        if response.error:
            raise CompletionFailure(response.error)
        if not response.text:
            raise CompletionFailure("The completion service returned an empty reply")
        return Completion(submitted, response.text, prompt)

    def commit(self, completion: Completion) -> None:
        self.conversation.commit(
            completion.user_content, completion.reply, completion.prompt
        )

    async def send_expression(self, expression: str, context: str | None = None) -> str:
        """Submit ``expression``, record the exchange and return the reply."""
        completion = await self.complete(expression, context)
        self.commit(completion)
        return completion.reply
