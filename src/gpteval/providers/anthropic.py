"""Anthropic (Claude) provider implementation."""

from __future__ import annotations

import asyncio
import logging

from .provider import ProviderBase, ProviderResponse

logger = logging.getLogger(__name__)


def split_system(messages: list[dict]) -> tuple[str | None, list[dict]]:
    """Separate system-role entries, which Claude takes as a parameter."""
    system = [m["content"] for m in messages if m["role"] == "system"]
    rest = [m for m in messages if m["role"] != "system"]
    return ("\n\n".join(system) if system else None), rest


class AnthropicProvider(ProviderBase):
    """Provider for Anthropic's Claude API."""

    default_model = "claude-haiku-4-5"

    def __init__(self, api_key: str | None, max_tokens: int = 4096):
        """Initialize Anthropic provider.

        Args:
            api_key: API key for authentication
            max_tokens: Upper bound on reply length
        """
        self.api_key = api_key
        self.max_tokens = max_tokens
        self._client = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def _get_client(self):
        """Lazy import and create Anthropic client."""
        if self._client is None:
            from anthropic import Anthropic

            self._client = Anthropic(api_key=self.api_key)
        return self._client

    async def send(self, messages: list[dict], model: str | None = None) -> ProviderResponse:
        model = model or self.default_model
        try:
            client = self._get_client()
            system, conversation = split_system(messages)
            api_params: dict = {
                "model": model,
                "max_tokens": self.max_tokens,
                "messages": conversation,
            }
            if system:
                api_params["system"] = system

            logger.info("Sending %d messages to %s", len(conversation), model)
            loop = asyncio.get_running_loop()
            message = await loop.run_in_executor(
                None, lambda: client.messages.create(**api_params)
            )

            text = "".join(
                block.text for block in message.content if block.type == "text"
            )
            logger.info(
                "Response complete (%d chars, stop_reason=%s)",
                len(text),
                message.stop_reason,
            )
            return ProviderResponse(text=text)

        except Exception as e:
            error_msg = f"Error communicating with Claude: {e}"
            logger.error("%s", error_msg)
            return ProviderResponse(text="", error=error_msg)
