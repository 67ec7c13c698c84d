"""OpenAI chat completions provider."""

from __future__ import annotations

import asyncio
import logging

from openai import OpenAI

from .provider import ProviderBase, ProviderResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(ProviderBase):
    """Provider for the OpenAI API and compatible services."""

    default_model = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: str | None,
        organization: str | None = None,
        base_url: str | None = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: API key for authentication
            organization: Optional OpenAI organization id
            base_url: Optional endpoint for OpenAI-compatible services
        """
        self.api_key = api_key
        self.organization = organization
        self.base_url = base_url
        self._client: OpenAI | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> OpenAI:
        """Lazy client initialization."""
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                organization=self.organization,
                base_url=self.base_url,
            )
        return self._client

    async def send(self, messages: list[dict], model: str | None = None) -> ProviderResponse:
        model = model or self.default_model
        try:
            client = self._get_client()
            logger.info("Sending %d messages to %s", len(messages), model)

            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: client.chat.completions.create(model=model, messages=messages),
            )

            text = ""
            if response.choices:
                text = response.choices[0].message.content or ""
            logger.info("Response complete (%d chars)", len(text))
            return ProviderResponse(text=text)

        except Exception as e:
            error_msg = f"Error communicating with OpenAI: {e}"
            logger.error("%s", error_msg)
            return ProviderResponse(text="", error=error_msg)
