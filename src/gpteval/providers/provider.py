"""Base classes for completion providers.

Providers handle the low-level API communication for a completion service.
They are stateless and receive the full conversation as a parameter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class ProviderResponse:
    """Raw response from a provider.

    Attributes:
        text: The reply content (empty on failure)
        error: Optional error message if the request failed
    """

    text: str
    error: str | None = None


class ProviderBase(ABC):
    """Base class for completion providers (stateless).

    Providers are responsible for:
    - Initializing API clients
    - Handling API credentials
    - Converting provider-specific formats to ProviderResponse

    Providers do NOT manage conversation history.
    """

    #: Model used when the caller does not name one.
    default_model: str = ""

    @property
    def has_credentials(self) -> bool:
        return True

    @abstractmethod
    async def send(self, messages: list[dict], model: str | None = None) -> ProviderResponse:
        """Send messages to the provider and wait for the full reply.

        Args:
            messages: Conversation in OpenAI format ({"role", "content"} dicts)
            model: Model identifier; ``default_model`` when None

        Returns:
            ProviderResponse with the reply or an error
        """
        pass
