"""Completion providers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .provider import ProviderBase, ProviderResponse
from .simulated import SimulatedProvider

if TYPE_CHECKING:
    from ..config import GPTEvalConfig

__all__ = [
    "AnthropicProvider",
    "OpenAIProvider",
    "ProviderBase",
    "ProviderResponse",
    "SimulatedProvider",
    "create_provider",
]


def create_provider(config: GPTEvalConfig) -> ProviderBase:
    """Build the provider selected by ``config.provider``."""
    provider = (config.provider or "openai").lower()
    if provider == "openai":
        return OpenAIProvider(
            api_key=config.get_openai_key(),
            organization=config.openai_org,
            base_url=config.openai_base_url,
        )
    elif provider == "anthropic":
        return AnthropicProvider(api_key=config.get_anthropic_key())
    elif provider == "simulated":
        return SimulatedProvider()
    else:
        raise ValueError(f"Unsupported provider {config.provider}")
