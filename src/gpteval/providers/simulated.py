"""Simulated provider for offline use and testing."""

from __future__ import annotations

import asyncio
import logging
import re

from .provider import ProviderBase, ProviderResponse

logger = logging.getLogger(__name__)


class SimulatedProvider(ProviderBase):
    """Replies from a list of scripted scenarios without any network access.

    Each scenario is a dict with a ``response`` and an optional ``pattern``
    regex matched against the last user message. The first matching scenario
    wins; otherwise the default response is used.
    """

    default_model = "simulated"

    def __init__(self, response_delay: float = 0.0):
        self.response_delay = response_delay
        self.scenarios: list[dict] = []
        self.default_response = "I'm a simulated assistant."
        self.error: str | None = None
        self.calls: list[tuple[list[dict], str]] = []

    def configure_scenarios(self, scenarios: list[dict]) -> None:
        self.scenarios = list(scenarios)

    def set_default_response(self, response: str) -> None:
        self.default_response = response

    def fail_with(self, error: str | None) -> None:
        """Make subsequent calls fail with ``error`` (None to recover)."""
        self.error = error

    def _find_response(self, prompt: str) -> str:
        for scenario in self.scenarios:
            pattern = scenario.get("pattern")
            if pattern is None or re.search(pattern, prompt, re.IGNORECASE):
                return scenario["response"]
        return self.default_response

    async def send(self, messages: list[dict], model: str | None = None) -> ProviderResponse:
        model = model or self.default_model
        self.calls.append((list(messages), model))
        if self.response_delay:
            await asyncio.sleep(self.response_delay)
        if self.error:
            logger.error("Simulated error: %s", self.error)
            return ProviderResponse(text="", error=self.error)

        prompt = messages[-1]["content"] if messages else ""
        text = self._find_response(prompt)
        logger.info("Simulated response (%d chars)", len(text))
        return ProviderResponse(text=text)
