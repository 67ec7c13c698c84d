"""Shared fixtures for GPTEval tests."""

import pytest

from gpteval.delimiters import DEFAULT_EXPRESSION_REGEX, compile_pattern
from gpteval.providers import SimulatedProvider


@pytest.fixture
def pattern():
    """The default '--' delimiter pattern."""
    return compile_pattern(DEFAULT_EXPRESSION_REGEX)


@pytest.fixture
def line_pattern():
    """A pattern that treats every line as expression text."""
    return compile_pattern(r"^(.*)$")


@pytest.fixture
def provider():
    """A simulated provider with a fixed reply."""
    p = SimulatedProvider()
    p.set_default_response("the answer")
    return p


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Provide a temporary config directory."""
    config_dir = tmp_path / "config" / "gpteval"
    config_dir.mkdir(parents=True)
    return config_dir
