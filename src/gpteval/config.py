"""Configuration management for GPTEval.

This module handles loading user configuration from ~/.config/gpteval/init.py
and provides a sandboxed execution environment for user settings.
"""

from __future__ import annotations

import os
import re
import traceback
from pathlib import Path
from typing import Optional

from .delimiters import DEFAULT_EXPRESSION_REGEX, compile_pattern
from .errors import ConfigError


class GPTEvalConfig:
    """Configuration container for GPTEval settings.

    This class stores configuration values that can be set by the user's init.py file.
    All settings have sensible defaults.
    """

    def __init__(self):
        # Completion settings
        self.provider: str = "openai"  # openai, anthropic, simulated
        self.openai_model: Optional[str] = None  # Defaults to gpt-3.5-turbo
        self.openai_key: Optional[str] = None  # Falls back to $OPENAI_API_KEY
        self.openai_org: Optional[str] = None
        self.openai_base_url: Optional[str] = None
        self.anthropic_model: Optional[str] = None
        self.anthropic_key: Optional[str] = None  # Falls back to $ANTHROPIC_API_KEY

        # Prompt template settings
        self.prompt_path: Optional[str] = None  # e.g. ~/prompts/terse.txt
        self.use_prompt_in_current_directory: bool = False

        # Expression settings
        self.expression_regex: str = DEFAULT_EXPRESSION_REGEX
        self.expression_dotall: bool = False

        # Display settings
        self.feedback_color: str = "rgba(100,250,100,0.3)"
        self.show_eval_count: bool = False
        self.eval_count_prefix: str = "Evals: "

    def get_openai_key(self) -> Optional[str]:
        return self.openai_key or os.environ.get("OPENAI_API_KEY")

    def get_anthropic_key(self) -> Optional[str]:
        return self.anthropic_key or os.environ.get("ANTHROPIC_API_KEY")

    def get_model(self) -> Optional[str]:
        """Model for the selected provider; None means the provider default."""
        if (self.provider or "").lower() == "anthropic":
            return self.anthropic_model
        return self.openai_model


def compile_expression_pattern(config: GPTEvalConfig) -> re.Pattern[str]:
    """Compile the configured delimiter pattern.

    Raises:
        ConfigError: If the pattern is invalid or has no capture group.
    """
    try:
        return compile_pattern(config.expression_regex, config.expression_dotall)
    except (re.error, ValueError) as e:
        raise ConfigError(
            f"Invalid expression_regex {config.expression_regex!r}: {e}"
        ) from e


def get_config_path() -> Path:
    """Get the path to the user's config directory."""
    config_home = os.environ.get('XDG_CONFIG_HOME')
    if config_home:
        return Path(config_home) / 'gpteval'
    return Path.home() / '.config' / 'gpteval'


def get_init_script_path() -> Path:
    """Get the path to the user's init.py script."""
    return get_config_path() / 'init.py'


def load_config() -> tuple[GPTEvalConfig, Optional[str]]:
    """Load configuration from ~/.config/gpteval/init.py.

    The init.py file is executed in a sandboxed environment where it can set
    configuration values on a 'config' object.

    Returns:
        A tuple of (config, error_message). If loading fails, error_message
        will contain details about the failure.
    """
    config = GPTEvalConfig()
    init_path = get_init_script_path()

    if not init_path.exists():
        return config, None

    sandbox = {
        '__builtins__': {
            'True': True,
            'False': False,
            'None': None,
            'str': str,
            'int': int,
            'float': float,
            'bool': bool,
            'list': list,
            'dict': dict,
            'tuple': tuple,
            'len': len,
            'print': print,  # Allow print for debugging config
            # Explicitly deny dangerous operations
            '__import__': None,
            'open': None,
            'exec': None,
            'eval': None,
            'compile': None,
        },
        'config': config,
    }

    try:
        with open(init_path, 'r', encoding='utf-8') as f:
            code = f.read()

        exec(code, sandbox)
    except Exception:
        error_msg = f"Error loading config from {init_path}:\n{traceback.format_exc()}"
        return config, error_msg

    try:
        compile_expression_pattern(config)
    except ConfigError as e:
        config.expression_regex = DEFAULT_EXPRESSION_REGEX
        config.expression_dotall = False
        return config, f"{e}; using the default pattern"

    return config, None
