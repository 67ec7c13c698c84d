"""Tests for configuration loading and sandboxing."""

import re

import pytest

from gpteval.config import (
    GPTEvalConfig,
    compile_expression_pattern,
    get_init_script_path,
    load_config,
)
from gpteval.delimiters import DEFAULT_EXPRESSION_REGEX
from gpteval.errors import ConfigError


class TestGPTEvalConfig:
    def test_defaults(self):
        c = GPTEvalConfig()
        assert c.provider == "openai"
        assert c.openai_model is None
        assert c.prompt_path is None
        assert c.use_prompt_in_current_directory is False
        assert c.expression_regex == DEFAULT_EXPRESSION_REGEX
        assert c.feedback_color == "rgba(100,250,100,0.3)"
        assert c.show_eval_count is False
        assert c.eval_count_prefix == "Evals: "

    def test_openai_key_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        c = GPTEvalConfig()
        assert c.get_openai_key() == "sk-env"
        c.openai_key = "sk-config"
        assert c.get_openai_key() == "sk-config"

    def test_anthropic_key_falls_back_to_env(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "ak-env")
        assert GPTEvalConfig().get_anthropic_key() == "ak-env"

    def test_model_follows_provider(self):
        c = GPTEvalConfig()
        c.openai_model = "gpt-4o"
        c.anthropic_model = "claude-sonnet-4-5"
        assert c.get_model() == "gpt-4o"
        c.provider = "anthropic"
        assert c.get_model() == "claude-sonnet-4-5"


class TestCompileExpressionPattern:
    def test_default(self):
        p = compile_expression_pattern(GPTEvalConfig())
        assert p.flags & re.MULTILINE

    def test_dotall(self):
        c = GPTEvalConfig()
        c.expression_dotall = True
        assert compile_expression_pattern(c).flags & re.DOTALL

    def test_invalid(self):
        c = GPTEvalConfig()
        c.expression_regex = "(unclosed"
        with pytest.raises(ConfigError):
            compile_expression_pattern(c)

    def test_missing_group(self):
        c = GPTEvalConfig()
        c.expression_regex = "^>>.*$"
        with pytest.raises(ConfigError):
            compile_expression_pattern(c)


class TestLoadConfig:
    def test_init_path_honours_xdg(self, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_init_script_path() == tmp_path / "gpteval" / "init.py"

    def test_no_config_file(self, monkeypatch, tmp_config_dir):
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: tmp_config_dir / "init.py")
        config, error = load_config()
        assert error is None
        assert config.provider == "openai"

    def test_valid_config(self, monkeypatch, tmp_config_dir):
        init_file = tmp_config_dir / "init.py"
        init_file.write_text(
            'config.openai_model = "gpt-4o"\n'
            'config.prompt_path = "~/prompts/terse.txt"\n'
            'config.expression_regex = r"^>>\\s?(.*)$"\n'
            'config.show_eval_count = True\n'
        )
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is None
        assert config.openai_model == "gpt-4o"
        assert config.prompt_path == "~/prompts/terse.txt"
        assert config.expression_regex == r"^>>\s?(.*)$"
        assert config.show_eval_count is True

    def test_sandbox_blocks_import(self, monkeypatch, tmp_config_dir):
        init_file = tmp_config_dir / "init.py"
        init_file.write_text("import os\n")
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None
        assert "Error" in error

    def test_sandbox_blocks_open(self, monkeypatch, tmp_config_dir):
        init_file = tmp_config_dir / "init.py"
        init_file.write_text("f = open('/etc/passwd')\n")
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None

    def test_syntax_error_in_config(self, monkeypatch, tmp_config_dir):
        init_file = tmp_config_dir / "init.py"
        init_file.write_text("def f(:\n")
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None
        assert "SyntaxError" in error

    def test_invalid_pattern_falls_back_to_default(self, monkeypatch, tmp_config_dir):
        init_file = tmp_config_dir / "init.py"
        init_file.write_text('config.expression_regex = "(oops"\n')
        monkeypatch.setattr("gpteval.config.get_init_script_path", lambda: init_file)
        config, error = load_config()
        assert error is not None
        assert "default pattern" in error
        assert config.expression_regex == DEFAULT_EXPRESSION_REGEX
