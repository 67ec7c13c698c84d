"""Error kinds raised inside an evaluation.

Every one of these is recovered by ``Repl.evaluate``; none escapes to crash
the session.
"""

from __future__ import annotations


class GPTEvalError(Exception):
    """Base class for recoverable evaluation errors."""


class NoExpressionFound(GPTEvalError):
    """The cursor is not on an evaluable block."""


class PromptLoadFailure(GPTEvalError):
    """The prompt template could not be read or parsed."""


class NoWorkspaceForTemplate(GPTEvalError):
    """A workspace-relative template was requested with no workspace open."""


class MissingCredential(GPTEvalError):
    """No API key is configured for the completion provider."""


class CompletionFailure(GPTEvalError):
    """The completion call failed or returned no usable content."""


class ConfigError(GPTEvalError):
    """A configuration value is unusable (e.g. an invalid delimiter pattern)."""
