"""Prompt template loading.

A template file holds a system message, a ``---`` separator, and an optional
scripted conversation. In the conversation part, lines matched by the
delimiter pattern are user turns and everything else is assistant text::

    You are terse.
    ---
    --What is 2 + 2?
    4
    --And 3 + 3?
    6
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .delimiters import scan_markers
from .errors import NoWorkspaceForTemplate, PromptLoadFailure

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."
WORKSPACE_PROMPT_FILENAME = "prompt.txt"

Role = Literal["system", "user", "assistant"]

_SYSTEM_SEPARATOR = re.compile(r"\A(.*?)---+(.*)\Z", re.DOTALL)


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class ChatPrompt:
    """A parsed template: system message plus scripted turns."""

    system: str = DEFAULT_SYSTEM_PROMPT
    messages: tuple[ChatMessage, ...] = field(default_factory=tuple)

    def same_as(self, other: ChatPrompt) -> bool:
        """Compare system text and turn contents; roles are not compared."""
        return (
            self.system == other.system
            and len(self.messages) == len(other.messages)
            and all(a.content == b.content for a, b in zip(self.messages, other.messages))
        )

    def to_history(self) -> list[ChatMessage]:
        return [ChatMessage("system", self.system), *self.messages]


def parse_prompt(text: str, pattern: re.Pattern[str]) -> ChatPrompt:
    """Parse template text into a ChatPrompt."""
    match = _SYSTEM_SEPARATOR.match(text)
    if match:
        system, rest = match.group(1).strip(), match.group(2)
    else:
        system, rest = text.strip(), ""

    messages: list[ChatMessage] = []
    user_lines: list[str] = []

    def flush_user() -> None:
        if user_lines:
            messages.append(ChatMessage("user", "\n".join(user_lines)))
            user_lines.clear()

    for marker in scan_markers(rest, pattern):
        assistant_text = marker.preceding.strip()
        if assistant_text:
            flush_user()
            messages.append(ChatMessage("assistant", assistant_text))
        if marker.capture and marker.capture.strip():
            user_lines.append(marker.capture.strip())
    flush_user()

    return ChatPrompt(system=system, messages=tuple(messages))


def load_prompt_file(path: Path, pattern: re.Pattern[str]) -> ChatPrompt:
    """Read and parse a UTF-8 template file.

    Raises:
        PromptLoadFailure: If the file cannot be read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PromptLoadFailure(f"Failed to load prompt from {path}: {e}") from e
    return parse_prompt(text, pattern)


def expand_home(path: str) -> Path:
    """Expand a leading ``~`` to the user's home directory."""
    if path.startswith("~"):
        return Path(str(Path.home()) + path[1:])
    return Path(path)


def resolve_prompt_path(
    prompt_path: str | None,
    use_prompt_in_current_directory: bool,
    workspace_roots: list[Path] | None = None,
) -> Path | None:
    """Work out which template file to load, if any.

    Raises:
        NoWorkspaceForTemplate: If the workspace template is requested but no
            workspace root is open.
    """
    if use_prompt_in_current_directory:
        if not workspace_roots:
            raise NoWorkspaceForTemplate(
                "You must open a folder or workspace in order to use the "
                "use_prompt_in_current_directory setting."
            )
        return workspace_roots[0] / WORKSPACE_PROMPT_FILENAME
    if prompt_path:
        return expand_home(prompt_path)
    return None


def format_prompt(messages: list[ChatMessage]) -> str:
    """Render history for the output channel, marking user turns with '>'."""
    return "\n".join(
        (">" if m.role == "user" else "") + m.content for m in messages
    )
