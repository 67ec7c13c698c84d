"""Delimiter-pattern scanning shared by the expression splitter and the
prompt template parser.

A delimiter pattern is a regular expression with a single capture group. Each
match marks an expression line; the captured group is the expression text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

# Lines starting with "--"; the rest of the line is the expression.
DEFAULT_EXPRESSION_REGEX = r"^--[ \t]?(.*)$"


@dataclass(frozen=True)
class Marker:
    """One step of a scan.

    Attributes:
        preceding: Unmatched text between the previous match and this one.
        capture: The captured group of this match, or None for the trailing
            span after the last match.
    """

    preceding: str
    capture: str | None


def compile_pattern(regex: str, dotall: bool = False) -> re.Pattern[str]:
    """Compile a delimiter regex with multiline semantics.

    Raises:
        re.error: If the regex is invalid.
        ValueError: If the regex has no capture group.
    """
    flags = re.MULTILINE
    if dotall:
        flags |= re.DOTALL
    pattern = re.compile(regex, flags)
    if pattern.groups < 1:
        raise ValueError(f"Delimiter pattern {regex!r} has no capture group")
    return pattern


def scan_markers(text: str, pattern: re.Pattern[str]) -> Iterator[Marker]:
    """Lazily split ``text`` into (preceding span, marker capture) pairs.

    Matches never overlap: each search resumes at the end of the previous
    match. The last item has ``capture=None`` and carries whatever follows the
    final match; it is omitted when that tail is empty.
    """
    pos = 0
    for match in pattern.finditer(text):
        yield Marker(text[pos : match.start()], match.group(1) or "")
        pos = match.end()
    if pos < len(text):
        yield Marker(text[pos:], None)
