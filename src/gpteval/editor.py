"""Block location, expression splitting and result writing.

A *block* is a maximal run of non-blank lines. Inside a block, lines matched
by the delimiter pattern are the expression; whatever follows the last
matched line is the result of a previous evaluation.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .delimiters import scan_markers
from .document import Document, Position, Range, Selection, TextEdit, is_blank

logger = logging.getLogger(__name__)


@dataclass
class GPTEvalExpression:
    """A single expression to be evaluated, with any stale result found
    alongside it in the same block."""

    range: Range
    expression: str
    result: str | None = None


def _first_non_blank_line_in_range(document: Document, search: Range) -> int | None:
    last = min(search.end.line, document.line_count - 1)
    for line in range(search.start.line, last + 1):
        if not is_blank(document, line):
            return line
    return None


def _first_block_line_before(document: Document, line: int) -> int:
    # The caller guarantees ``line`` itself is non-blank.
    while line >= 0 and not is_blank(document, line):
        line -= 1
    return line + 1


def _last_block_line(document: Document, start_line: int) -> int:
    line = start_line
    while line < document.line_count and not is_blank(document, line):
        line += 1
    return line - 1


def locate_block(
    document: Document, selection: Selection, multiline: bool
) -> Range | None:
    """Return the range of the block under the selection, or None.

    In single-line mode the block is the line holding the cursor. In
    multiline mode a blank start line searches forward inside the selection,
    while a non-blank start line extends backwards to the top of its block.
    """
    if not multiline:
        line = selection.active.line
        if is_blank(document, line):
            return None
        return Range.from_coords(line, 0, line, len(document.line_at(line)))

    search = selection.to_range()
    if is_blank(document, search.start.line):
        start_line = _first_non_blank_line_in_range(document, search)
    else:
        start_line = _first_block_line_before(document, search.start.line)
    if start_line is None:
        return None

    end_line = _last_block_line(document, start_line)
    return Range.from_coords(start_line, 0, end_line, len(document.line_at(end_line)))


def split_expression(text: str, pattern: re.Pattern[str]) -> tuple[str, str] | None:
    """Split block text into ``(expression, prior_result)``.

    Each delimiter match contributes its captured group to the expression;
    the text after the last match is the prior result. Returns None when the
    block contains no expression.
    """
    expression = ""
    prior_result = ""
    for marker in scan_markers(text, pattern):
        if marker.capture is None:
            prior_result = marker.preceding
            break
        expression += marker.capture.strip() + "\n"

    if not expression.strip():
        return None
    return expression.strip(), prior_result.strip()


def find_result_start(document: Document, block: GPTEvalExpression) -> int | None:
    """Return the line on which ``block.result`` begins, if it can be found."""
    if not block.result:
        return None
    first, last = block.range.start.line, block.range.end.line
    lines = [document.line_at(n) for n in range(first, last + 1)]
    for offset in range(len(lines)):
        if "\n".join(lines[offset:]).strip() == block.result:
            return first + offset
    return None


def plan_result_edit(
    document: Document, block: GPTEvalExpression, new_result: str
) -> TextEdit:
    """Compute the edit that writes ``new_result`` for ``block``.

    A located prior result is replaced through to the end of the block;
    otherwise the new result is inserted on a new line after the block.
    """
    start = find_result_start(document, block)
    if start is not None:
        target = Range(Position(start, 0), block.range.end)
        if not target.is_empty:
            return TextEdit.replace(target, new_result)
    return TextEdit.insert(block.range.end, "\n" + new_result)


class ExpressionEditor:
    """Reads expressions from, and writes results into, one document."""

    def __init__(self, document: Document, pattern: re.Pattern[str]):
        self.document = document
        self.pattern = pattern

    def get_expression_under_cursor(self, multiline: bool) -> GPTEvalExpression | None:
        block_range = locate_block(self.document, self.document.selection, multiline)
        if block_range is None:
            logger.debug("No block under cursor")
            return None

        text = self.document.get_text(block_range)
        split = split_expression(text, self.pattern)
        if split is None:
            logger.debug(
                "Block at lines %d-%d has no expression",
                block_range.start.line,
                block_range.end.line,
            )
            return None

        expression, prior_result = split
        logger.debug("Expression: %r, prior result: %r", expression, prior_result)
        return GPTEvalExpression(block_range, expression, prior_result)

    def insert_or_replace_result(self, block: GPTEvalExpression, new_result: str) -> None:
        """Write ``new_result`` into the document, keeping the cursor in place."""
        cursor = self.document.selection.active
        edit = plan_result_edit(self.document, block, new_result)
        self.document.apply_edit(edit)
        self.document.selection = Selection.cursor(cursor)
