from __future__ import annotations

from collections import deque
from typing import Deque, List, Sequence

from ..utils.logging import get_logger
from . import directives as d
from .constants import WIDTH

_LINE_ENDS = (d.SoftBreak, d.HardBreak, d.HorizontalRule, d.BlankLine)


def _next_chunk_length(pending: Deque[d.Directive]) -> int:
    length = 0
    for directive in pending:
        if isinstance(directive, _LINE_ENDS):
            break
        if isinstance(directive, d.TextRun):
            length += len(directive.text)
    return length


def fix_line_breaks(directives: Sequence[d.Directive]) -> List[d.Directive]:
    """Resolve every soft break into either a kept space or a hard break.

    Greedy, one chunk of lookahead: a soft break becomes a hard break when the
    current line is already over WIDTH or when the next unbreakable run of text
    would push it over. Decisions are never revisited. Prefix widths are not
    counted here.
    """
    pending: Deque[d.Directive] = deque(directives)
    while pending and isinstance(pending[0], d.BREAKS):
        pending.popleft()
    while pending and isinstance(pending[-1], d.BREAKS):
        pending.pop()
    pending.append(d.HardBreak())

    result: List[d.Directive] = []
    line_length = 0
    while pending:
        directive = pending.popleft()
        if isinstance(directive, d.TextRun):
            line_length += len(directive.text)
            result.append(directive)
        elif isinstance(directive, d.SoftBreak):
            if line_length > WIDTH or line_length + _next_chunk_length(pending) > WIDTH:
                result.append(d.HardBreak())
                line_length = 0
            else:
                # kept: renders as a single space, not counted
                result.append(directive)
        else:
            if isinstance(directive, (d.HardBreak, d.BlankLine, d.HorizontalRule)):
                line_length = 0
            result.append(directive)

    get_logger().debug(f"Reflow: {len(directives)} directives in, {len(result)} out")
    return result
