from __future__ import annotations

from typing import List, Sequence

from ..errors import InvariantError
from . import directives as d
from .constants import MIN_RULE_WIDTH, RULE_PREFIX_LIMIT, WIDTH


class Formatter:
    """Turns a resolved directive stream into text.

    ``newlines`` is 0 mid-line, 1 right after a line break and 2 once a blank
    line is in place. Prefixes are written lazily, on the first write of a line.
    A fresh formatter starts at 2 so the first line gets its prefixes and no
    leading blank line is produced.
    """

    def __init__(self) -> None:
        self.parts: List[str] = []
        self.prefixes: List[str] = []
        self.newlines = 2

    @property
    def text(self) -> str:
        return "".join(self.parts)

    def _lf(self) -> None:
        if self.newlines >= 2:
            raise InvariantError("more than one blank line requested")
        self.parts.append("\n")
        self.newlines += 1

    def write(self, text: str) -> None:
        if self.newlines > 0:
            self.parts.extend(self.prefixes)
        self.parts.append(text)
        self.newlines = 0

    def break_line(self) -> None:
        if self.newlines == 0:
            self._lf()

    def blank_line(self) -> None:
        if self.newlines == 0:
            self._lf()
            self._lf()
        elif self.newlines == 1:
            self._lf()

    def pop(self) -> None:
        if not self.prefixes:
            raise InvariantError("Pop without a matching prefix")
        self.prefixes.pop()

    def rule(self) -> None:
        self.blank_line()
        prefix_len = sum(len(p) for p in self.prefixes)
        width = MIN_RULE_WIDTH if prefix_len > RULE_PREFIX_LIMIT else WIDTH - prefix_len
        self.write("-" * width)
        self.blank_line()

    def format(self, directive: d.Directive) -> None:
        if isinstance(directive, d.TextRun):
            self.write(directive.text)
        elif isinstance(directive, d.SoftBreak):
            self.write(" ")
        elif isinstance(directive, d.HardBreak):
            self.break_line()
        elif isinstance(directive, d.BlankLine):
            self.blank_line()
        elif isinstance(directive, d.PushPrefix):
            self.prefixes.append(directive.text)
        elif isinstance(directive, d.PushPrefixFirstLine):
            self.write(directive.first)
            self.prefixes.append(directive.continuation)
        elif isinstance(directive, d.Pop):
            self.pop()
        elif isinstance(directive, d.HorizontalRule):
            self.rule()
        else:
            raise InvariantError(f"Unknown directive: {directive!r}")


def render(directives: Sequence[d.Directive]) -> str:
    formatter = Formatter()
    for directive in directives:
        formatter.format(directive)
    text = formatter.text
    # a trailing rule leaves a blank line behind; documents end with one newline
    return text.rstrip("\n") + "\n" if text else text
