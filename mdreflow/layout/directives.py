"""Layout directives: the flat intermediate language between the tree and text.

Lowering produces a list of these, reflow resolves the soft breaks, and the
renderer turns the result into lines.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Union

from ..errors import InvariantError


@dataclass(frozen=True)
class SoftBreak:
    """Candidate wrap point; becomes a space or a line break during reflow."""


@dataclass(frozen=True)
class HardBreak:
    """Unconditional line end, a no-op at the start of a line."""


@dataclass(frozen=True)
class BlankLine:
    """Exactly one empty line, however many are requested in a row."""


@dataclass(frozen=True)
class PushPrefix:
    text: str


@dataclass(frozen=True)
class PushPrefixFirstLine:
    """Write ``first`` on the current line, then prefix later lines with ``continuation``."""

    first: str
    continuation: str


@dataclass(frozen=True)
class Pop:
    pass


@dataclass(frozen=True)
class TextRun:
    text: str

    def __post_init__(self) -> None:
        if "\n" in self.text or "\r" in self.text:
            raise InvariantError(f"TextRun may not contain a line break: {self.text!r}")


@dataclass(frozen=True)
class HorizontalRule:
    pass


Directive = Union[
    SoftBreak,
    HardBreak,
    BlankLine,
    PushPrefix,
    PushPrefixFirstLine,
    Pop,
    TextRun,
    HorizontalRule,
]

BREAKS = (SoftBreak, HardBreak, BlankLine)


def to_one_line(directives: Sequence[Directive]) -> str:
    """Flatten a prefix-free directive list into a single line of text.

    Any run of breaks between two pieces of text becomes one space; breaks at
    either end disappear.
    """
    parts: List[str] = []
    pending_space = False
    for directive in directives:
        if isinstance(directive, TextRun):
            if pending_space and parts:
                parts.append(" ")
            pending_space = False
            parts.append(directive.text)
        elif isinstance(directive, BREAKS):
            pending_space = True
        else:
            raise InvariantError(f"{type(directive).__name__} cannot appear in a one-line rendering")
    return "".join(parts)
