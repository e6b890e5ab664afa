from __future__ import annotations

import re
from typing import List, Optional, Sequence

from ..errors import InvariantError, UnsupportedConstruct
from ..parse import escape
from ..parse.tree import (
    Block,
    Blockquote,
    Code,
    Emphasis,
    FencedCode,
    Header,
    HorizontalRule,
    Image,
    IndentedCode,
    LineBreak,
    Link,
    ListItem,
    OrderedList,
    Paragraph,
    Raw,
    Span,
    Strong,
    Text,
    UnorderedList,
)
from . import directives as d
from .constants import CLAUSE_DELIMITERS, CODE_WRAP_LENGTH

_clause_re = re.compile(rf"[^{re.escape(CLAUSE_DELIMITERS)}]*[{re.escape(CLAUSE_DELIMITERS)}]|[^{re.escape(CLAUSE_DELIMITERS)}]+")
_space_re = re.compile(r"[ \t\r\n]+")
_number_re = re.compile(r"[0-9]+")
# Text that would open a list, heading, quote, setext underline, rule or fence at the start of a line.
_marker_re = re.compile(r"(?:[-+*]|#{1,6}|=+|[0-9]{1,9}[.)])(?: |$)|>|(?:[-*_] *){3,}$|`{3}|~{3}")
_ordinal_re = re.compile(r"[0-9]{1,9}(?=[.)])")

QUOTE_PREFIX = "> "
CODE_PREFIX = "    "
ITEM_CONTINUATION = "    "
BULLET = "*   "
FENCE = "```"


class LayoutBuffer:
    def __init__(self, one_line: bool = False) -> None:
        self.directives: List[d.Directive] = []
        # header text is flattened to a single line, so nothing starts a line inside it
        self.one_line = one_line

    def _append(self, directive: d.Directive) -> None:
        # A pending soft break is swallowed by whatever structural directive follows it.
        if self.directives and isinstance(self.directives[-1], d.SoftBreak):
            self.directives.pop()
        self.directives.append(directive)

    def soft_break(self) -> None:
        if self.directives and isinstance(self.directives[-1], d.TextRun):
            self.directives.append(d.SoftBreak())

    def hard_break(self) -> None:
        self._append(d.HardBreak())

    def blank_line(self) -> None:
        self._append(d.BlankLine())

    def write(self, text: str) -> None:
        if text:
            self.directives.append(d.TextRun(text))

    def write_verbatim(self, text: str) -> None:
        self.directives.append(d.TextRun(text))

    def push_prefix(self, prefix: str) -> None:
        self._append(d.PushPrefix(prefix))

    def push_first_line(self, first: str, continuation: str) -> None:
        self._append(d.PushPrefixFirstLine(first, continuation))

    def pop(self) -> None:
        self._append(d.Pop())

    def rule(self) -> None:
        self._append(d.HorizontalRule())

    # spans

    def lower_spans(self, spans: Sequence[Span]) -> None:
        for span in spans:
            if isinstance(span, LineBreak):
                self.write("\\")
                self.hard_break()
            elif isinstance(span, Text):
                self._lower_text(span.text)
            elif isinstance(span, Code):
                self._lower_code(span.text)
            elif isinstance(span, Link):
                self._lower_link("", span.text, span.url, span.title)
            elif isinstance(span, Image):
                self._lower_link("!", span.text, span.url, span.title)
            elif isinstance(span, Emphasis):
                self.write("*")
                self.lower_spans(span.spans)
                self.write("*")
            elif isinstance(span, Strong):
                self.write("__")
                self.lower_spans(span.spans)
                self.write("__")
            else:
                raise InvariantError(f"Unknown span: {span!r}")

    def _lower_text(self, text: str) -> None:
        for i, clause in enumerate(_clause_re.findall(text)):
            if i:
                self.hard_break()
            run = _space_re.sub(" ", clause)
            if run.startswith(" "):
                self.soft_break()
            self._write_run(run.strip(" "))
            if run.endswith(" "):
                self.soft_break()

    def _write_run(self, run: str) -> None:
        """Write one clause, keeping it from reading as a block marker on a fresh line."""
        if not run:
            return
        if self.directives and _marker_re.match(run):
            last = self.directives[-1]
            if isinstance(last, d.SoftBreak):
                self.directives.pop()
                run = " " + run
            elif isinstance(last, d.HardBreak) and not self.one_line:
                run = _escape_marker(run)
        self.write(run)

    def _lower_code(self, code: str) -> None:
        wrap = self.hard_break if len(code) > CODE_WRAP_LENGTH else self.soft_break
        if "`" in code:
            code = code.replace("\\", "\\\\").replace("`", "\\`")
        wrap()
        self.write(f"`{code}`")
        wrap()

    def _lower_link(self, bang: str, text: str, url: str, title: Optional[str]) -> None:
        self.hard_break()
        if title is not None:
            self.write(f"{bang}[{text}]({escape.destination(url)} {escape.title(title)})")
        else:
            self.write(f"{bang}[{text}]({escape.destination(url)})")
        self.hard_break()

    # blocks

    def lower_header(self, spans: Sequence[Span], level: int) -> None:
        if level < 1:
            raise InvariantError(f"Invalid header level {level}")
        inner = LayoutBuffer(one_line=True)
        inner.lower_spans(spans)
        text = d.to_one_line(inner.directives)
        if level <= 2 and text:
            self.write(text)
            self.hard_break()
            self.write(("=" if level == 1 else "-") * len(text))
        else:
            self.write(f"{'#' * level} {text}".rstrip())
        self.blank_line()

    def lower_blocks(self, blocks: Sequence[Block]) -> None:
        for block in blocks:
            if isinstance(block, Header):
                self.lower_header(block.spans, block.level)
            elif isinstance(block, Paragraph):
                self.lower_spans(block.spans)
                self.blank_line()
            elif isinstance(block, Blockquote):
                self.push_prefix(QUOTE_PREFIX)
                self.lower_blocks(block.blocks)
                self.pop()
            elif isinstance(block, IndentedCode):
                self.push_prefix(CODE_PREFIX)
                for line in _code_lines(block.code):
                    self.write_verbatim(line)
                    self.hard_break()
                self.pop()
            elif isinstance(block, FencedCode):
                self.write(FENCE + block.info)
                self.hard_break()
                for line in _code_lines(block.code):
                    self.write_verbatim(line)
                    self.hard_break()
                self.write(FENCE)
            elif isinstance(block, OrderedList):
                self._lower_ordered(block)
            elif isinstance(block, UnorderedList):
                for item in block.items:
                    self.push_first_line(BULLET, ITEM_CONTINUATION)
                    self._lower_item(item)
                    self.pop()
                    self.hard_break()
            elif isinstance(block, HorizontalRule):
                self.rule()
            elif isinstance(block, Raw):
                raise UnsupportedConstruct("Raw HTML blocks are not supported")
            else:
                raise InvariantError(f"Unknown block: {block!r}")
            self.blank_line()

    def _lower_ordered(self, block: OrderedList) -> None:
        if not _number_re.fullmatch(block.start):
            raise UnsupportedConstruct(f"Unsupported list type {block.start!r}")
        counter = int(block.start, 10)
        for item in block.items:
            self.push_first_line(f"{counter}.".ljust(4), ITEM_CONTINUATION)
            self._lower_item(item)
            self.pop()
            self.hard_break()
            counter += 1

    def _lower_item(self, item: ListItem) -> None:
        if item.spans is not None:
            self.lower_spans(item.spans)
        else:
            self.lower_blocks(item.blocks or ())


def _escape_marker(run: str) -> str:
    m = _ordinal_re.match(run)
    if m:
        return run[: m.end()] + "\\" + run[m.end() :]
    return "\\" + run


def _code_lines(code: str) -> List[str]:
    if not code:
        return []
    if code.endswith("\n"):
        code = code[:-1]
    return code.split("\n")


def lower(blocks: Sequence[Block]) -> List[d.Directive]:
    buffer = LayoutBuffer()
    buffer.lower_blocks(blocks)
    return buffer.directives
