from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class LineBreak:
    pass


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Code:
    text: str


@dataclass(frozen=True)
class Link:
    text: str
    url: str
    title: Optional[str] = None


@dataclass(frozen=True)
class Image:
    text: str
    url: str
    title: Optional[str] = None


@dataclass(frozen=True)
class Emphasis:
    spans: Tuple["Span", ...]


@dataclass(frozen=True)
class Strong:
    spans: Tuple["Span", ...]


Span = Union[LineBreak, Text, Code, Link, Image, Emphasis, Strong]


@dataclass(frozen=True)
class ListItem:
    # Tight items carry spans, items holding several blocks carry blocks.
    spans: Optional[Tuple[Span, ...]] = None
    blocks: Optional[Tuple["Block", ...]] = None

    def __post_init__(self) -> None:
        if (self.spans is None) == (self.blocks is None):
            raise ValueError("ListItem needs exactly one of spans or blocks")


@dataclass(frozen=True)
class Header:
    spans: Tuple[Span, ...]
    level: int


@dataclass(frozen=True)
class Paragraph:
    spans: Tuple[Span, ...]


@dataclass(frozen=True)
class Blockquote:
    blocks: Tuple["Block", ...]


@dataclass(frozen=True)
class IndentedCode:
    code: str


@dataclass(frozen=True)
class FencedCode:
    code: str
    info: str = ""


@dataclass(frozen=True)
class OrderedList:
    items: Tuple[ListItem, ...]
    start: str = "1"


@dataclass(frozen=True)
class UnorderedList:
    items: Tuple[ListItem, ...]


@dataclass(frozen=True)
class Raw:
    html: str


@dataclass(frozen=True)
class HorizontalRule:
    pass


Block = Union[
    Header,
    Paragraph,
    Blockquote,
    IndentedCode,
    FencedCode,
    OrderedList,
    UnorderedList,
    Raw,
    HorizontalRule,
]
