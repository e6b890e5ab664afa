from __future__ import annotations

from typing import List, Optional, Sequence

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from ..errors import UnsupportedConstruct
from ..utils.logging import get_logger
from . import escape
from .tree import (
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


def _keep(url: str) -> str:
    return url


def _parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    # Keep escapes and entities as separate tokens so their source spelling survives.
    md.disable("text_join")
    # Link destinations are reproduced as written, no percent-encoding.
    md.normalizeLink = _keep  # type: ignore[method-assign]
    md.normalizeLinkText = _keep  # type: ignore[method-assign]
    return md


def tokenize(text: str) -> List[Block]:
    root = SyntaxTreeNode(_parser().parse(text))
    blocks = _blocks(root.children)
    get_logger().debug(f"Parsed {len(blocks)} top-level blocks")
    return blocks


def _blocks(nodes: Sequence[SyntaxTreeNode]) -> List[Block]:
    return [_block(node) for node in nodes]


def _inline_children(node: SyntaxTreeNode) -> Sequence[SyntaxTreeNode]:
    if node.children and node.children[0].type == "inline":
        return node.children[0].children
    return []


def _block(node: SyntaxTreeNode) -> Block:
    t = node.type
    if t == "heading":
        return Header(tuple(_spans(_inline_children(node))), int(node.tag[1:]))
    if t == "paragraph":
        return Paragraph(tuple(_spans(_inline_children(node))))
    if t == "blockquote":
        return Blockquote(tuple(_blocks(node.children)))
    if t == "code_block":
        return IndentedCode(node.content)
    if t == "fence":
        return FencedCode(node.content, node.info.strip())
    if t == "bullet_list":
        return UnorderedList(tuple(_item(child) for child in node.children))
    if t == "ordered_list":
        start = node.attrs.get("start", 1)
        return OrderedList(tuple(_item(child) for child in node.children), str(start))
    if t == "hr":
        return HorizontalRule()
    if t == "html_block":
        return Raw(node.content)
    raise UnsupportedConstruct(f"Unsupported block: {t}")


def _item(node: SyntaxTreeNode) -> ListItem:
    children = node.children
    if not children:
        return ListItem(spans=())
    if len(children) == 1 and children[0].type == "paragraph" and children[0].hidden:
        return ListItem(spans=tuple(_spans(_inline_children(children[0]))))
    return ListItem(blocks=tuple(_blocks(children)))


def _spans(nodes: Sequence[SyntaxTreeNode]) -> List[Span]:
    spans: List[Span] = []
    pending: List[str] = []

    def flush() -> None:
        if pending:
            spans.append(Text("".join(pending)))
            pending.clear()

    for node in nodes:
        t = node.type
        if t == "text" or t == "html_inline":
            pending.append(node.content)
        elif t == "text_special":
            pending.append(node.markup or node.content)
        elif t == "softbreak":
            pending.append(" ")
        else:
            flush()
            spans.append(_span(node))
    flush()
    return spans


def _span(node: SyntaxTreeNode) -> Span:
    t = node.type
    if t == "hardbreak":
        return LineBreak()
    if t == "code_inline":
        return Code(node.content)
    if t == "em":
        return Emphasis(tuple(_spans(node.children)))
    if t == "strong":
        return Strong(tuple(_spans(node.children)))
    if t == "link":
        return Link(_source_text(node.children), str(node.attrs["href"]), _title(node))
    if t == "image":
        return Image(_source_text(node.children), str(node.attrs["src"]), _title(node))
    raise UnsupportedConstruct(f"Unsupported inline element: {t}")


def _source_text(nodes: Sequence[SyntaxTreeNode]) -> str:
    parts: List[str] = []
    for node in nodes:
        t = node.type
        if t in ("text", "html_inline"):
            parts.append(node.content)
        elif t == "text_special":
            parts.append(node.markup or node.content)
        elif t in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif t == "code_inline":
            parts.append(f"{node.markup}{node.content}{node.markup}")
        elif t in ("em", "strong"):
            parts.append(f"{node.markup}{_source_text(node.children)}{node.markup}")
        elif t == "image":
            parts.append(f"![{_source_text(node.children)}]({_target(str(node.attrs['src']), _title(node))})")
        elif t == "link":
            parts.append(f"[{_source_text(node.children)}]({_target(str(node.attrs['href']), _title(node))})")
    return "".join(parts)


def _title(node: SyntaxTreeNode) -> Optional[str]:
    title = node.attrs.get("title")
    return str(title) if title is not None else None


def _target(url: str, title: Optional[str]) -> str:
    if title is None:
        return escape.destination(url)
    return f"{escape.destination(url)} {escape.title(title)}"
