"""Source spelling for link destinations and titles.

markdown-it hands destinations and titles back with backslash escapes and
entities already resolved. These helpers write them out again in a form that
parses back to the same value.
"""
from __future__ import annotations

import re
import string

_punct = re.escape(string.punctuation)
# a backslash is literal unless ASCII punctuation (or the closing delimiter) follows it
_backslash_re = re.compile(rf"\\(?=[{_punct}]|$)")
_entity_re = re.compile(r"&(?=#[0-9]{1,7};|#[xX][0-9a-fA-F]{1,6};|[A-Za-z][A-Za-z0-9]*;)")
_needs_angle_re = re.compile(r"[\x00-\x20\x7f]")
_angle_re = re.compile(r"[<>]")
_paren_re = re.compile(r"[()]")


def _common(text: str) -> str:
    text = _backslash_re.sub(r"\\\\", text)
    return _entity_re.sub(r"\\&", text)


def _balanced(url: str) -> bool:
    depth = 0
    for ch in url:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def destination(url: str) -> str:
    """Spell ``url`` as a link destination.

    Empty destinations and ones with spaces or control characters use the
    ``<...>`` form; everything else is written bare, with parentheses escaped
    only when they do not balance.
    """
    if not url or _needs_angle_re.search(url):
        return "<" + _angle_re.sub(r"\\\g<0>", _common(url)) + ">"
    out = _common(url)
    if not _balanced(url):
        out = _paren_re.sub(r"\\\g<0>", out)
    if out.startswith("<"):
        out = "\\" + out
    return out


def title(text: str) -> str:
    """Spell ``text`` as a double-quoted link title on one line."""
    text = _common(text).replace('"', '\\"')
    return '"' + re.sub(r"[\r\n]+", " ", text) + '"'
