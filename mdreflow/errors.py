from __future__ import annotations


class FormatError(Exception):
    """Base class for errors that abort formatting of a document."""


class UnsupportedConstruct(FormatError):
    """The document uses Markdown this formatter does not handle (raw HTML, odd list markers)."""


class InvariantError(FormatError):
    """Internal consistency check failed while lowering or rendering."""
