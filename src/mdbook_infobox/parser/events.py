"""Flat Markdown event stream built on markdown-it-py, plus a lookahead cursor.

markdown-it-py produces nested block tokens whose ``inline`` tokens carry
children. The infobox grammar wants a single forward-only sequence of
start/end/text events, so :func:`iter_events` flattens the token tree and
:class:`EventCursor` adds one token of lookahead on top of it.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.tasklists import tasklists_plugin


class EventKind(enum.Enum):
    START = "start"
    END = "end"
    TEXT = "text"
    CODE = "code"
    HTML = "html"
    SOFT_BREAK = "soft_break"
    HARD_BREAK = "hard_break"
    RULE = "rule"
    FOOTNOTE_REFERENCE = "footnote_reference"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class Event:
    kind: EventKind
    tag: str | None = None
    content: str = ""
    attrs: dict[str, Any] = field(default_factory=dict)

    def is_start(self, tag: str) -> bool:
        return self.kind is EventKind.START and self.tag == tag

    def is_end(self, tag: str) -> bool:
        return self.kind is EventKind.END and self.tag == tag

    @property
    def is_text(self) -> bool:
        return self.kind is EventKind.TEXT

    def __str__(self) -> str:
        if self.kind in (EventKind.START, EventKind.END):
            return f"{self.kind.name}({self.tag})"
        if self.content:
            return f"{self.kind.name}({self.content!r})"
        return self.kind.name


_SIMPLE_TOKENS = {
    "text": EventKind.TEXT,
    "code_inline": EventKind.CODE,
    "softbreak": EventKind.SOFT_BREAK,
    "hardbreak": EventKind.HARD_BREAK,
    "hr": EventKind.RULE,
    "html_block": EventKind.HTML,
    "html_inline": EventKind.HTML,
    "footnote_ref": EventKind.FOOTNOTE_REFERENCE,
}

_MARKDOWN: MarkdownIt | None = None


def _build_markdown_parser() -> MarkdownIt:
    md = MarkdownIt("commonmark")
    md.enable(["table", "strikethrough"])
    md.use(footnote_plugin, inline=False, move_to_end=False)
    md.use(tasklists_plugin)
    # Link and image destinations are kept exactly as written.
    md.normalizeLink = lambda url: url  # type: ignore[method-assign]
    md.validateLink = lambda url: True  # type: ignore[method-assign]
    return md


def get_markdown_parser() -> MarkdownIt:
    global _MARKDOWN
    if _MARKDOWN is None:
        _MARKDOWN = _build_markdown_parser()
    return _MARKDOWN


def iter_events(markdown: str) -> Iterator[Event]:
    """Yield the flattened event stream of *markdown*."""
    yield from _flatten(get_markdown_parser().parse(markdown))


def _flatten(tokens: Iterable[Token]) -> Iterator[Event]:
    for token in tokens:
        if token.type == "inline":
            yield from _flatten(token.children or [])
        elif token.type == "image":
            attrs = {"src": str(token.attrGet("src") or ""), "title": token.attrGet("title")}
            yield Event(EventKind.START, "image", attrs=attrs)
            yield from _flatten(token.children or [])
            yield Event(EventKind.END, "image")
        elif token.type in ("fence", "code_block"):
            attrs = {"info": token.info.strip()} if token.info else {}
            yield Event(EventKind.START, "code_block", attrs=attrs)
            yield Event(EventKind.TEXT, content=token.content)
            yield Event(EventKind.END, "code_block")
        elif token.nesting == 1:
            yield Event(EventKind.START, _tag_name(token.type), attrs=_start_attrs(token))
        elif token.nesting == -1:
            yield Event(EventKind.END, _tag_name(token.type))
        elif token.type in _SIMPLE_TOKENS:
            yield Event(_SIMPLE_TOKENS[token.type], content=token.content)
        else:
            yield Event(EventKind.OTHER, token.type, content=token.content)


def _tag_name(token_type: str) -> str:
    for suffix in ("_open", "_close"):
        if token_type.endswith(suffix):
            return token_type[: -len(suffix)]
    return token_type


def _start_attrs(token: Token) -> dict[str, Any]:
    if token.type == "heading_open":
        return {"level": int(token.tag[1:]) if token.tag[1:].isdigit() else 1}
    if token.type == "link_open":
        return {"href": str(token.attrGet("href") or "")}
    return {}


class EventCursor:
    """Forward-only iterator over events with a one-event lookahead.

    ``peek`` never consumes; repeated calls return the same event until the
    cursor is advanced. Both ``peek`` and ``advance`` return ``None`` once the
    underlying stream is exhausted.
    """

    _EMPTY = object()

    def __init__(self, events: Iterable[Event]) -> None:
        self._events = iter(events)
        self._peeked: Any = self._EMPTY

    @classmethod
    def from_markdown(cls, markdown: str) -> EventCursor:
        return cls(iter_events(markdown))

    def __iter__(self) -> EventCursor:
        return self

    def __next__(self) -> Event:
        if self._peeked is not self._EMPTY:
            event, self._peeked = self._peeked, self._EMPTY
            if event is None:
                raise StopIteration
            return event
        return next(self._events)

    def peek(self) -> Event | None:
        if self._peeked is self._EMPTY:
            self._peeked = next(self._events, None)
        return self._peeked

    def advance(self) -> Event | None:
        return next(self, None)
