"""Rewrite the chapters of an mdBook book, replacing infobox blocks with HTML."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, MutableMapping
from typing import Any

from mdbook_infobox.config import InfoboxConfig
from mdbook_infobox.errors import InfoboxInputError, InfoboxParseError
from mdbook_infobox.parser.infobox_parser import InfoboxParser
from mdbook_infobox.parser.locator import find_infoboxes
from mdbook_infobox.renderer.html_renderer import HTMLRenderer

logger = logging.getLogger("mdbook_infobox.preprocessor")

SUPPORTED_RENDERERS = frozenset({"html"})


def supports_renderer(renderer: str) -> bool:
    return renderer in SUPPORTED_RENDERERS


def preprocess_chapter(
    content: str,
    *,
    parser: InfoboxParser | None = None,
    renderer: HTMLRenderer | None = None,
    greedy: bool = False,
) -> str:
    """Return *content* with every infobox block replaced by its HTML table."""
    blocks = find_infoboxes(content, greedy=greedy)
    if not blocks:
        return content

    parser = parser or InfoboxParser()
    renderer = renderer or HTMLRenderer()
    rendered = [renderer.render(parser.parse(block.inner)) for block in blocks]

    # Splice from the end so earlier spans keep their original offsets.
    output = content
    for block, html in zip(reversed(blocks), reversed(rendered)):
        output = output[: block.start] + html + output[block.end :]
    return output


class InfoboxPreprocessor:
    """The ``infobox`` preprocessor: walks a book and rewrites chapter content."""

    name = "infobox"

    def __init__(self, config: InfoboxConfig | None = None) -> None:
        self.config = config or InfoboxConfig()
        self._parser = InfoboxParser()
        self._renderer = HTMLRenderer(css_class=self.config.css_class)

    def supports_renderer(self, renderer: str) -> bool:
        return supports_renderer(renderer)

    def run(self, context: Any, book: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Return a rewritten copy of *book*; *book* itself is left untouched.

        The first malformed infobox aborts the run with an error naming the
        chapter it was found in.
        """
        processed = copy.deepcopy(book)
        rewritten = 0
        for chapter in _iter_chapters(_book_items(processed)):
            content = chapter.get("content") or ""
            try:
                new_content = preprocess_chapter(
                    content,
                    parser=self._parser,
                    renderer=self._renderer,
                    greedy=self.config.greedy,
                )
            except InfoboxParseError as exc:
                label = chapter.get("name") or chapter.get("path") or "<unnamed chapter>"
                raise type(exc)(f"{label}: {exc}") from exc

            if new_content != content:
                chapter["content"] = new_content
                rewritten += 1
                logger.debug("rewrote infoboxes in chapter %r", chapter.get("name"))

        logger.info("rewrote %d chapter(s)", rewritten)
        return processed


def _book_items(book: MutableMapping[str, Any]) -> list[Any]:
    if not isinstance(book, MutableMapping):
        raise InfoboxInputError(f"book must be a JSON object, got {type(book).__name__}")
    for key in ("sections", "items"):
        if key in book:
            items = book[key]
            if not isinstance(items, list):
                raise InfoboxInputError(f"book.{key} must be a list")
            return items
    raise InfoboxInputError("book has neither 'sections' nor 'items'")


def _iter_chapters(items: list[Any]) -> Iterator[MutableMapping[str, Any]]:
    """Yield chapter objects depth-first in tree order.

    Separators, part titles and other item kinds are skipped.
    """
    for item in items:
        if not isinstance(item, MutableMapping) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        if not isinstance(chapter, MutableMapping):
            raise InfoboxInputError(f"chapter must be a JSON object, got {type(chapter).__name__}")
        sub_items = chapter.get("sub_items") or []
        if not isinstance(sub_items, list):
            raise InfoboxInputError(f"sub_items of chapter {chapter.get('name')!r} must be a list")
        yield chapter
        yield from _iter_chapters(sub_items)
