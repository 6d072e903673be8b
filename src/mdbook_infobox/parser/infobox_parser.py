"""Parse the Markdown inside an infobox block into :class:`Infobox`.

The block grammar is strict about headings and lenient about everything else:

* the first event must open a heading, whose plain text is the title;
* every later heading opens a field named by its plain text, whose contents
  are all text events up to the next heading;
* an image between sections becomes an image section, captioned by the text
  event that immediately follows its start.
"""

from __future__ import annotations

from mdbook_infobox.errors import InfoboxFieldError, InfoboxImageError, InfoboxTitleError

from .base import Infobox, InfoboxField, InfoboxImage, InfoboxSection
from .events import EventCursor


class InfoboxParser:
    """Build :class:`Infobox` values from block contents."""

    def parse(self, markdown: str) -> Infobox:
        return self.parse_events(EventCursor.from_markdown(markdown))

    def parse_events(self, cursor: EventCursor) -> Infobox:
        title = self._parse_title(cursor)
        sections: list[InfoboxSection] = []
        while (section := self._parse_section(cursor)) is not None:
            sections.append(section)
        return Infobox(title=title, sections=sections)

    def _parse_title(self, cursor: EventCursor) -> str:
        event = cursor.advance()
        if event is None:
            raise InfoboxTitleError("failed to find infobox title")
        if not event.is_start("heading"):
            raise InfoboxTitleError(f"unexpected event: {event}")

        title = _read_heading_text(cursor, InfoboxTitleError)
        if title is None:
            raise InfoboxTitleError("failed to find infobox title")
        return title

    def _parse_section(self, cursor: EventCursor) -> InfoboxSection | None:
        while (event := cursor.peek()) is not None:
            if event.is_start("heading"):
                return self._parse_field(cursor)
            if event.is_start("image"):
                return self._parse_image(cursor)
            cursor.advance()
        return None

    def _parse_field(self, cursor: EventCursor) -> InfoboxField:
        cursor.advance()
        name = _read_heading_text(cursor, InfoboxFieldError)
        if name is None:
            raise InfoboxFieldError("unterminated field heading")

        parts: list[str] = []
        while (event := cursor.peek()) is not None and not event.is_start("heading"):
            if event.is_text:
                parts.append(event.content)
            cursor.advance()

        return InfoboxField(name=name, contents="".join(parts))

    def _parse_image(self, cursor: EventCursor) -> InfoboxImage:
        event = cursor.advance()
        if event is None or not event.is_start("image"):
            raise InfoboxImageError(f"unexpected event {event}")
        url = event.attrs.get("src", "")

        title = None
        following = cursor.peek()
        if following is not None and following.is_text:
            title = following.content
            cursor.advance()

        closing = cursor.advance()
        if closing is None or not closing.is_end("image"):
            raise InfoboxImageError(f"expected end of image {url!r}, got {closing}")

        return InfoboxImage(url=url, title=title)


def _read_heading_text(cursor: EventCursor, error: type[Exception]) -> str | None:
    """Collect heading text after its start event, through the end event.

    Returns ``None`` when the stream ends before the heading closes.
    """
    parts: list[str] = []
    for event in cursor:
        if event.is_text:
            parts.append(event.content)
        elif event.is_end("heading"):
            return "".join(parts)
        else:
            raise error(f"unexpected event: {event}")
    return None
