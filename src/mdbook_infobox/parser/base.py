"""Intermediate representation for parsed infobox blocks."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class InfoboxField:
    name: str
    contents: str = ""


@dataclass(slots=True)
class InfoboxImage:
    url: str
    title: str | None = None


InfoboxSection = InfoboxField | InfoboxImage


@dataclass(slots=True)
class Infobox:
    title: str
    sections: list[InfoboxSection] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class LocatedBlock:
    """An infobox found in chapter text.

    ``inner`` is the text between the markers; ``span`` is the half-open range
    of the whole match, markers included, in the original text.
    """

    inner: str
    span: tuple[int, int]

    @property
    def start(self) -> int:
        return self.span[0]

    @property
    def end(self) -> int:
        return self.span[1]
