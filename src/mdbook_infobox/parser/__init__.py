"""Parser package."""

from .base import Infobox, InfoboxField, InfoboxImage, InfoboxSection, LocatedBlock
from .events import Event, EventCursor, EventKind, iter_events
from .infobox_parser import InfoboxParser
from .locator import CLOSING_MARKER, OPENING_MARKER, find_infoboxes

__all__ = [
    "Infobox",
    "InfoboxField",
    "InfoboxImage",
    "InfoboxSection",
    "LocatedBlock",
    "Event",
    "EventCursor",
    "EventKind",
    "iter_events",
    "InfoboxParser",
    "OPENING_MARKER",
    "CLOSING_MARKER",
    "find_infoboxes",
]
