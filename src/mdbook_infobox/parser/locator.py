"""Locate ``{{#infobox}} ... {{/infobox}}`` blocks inside chapter text."""

from __future__ import annotations

import logging
import re

from .base import LocatedBlock

logger = logging.getLogger("mdbook_infobox.locator")

OPENING_MARKER = "{{#infobox}}"
CLOSING_MARKER = "{{/infobox}}"

# Each opening marker pairs with the nearest closing marker after it.
_INFOBOX_RE = re.compile(
    re.escape(OPENING_MARKER) + r"(.*?)" + re.escape(CLOSING_MARKER),
    re.DOTALL,
)

# First opening marker through the last closing marker of the text, as a plain
# greedy ``(.*)`` pairs them. Selected by the ``greedy`` option.
_GREEDY_INFOBOX_RE = re.compile(
    re.escape(OPENING_MARKER) + r"(.*)" + re.escape(CLOSING_MARKER),
    re.DOTALL,
)


def find_infoboxes(text: str, *, greedy: bool = False) -> list[LocatedBlock]:
    """Return every infobox block in *text*, in source order.

    Blocks missing either marker are not matched and stay part of the text.
    """
    pattern = _GREEDY_INFOBOX_RE if greedy else _INFOBOX_RE
    blocks = [LocatedBlock(inner=m.group(1), span=m.span()) for m in pattern.finditer(text)]
    for block in blocks:
        logger.debug("found infobox at %d:%d", block.start, block.end)
    return blocks
