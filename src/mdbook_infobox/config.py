"""Preprocessor configuration from the ``[preprocessor.infobox]`` table of book.toml."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from mdbook_infobox.errors import InfoboxConfigError
from mdbook_infobox.renderer.html_renderer import DEFAULT_CSS_CLASS

logger = logging.getLogger("mdbook_infobox.config")

# Keys mdBook itself reads from every preprocessor table.
_MDBOOK_KEYS = frozenset({"command", "renderer", "before", "after", "optional"})


@dataclass(frozen=True)
class InfoboxConfig:
    css_class: str = DEFAULT_CSS_CLASS
    greedy: bool = False


def load_config(context: Mapping[str, Any]) -> InfoboxConfig:
    """Read :class:`InfoboxConfig` from an mdBook preprocessor context."""
    table = _preprocessor_table(context)

    for key in sorted(set(table) - _MDBOOK_KEYS - {"css-class", "greedy"}):
        logger.warning("ignoring unknown preprocessor.infobox option %r", key)

    css_class = table.get("css-class", DEFAULT_CSS_CLASS)
    if not isinstance(css_class, str) or not css_class.strip():
        raise InfoboxConfigError("preprocessor.infobox.css-class must be a non-empty string")

    greedy = table.get("greedy", False)
    if not isinstance(greedy, bool):
        raise InfoboxConfigError("preprocessor.infobox.greedy must be a boolean")

    return InfoboxConfig(css_class=css_class, greedy=greedy)


def _preprocessor_table(context: Mapping[str, Any]) -> Mapping[str, Any]:
    table: Any = context.get("config") or {}
    for key in ("preprocessor", "infobox"):
        if not isinstance(table, Mapping):
            raise InfoboxConfigError(f"expected a table above preprocessor.infobox, got {type(table).__name__}")
        table = table.get(key) or {}
    if not isinstance(table, Mapping):
        raise InfoboxConfigError("preprocessor.infobox must be a table")
    return table
