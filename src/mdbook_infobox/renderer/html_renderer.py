"""Render :class:`Infobox` values into HTML table fragments."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from mdbook_infobox.parser.base import Infobox, InfoboxField, InfoboxImage, InfoboxSection

DEFAULT_CSS_CLASS = "infobox"


class HTMLRenderer:
    """Render an infobox into the table template.

    Values are inserted verbatim: titles, names, contents and URLs come from
    authored book sources and are not HTML-escaped.
    """

    def __init__(self, css_class: str = DEFAULT_CSS_CLASS, template_path: Path | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent.parent / "template" / "infobox.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self._template_name = template_path.name
        self.css_class = css_class

    def render(self, infobox: Infobox) -> str:
        template = self._env.get_template(self._template_name)
        return template.render(
            css_class=self.css_class,
            title=infobox.title,
            rows=[self._render_section(section) for section in infobox.sections],
        )

    def _render_section(self, section: InfoboxSection) -> dict[str, Any]:
        if isinstance(section, InfoboxField):
            return {"kind": "field", "name": section.name, "contents": section.contents}

        if isinstance(section, InfoboxImage):
            return {"kind": "image", "url": section.url, "title": section.title or ""}

        raise TypeError(f"unsupported infobox section: {section!r}")
