from __future__ import annotations

import copy
from typing import Any

import pytest

from mdbook_infobox.config import InfoboxConfig
from mdbook_infobox.errors import InfoboxFieldError, InfoboxInputError, InfoboxTitleError
from mdbook_infobox.preprocessor import InfoboxPreprocessor, preprocess_chapter, supports_renderer

CHAPTER = """
# Sunshine

{{#infobox}}
# Sunshine
![image](images/test.jpg)

## Name
Testing
{{/infobox}}

# History
Teste
"""

SUNSHINE_TABLE = """\
<table class="infobox">
<thead>
<tr>
<th colspan="2">Sunshine</th>
</tr>
</thead>
<tr>
    <td colspan="2"><img src="images/test.jpg" title="image"/></td>
</tr>
<tr>
    <td>Name</td>
    <td>Testing</td>
</tr>
</table>"""

EXPECTED_CHAPTER = "\n# Sunshine\n\n" + SUNSHINE_TABLE + "\n\n# History\nTeste\n"


def mock_context(renderer: str = "html", infobox: dict[str, Any] | None = None) -> dict[str, Any]:
    config: dict[str, Any] = {
        "book": {
            "authors": ["AUTHOR"],
            "language": "en",
            "multilingual": False,
            "src": "src",
            "title": "TITLE",
        },
    }
    if infobox is not None:
        config["preprocessor"] = {"infobox": infobox}
    return {
        "root": "/path/to/book",
        "config": config,
        "renderer": renderer,
        "mdbook_version": "0.4.21",
    }


def mock_chapter(name: str, content: str, sub_items: list[Any] | None = None) -> dict[str, Any]:
    return {
        "Chapter": {
            "name": name,
            "content": content,
            "number": [1],
            "sub_items": sub_items or [],
            "path": f"{name.lower().replace(' ', '_')}.md",
            "source_path": f"{name.lower().replace(' ', '_')}.md",
            "parent_names": [],
        }
    }


def mock_book(*items: Any) -> dict[str, Any]:
    return {"sections": list(items), "__non_exhaustive": None}


# ---------------------------------------------------------------------------
# Chapter rewriting
# ---------------------------------------------------------------------------

def test_preprocess_chapter_replaces_block_in_place() -> None:
    assert preprocess_chapter(CHAPTER) == EXPECTED_CHAPTER


def test_chapter_without_infobox_is_unchanged() -> None:
    content = "# Plain\n\n  some text with {{#infobox}} but no end\n\n"

    assert preprocess_chapter(content) == content


def test_multiple_blocks_with_different_lengths() -> None:
    content = (
        "before\n"
        "{{#infobox}}\n# A\n## Long field name\nlong field contents\n{{/infobox}}\n"
        "between\n"
        "{{#infobox}}\n# B\n{{/infobox}}\n"
        "after\n"
    )

    output = preprocess_chapter(content)

    assert output.startswith("before\n<table")
    assert output.endswith("</table>\nafter\n")
    assert "\nbetween\n" in output
    assert output.count('<table class="infobox">') == 2
    assert output.index(">A</th>") < output.index("between") < output.index(">B</th>")
    assert "{{" not in output


def test_greedy_chapter_rewrite_collapses_blocks() -> None:
    content = "{{#infobox}}\n# A\n## F\nx\n{{/infobox}}\nmid\n{{#infobox}}\n# B\n{{/infobox}}\n"

    output = preprocess_chapter(content, greedy=True)

    assert output.count("<table") == 1
    assert "<td>F</td>" in output
    assert "<td>B</td>" in output


# ---------------------------------------------------------------------------
# Book processing
# ---------------------------------------------------------------------------

def test_preprocessor_rewrites_book() -> None:
    book = mock_book(mock_chapter("Chapter 1", CHAPTER))

    processed = InfoboxPreprocessor().run(mock_context(), book)

    assert processed == mock_book(mock_chapter("Chapter 1", EXPECTED_CHAPTER))


def test_preprocessor_walks_nested_chapters_and_skips_other_items() -> None:
    nested = mock_chapter("Nested", CHAPTER)
    book = mock_book(
        {"PartTitle": "Part one"},
        mock_chapter("Intro", "no infobox", sub_items=[nested]),
        "Separator",
        mock_chapter("Second", CHAPTER),
    )

    processed = InfoboxPreprocessor().run(mock_context(), book)

    assert processed["sections"][0] == {"PartTitle": "Part one"}
    assert processed["sections"][2] == "Separator"
    intro = processed["sections"][1]["Chapter"]
    assert intro["content"] == "no infobox"
    assert intro["sub_items"][0]["Chapter"]["content"] == EXPECTED_CHAPTER
    assert processed["sections"][3]["Chapter"]["content"] == EXPECTED_CHAPTER


def test_preprocessor_accepts_items_key() -> None:
    book = {"items": [mock_chapter("Chapter 1", CHAPTER)]}

    processed = InfoboxPreprocessor().run(mock_context(), book)

    assert processed["items"][0]["Chapter"]["content"] == EXPECTED_CHAPTER


def test_preprocessor_passes_chapter_metadata_through() -> None:
    book = mock_book(mock_chapter("Chapter 1", CHAPTER))
    book["sections"][0]["Chapter"]["extra"] = {"kept": True}

    processed = InfoboxPreprocessor().run(mock_context(), book)

    assert processed["sections"][0]["Chapter"]["extra"] == {"kept": True}
    assert processed["__non_exhaustive"] is None


def test_preprocessor_handles_draft_chapters() -> None:
    draft = mock_chapter("Draft", "")
    draft["Chapter"]["path"] = None

    processed = InfoboxPreprocessor().run(mock_context(), mock_book(draft))

    assert processed == mock_book(draft)


def test_malformed_infobox_aborts_whole_book() -> None:
    book = mock_book(
        mock_chapter("Good", CHAPTER),
        mock_chapter("Bad", "{{#infobox}}\nno title here\n{{/infobox}}"),
    )
    original = copy.deepcopy(book)

    with pytest.raises(InfoboxTitleError, match="Bad: unexpected event"):
        InfoboxPreprocessor().run(mock_context(), book)

    assert book == original


def test_malformed_field_reports_chapter() -> None:
    book = mock_book(mock_chapter("Fields", "{{#infobox}}\n# T\n## *x*\n{{/infobox}}"))

    with pytest.raises(InfoboxFieldError, match="^Fields: "):
        InfoboxPreprocessor().run(mock_context(), book)


def test_preprocessor_uses_configured_css_class() -> None:
    book = mock_book(mock_chapter("Chapter 1", CHAPTER))

    processed = InfoboxPreprocessor(InfoboxConfig(css_class="wiki")).run(mock_context(), book)

    assert processed["sections"][0]["Chapter"]["content"].count('<table class="wiki">') == 1


def test_preprocessor_rejects_book_without_items() -> None:
    with pytest.raises(InfoboxInputError):
        InfoboxPreprocessor().run(mock_context(), {"chapters": []})


def test_preprocessor_rejects_malformed_chapter() -> None:
    with pytest.raises(InfoboxInputError, match="chapter must be a JSON object"):
        InfoboxPreprocessor().run(mock_context(), mock_book({"Chapter": "not an object"}))


def test_preprocessor_rejects_malformed_sub_items() -> None:
    chapter = mock_chapter("Parent", CHAPTER)
    chapter["Chapter"]["sub_items"] = {"Chapter": {}}

    with pytest.raises(InfoboxInputError, match="sub_items"):
        InfoboxPreprocessor().run(mock_context(), mock_book(chapter))


def test_supports_only_html() -> None:
    assert supports_renderer("html")
    assert not supports_renderer("markdown")
    assert not supports_renderer("HTML")
    assert InfoboxPreprocessor().supports_renderer("html")
    assert InfoboxPreprocessor.name == "infobox"
