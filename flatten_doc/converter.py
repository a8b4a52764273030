"""
HTML → Markdown conversion of documentation pages and source files.

Only the readme and documentation sections of a page are converted. Noise
(index blocks, scripts, styles, example buttons) is dropped first, disclosure
widgets are unwrapped and their summaries become level-4 headings.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Optional
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag
from markdownify import ATX, MarkdownConverter

CONTENT_SELECTORS = (".UnitReadme", ".Documentation", ".Documentation-content")
NOISE_SELECTORS = (
    ".Documentation-index",
    "script",
    "style",
    ".Documentation-exampleButtonsContainer",
)
TITLE_SELECTORS = (".UnitHeader-titleHeading", "title")

FENCE_LANGUAGES = {".go": "go", ".py": "python", ".rs": "rust", ".js": "javascript"}


class DocMarkdownConverter(MarkdownConverter):
    """markdownify converter with the rules for disclosure widgets."""

    def convert_details(self, el, text, parent_tags):
        return text

    def convert_summary(self, el, text, parent_tags):
        return f"\n#### {text.strip()}\n\n"


def _top_level(elements: List[Tag]) -> List[Tag]:
    """Drop elements nested inside another selected element."""
    chosen = {id(el) for el in elements}
    return [el for el in elements if not any(id(p) in chosen for p in el.parents)]


def page_title(soup: BeautifulSoup, fallback: str) -> str:
    for selector in TITLE_SELECTORS:
        tag = soup.select_one(selector)
        if tag is not None:
            text = " ".join(tag.get_text(" ", strip=True).split())
            if text:
                return text
    return fallback


class ContentConverter:
    """Turns a parsed page into its Markdown page result body."""

    def __init__(self) -> None:
        self._md = DocMarkdownConverter(heading_style=ATX)

    def select_content(self, soup: BeautifulSoup) -> List[Tag]:
        scope = soup.find("main") or soup
        return _top_level(scope.select(", ".join(CONTENT_SELECTORS)))

    def convert(self, sections: List[Tag]) -> str:
        for section in sections:
            for noise in section.select(", ".join(NOISE_SELECTORS)):
                noise.decompose()
        parts = [self._md.convert_soup(section).strip() for section in sections]
        return "\n\n".join(part for part in parts if part)

    def convert_page(self, soup: BeautifulSoup, url: str) -> Optional[str]:
        """
        Markdown for the page with its header, or None when the page has no
        readme or documentation section. Noise is removed from ``soup`` in place.
        """
        sections = self.select_content(soup)
        if not sections:
            return None
        title = page_title(soup, url)
        body = self.convert(sections)
        return f"# Package: {title}\nInput URL: {url}\n\n{body}"


def format_source(url: str, text: str) -> str:
    """Wrap a downloaded source file in a fenced block under a two-line header."""
    path = unquote(urlparse(url).path)
    suffix = PurePosixPath(path).suffix.lower()
    lang = FENCE_LANGUAGES.get(suffix, suffix.lstrip("."))
    body = text if text.endswith("\n") else text + "\n"
    return f"# Source: {path}\nInput URL: {url}\n\n```{lang}\n{body}```"
