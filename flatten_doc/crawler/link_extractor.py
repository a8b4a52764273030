"""
Link extraction and scope checks for documentation pages.
"""
from __future__ import annotations

from typing import Iterable, List
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from flatten_doc.crawler.fetcher import host_allowed

CHILD_LINK_SELECTOR = ".UnitDirectories table a[href]"
SOURCE_LINK_SELECTOR = ".UnitFiles-fileList a[href]"


def _resolve(soup: BeautifulSoup, selector: str, base_url: str) -> List[str]:
    links: List[str] = []
    for tag in soup.select(selector):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw or raw.startswith(("#", "mailto:", "javascript:")):
            continue
        absolute, _ = urldefrag(urljoin(base_url, raw))
        if urlparse(absolute).scheme in ("http", "https"):
            links.append(absolute)
    return list(dict.fromkeys(links))


def extract_child_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    """Absolute URLs of the sub-packages listed in the page's directory table."""
    return _resolve(soup, CHILD_LINK_SELECTOR, base_url)


def extract_source_links(
    soup: BeautifulSoup, base_url: str, extensions: Iterable[str]
) -> List[str]:
    """Absolute URLs of source files from the page's file list."""
    return [
        url for url in _resolve(soup, SOURCE_LINK_SELECTOR, base_url)
        if is_source_link(url, extensions)
    ]


def is_source_link(url: str, extensions: Iterable[str]) -> bool:
    return urlparse(url).path.endswith(tuple(extensions))


def in_scope(url: str, root_url: str, allowed_domains: tuple[str, ...]) -> bool:
    """A child page is crawled only inside the allowed domains and under the root URL."""
    return host_allowed(url, allowed_domains) and url.startswith(root_url.rstrip("/"))
