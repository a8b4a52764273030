"""
Data models for the flatten-doc crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class PageResult:
    """One crawled artifact: canonical URL and its Markdown content."""

    url: str
    content: str


@dataclass(slots=True)
class FetchedPage:
    """A successful page response. ``html`` is None for non-HTML documents."""

    url: str
    final_url: str
    status: int
    html: Optional[str]
