"""flatten_doc.utils: URL helpers for the command line."""

from __future__ import annotations

import re
from typing import Sequence, Tuple
from urllib.parse import urlparse

from flatten_doc.logger import logger

__all__: Sequence[str] = ("resolve_target_url", "default_output_name", "PKG_GO_DEV")

PKG_GO_DEV = "https://pkg.go.dev/"
_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|]')


def resolve_target_url(raw: str) -> Tuple[str, bool]:
    """
    Map a GitHub repository URL to its pkg.go.dev page.

    Returns the URL to crawl and whether the input was a GitHub URL.
    ``https://github.com/u/r`` and ``github.com/u/r`` both give
    ``https://pkg.go.dev/github.com/u/r``.
    """
    raw = raw.strip()
    parsed = urlparse(raw)
    if parsed.scheme in ("http", "https") and (parsed.hostname or "").endswith("github.com"):
        target = PKG_GO_DEV + parsed.netloc + parsed.path
    elif not parsed.scheme and raw.startswith("github.com/"):
        target = PKG_GO_DEV + raw
    else:
        return raw, False
    logger.debug("Resolved GitHub URL %s -> %s", raw, target)
    return target, True


def default_output_name(url: str) -> str:
    """File name derived from the URL path, with unsafe characters replaced and a .md suffix."""
    path = urlparse(url).path.strip("/")
    name = _UNSAFE_CHARS.sub("_", path) if path else "documentation"
    return ensure_md_suffix(name)


def ensure_md_suffix(name: str) -> str:
    return name if name.lower().endswith(".md") else name + ".md"
