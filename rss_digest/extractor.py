"""Best-effort main-content extraction from article pages.

The heuristic is deliberately simple: the first <article> region, else the first
<main> region, else the <div> whose stripped text is longest. Tag matching is
regex based and not nesting aware.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from html import unescape
from typing import Optional

import requests

logger = logging.getLogger(__name__)

NO_CONTENT_SENTINEL = "[No main content found]"
UNFETCHABLE_SENTINEL = "[Could not retrieve full content]"

DEFAULT_ARTICLE_TIMEOUT = 20  # seconds
BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

_FLAGS = re.IGNORECASE | re.DOTALL
_ARTICLE_RE = re.compile(r"<article\b[^>]*>(.*?)</article\s*>", _FLAGS)
_MAIN_RE = re.compile(r"<main\b[^>]*>(.*?)</main\s*>", _FLAGS)
_DIV_RE = re.compile(r"<div\b[^>]*>(.*?)</div\s*>", _FLAGS)
_TAG_RE = re.compile(r"<[^>]+>")


class ExtractionError(enum.Enum):
    SKIPPED = "skipped"          # link is not http(s); nothing was fetched
    UNFETCHABLE = "unfetchable"  # network error, timeout or non-2xx
    NO_CONTENT = "no_content"    # page fetched but no region found


@dataclass(frozen=True)
class Extraction:
    text: str = ""
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_text(self) -> str:
        if self.error is ExtractionError.UNFETCHABLE:
            return UNFETCHABLE_SENTINEL
        if self.error is not None or not self.text:
            return NO_CONTENT_SENTINEL
        return self.text


def is_sentinel(text: Optional[str]) -> bool:
    return text in (NO_CONTENT_SENTINEL, UNFETCHABLE_SENTINEL)


def strip_tags(markup: str) -> str:
    """Remove tags and decode entities, leaving plain text."""
    return unescape(_TAG_RE.sub("", markup))


def select_main_content(html: str) -> Optional[str]:
    """
    Pick the main textual region of a page and return it without markup.

    Returns None when no candidate region exists or the chosen region has no text.
    """
    if not html:
        return None

    region: Optional[str] = None
    for pattern in (_ARTICLE_RE, _MAIN_RE):
        m = pattern.search(html)
        if m:
            region = strip_tags(m.group(1))
            break
    else:
        best_len = -1
        for m in _DIV_RE.finditer(html):
            candidate = strip_tags(m.group(1))
            # strict comparison keeps the first of equally long candidates
            if len(candidate) > best_len:
                region, best_len = candidate, len(candidate)

    if region is None:
        return None
    region = region.strip()
    return region or None


def _charset_defaulted(resp) -> bool:
    # requests assumes ISO-8859-1 for text/* responses that name no charset
    if resp.encoding != "ISO-8859-1":
        return False
    return "charset" not in (resp.headers.get("Content-Type") or "").lower()


def fetch_article(
    link: str,
    *,
    timeout: float = DEFAULT_ARTICLE_TIMEOUT,
    user_agent: str = BROWSER_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> Extraction:
    """Fetch an article page and extract its main content. Never raises."""
    if not link or not link.startswith("http"):
        logger.debug("Skipping non-http link: %r", link)
        return Extraction(error=ExtractionError.SKIPPED)

    http = session or requests
    try:
        resp = http.get(link, headers={"User-Agent": user_agent}, timeout=timeout)
        resp.raise_for_status()
        if _charset_defaulted(resp):
            resp.encoding = resp.apparent_encoding
        html = resp.text
    except requests.RequestException as e:
        logger.warning("Could not fetch article %s: %s", link, e)
        return Extraction(error=ExtractionError.UNFETCHABLE)

    text = select_main_content(html)
    if text is None:
        logger.debug("No main content found at %s", link)
        return Extraction(error=ExtractionError.NO_CONTENT)
    return Extraction(text=text)


def extract(link: str, **kwargs) -> str:
    """Return the main content of `link`, or a sentinel string when extraction fails."""
    return fetch_article(link, **kwargs).as_text()
