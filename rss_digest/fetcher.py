from __future__ import annotations

import logging
from typing import Any, Optional

import feedparser
import requests

from .exceptions import FeedFetchError, FeedParseError

logger = logging.getLogger(__name__)

DEFAULT_FEED_TIMEOUT = 30  # seconds


def fetch_feed(
    url: str,
    *,
    timeout: float = DEFAULT_FEED_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Any:
    """
    Fetch a single feed URL and return the feedparser result.

    Raises FeedFetchError on network/HTTP errors and FeedParseError when the body
    is not recognizable as a feed at all. Feeds that feedparser flags as malformed
    (bozo) but still parsed into entries are returned as-is.
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FeedFetchError(f"Failed to fetch feed: {url} ({e})") from e

    feed = feedparser.parse(resp.content)

    if getattr(feed, "bozo", 0):
        exc = getattr(feed, "bozo_exception", None)
        if not feed.get("version") and not feed.get("entries"):
            msg = f"Invalid RSS/Atom feed: {url}"
            if exc:
                msg += f" ({exc})"
            raise FeedParseError(msg)
        logger.debug("Feed %s parsed with warnings: %s", url, exc)

    return feed
