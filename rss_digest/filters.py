from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from .models import RawItem

DEFAULT_WINDOW = timedelta(days=7)


def keep(item: RawItem, window: timedelta = DEFAULT_WINDOW, now: Optional[datetime] = None) -> bool:
    """
    Recency test for a normalized item.

    Items without a usable date are kept: they cannot be proven stale. Dated items
    are dropped only when strictly older than `now - window`.
    """
    if item.published_at is None:
        return True
    if now is None:
        now = datetime.now(timezone.utc)
    try:
        cutoff = now - window
    except OverflowError:
        # window reaches past datetime.min: nothing can be too old
        cutoff = datetime.min.replace(tzinfo=timezone.utc)
    return item.published_at >= cutoff


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    t = text.casefold()
    return any(k.casefold() in t for k in keywords)


def matches(title: str, description: str, keywords: Iterable[str]) -> bool:
    """
    True when any keyword occurs in the title or description.

    Keywords are literal text compared case-insensitively as plain substrings, so
    "PIM" also matches "pimento".
    """
    keywords = [k for k in keywords if k]
    return _contains_any(title or "", keywords) or _contains_any(description or "", keywords)
