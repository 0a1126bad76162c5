from __future__ import annotations

import calendar
import time
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from .models import RawItem

# feedparser reports RSS pubDate and Atom published under the same key
_DATE_KEYS = ("published", "updated")


def text_of(value: Any) -> str:
    """
    Resolve a feed field to plain text.

    feedparser hands out either plain strings or nested nodes: detail dicts with a
    `value`, link dicts with an `href`, or lists of either (`links`, `content`).
    Anything unresolvable becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, Mapping):
        for key in ("value", "href"):
            v = value.get(key)
            if isinstance(v, str):
                return v.strip()
        return ""
    if isinstance(value, (list, tuple)):
        for v in value:
            text = text_of(v)
            if text:
                return text
    return ""


def _struct_to_datetime(val: Any) -> Optional[datetime]:
    if not isinstance(val, time.struct_time):
        return None
    try:
        # feedparser normalizes *_parsed to UTC
        return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return None


def _string_to_datetime(s: str) -> Optional[datetime]:
    try:
        dt = date_parser.parse(s)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_published(entry: Dict[str, Any]) -> Optional[datetime]:
    """
    Convert entry date fields to a timezone-aware UTC datetime.
    Priority: pubDate/published -> updated -> None.
    """
    for key in _DATE_KEYS:
        dt = _struct_to_datetime(entry.get(f"{key}_parsed"))
        if dt is not None:
            return dt
        raw = text_of(entry.get(key))
        if raw:
            dt = _string_to_datetime(raw)
            if dt is not None:
                return dt
    return None


def _atom_link(entry: Dict[str, Any]) -> str:
    links = entry.get("links")
    if isinstance(links, list):
        for link in links:
            if isinstance(link, Mapping) and link.get("rel", "alternate") == "alternate":
                href = text_of(link.get("href"))
                if href:
                    return href
    return text_of(entry.get("link")) or text_of(links)


def _from_rss_item(entry: Dict[str, Any]) -> RawItem:
    return RawItem(
        title=text_of(entry.get("title")),
        description=text_of(entry.get("summary") or entry.get("description")),
        link=text_of(entry.get("link")),
        published_at=parse_published(entry),
    )


def _from_atom_entry(entry: Dict[str, Any]) -> RawItem:
    description = text_of(entry.get("summary")) or text_of(entry.get("content"))
    return RawItem(
        title=text_of(entry.get("title")),
        description=description,
        link=_atom_link(entry),
        published_at=parse_published(entry),
    )


def _entries_for(parsed: Any, family: str) -> List[Dict[str, Any]]:
    version = parsed.get("version") or ""
    if not version.startswith(family):
        return []
    entries = parsed.get("entries")
    return entries if isinstance(entries, list) else []


def normalize_feed(parsed: Any) -> List[RawItem]:
    """
    Map a parsed feed (from feedparser) to a list of RawItem.

    RSS items are tried first, then Atom entries. A document that is neither
    yields an empty list.
    """
    items = _entries_for(parsed, "rss")
    if items:
        return [_from_rss_item(e) for e in items]
    entries = _entries_for(parsed, "atom")
    if entries:
        return [_from_atom_entry(e) for e in entries]
    return []
