from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class RawItem:
    """
    One feed entry after normalization, regardless of the wire format it came from.

    published_at is timezone-aware UTC, or None when the feed gave no usable date.
    """
    title: str
    description: str
    link: str
    published_at: Optional[datetime] = None


@dataclass(frozen=True)
class ResultRecord:
    """
    A matched item together with its extracted article body.

    WARNING: Do not change fields lightly. The report template reads them by name.
    """
    title: str
    link: str
    description: str
    feed_source: str
    published_at: Optional[datetime]
    full_content: str
    summary: Optional[str] = None


@dataclass(frozen=True)
class RunSummary:
    count: int
    earliest: Optional[datetime] = None
    latest: Optional[datetime] = None

    @classmethod
    def from_records(cls, records: Iterable[ResultRecord]) -> "RunSummary":
        records = list(records)
        dates = [r.published_at for r in records if r.published_at is not None]
        return cls(
            count=len(records),
            earliest=min(dates) if dates else None,
            latest=max(dates) if dates else None,
        )


@dataclass(frozen=True)
class FeedFailure:
    feed_source: str
    error: str


@dataclass
class DigestResult:
    records: List[ResultRecord]
    summary: RunSummary
    failed_feeds: List[FeedFailure] = field(default_factory=list)
