from __future__ import annotations

import concurrent.futures as _fut
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import requests

from .config import PipelineConfig
from .extractor import fetch_article, is_sentinel
from .fetcher import fetch_feed
from .filters import keep, matches
from .models import DigestResult, FeedFailure, RawItem, ResultRecord, RunSummary
from .normalizer import normalize_feed
from .summarizers import Summarizer, build_summarizer

logger = logging.getLogger(__name__)

_FeedOutcome = Tuple[List[ResultRecord], Optional[FeedFailure]]


class DigestPipeline:
    """
    High-level API: turn a PipelineConfig into a DigestResult.

    Pipeline, per feed: fetch → normalize → per item: recency → keywords →
    extract → (optional) summarize → append.
    """

    def __init__(
        self,
        config: PipelineConfig,
        *,
        session: Optional[requests.Session] = None,
        summarizer: Optional[Summarizer] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self.config = config
        self._session = session
        self._summarizer = summarizer if summarizer is not None else build_summarizer(config.summarize)
        if now is not None and now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self._now = now.astimezone(timezone.utc) if now is not None else None

    def run(self) -> DigestResult:
        # One cutoff for the whole run
        now = self._now or datetime.now(timezone.utc)
        owns_session = self._session is None
        session = self._session or requests.Session()
        try:
            outcomes = self._process_feeds(session, now)
        finally:
            if owns_session:
                session.close()

        records: List[ResultRecord] = []
        failures: List[FeedFailure] = []
        for feed_records, failure in outcomes:
            records.extend(feed_records)
            if failure is not None:
                failures.append(failure)

        summary = RunSummary.from_records(records)
        logger.info(
            "Digest complete: %d record(s) from %d feed(s), %d feed(s) failed",
            summary.count, len(self.config.feeds), len(failures),
        )
        return DigestResult(records=records, summary=summary, failed_feeds=failures)

    def _process_feeds(self, session: requests.Session, now: datetime) -> List[_FeedOutcome]:
        feeds = list(self.config.feeds)
        max_workers = max(1, int(self.config.max_workers or 1))
        if max_workers == 1 or len(feeds) <= 1:
            return [self._process_feed(url, session, now) for url in feeds]

        # map() keeps feed order, so merging afterwards is deterministic
        with _fut.ThreadPoolExecutor(max_workers=max_workers) as ex:
            return list(ex.map(lambda url: self._process_feed(url, session, now), feeds))

    def _process_feed(self, url: str, session: requests.Session, now: datetime) -> _FeedOutcome:
        try:
            parsed = fetch_feed(url, timeout=self.config.feed_timeout, session=session)
            items = normalize_feed(parsed)
        except Exception as e:
            logger.warning("Skipping feed %s: %s", url, e)
            return [], FeedFailure(feed_source=url, error=str(e))

        records = []
        for item in items:
            if not keep(item, self.config.window, now):
                logger.debug("Dropping stale item %r (%s)", item.title, item.published_at)
                continue
            if not matches(item.title, item.description, self.config.keywords):
                continue
            records.append(self._build_record(item, url, session))

        logger.info("Feed %s: %d item(s), %d matched", url, len(items), len(records))
        return records, None

    def _build_record(self, item: RawItem, feed_source: str, session: requests.Session) -> ResultRecord:
        extraction = fetch_article(
            item.link,
            timeout=self.config.article_timeout,
            user_agent=self.config.user_agent,
            session=session,
        )
        content = extraction.as_text()

        summary = None
        if not is_sentinel(content):
            try:
                summary = self._summarizer.summarize(content)
            except Exception as e:
                logger.warning("Summarizer raised for %s: %s", item.link, e)
                summary = f"[Summary failed: {e}]"

        return ResultRecord(
            title=item.title,
            link=item.link,
            description=item.description,
            feed_source=feed_source,
            published_at=item.published_at,
            full_content=content,
            summary=summary,
        )


def run_pipeline(config: PipelineConfig, **kwargs) -> DigestResult:
    return DigestPipeline(config, **kwargs).run()
