from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, PackageLoader, select_autoescape

from .models import DigestResult

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Feed Digest"

_env = Environment(
    loader=PackageLoader("rss_digest", "templates"),
    autoescape=select_autoescape(["html", "j2"]),
)


def _fmt_date(value: Optional[datetime]) -> str:
    if value is None:
        return "unknown date"
    return value.strftime("%Y-%m-%d %H:%M UTC")


_env.filters["fmt_date"] = _fmt_date


def render_report(
    result: DigestResult,
    *,
    title: str = DEFAULT_TITLE,
    generated_at: Optional[datetime] = None,
) -> str:
    tmpl = _env.get_template("report.html.j2")
    return tmpl.render(
        title=title,
        records=result.records,
        summary=result.summary,
        failed_feeds=result.failed_feeds,
        generated_at=generated_at or datetime.now(timezone.utc),
    )


def write_report(result: DigestResult, path: Union[str, Path], **kwargs) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(result, **kwargs), encoding="utf-8")
    logger.info("Wrote report with %d record(s) to %s", result.summary.count, path)
    return path
