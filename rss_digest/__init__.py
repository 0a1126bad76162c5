"""
rss_digest

Collects recent, keyword-matching articles from RSS/Atom feeds, pulls each
article's main text from its page, and optionally summarizes it.

Core ideas:
- Input: PipelineConfig (feed URLs, keywords, recency window, summarization options)
- Process: fetch → normalize → recency filter → keyword match → extract → summarize
- Output: DigestResult (List[ResultRecord] + RunSummary)

Failures are contained: a broken feed is skipped, an unreachable article gets a
sentinel body, a failed summary becomes an error string.

Example
-------
from rss_digest import PipelineConfig, run_pipeline

config = PipelineConfig(
    feeds=["https://azure.microsoft.com/en-us/blog/feed/"],
    keywords=["Azure", "Entra ID"],
)
result = run_pipeline(config)

for record in result.records:
    print(record.published_at, record.title)
print(result.summary.count, result.summary.earliest, result.summary.latest)
"""
from .config import PipelineConfig, load_config
from .core import DigestPipeline, run_pipeline
from .models import DigestResult, RawItem, ResultRecord, RunSummary
from .summarizers import SummarizeOptions

__all__ = [
    "DigestPipeline",
    "DigestResult",
    "PipelineConfig",
    "RawItem",
    "ResultRecord",
    "RunSummary",
    "SummarizeOptions",
    "load_config",
    "run_pipeline",
]
