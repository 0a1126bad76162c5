"""
Run configuration.

Feeds, keywords and timeouts come from an optional YAML file; summarization
secrets come from the environment (a local .env file is loaded first).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigError
from .extractor import BROWSER_USER_AGENT, DEFAULT_ARTICLE_TIMEOUT
from .fetcher import DEFAULT_FEED_TIMEOUT
from .filters import DEFAULT_WINDOW
from .summarizers import SummarizeOptions

DEFAULT_FEEDS = [
    "https://azure.microsoft.com/en-us/blog/feed/",
    "https://techcommunity.microsoft.com/t5/s/gxcuf89792/rss/Community",
    "https://www.microsoft.com/en-us/security/blog/feed/",
    "https://devblogs.microsoft.com/feed/",
]

MAX_WINDOW_DAYS = 36500

DEFAULT_KEYWORDS = [
    "Azure",
    "Intune",
    "Entra ID",
    "Defender",
    "Sentinel",
    "Conditional Access",
    "PIM",
    "Purview",
]


@dataclass(frozen=True)
class PipelineConfig:
    feeds: List[str] = field(default_factory=lambda: list(DEFAULT_FEEDS))
    keywords: List[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    window: timedelta = DEFAULT_WINDOW
    summarize: SummarizeOptions = field(default_factory=SummarizeOptions)
    feed_timeout: float = DEFAULT_FEED_TIMEOUT
    article_timeout: float = DEFAULT_ARTICLE_TIMEOUT
    user_agent: str = BROWSER_USER_AGENT
    max_workers: int = 1

    def with_overrides(self, **overrides: Any) -> "PipelineConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _string_list(data: Dict[str, Any], key: str, default: List[str]) -> List[str]:
    value = data.get(key)
    if value is None:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def _number(data: Dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive number")
    return value


def window_from_days(days: Any) -> timedelta:
    """Validate a recency window given in days. Raises ConfigError when out of range."""
    if isinstance(days, bool) or not isinstance(days, (int, float)) or not 0 < days <= MAX_WINDOW_DAYS:
        raise ConfigError(f"window must be between 0 and {MAX_WINDOW_DAYS} days, got {days!r}")
    return timedelta(days=days)


def _summarize_options(data: Dict[str, Any]) -> SummarizeOptions:
    env = SummarizeOptions.from_env()
    section = data.get("summarize") or {}
    if not isinstance(section, dict):
        raise ConfigError("'summarize' must be a mapping")
    enabled = section.get("enabled")
    if enabled is not None and not isinstance(enabled, bool):
        raise ConfigError("'summarize.enabled' must be true or false")
    # the API key is deliberately not read from the file
    return env.merged(
        enabled=enabled,
        endpoint=section.get("endpoint"),
        deployment=section.get("deployment"),
        api_version=section.get("api_version"),
    )


def load_config(path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Build a PipelineConfig from a YAML file and the environment.

    With no path only defaults and environment variables are used. Raises
    ConfigError when the file cannot be read or has the wrong shape.
    """
    load_dotenv(find_dotenv(usecwd=True))

    data: Dict[str, Any] = {}
    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                loaded = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config {path} must be a mapping at top level")
        data = loaded

    window = window_from_days(data.get("window_days", DEFAULT_WINDOW.days))
    max_workers = data.get("max_workers", 1)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
        raise ConfigError("'max_workers' must be a positive integer")

    return PipelineConfig(
        feeds=_string_list(data, "feeds", DEFAULT_FEEDS),
        keywords=_string_list(data, "keywords", DEFAULT_KEYWORDS),
        window=window,
        summarize=_summarize_options(data),
        feed_timeout=_number(data, "feed_timeout", DEFAULT_FEED_TIMEOUT),
        article_timeout=_number(data, "article_timeout", DEFAULT_ARTICLE_TIMEOUT),
        user_agent=data.get("user_agent") or BROWSER_USER_AGENT,
        max_workers=max_workers,
    )
