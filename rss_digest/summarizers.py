from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Optional, Protocol

from openai import AzureOpenAI

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-02-15-preview"
SYSTEM_PROMPT = "You are an assistant that summarizes technical articles concisely and accurately."

_TRUTHY = {"1", "true", "yes", "on"}


class Summarizer(Protocol):
    def summarize(self, content: str) -> Optional[str]:  # pragma: no cover - interface
        ...


@dataclass(frozen=True)
class SummarizeOptions:
    enabled: bool = False
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    deployment: Optional[str] = None
    api_version: str = DEFAULT_API_VERSION
    max_tokens: int = 500
    temperature: float = 0.3
    timeout_sec: float = 60.0
    max_input_chars: int = 12000

    @property
    def complete(self) -> bool:
        return bool(self.endpoint and self.api_key and self.deployment)

    @classmethod
    def from_env(cls) -> "SummarizeOptions":
        return cls(
            enabled=os.getenv("SUMMARIZE_ENABLED", "").strip().lower() in _TRUTHY,
            endpoint=os.getenv("AZURE_OPENAI_ENDPOINT") or None,
            api_key=os.getenv("AZURE_OPENAI_API_KEY") or None,
            deployment=os.getenv("AZURE_OPENAI_DEPLOYMENT") or None,
            api_version=os.getenv("AZURE_OPENAI_API_VERSION") or DEFAULT_API_VERSION,
        )

    def merged(self, **overrides) -> "SummarizeOptions":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


class NullSummarizer:
    def summarize(self, content: str) -> Optional[str]:
        return None


class AzureOpenAISummarizer:
    def __init__(self, options: SummarizeOptions, *, client: Optional[AzureOpenAI] = None) -> None:
        self._options = options
        self._client = client or AzureOpenAI(
            azure_endpoint=options.endpoint,
            api_key=options.api_key,
            api_version=options.api_version,
            timeout=options.timeout_sec,
            max_retries=0,
        )

    def summarize(self, content: str) -> Optional[str]:
        text = _truncate(content, self._options.max_input_chars)
        try:
            resp = self._client.chat.completions.create(
                model=self._options.deployment,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                max_tokens=self._options.max_tokens,
                temperature=self._options.temperature,
            )
            summary = resp.choices[0].message.content if resp and resp.choices else None
        except Exception as e:
            # A failed summary must never abort the item or the run
            logger.warning("Summarization failed: %s", e)
            return f"[Summary failed: {e}]"
        if not summary:
            return "[Summary failed: empty response]"
        return summary.strip()


def _truncate(s: str, limit: int) -> str:
    if limit <= 0:
        return s
    if len(s) <= limit:
        return s
    return s[:limit]


def build_summarizer(options: Optional[SummarizeOptions]) -> Summarizer:
    if not options or not options.enabled:
        return NullSummarizer()
    if not options.complete:
        logger.warning(
            "Summarization enabled but endpoint, API key or deployment is missing; skipping summaries"
        )
        return NullSummarizer()
    return AzureOpenAISummarizer(options)


def summarize(content: str, endpoint: str, credential: str, deployment: str) -> str:
    """Summarize one article body with an Azure OpenAI chat deployment.

    Errors come back as a "[Summary failed: ...]" string instead of raising.
    """
    try:
        summarizer = AzureOpenAISummarizer(
            SummarizeOptions(enabled=True, endpoint=endpoint, api_key=credential, deployment=deployment)
        )
    except Exception as e:
        logger.warning("Could not create Azure OpenAI client: %s", e)
        return f"[Summary failed: {e}]"
    return summarizer.summarize(content) or ""
