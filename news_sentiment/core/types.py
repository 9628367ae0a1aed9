"""
Core data types for the news sentiment analyser.

This module defines the data structures passed between pipeline stages:
- NewsItem: A feed entry, filled in with scraped content as the run proceeds
- Outcome: The result of one classification attempt (label or failure reason)
- AnalysisResult: The resolved sentiment for a single item
- AnalysisSummary: Aggregate counts computed once at the end of a run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Sentiment = Literal["Left", "Right", "Centre", "Unknown"]
Method = Literal["LLM", "LocalModel"]

LEFT = "Left"
RIGHT = "Right"
CENTRE = "Centre"
UNKNOWN = "Unknown"

# Order matters: similarity ties resolve to the earliest label.
LABELS: tuple[str, ...] = (LEFT, RIGHT, CENTRE)
SENTIMENTS: tuple[str, ...] = LABELS + (UNKNOWN,)

METHOD_LLM = "LLM"
METHOD_LOCAL = "LocalModel"
METHODS: tuple[str, ...] = (METHOD_LLM, METHOD_LOCAL)

# Failure reasons carried by Outcome and AnalysisResult
REASON_EMPTY_INPUT = "empty_input"
REASON_NO_CONTENT = "no_content"
REASON_LLM_DISABLED = "llm_disabled"
REASON_CONNECTION = "connection_error"
REASON_TIMEOUT = "timeout"
REASON_HTTP = "http_error"
REASON_INCOMPLETE = "incomplete_stream"
REASON_INVALID_LABEL = "invalid_label"
REASON_EMBEDDING = "embedding_error"
REASON_UNEXPECTED = "unexpected_error"

Embedding = tuple[float, ...]


@dataclass
class NewsItem:
    """A single feed entry.

    The pipeline mutates ``content`` in place once the article page has been
    scraped.

    Attributes:
        title: The headline ("Untitled" when the feed omits it)
        link: URL of the full article, if the feed provides one
        content: Scraped article body, or a scraper sentinel string
        published: Publish date as given by the feed
        snippet: Short description from the feed
    """
    title: str
    link: str | None = None
    content: str | None = None
    published: str | None = None
    snippet: str | None = None


@dataclass(frozen=True)
class Outcome:
    """Result of one classification attempt.

    Exactly one of ``sentiment`` and ``reason`` is set.
    """
    sentiment: str | None = None
    reason: str | None = None
    detail: str | None = None
    scores: dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.sentiment is not None

    @classmethod
    def success(cls, sentiment: str, scores: dict[str, float] | None = None) -> Outcome:
        return cls(sentiment=sentiment, scores=dict(scores or {}))

    @classmethod
    def failure(cls, reason: str, detail: str | None = None) -> Outcome:
        return cls(reason=reason, detail=detail)


@dataclass(frozen=True)
class AnalysisResult:
    """Resolved sentiment for one news item.

    Attributes:
        title: The item headline
        sentiment: One of Left, Right, Centre, Unknown
        method: "LLM" or "LocalModel"
        link: The article URL, if any
        reason: Why the LLM answer was not used, when it was not
    """
    title: str
    sentiment: str
    method: str
    link: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class AnalysisSummary:
    """Aggregate statistics over a finished run."""
    total_articles: int
    processed_articles: int
    failed_articles: int
    sentiment_distribution: dict[str, int]
    method_distribution: dict[str, int]
    time_elapsed: float
