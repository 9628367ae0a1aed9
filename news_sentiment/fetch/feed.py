"""
RSS/Atom feed reading.

Downloads the configured feed with httpx and hands the raw bytes to
feedparser, which handles both RSS and Atom. Each entry becomes a NewsItem.
"""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup
import feedparser
import httpx

from ..config import FeedConfig, ScrapeConfig, get_feed_url
from ..core.types import NewsItem
from .fetcher import fetch_url

logger = logging.getLogger(__name__)


def fetch_news(
    feed_cfg: FeedConfig,
    scrape_cfg: ScrapeConfig,
    limit: int | None = None,
    transport: httpx.BaseTransport | None = None,
) -> list[NewsItem]:
    """Fetch headlines from the configured feed.

    Failures to download or parse the feed are logged and yield an empty
    list; the run then completes with nothing to analyse.

    Args:
        feed_cfg: Feed settings (URL, item limit, timeout)
        scrape_cfg: Shared HTTP settings (user agent, proxy handling)
        limit: Maximum number of items; defaults to ``feed_cfg.max_items``
        transport: Optional httpx transport, used by tests

    Returns:
        Up to ``limit`` NewsItems in feed order
    """
    url = get_feed_url(feed_cfg)
    limit = feed_cfg.max_items if limit is None else limit
    logger.info("Fetching news headlines from %s", url)

    result = fetch_url(
        url,
        timeout=feed_cfg.timeout_seconds,
        retries=0,
        user_agent=scrape_cfg.user_agent,
        trust_env=scrape_cfg.trust_env,
        transport=transport,
    )
    if not result.ok:
        logger.error("Error fetching news headlines from %s: %s", url, result.error)
        return []

    return parse_feed(result.content or b"", limit)


def parse_feed(raw: bytes | str, limit: int) -> list[NewsItem]:
    """Parse raw feed content into NewsItems.

    A feed that feedparser flags as malformed is still used when it yielded
    entries; only a feed with no entries at all is treated as an error.
    """
    feed = feedparser.parse(raw)
    if feed.bozo and not feed.entries:
        logger.error("Error parsing news feed: %s", feed.get("bozo_exception"))
        return []
    return [_to_news_item(entry) for entry in feed.entries[: max(limit, 0)]]


def _to_news_item(entry: Any) -> NewsItem:
    return NewsItem(
        title=(entry.get("title") or "").strip() or "Untitled",
        link=entry.get("link") or None,
        published=entry.get("published") or entry.get("updated") or None,
        snippet=_clean_snippet(entry.get("summary")),
    )


def _clean_snippet(summary: str | None) -> str | None:
    if not summary:
        return None
    # Feed summaries often carry inline markup
    text = BeautifulSoup(summary, "html.parser").get_text(separator=" ").strip()
    return " ".join(text.split()) or None
