"""
Feed reading and article scraping.

This package handles HTTP fetching, RSS/Atom parsing and article
body extraction.
"""

from .feed import fetch_news, parse_feed
from .fetcher import FetchResult, fetch_url
from .scraper import EXTRACTION_FAILED, NO_CONTENT, extract_text, is_sentinel, scrape_content

__all__ = [
    "fetch_news",
    "parse_feed",
    "FetchResult",
    "fetch_url",
    "scrape_content",
    "extract_text",
    "is_sentinel",
    "NO_CONTENT",
    "EXTRACTION_FAILED",
]
