"""
Article body scraping with multiple extraction strategies.

``scrape_content`` never raises: it returns the article text, or one of two
sentinel strings that downstream code must treat as "no usable content":

- NO_CONTENT: the page was fetched but no extractor found more than
  ``min_chars`` (100) characters of article text
- EXTRACTION_FAILED: the page could not be fetched at all

Extraction methods, tried in configured order:
1. selectors: site-specific blocks (BBC), common article containers, then
   all paragraph text
2. trafilatura: purpose-built main-content extraction
3. readability: Mozilla's readability algorithm, converted to plain text
"""

from __future__ import annotations

import logging
from typing import Callable

from bs4 import BeautifulSoup
import httpx
from readability import Document
import trafilatura

from ..config import ScrapeConfig
from .fetcher import fetch_url

logger = logging.getLogger(__name__)

NO_CONTENT = "No content extracted."
EXTRACTION_FAILED = "Failed to extract content."
SENTINELS = frozenset({NO_CONTENT, EXTRACTION_FAILED})

_BBC_HOSTS = ("bbc.com/news", "bbc.co.uk/news")
_BBC_FALLBACK_SELECTORS = (".article__body-content", ".story-body__inner")
_CONTENT_SELECTORS = (
    "article",
    ".article-body",
    ".story-content",
    ".main-content",
    '[role="main"]',
    ".content",
    "#main-content",
)


def is_sentinel(content: str | None) -> bool:
    """Return True if content is missing or is one of the scraper sentinels."""
    return content is None or content in SENTINELS


def scrape_content(
    url: str,
    cfg: ScrapeConfig,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Fetch an article page and extract its body text.

    Args:
        url: The article URL
        cfg: Scrape settings (timeouts, retries, extraction order)
        transport: Optional httpx transport, used by tests

    Returns:
        The extracted text, NO_CONTENT, or EXTRACTION_FAILED
    """
    logger.info("Fetching article content from: %s", url)
    result = fetch_url(
        url,
        timeout=cfg.timeout_seconds,
        retries=cfg.retries,
        user_agent=cfg.user_agent,
        trust_env=cfg.trust_env,
        transport=transport,
    )
    if not result.ok or result.text is None:
        logger.error("Error scraping content from %s: %s", url, result.error)
        return EXTRACTION_FAILED

    text = extract_text(result.text, url, cfg.primary, cfg.fallback, cfg.min_chars)
    if not text:
        logger.warning("No content found for URL: %s", url)
        return NO_CONTENT
    return text


def extract_text(
    html: str,
    url: str,
    primary: str,
    fallback: list[str],
    min_chars: int = 100,
) -> str | None:
    """Extract plain text from HTML using a chain of extractors.

    Tries each extraction method in order until one produces text longer
    than ``min_chars`` characters. Site-specific matches from the selectors
    method are accepted at any length.

    Returns:
        The extracted text, or None if every method came up short
    """
    order = [primary] + [name for name in fallback if name != primary]
    for method in order:
        extractor = _get_extractor(method)
        if extractor is None:
            logger.debug("Unknown extraction method: %s", method)
            continue
        try:
            text = extractor(html, url, min_chars)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Extractor %s failed on %s: %s", method, url, exc)
            continue
        if text:
            return text.strip()
    return None


def _get_extractor(name: str) -> Callable[[str, str, int], str | None] | None:
    if name == "selectors":
        return _extract_selectors
    if name == "trafilatura":
        return _extract_trafilatura
    if name == "readability":
        return _extract_readability
    return None


def _extract_selectors(html: str, url: str, min_chars: int) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()

    if any(host in url for host in _BBC_HOSTS):
        blocks = [
            node.get_text(" ", strip=True)
            for node in soup.select('[data-component="text-block"]')
        ]
        content = "\n\n".join(block for block in blocks if block)
        if not content:
            for selector in _BBC_FALLBACK_SELECTORS:
                content = _select_text(soup, selector)
                if content:
                    break
        if content:
            return content

    for selector in _CONTENT_SELECTORS:
        content = _select_text(soup, selector)
        if len(content) > min_chars:
            return content

    paragraphs = [p.get_text(" ", strip=True) for p in soup.find_all("p")]
    content = "\n\n".join(p for p in paragraphs if p)
    if len(content) > min_chars:
        return content
    return None


def _select_text(soup: BeautifulSoup, selector: str) -> str:
    node = soup.select_one(selector)
    if node is None:
        return ""
    return node.get_text(" ", strip=True)


def _extract_trafilatura(html: str, url: str, min_chars: int) -> str | None:
    text = trafilatura.extract(html, url=url)
    if text and len(text.strip()) > min_chars:
        return text
    return None


def _extract_readability(html: str, url: str, min_chars: int) -> str | None:
    doc = Document(html)
    soup = BeautifulSoup(doc.summary(), "html.parser")
    text = soup.get_text(separator="\n")
    cleaned = "\n".join(line.strip() for line in text.splitlines() if line.strip())
    if len(cleaned) > min_chars:
        return cleaned
    return None
