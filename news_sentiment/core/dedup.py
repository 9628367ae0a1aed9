"""
News item deduplication using link matching and fuzzy title comparison.

Feeds occasionally repeat a story under a second link or with a lightly
edited headline. BBC feeds in particular append ``at_medium``/``at_campaign``
tracking parameters, so links are compared with those stripped. This module
drops such repeats before scraping.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from rapidfuzz import fuzz

from .types import NewsItem

_TRACKING_PREFIXES = ("at_", "utm_")


def normalize_link(link: str) -> str:
    """Return ``link`` without tracking parameters, fragment or trailing slash."""
    parts = urlsplit(link.strip())
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if not key.lower().startswith(_TRACKING_PREFIXES)
    ]
    path = parts.path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, urlencode(query), ""))


def dedup_items(items: list[NewsItem], threshold: int = 92) -> list[NewsItem]:
    """Remove duplicate news items, preserving feed order.

    Items without a real headline ("Untitled") are only compared by link.

    Args:
        items: Items as returned by the feed fetcher
        threshold: Similarity (0-100) at which two titles count as the same story

    Returns:
        The items with link and near-identical title repeats removed
    """
    seen_links: set[str] = set()
    kept: list[NewsItem] = []
    titles: list[str] = []

    for item in items:
        link = normalize_link(item.link) if item.link else None
        if link and link in seen_links:
            continue
        has_title = item.title != "Untitled"
        if has_title and _is_similar_title(item.title, titles, threshold):
            continue
        if link:
            seen_links.add(link)
        if has_title:
            titles.append(item.title)
        kept.append(item)

    return kept


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    return any(fuzz.ratio(title, existing) >= threshold for existing in titles)
