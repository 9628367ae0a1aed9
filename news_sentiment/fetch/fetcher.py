"""
HTTP page fetching with retry support.

Both the feed reader and the article scraper go through ``fetch_url`` so
that timeouts, redirects, proxy handling and retries behave the same way
for every outbound page request.
"""

from __future__ import annotations

from dataclasses import dataclass
import time

import httpx


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
        content: The raw response body, for parsers that sniff the encoding themselves
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None
    content: bytes | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


def fetch_url(
    url: str,
    timeout: float,
    retries: int,
    user_agent: str,
    trust_env: bool,
    transport: httpx.BaseTransport | None = None,
) -> FetchResult:
    """Fetch a URL using httpx with retry logic.

    Network failures are retried with a linear backoff. A completed request
    is never retried, whatever its status code; callers decide what a
    non-2xx status means for them.

    Args:
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: User-Agent header string
        trust_env: Whether to respect system proxy settings from environment
        transport: Optional httpx transport, used by tests

    Returns:
        FetchResult with text on success or error message on failure
    """
    headers = {"User-Agent": user_agent}
    last_error: str | None = None

    for attempt in range(retries + 1):
        try:
            with httpx.Client(
                timeout=timeout,
                headers=headers,
                follow_redirects=True,
                trust_env=trust_env,
                transport=transport,
            ) as client:
                resp = client.get(url)
                error = None if resp.is_success else f"HTTP {resp.status_code}"
                return FetchResult(
                    url=url,
                    status_code=resp.status_code,
                    text=resp.text,
                    error=error,
                    content=resp.content,
                )
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            if attempt < retries:
                time.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=None, text=None, error=last_error)
