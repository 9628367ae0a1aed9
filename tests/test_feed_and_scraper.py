"""Tests for feed parsing and article extraction."""

import httpx

from news_sentiment.config import FeedConfig, ScrapeConfig
from news_sentiment.fetch.feed import fetch_news, parse_feed
from news_sentiment.fetch.fetcher import fetch_url
from news_sentiment.fetch.scraper import (
    EXTRACTION_FAILED,
    NO_CONTENT,
    extract_text,
    is_sentinel,
    scrape_content,
)

RSS = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Test News</title>
    <item>
      <title>First headline</title>
      <link>https://news.test/first</link>
      <description>&lt;p&gt;Short &lt;b&gt;summary&lt;/b&gt;&lt;/p&gt;</description>
      <pubDate>Mon, 12 Oct 2026 08:00:00 GMT</pubDate>
    </item>
    <item>
      <title>Second headline</title>
      <link>https://news.test/second</link>
    </item>
    <item>
      <link>https://news.test/third</link>
    </item>
  </channel>
</rss>
"""

PARAGRAPH = "Ministers set out plans for the coming year in a lengthy statement. " * 4

ARTICLE_HTML = f"""
<html><head><title>Story</title><script>var x = 1;</script></head>
<body>
  <nav>Home | World | Politics</nav>
  <article><h1>Story</h1><p>{PARAGRAPH}</p><p>{PARAGRAPH}</p></article>
</body></html>
"""

BBC_HTML = """
<html><body>
  <div data-component="text-block"><p>Short BBC paragraph one.</p></div>
  <div data-component="image-block"><p>Caption text</p></div>
  <div data-component="text-block"><p>Short BBC paragraph two.</p></div>
</body></html>
"""


def _transport(routes: dict) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(str(request.url), (404, "missing"))
        return httpx.Response(status, text=body)

    return httpx.MockTransport(handler)


def test_parse_feed_builds_items():
    items = parse_feed(RSS, limit=10)

    assert [item.title for item in items] == ["First headline", "Second headline", "Untitled"]
    assert items[0].link == "https://news.test/first"
    assert items[0].snippet == "Short summary"
    assert items[0].published == "Mon, 12 Oct 2026 08:00:00 GMT"
    assert items[1].snippet is None
    assert all(item.content is None for item in items)


def test_parse_feed_respects_limit():
    assert len(parse_feed(RSS, limit=2)) == 2
    assert parse_feed(RSS, limit=0) == []


def test_parse_feed_garbage_returns_empty():
    assert parse_feed(b"this is not a feed <<<", limit=5) == []


def test_fetch_news_downloads_and_parses():
    transport = _transport({"https://feed.test/rss.xml": (200, RSS)})
    feed_cfg = FeedConfig(url="https://feed.test/rss.xml", max_items=1)

    items = fetch_news(feed_cfg, ScrapeConfig(), transport=transport)

    assert [item.title for item in items] == ["First headline"]


def test_fetch_news_http_error_returns_empty():
    feed_cfg = FeedConfig(url="https://feed.test/missing.xml")

    assert fetch_news(feed_cfg, ScrapeConfig(), transport=_transport({})) == []


def test_fetch_news_uses_env_url(monkeypatch):
    monkeypatch.setenv("RSS_FEED_URL", "https://env.test/feed")
    transport = _transport({"https://env.test/feed": (200, RSS)})

    items = fetch_news(FeedConfig(), ScrapeConfig(), limit=3, transport=transport)

    assert len(items) == 3


def test_fetch_url_reports_status_errors():
    result = fetch_url(
        "https://news.test/gone",
        timeout=1,
        retries=0,
        user_agent="test",
        trust_env=False,
        transport=_transport({"https://news.test/gone": (410, "gone")}),
    )

    assert not result.ok
    assert result.status_code == 410
    assert result.error == "HTTP 410"


def test_extract_text_from_article_container():
    text = extract_text(ARTICLE_HTML, "https://news.test/story", "selectors", [])

    assert text.startswith("Story")
    assert "Ministers set out plans" in text
    assert "var x" not in text


def test_extract_text_bbc_blocks_accepted_at_any_length():
    text = extract_text(BBC_HTML, "https://www.bbc.co.uk/news/uk-123", "selectors", [])

    assert text == "Short BBC paragraph one.\n\nShort BBC paragraph two."


def test_extract_text_short_page_gives_none():
    html = "<html><body><p>Too short.</p></body></html>"

    assert extract_text(html, "https://news.test/x", "selectors", ["unknown-method"]) is None


def test_scrape_content_success():
    cfg = ScrapeConfig(retries=0, fallback=[])
    transport = _transport({"https://news.test/story": (200, ARTICLE_HTML)})

    text = scrape_content("https://news.test/story", cfg, transport=transport)

    assert "Ministers set out plans" in text
    assert not is_sentinel(text)


def test_scrape_content_http_error_is_extraction_failed():
    cfg = ScrapeConfig(retries=0)

    assert scrape_content("https://news.test/404", cfg, transport=_transport({})) == EXTRACTION_FAILED


def test_scrape_content_without_article_is_no_content():
    cfg = ScrapeConfig(retries=0, fallback=[])
    transport = _transport({"https://news.test/tiny": (200, "<html><body><p>Hi</p></body></html>")})

    assert scrape_content("https://news.test/tiny", cfg, transport=transport) == NO_CONTENT


def test_is_sentinel():
    assert is_sentinel(None)
    assert is_sentinel(NO_CONTENT)
    assert is_sentinel(EXTRACTION_FAILED)
    assert not is_sentinel("Real article text")
