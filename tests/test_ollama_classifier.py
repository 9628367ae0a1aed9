"""Tests for the Ollama classifier using a mocked HTTP transport."""

import json
import logging

import httpx

from news_sentiment.config import LLMConfig
from news_sentiment.llm.ollama import OllamaClassifier
from news_sentiment.llm.prompts import build_sentiment_prompt


def _classifier(handler, cfg: LLMConfig | None = None) -> OllamaClassifier:
    return OllamaClassifier(
        "http://ollama.test:11434/",
        "mistral",
        cfg or LLMConfig(timeout_seconds=5),
        transport=httpx.MockTransport(handler),
    )


def _ndjson(*fragments: dict) -> bytes:
    return "\n".join(json.dumps(fragment) for fragment in fragments).encode("utf-8")


def test_classify_posts_prompt_and_reads_stream():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            content=_ndjson({"response": "Ri"}, {"response": "ght"}, {"response": "", "done": True}),
        )

    outcome = _classifier(handler).classify("Tax cuts for business owners.")

    assert outcome.ok
    assert outcome.sentiment == "Right"
    assert seen["url"] == "http://ollama.test:11434/api/generate"
    assert seen["body"]["model"] == "mistral"
    assert seen["body"]["temperature"] == 0.1
    assert "Tax cuts for business owners." in seen["body"]["prompt"]


def test_classify_without_done_flag_fails():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'{"response":"Le"}\n{"response":"ft"}\n')

    outcome = _classifier(handler).classify("Some article")

    assert not outcome.ok
    assert outcome.reason == "incomplete_stream"


def test_classify_tolerates_malformed_lines():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            content=b'{"response":"Cen"}\ngarbage\n{"response":"tre","done":true}\n',
        )

    outcome = _classifier(handler).classify("Some article")

    assert outcome.sentiment == "Centre"


def test_classify_invalid_label():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_ndjson({"response": "It leans left.", "done": True}))

    outcome = _classifier(handler).classify("Some article")

    assert outcome.reason == "invalid_label"


def test_classify_timeout_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = _classifier(handler).classify("Some article")

    assert outcome.reason == "timeout"


def test_classify_connection_error_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = _classifier(handler).classify("Some article")

    assert outcome.reason == "connection_error"


def test_classify_error_status_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, content=b'{"error":"boom"}')

    outcome = _classifier(handler).classify("Some article")

    assert outcome.reason == "http_error"
    assert outcome.detail == "HTTP 500"


def test_prompt_truncates_article_text():
    prompt = build_sentiment_prompt("x" * 50, max_chars=10)

    assert "Text: " + "x" * 10 + "\n" in prompt
    assert "x" * 11 not in prompt
    assert "Respond with only one word: 'Left', 'Right', or 'Centre'." in prompt


def test_classify_records_llm_log(caplog):
    llm_logger = logging.getLogger("test_llm_log")

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_ndjson({"response": "Left", "done": True}))

    classifier = _classifier(handler)
    classifier.llm_logger = llm_logger
    with caplog.at_level(logging.INFO, logger="test_llm_log"):
        classifier.classify("Some article", title="Headline")

    record = next(r for r in caplog.records if r.name == "test_llm_log")
    assert record.event == "llm_sentiment_response"
    assert record.status == "ok"
    assert record.article_title == "Headline"
    assert record.raw_response == "Left"
