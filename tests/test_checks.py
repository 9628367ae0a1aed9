"""Tests for the Ollama startup checks."""

import httpx
import pytest

from news_sentiment.errors import ConfigError, LLMConnectionError
from news_sentiment.llm.checks import (
    backoff_delay,
    check_connection,
    check_required_model,
    probe_llm,
    validate_url,
)

TAGS = {"models": [{"name": "mistral:latest"}, {"name": "llama3:8b"}]}


def _tags_transport(payload=TAGS, status: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/tags"
        return httpx.Response(status, json=payload)

    return httpx.MockTransport(handler)


def _refusing_transport(counter: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        counter.append(request.url)
        raise httpx.ConnectError("connection refused", request=request)

    return httpx.MockTransport(handler)


def test_validate_url_strips_trailing_slashes():
    assert validate_url("http://localhost:11434/") == "http://localhost:11434"
    assert validate_url("https://ollama.example.com//") == "https://ollama.example.com"


@pytest.mark.parametrize("url", ["", "localhost:11434", "ftp://x", "http://", "not a url"])
def test_validate_url_rejects_malformed(url):
    with pytest.raises(ConfigError):
        validate_url(url)


def test_backoff_delay_is_capped():
    assert [backoff_delay(n) for n in range(1, 6)] == [2.0, 4.0, 8.0, 10.0, 10.0]


def test_check_connection_returns_model_names():
    models = check_connection("http://ollama.test", transport=_tags_transport())

    assert models == ["mistral:latest", "llama3:8b"]


def test_check_connection_retries_with_backoff_then_raises():
    requests: list = []
    sleeps: list[float] = []

    with pytest.raises(LLMConnectionError):
        check_connection(
            "http://ollama.test",
            retries=3,
            transport=_refusing_transport(requests),
            sleep=sleeps.append,
        )

    assert len(requests) == 3
    assert sleeps == [2.0, 4.0]


def test_check_connection_recovers_on_later_attempt():
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            raise httpx.ConnectError("not yet", request=request)
        return httpx.Response(200, json=TAGS)

    sleeps: list[float] = []
    models = check_connection(
        "http://ollama.test",
        transport=httpx.MockTransport(handler),
        sleep=sleeps.append,
    )

    assert "llama3:8b" in models
    assert sleeps == [2.0]


def test_check_connection_error_status_is_not_retried():
    sleeps: list[float] = []

    with pytest.raises(LLMConnectionError) as excinfo:
        check_connection(
            "http://ollama.test",
            transport=_tags_transport({"error": "nope"}, status=503),
            sleep=sleeps.append,
        )

    assert excinfo.value.status_code == 503
    assert sleeps == []


def test_check_required_model_matches_latest_tag():
    available = ["mistral:latest", "llama3:8b"]

    assert check_required_model("mistral", available)
    assert check_required_model("mistral:latest", available)
    assert check_required_model("llama3:8b", available)
    assert not check_required_model("llama3", available)
    assert not check_required_model("phi3", [])


def test_probe_llm_usable():
    status = probe_llm("http://ollama.test/", "mistral", transport=_tags_transport())

    assert status.usable
    assert status.base_url == "http://ollama.test"
    assert status.error is None


def test_probe_llm_missing_model():
    status = probe_llm("http://ollama.test", "phi3", transport=_tags_transport())

    assert status.reachable
    assert not status.model_available
    assert not status.usable
    assert "phi3" in status.error


def test_probe_llm_unreachable_reports_status():
    status = probe_llm(
        "http://ollama.test",
        "mistral",
        retries=2,
        transport=_refusing_transport([]),
        sleep=lambda _: None,
    )

    assert not status.reachable
    assert not status.usable
    assert status.error


def test_probe_llm_raises_on_bad_url():
    with pytest.raises(ConfigError):
        probe_llm("ollama.test", "mistral", transport=_tags_transport())
