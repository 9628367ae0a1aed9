from __future__ import annotations

import logging

import pytest

from news_sentiment.core.types import Outcome
from news_sentiment.embeddings.provider import EmbeddingProvider
from news_sentiment.embeddings.reference import ReferenceSet


class KeywordEmbedder(EmbeddingProvider):
    """Deterministic embedder: one dimension per leaning keyword."""

    def __init__(self):
        self.calls: list[str] = []

    def embed(self, text: str):
        self.calls.append(text)
        lowered = text.lower()
        return (
            float(lowered.count("progressive")),
            float(lowered.count("conservative")),
            float(lowered.count("balanced")),
        )


class BrokenEmbedder(EmbeddingProvider):
    def __init__(self):
        self.calls = 0

    def embed(self, text: str):
        self.calls += 1
        raise RuntimeError("model unavailable")


class FakeLLM:
    """Stands in for OllamaClassifier, returning queued outcomes."""

    def __init__(self, *outcomes: Outcome):
        self.outcomes = list(outcomes)
        self.calls: list[str] = []

    def classify(self, text: str, title: str | None = None) -> Outcome:
        self.calls.append(text)
        if not self.outcomes:
            return Outcome.failure("connection_error", "no outcome queued")
        return self.outcomes.pop(0)


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def references() -> ReferenceSet:
    return ReferenceSet.from_mapping(
        {
            "Left": [1.0, 0.0, 0.0],
            "Right": [0.0, 1.0, 0.0],
            "Centre": [0.0, 0.0, 1.0],
        }
    )


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Undo handler and propagation changes made by setup_logging."""
    yield
    for name in ("news_sentiment", "news_sentiment.llm_responses"):
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
