"""
Two-tier sentiment resolution.

The resolver runs an ordered list of attempts and keeps the first one that
produces a label:

1. LLM: the Ollama classifier (skipped when the LLM is disabled for the run)
2. LocalModel: embed the text and pick the closest reference vector

When every attempt fails the item resolves to Unknown. Blank text resolves
to Unknown straight away, without touching the network or the model.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Protocol

from ..core.types import (
    METHOD_LLM,
    METHOD_LOCAL,
    REASON_EMBEDDING,
    REASON_EMPTY_INPUT,
    REASON_LLM_DISABLED,
    REASON_UNEXPECTED,
    UNKNOWN,
    Outcome,
)
from ..embeddings.provider import EmbeddingProvider
from ..embeddings.reference import ReferenceSet
from ..embeddings.similarity import classify

logger = logging.getLogger(__name__)


class TextClassifier(Protocol):
    def classify(self, text: str, title: str | None = None) -> Outcome: ...


@dataclass(frozen=True)
class Resolution:
    """Final sentiment for one text.

    Attributes:
        sentiment: Left, Right, Centre or Unknown
        method: The tier that produced the answer ("LLM" or "LocalModel")
        reason: The last failure reason, when the LLM answer was not used
        scores: Similarity scores, when the LocalModel tier ran
    """
    sentiment: str
    method: str
    reason: str | None = None
    scores: dict[str, float] | None = None


Attempt = tuple[str, Callable[..., Outcome]]


class SentimentResolver:
    """Resolves text to a sentiment label, never raising.

    Args:
        references: Reference vectors for the similarity fallback
        embedder: Provider used to embed text for the fallback
        llm: Primary classifier, or None to run fallback-only
    """

    def __init__(
        self,
        references: ReferenceSet,
        embedder: EmbeddingProvider,
        llm: TextClassifier | None = None,
    ):
        self.references = references
        self.embedder = embedder
        self.llm = llm

    def attempts(self) -> list[Attempt]:
        return [
            (METHOD_LLM, self._try_llm),
            (METHOD_LOCAL, self._try_similarity),
        ]

    def resolve(self, text: str | None, title: str | None = None) -> Resolution:
        if not text or not text.strip():
            return Resolution(sentiment=UNKNOWN, method=METHOD_LOCAL, reason=REASON_EMPTY_INPUT)

        reason: str | None = None
        for method, attempt in self.attempts():
            try:
                outcome = attempt(text, title)
            except Exception as exc:  # noqa: BLE001
                logger.exception("Unexpected error in %s classification for %r", method, title)
                outcome = Outcome.failure(REASON_UNEXPECTED, f"{type(exc).__name__}: {exc}")
            if outcome.ok:
                return Resolution(
                    sentiment=outcome.sentiment,
                    method=method,
                    reason=reason,
                    scores=outcome.scores or None,
                )
            reason = outcome.reason
            logger.debug("%s classification failed for %r: %s", method, title, outcome.detail)

        return Resolution(sentiment=UNKNOWN, method=METHOD_LOCAL, reason=reason)

    def _try_llm(self, text: str, title: str | None) -> Outcome:
        if self.llm is None:
            return Outcome.failure(REASON_LLM_DISABLED)
        return self.llm.classify(text, title=title)

    def _try_similarity(self, text: str, title: str | None) -> Outcome:
        try:
            embedding = self.embedder.embed(text)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error in local sentiment analysis for %r: %s", title, exc)
            return Outcome.failure(REASON_EMBEDDING, f"{type(exc).__name__}: {exc}")
        label, scores = classify(embedding, self.references.vectors)
        return Outcome.success(label, scores)
