"""Ollama-backed political sentiment classifier."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import LLMConfig, get_llm_timeout
from ..core.types import (
    LABELS,
    REASON_CONNECTION,
    REASON_HTTP,
    REASON_INCOMPLETE,
    REASON_INVALID_LABEL,
    REASON_TIMEOUT,
    Outcome,
)
from ..logging_utils import log_event, truncate_text
from .prompts import build_sentiment_prompt
from .stream import StreamResult, read_stream, strip_reasoning

logger = logging.getLogger(__name__)


class OllamaClassifier:
    """Classifies article text with a single streamed ``/api/generate`` call.

    Transport failures, timeouts, error statuses and unusable answers all
    come back as failed Outcomes; nothing is retried here.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        cfg: LLMConfig,
        llm_logger: logging.Logger | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.cfg = cfg
        self.timeout = get_llm_timeout(cfg)
        self.llm_logger = llm_logger
        self.transport = transport

    def classify(self, text: str, title: str | None = None) -> Outcome:
        prompt = build_sentiment_prompt(text, self.cfg.max_chars)
        payload = {
            "model": self.model,
            "prompt": prompt,
            "temperature": self.cfg.temperature,
        }
        try:
            stream = self._generate(payload)
        except httpx.TimeoutException as exc:
            outcome = Outcome.failure(REASON_TIMEOUT, f"{type(exc).__name__}: {exc}")
            self._log_response(title, outcome, "")
            return outcome
        except httpx.HTTPStatusError as exc:
            outcome = Outcome.failure(REASON_HTTP, f"HTTP {exc.response.status_code}")
            self._log_response(title, outcome, "")
            return outcome
        except httpx.HTTPError as exc:
            outcome = Outcome.failure(REASON_CONNECTION, f"{type(exc).__name__}: {exc}")
            self._log_response(title, outcome, "")
            return outcome

        outcome = interpret_stream(stream)
        self._log_response(title, outcome, stream.text, malformed=stream.malformed)
        return outcome

    def _generate(self, payload: dict[str, Any]) -> StreamResult:
        url = f"{self.base_url}/api/generate"
        with httpx.Client(
            timeout=self.timeout,
            trust_env=self.cfg.trust_env,
            transport=self.transport,
        ) as client:
            with client.stream("POST", url, json=payload) as resp:
                resp.raise_for_status()
                return read_stream(resp.iter_lines())

    def _log_response(
        self,
        title: str | None,
        outcome: Outcome,
        content: str,
        malformed: int = 0,
    ) -> None:
        if not outcome.ok:
            logger.debug("LLM classification failed (%s): %s", outcome.reason, outcome.detail)
        log_event(
            self.llm_logger,
            "LLM response",
            event="llm_sentiment_response",
            status="ok" if outcome.ok else outcome.reason,
            model=self.model,
            article_title=title,
            sentiment=outcome.sentiment,
            detail=outcome.detail,
            malformed_lines=malformed,
            raw_response=truncate_text(content),
        )


def interpret_stream(stream: StreamResult) -> Outcome:
    """Turn a finished stream into a label or a failure reason.

    The answer only counts when the stream completed and, once reasoning
    markup is removed, reads exactly Left, Right or Centre.
    """
    if stream.error:
        return Outcome.failure(REASON_HTTP, stream.error)
    if not stream.done:
        return Outcome.failure(REASON_INCOMPLETE, "stream ended without done flag")
    answer = strip_reasoning(stream.text)
    if answer in LABELS:
        return Outcome.success(answer)
    return Outcome.failure(REASON_INVALID_LABEL, truncate_text(answer, 100) or "empty response")
