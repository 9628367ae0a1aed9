"""
Startup checks against the Ollama server.

- validate_url: rejects malformed base URLs (fatal for the run)
- check_connection: probes ``/api/tags`` with bounded exponential backoff
- check_required_model: verifies the configured model is installed
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Callable
from urllib.parse import urlparse

import httpx

from ..errors import ConfigError, LLMConnectionError

logger = logging.getLogger(__name__)

MAX_BACKOFF_SECONDS = 10.0


@dataclass
class LLMStatus:
    """Outcome of the startup checks.

    Attributes:
        base_url: The sanitized base URL
        reachable: Whether the server answered the tags probe
        model_available: Whether the required model is installed
        models: Names of installed models, when known
        error: Why the LLM is unusable, if it is
    """
    base_url: str
    reachable: bool = False
    model_available: bool = False
    models: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def usable(self) -> bool:
        return self.reachable and self.model_available


def validate_url(url: str) -> str:
    """Strip trailing slashes and check that ``url`` is an absolute http(s) URL.

    Raises:
        ConfigError: If the URL is malformed
    """
    sanitized = (url or "").strip().rstrip("/")
    parsed = urlparse(sanitized)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid Ollama URL: {url}")
    return sanitized


def backoff_delay(attempt: int) -> float:
    """Delay in seconds after failed attempt number ``attempt`` (1-based)."""
    return min(2.0**attempt, MAX_BACKOFF_SECONDS)


def check_connection(
    base_url: str,
    retries: int = 3,
    timeout: float = 5.0,
    transport: httpx.BaseTransport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> list[str]:
    """Probe the server and return the installed model names.

    Transport errors are retried up to ``retries`` attempts in total. A
    response that arrives but is not a 200 with a ``models`` list is not
    retried.

    Raises:
        LLMConnectionError: If the server stays unreachable or answers unexpectedly
    """
    url = f"{base_url}/api/tags"
    attempts = max(retries, 1)
    for attempt in range(1, attempts + 1):
        logger.info("Attempting to connect to Ollama (attempt %d/%d): %s", attempt, attempts, base_url)
        try:
            with httpx.Client(timeout=timeout, transport=transport) as client:
                resp = client.get(url)
        except httpx.HTTPError as exc:
            logger.error("Ollama connection check failed: %s", exc)
            if attempt < attempts:
                delay = backoff_delay(attempt)
                logger.info("Retrying in %.0fms...", delay * 1000)
                sleep(delay)
                continue
            raise LLMConnectionError(f"Failed to connect to Ollama server at {base_url}: {exc}") from exc

        models = _model_names(resp)
        if resp.status_code == 200 and models is not None:
            logger.info("Successfully connected to Ollama")
            return models
        logger.warning("Unexpected response from Ollama (status %s)", resp.status_code)
        raise LLMConnectionError(
            f"Ollama server at {base_url} is not responding correctly",
            status_code=resp.status_code,
        )
    raise LLMConnectionError(f"Failed to connect to Ollama server at {base_url}")


def check_required_model(model: str, available: list[str]) -> bool:
    """Return True if ``model`` is among the installed models.

    A bare model name also matches its ``:latest`` tag, which is how Ollama
    lists models pulled without an explicit tag.
    """
    candidates = {model}
    if ":" not in model:
        candidates.add(f"{model}:latest")
    found = any(name in candidates for name in available)
    if found:
        logger.info("Required model %s is installed", model)
    else:
        logger.warning(
            'Required model "%s" not found in Ollama installation (available: %s)',
            model,
            ", ".join(available) or "none",
        )
    return found


def probe_llm(
    url: str,
    model: str,
    retries: int = 3,
    timeout: float = 5.0,
    transport: httpx.BaseTransport | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> LLMStatus:
    """Run all startup checks.

    Only a malformed URL raises; an unreachable server or a missing model
    is reported through the returned status.

    Raises:
        ConfigError: If the URL is malformed
    """
    logger.info("Validating Ollama URL: %s", url)
    base_url = validate_url(url)
    status = LLMStatus(base_url=base_url)
    try:
        status.models = check_connection(base_url, retries, timeout, transport, sleep)
    except LLMConnectionError as exc:
        status.error = str(exc)
        return status
    status.reachable = True
    status.model_available = check_required_model(model, status.models)
    if not status.model_available:
        status.error = f'Required model "{model}" is not installed'
    return status


def _model_names(resp: httpx.Response) -> list[str] | None:
    try:
        data = resp.json()
    except ValueError:
        return None
    models = data.get("models") if isinstance(data, dict) else None
    if not isinstance(models, list):
        return None
    return [str(item.get("name")) for item in models if isinstance(item, dict) and item.get("name")]
