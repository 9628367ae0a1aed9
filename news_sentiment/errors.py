"""Exception types raised by the news sentiment analyser."""

from __future__ import annotations


class ConfigError(ValueError):
    """Invalid configuration that must stop the run before processing starts."""


class LLMConnectionError(Exception):
    """The LLM server could not be reached or answered unexpectedly."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ReferenceInitError(Exception):
    """Reference embeddings could not be loaded or computed."""


class ReferenceStoreNotInitialized(RuntimeError):
    """The reference store was read before ``initialize()`` completed."""
