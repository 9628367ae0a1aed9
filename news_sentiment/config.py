"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FeedConfig: RSS/Atom feed source settings
- ScrapeConfig: Article page fetching and extraction settings
- LLMConfig: Ollama endpoint and classifier settings
- EmbeddingConfig: Local embedding model and reference cache settings
- DedupConfig: Feed item deduplication settings
- OutputConfig: Report output settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container

Values that can also come from the environment (feed URL, Ollama URL and
model, LLM timeout, log level) are resolved through the ``get_*`` helpers:
an inline config value wins over the environment variable, which wins over
the default.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

DEFAULT_FEED_URL = "https://feeds.bbci.co.uk/news/rss.xml"
DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "mistral"


@dataclass
class FeedConfig:
    """Configuration for the news feed source.

    Attributes:
        url: Feed URL (falls back to RSS_FEED_URL, then the BBC News feed)
        max_items: Maximum number of feed entries to analyse
        timeout_seconds: HTTP timeout for downloading the feed
    """

    url: str | None = None
    max_items: int = 10
    timeout_seconds: float = 10.0


@dataclass
class ScrapeConfig:
    """Configuration for article page fetching and text extraction.

    Attributes:
        timeout_seconds: HTTP request timeout
        retries: Number of retry attempts for failed requests
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
        min_chars: Extracted text must be longer than this to count as real content
        primary: First extraction method ("selectors", "trafilatura", "readability")
        fallback: Extraction methods to try in order if the primary one fails
    """

    timeout_seconds: float = 20.0
    retries: int = 1
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    min_chars: int = 100
    primary: str = "selectors"
    fallback: list[str] = field(default_factory=lambda: ["trafilatura", "readability"])


@dataclass
class LLMConfig:
    """Configuration for the Ollama-backed classifier.

    Attributes:
        enabled: Whether to attempt LLM classification at all
        base_url: Ollama base URL (falls back to OLLAMA_BASE_URL)
        model: Model name (falls back to OLLAMA_MODEL)
        temperature: Sampling temperature sent with each request
        timeout_seconds: Timeout for a single generate request
        max_chars: Maximum characters of article text placed in the prompt
        connect_retries: Attempts made by the startup connectivity probe
        probe_timeout_seconds: Timeout for each probe request
        trust_env: Whether to respect system proxy settings
    """

    enabled: bool = True
    base_url: str | None = None
    model: str | None = None
    temperature: float = 0.1
    timeout_seconds: float | None = None
    max_chars: int = 12000
    connect_retries: int = 3
    probe_timeout_seconds: float = 5.0
    trust_env: bool = False


@dataclass
class EmbeddingConfig:
    """Configuration for the local embedding model used by the fallback.

    Attributes:
        model_name: sentence-transformers model identifier
        device: Torch device ("cpu", "cuda"); None lets the library decide
        cache_dir: Directory holding the reference embedding cache
        cache_filename: Name of the reference embedding cache file
    """

    model_name: str = "sentence-transformers/distiluse-base-multilingual-cased-v2"
    device: str | None = None
    cache_dir: str = "models/embeddings-cache"
    cache_filename: str = "reference-embeddings.json"


@dataclass
class DedupConfig:
    """Configuration for feed item deduplication.

    Attributes:
        enabled: Whether to perform deduplication
        title_similarity_threshold: Fuzzy match threshold (0-100) for title similarity
    """

    enabled: bool = True
    title_similarity_threshold: int = 92


@dataclass
class OutputConfig:
    """Configuration for report output.

    Attributes:
        dir: Folder for results.json, report.md and log files; None prints only
        include_markdown: Whether to render report.md alongside results.json
    """

    dir: str | None = None
    include_markdown: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file (needs an output folder)
        format: Log file format ("jsonl" or "plain")
        filename: Name of the main log file
        llm_log_enabled: Whether to enable separate LLM interaction logging
        llm_log_file: Name of the LLM log file
    """

    level: str | None = None
    console: bool = True
    file: bool = True
    format: str = "jsonl"
    filename: str = "run.jsonl"
    llm_log_enabled: bool = True
    llm_log_file: str = "llm.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    feed: FeedConfig = field(default_factory=FeedConfig)
    scrape: ScrapeConfig = field(default_factory=ScrapeConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return _fromdict(_asdict(DEFAULT_CONFIG))

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(DEFAULT_CONFIG, raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {
        "feed": {
            "url": cfg.feed.url,
            "max_items": cfg.feed.max_items,
            "timeout_seconds": cfg.feed.timeout_seconds,
        },
        "scrape": {
            "timeout_seconds": cfg.scrape.timeout_seconds,
            "retries": cfg.scrape.retries,
            "trust_env": cfg.scrape.trust_env,
            "user_agent": cfg.scrape.user_agent,
            "min_chars": cfg.scrape.min_chars,
            "primary": cfg.scrape.primary,
            "fallback": list(cfg.scrape.fallback),
        },
        "llm": {
            "enabled": cfg.llm.enabled,
            "base_url": cfg.llm.base_url,
            "model": cfg.llm.model,
            "temperature": cfg.llm.temperature,
            "timeout_seconds": cfg.llm.timeout_seconds,
            "max_chars": cfg.llm.max_chars,
            "connect_retries": cfg.llm.connect_retries,
            "probe_timeout_seconds": cfg.llm.probe_timeout_seconds,
            "trust_env": cfg.llm.trust_env,
        },
        "embedding": {
            "model_name": cfg.embedding.model_name,
            "device": cfg.embedding.device,
            "cache_dir": cfg.embedding.cache_dir,
            "cache_filename": cfg.embedding.cache_filename,
        },
        "dedup": {
            "enabled": cfg.dedup.enabled,
            "title_similarity_threshold": cfg.dedup.title_similarity_threshold,
        },
        "output": {
            "dir": cfg.output.dir,
            "include_markdown": cfg.output.include_markdown,
        },
        "logging": {
            "level": cfg.logging.level,
            "console": cfg.logging.console,
            "file": cfg.logging.file,
            "format": cfg.logging.format,
            "filename": cfg.logging.filename,
            "llm_log_enabled": cfg.logging.llm_log_enabled,
            "llm_log_file": cfg.logging.llm_log_file,
        },
    }


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        feed=FeedConfig(**data["feed"]),
        scrape=ScrapeConfig(**data["scrape"]),
        llm=LLMConfig(**data["llm"]),
        embedding=EmbeddingConfig(**data["embedding"]),
        dedup=DedupConfig(**data["dedup"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def get_feed_url(cfg: FeedConfig) -> str:
    """Get the feed URL from inline config or environment variable."""
    if cfg.url:
        return cfg.url
    return os.getenv("RSS_FEED_URL") or DEFAULT_FEED_URL


def get_ollama_base_url(cfg: LLMConfig) -> str:
    """Get the Ollama base URL from inline config or environment variable."""
    if cfg.base_url:
        return cfg.base_url
    return os.getenv("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_URL


def get_ollama_model(cfg: LLMConfig) -> str:
    """Get the Ollama model name from inline config or environment variable."""
    if cfg.model:
        return cfg.model
    return os.getenv("OLLAMA_MODEL") or DEFAULT_OLLAMA_MODEL


def get_llm_timeout(cfg: LLMConfig) -> float:
    """Get the generate-request timeout in seconds.

    Falls back to OLLAMA_TIMEOUT_SECONDS, then 120 seconds. Unparseable
    environment values are ignored.
    """
    if cfg.timeout_seconds is not None:
        return float(cfg.timeout_seconds)
    raw = os.getenv("OLLAMA_TIMEOUT_SECONDS")
    if raw:
        try:
            return float(raw)
        except ValueError:
            pass
    return 120.0


def get_log_level(cfg: LoggingConfig) -> str:
    """Get the log level from inline config or the LOG_LEVEL variable."""
    if cfg.level:
        return cfg.level
    return os.getenv("LOG_LEVEL") or "INFO"
