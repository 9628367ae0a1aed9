"""
Main pipeline orchestration for the news sentiment analyser.

This module coordinates the entire workflow:
1. Check the Ollama server (URL, connectivity, required model)
2. Load or compute the reference embeddings and confirm the model works
3. Fetch headlines from the news feed
4. Scrape each article and resolve its sentiment
5. Summarize, print and optionally write the report

Items are processed one at a time. A failure while handling one item is
logged and recorded as Unknown; it never stops the run.
"""

from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Callable

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .analyzers.resolver import SentimentResolver
from .config import AppConfig, get_ollama_base_url, get_ollama_model
from .core.dedup import dedup_items
from .core.summary import summarize_results
from .core.types import (
    LEFT,
    METHOD_LOCAL,
    REASON_NO_CONTENT,
    REASON_UNEXPECTED,
    UNKNOWN,
    AnalysisResult,
    AnalysisSummary,
    NewsItem,
)
from .embeddings.provider import EmbeddingProvider, SentenceTransformerProvider
from .embeddings.reference import ReferenceStore, check_provider
from .fetch.feed import fetch_news
from .fetch.scraper import is_sentinel, scrape_content
from .llm.checks import LLMStatus, probe_llm
from .llm.ollama import OllamaClassifier
from .logging_utils import log_event, setup_llm_logger, setup_logging
from .output.renderer import render_markdown, render_summary, write_results_json

Scraper = Callable[[str], str]


def run_pipeline(
    cfg: AppConfig,
    show_progress: bool = True,
    console: Console | None = None,
    embedder: EmbeddingProvider | None = None,
) -> tuple[AnalysisSummary, list[AnalysisResult]]:
    """Run the complete fetch, scrape and classify pipeline.

    Args:
        cfg: Application configuration
        show_progress: Whether to display a progress bar
        console: Rich console for output (creates default if None)
        embedder: Embedding provider; defaults to the configured
            sentence-transformers model

    Returns:
        The run summary and the per-item results

    Raises:
        ConfigError: If the Ollama URL is malformed
        ReferenceInitError: If the reference embeddings cannot be prepared
    """
    console = console or Console()
    started = time.monotonic()
    run_output_dir = Path(cfg.output.dir) if cfg.output.dir else None
    logger = setup_logging(cfg.logging, run_output_dir)
    llm_logger = setup_llm_logger(cfg.logging, run_output_dir)

    log_event(
        logger,
        "Starting news sentiment analyser",
        event="pipeline_start",
        output=str(run_output_dir) if run_output_dir else None,
    )

    llm = _build_llm(cfg, logger, llm_logger)

    embedder = embedder or SentenceTransformerProvider(cfg.embedding)
    store = ReferenceStore.from_config(cfg.embedding, embedder)
    references = store.initialize()
    check_provider(embedder, references)
    log_event(
        logger,
        "Reference embeddings ready",
        event="references_ready",
        cache=str(store.cache_path),
        dimensions=len(references[LEFT]),
    )
    resolver = SentimentResolver(references, embedder, llm)

    items = fetch_news(cfg.feed, cfg.scrape)
    fetched = len(items)
    if cfg.dedup.enabled:
        items = dedup_items(items, cfg.dedup.title_similarity_threshold)
    log_event(
        logger,
        "Fetched news items",
        event="feed_fetched",
        count=len(items),
        duplicates=fetched - len(items),
    )

    def scraper(url: str) -> str:
        return scrape_content(url, cfg.scrape)

    if show_progress and items:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=console,
        )
        with progress:
            task = progress.add_task("Analyse", total=len(items))
            results = process_items(
                items, scraper, resolver, logger, on_done=lambda: progress.advance(task, 1)
            )
    else:
        results = process_items(items, scraper, resolver, logger)

    summary = summarize_results(results, time.monotonic() - started)
    render_summary(summary, results, console)

    if run_output_dir is not None:
        write_results_json(summary, results, run_output_dir / "results.json")
        if cfg.output.include_markdown:
            render_markdown(summary, results, run_output_dir / "report.md", "News Sentiment Report")

    log_event(
        logger,
        "Analysis complete",
        event="pipeline_complete",
        total=summary.total_articles,
        processed=summary.processed_articles,
        failed=summary.failed_articles,
        elapsed=round(summary.time_elapsed, 2),
    )
    return summary, results


def process_items(
    items: list[NewsItem],
    scraper: Scraper,
    resolver: SentimentResolver,
    logger: logging.Logger,
    on_done: Callable[[], None] | None = None,
) -> list[AnalysisResult]:
    """Analyse each item in turn, isolating per-item failures.

    Args:
        items: Feed items, mutated in place as content is scraped
        scraper: Returns article text (or a sentinel) for a URL
        resolver: Sentiment resolver for scraped text
        logger: Logger for per-item events
        on_done: Called after every item, e.g. to advance a progress bar

    Returns:
        One AnalysisResult per item, in input order
    """
    log_event(logger, "Starting news analysis", event="analysis_start", count=len(items))
    results: list[AnalysisResult] = []
    for item in items:
        try:
            result = process_item(item, scraper, resolver, logger)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                f"Error processing article: {item.title}",
                level=logging.ERROR,
                event="item_error",
                title=item.title,
                link=item.link,
                error=f"{type(exc).__name__}: {exc}",
            )
            result = AnalysisResult(
                title=item.title,
                sentiment=UNKNOWN,
                method=METHOD_LOCAL,
                link=item.link,
                reason=REASON_UNEXPECTED,
            )
        results.append(result)
        if on_done is not None:
            on_done()
    return results


def process_item(
    item: NewsItem,
    scraper: Scraper,
    resolver: SentimentResolver,
    logger: logging.Logger,
) -> AnalysisResult:
    """Scrape one item and resolve its sentiment.

    Items whose content is missing or a scraper sentinel are recorded as
    Unknown without invoking the resolver.
    """
    logger.debug("Processing article: %s", item.title)
    if item.link:
        item.content = scraper(item.link)

    if is_sentinel(item.content):
        log_event(
            logger,
            f"No usable content: {item.title}",
            level=logging.WARNING,
            event="item_no_content",
            title=item.title,
            link=item.link,
            content=item.content,
        )
        return AnalysisResult(
            title=item.title,
            sentiment=UNKNOWN,
            method=METHOD_LOCAL,
            link=item.link,
            reason=REASON_NO_CONTENT,
        )

    resolution = resolver.resolve(item.content, title=item.title)
    log_event(
        logger,
        f"Analysis complete: {item.title} -> {resolution.sentiment} ({resolution.method})",
        event="item_analyzed",
        title=item.title,
        sentiment=resolution.sentiment,
        method=resolution.method,
        reason=resolution.reason,
        link=item.link,
    )
    return AnalysisResult(
        title=item.title,
        sentiment=resolution.sentiment,
        method=resolution.method,
        link=item.link,
        reason=resolution.reason,
    )


def check_llm(cfg: AppConfig) -> LLMStatus:
    """Run the Ollama startup checks for the configured server and model.

    Raises:
        ConfigError: If the Ollama URL is malformed
    """
    return probe_llm(
        get_ollama_base_url(cfg.llm),
        get_ollama_model(cfg.llm),
        retries=cfg.llm.connect_retries,
        timeout=cfg.llm.probe_timeout_seconds,
    )


def _build_llm(
    cfg: AppConfig,
    logger: logging.Logger,
    llm_logger: logging.Logger | None,
) -> OllamaClassifier | None:
    """Return the LLM classifier, or None when the run is fallback-only."""
    if not cfg.llm.enabled:
        log_event(logger, "LLM disabled; using local model only", event="llm_check", usable=False)
        return None

    status = check_llm(cfg)
    model = get_ollama_model(cfg.llm)
    log_event(
        logger,
        "Ollama check complete",
        event="llm_check",
        base_url=status.base_url,
        reachable=status.reachable,
        model=model,
        model_available=status.model_available,
        usable=status.usable,
    )
    if not status.usable:
        log_event(
            logger,
            f"Ollama unavailable ({status.error}); falling back to local model for all articles",
            level=logging.WARNING,
            event="llm_degraded",
            error=status.error,
        )
        return None
    return OllamaClassifier(status.base_url, model, cfg.llm, llm_logger=llm_logger)
