"""
Command-line interface for the news sentiment analyser.

Uses Typer to provide a CLI with options for the most common configuration
settings. Loads .env files so feed and Ollama settings can live there.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import AppConfig, get_ollama_model, load_config
from .embeddings.provider import SentenceTransformerProvider
from .embeddings.reference import ReferenceStore, check_provider
from .errors import ConfigError, ReferenceInitError
from .logging_utils import setup_logging
from .runner import check_llm, run_pipeline

app = typer.Typer(add_completion=False, help="Political sentiment analysis for news feeds.")
console = Console()


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    feed_url: str | None = typer.Option(None, "--feed-url", help="RSS/Atom feed URL."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum items to analyse."),
    ollama_url: str | None = typer.Option(None, "--ollama-url", help="Ollama base URL."),
    model: str | None = typer.Option(None, "--model", help="Ollama model name."),
    llm: bool | None = typer.Option(
        None, "--llm/--no-llm", help="Enable or disable LLM classification."
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Folder for results.json, report.md and logs."
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Fetch headlines, scrape articles and classify their political sentiment.

    Args:
        config: Optional path to YAML config file
        feed_url: Override the feed URL
        limit: Override the number of feed items to analyse
        ollama_url: Override the Ollama base URL
        model: Override the Ollama model
        llm: Enable/disable the LLM tier
        output: Output folder for reports and log files
        progress: Whether to show progress bar
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    cfg = _load(config, log_level)

    # Override with CLI options
    if feed_url:
        cfg.feed.url = feed_url
    if limit is not None:
        cfg.feed.max_items = limit
    if ollama_url:
        cfg.llm.base_url = ollama_url
    if model:
        cfg.llm.model = model
    if llm is not None:
        cfg.llm.enabled = llm
    if output is not None:
        cfg.output.dir = str(output)

    try:
        run_pipeline(cfg, show_progress=progress, console=console)
    except (ConfigError, ReferenceInitError) as exc:
        console.print(f"[bold red]Fatal:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    if cfg.output.dir:
        console.print(f"Report written to: {cfg.output.dir}")


@app.command()
def check(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    ollama_url: str | None = typer.Option(None, "--ollama-url", help="Ollama base URL."),
    model: str | None = typer.Option(None, "--model", help="Ollama model name."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Check that the Ollama server is reachable and the model is installed."""
    cfg = _load(config, log_level)
    if ollama_url:
        cfg.llm.base_url = ollama_url
    if model:
        cfg.llm.model = model
    setup_logging(cfg.logging, None)

    try:
        status = check_llm(cfg)
    except ConfigError as exc:
        console.print(f"[bold red]Fatal:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"Server: {status.base_url} ({'reachable' if status.reachable else 'unreachable'})")
    if status.models:
        console.print(f"Installed models: {', '.join(status.models)}")
    if not status.usable:
        console.print(f"[bold red]Not usable:[/bold red] {status.error}")
        raise typer.Exit(code=1)
    console.print(f"[green]Model {get_ollama_model(cfg.llm)} is ready.[/green]")


@app.command("init-references")
def init_references(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Load or compute the reference embeddings used by the local model."""
    cfg = _load(config, log_level)
    setup_logging(cfg.logging, None)

    embedder = SentenceTransformerProvider(cfg.embedding)
    store = ReferenceStore.from_config(cfg.embedding, embedder)
    try:
        references = store.initialize()
        check_provider(embedder, references)
    except ReferenceInitError as exc:
        console.print(f"[bold red]Fatal:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc
    dims = ", ".join(f"{label}={len(vector)}" for label, vector in references.vectors.items())
    console.print(f"Reference embeddings ready at {store.cache_path} ({dims})")


if __name__ == "__main__":
    app()
