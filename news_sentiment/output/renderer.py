"""
Report rendering for the end-of-run summary.

The console report is always printed when a run completes. When an output
folder is configured the results are also written as ``results.json`` and,
optionally, as a Markdown report rendered from a Jinja2 template.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.types import METHOD_LLM, AnalysisResult, AnalysisSummary

_SENTIMENT_STYLES = {
    "Left": "blue",
    "Right": "red",
    "Centre": "green",
    "Unknown": "dim",
}


def render_summary(
    summary: AnalysisSummary,
    results: list[AnalysisResult],
    console: Console,
) -> None:
    """Print per-article results and the aggregate summary.

    Args:
        summary: The aggregate summary for the run
        results: Per-item results, in processing order
        console: Rich console for output
    """
    if results:
        articles = Table(title="Articles", show_lines=False)
        articles.add_column("#", justify="right")
        articles.add_column("Title", overflow="fold")
        articles.add_column("Sentiment")
        articles.add_column("Method")
        for idx, result in enumerate(results, start=1):
            articles.add_row(
                str(idx),
                Text(result.title),
                Text(result.sentiment, style=_SENTIMENT_STYLES.get(result.sentiment, "")),
                _method_label(result.method),
            )
        console.print(articles)

    totals = Table(title="Analysis summary", show_header=False)
    totals.add_column("Metric")
    totals.add_column("Value", justify="right")
    totals.add_row("Total articles", str(summary.total_articles))
    totals.add_row("Processed", str(summary.processed_articles))
    totals.add_row("Failed", str(summary.failed_articles))
    for label, count in summary.sentiment_distribution.items():
        totals.add_row(f"Sentiment: {label}", str(count))
    for method, count in summary.method_distribution.items():
        totals.add_row(f"Method: {_method_label(method)}", str(count))
    totals.add_row("Time elapsed", f"{summary.time_elapsed:.1f}s")
    console.print(totals)


def write_results_json(
    summary: AnalysisSummary,
    results: list[AnalysisResult],
    output_path: Path,
) -> None:
    """Write results and summary as a single JSON document."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "summary": asdict(summary),
        "results": [asdict(result) for result in results],
    }
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def render_markdown(
    summary: AnalysisSummary,
    results: list[AnalysisResult],
    output_path: Path,
    title: str,
) -> None:
    """Render a Markdown report using the bundled Jinja2 template."""
    env = Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["method_label"] = _method_label
    template = env.get_template("report.md.j2")
    markdown = template.render(
        title=title,
        generated_at=datetime.now().strftime("%Y-%m-%d %H:%M"),
        summary=summary,
        results=results,
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(markdown, encoding="utf-8")


def _method_label(method: str) -> str:
    return "Ollama" if method == METHOD_LLM else "Local model"
