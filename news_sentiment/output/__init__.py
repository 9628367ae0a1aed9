"""Report output for finished runs."""

from .renderer import render_markdown, render_summary, write_results_json

__all__ = ["render_summary", "render_markdown", "write_results_json"]
