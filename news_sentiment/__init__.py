"""
News Sentiment Analyser - political leaning of news headlines.

This package fetches an RSS/Atom feed, scrapes each article and classifies
its political sentiment (Left, Right, Centre or Unknown) with a local Ollama
model, falling back to embedding similarity against reference sentences.

Main entry point is the CLI via `news-sentiment run` command.

Example:
    $ news-sentiment run --limit 5 -o out/
"""

__all__ = ["__version__", "NewsItem", "AnalysisResult", "AnalysisSummary", "SentimentResolver"]
__version__ = "0.1.0"

from .analyzers.resolver import SentimentResolver
from .core.types import AnalysisResult, AnalysisSummary, NewsItem
