"""
Core domain models and business logic.

This package contains data types and aggregation logic that is
independent of any specific pipeline stage.
"""

from .dedup import dedup_items, normalize_link
from .summary import summarize_results
from .types import AnalysisResult, AnalysisSummary, NewsItem, Outcome

__all__ = [
    "NewsItem",
    "Outcome",
    "AnalysisResult",
    "AnalysisSummary",
    "dedup_items",
    "normalize_link",
    "summarize_results",
]
