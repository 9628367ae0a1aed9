"""Aggregation of per-item results into a run summary."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .types import METHODS, SENTIMENTS, UNKNOWN, AnalysisResult, AnalysisSummary


def summarize_results(results: Iterable[AnalysisResult], time_elapsed: float) -> AnalysisSummary:
    """Build an AnalysisSummary from the collected results.

    An item counts as processed when it resolved to a real label and as
    failed when it ended as Unknown, so the two always add up to the total.
    Both distributions list every known key, including zero counts.

    Args:
        results: Results collected by the pipeline driver
        time_elapsed: Wall-clock seconds spent on the run

    Returns:
        The summary for the run
    """
    results = list(results)
    sentiments = Counter(result.sentiment for result in results)
    methods = Counter(result.method for result in results)

    sentiment_distribution = {label: sentiments.get(label, 0) for label in SENTIMENTS}
    method_distribution = {method: methods.get(method, 0) for method in METHODS}
    # Keep unexpected labels visible rather than dropping them from the totals
    for label, count in sentiments.items():
        sentiment_distribution.setdefault(label, count)
    for method, count in methods.items():
        method_distribution.setdefault(method, count)

    failed = sentiments.get(UNKNOWN, 0)
    return AnalysisSummary(
        total_articles=len(results),
        processed_articles=len(results) - failed,
        failed_articles=failed,
        sentiment_distribution=sentiment_distribution,
        method_distribution=method_distribution,
        time_elapsed=time_elapsed,
    )
