"""Sentiment resolution over the LLM and similarity classifiers."""

from .resolver import Resolution, SentimentResolver

__all__ = ["Resolution", "SentimentResolver"]
