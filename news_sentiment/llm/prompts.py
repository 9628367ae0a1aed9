"""Prompt text for the political sentiment classifier."""

from __future__ import annotations

_SENTIMENT_TEMPLATE = """Analyze the following news article and categorize its political sentiment as:
- 'Left' if it leans progressive/liberal.
- 'Right' if it leans conservative.
- 'Centre' if it is neutral or balanced.

Text: {text}

Respond with only one word: 'Left', 'Right', or 'Centre'."""


def build_sentiment_prompt(text: str, max_chars: int) -> str:
    return _SENTIMENT_TEMPLATE.format(text=text[:max_chars])
