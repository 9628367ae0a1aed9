"""
Parsing of streamed newline-delimited JSON completions.

Ollama streams a completion as one JSON object per line, each carrying a
piece of the answer in ``response`` and, on the last line, ``done: true``.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
import re
from typing import Iterable

logger = logging.getLogger(__name__)

_THINK_BLOCK_RE = re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE)
_THINK_OPEN_RE = re.compile(r"<think>.*\Z", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class StreamResult:
    """Accumulated state after reading a completion stream.

    Attributes:
        text: All ``response`` fragments concatenated in arrival order
        done: Whether any fragment carried ``done: true``
        malformed: Number of lines skipped because they were not JSON objects
        error: Error message reported by the server inside the stream, if any
    """
    text: str = ""
    done: bool = False
    malformed: int = 0
    error: str | None = None


def read_stream(lines: Iterable[str]) -> StreamResult:
    """Fold a stream of NDJSON lines into a StreamResult.

    Blank lines are ignored. Lines that are not valid JSON objects are
    skipped with a warning; they never abort the read.
    """
    parts: list[str] = []
    done = False
    malformed = 0
    error: str | None = None

    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            fragment = json.loads(line)
        except json.JSONDecodeError as exc:
            malformed += 1
            logger.warning("Skipping malformed stream line: %s (%s)", line[:200], exc)
            continue
        if not isinstance(fragment, dict):
            malformed += 1
            logger.warning("Skipping non-object stream line: %s", line[:200])
            continue

        chunk = fragment.get("response")
        if isinstance(chunk, str):
            parts.append(chunk)
        if fragment.get("done") is True:
            done = True
        if fragment.get("error"):
            error = str(fragment["error"])

    return StreamResult(text="".join(parts), done=done, malformed=malformed, error=error)


def strip_reasoning(text: str) -> str:
    """Remove ``<think>...</think>`` blocks and return the stripped remainder.

    An opening tag that is never closed swallows the rest of the text.
    """
    text = _THINK_BLOCK_RE.sub("", text)
    text = _THINK_OPEN_RE.sub("", text)
    return text.strip()
