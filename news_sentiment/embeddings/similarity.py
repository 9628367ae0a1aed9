"""Cosine-similarity classification against the reference vectors."""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from ..core.types import LABELS


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return dot(a, b) / (|a| * |b|).

    A zero vector on either side has no direction, so its similarity to
    anything is 0.0.

    Raises:
        ValueError: If the vectors differ in length
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector length mismatch: {va.shape[0]} != {vb.shape[0]}")
    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb)) / denom


def classify(
    embedding: Sequence[float],
    references: Mapping[str, Sequence[float]],
) -> tuple[str, dict[str, float]]:
    """Pick the reference label most similar to ``embedding``.

    Labels are scored in the order Left, Right, Centre; a later label only
    wins with a strictly greater score, so ties go to the earlier one.

    Returns:
        The winning label and the score for every label
    """
    scores: dict[str, float] = {}
    best_label: str | None = None
    best_score = float("-inf")
    for label in LABELS:
        score = cosine_similarity(embedding, references[label])
        scores[label] = score
        if best_label is None or score > best_score:
            best_label = label
            best_score = score
    return best_label, scores
