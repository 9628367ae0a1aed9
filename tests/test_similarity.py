"""Tests for cosine similarity and nearest-reference classification."""

import math

import pytest

from news_sentiment.embeddings.similarity import classify, cosine_similarity


def test_cosine_similarity_is_symmetric():
    pairs = [
        ([1.0, 2.0, 3.0], [4.0, -5.0, 6.0]),
        ([0.3, 0.1], [0.2, 0.9]),
        ([-1.0, 0.0, 2.5], [7.0, 7.0, 0.1]),
    ]
    for a, b in pairs:
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_similarity_known_values():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)
    assert cosine_similarity([1.0, 1.0], [1.0, 0.0]) == pytest.approx(1 / math.sqrt(2))


def test_cosine_similarity_ignores_magnitude():
    assert cosine_similarity([2.0, 4.0], [10.0, 20.0]) == pytest.approx(1.0)


def test_cosine_similarity_zero_vector_is_zero():
    assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0


def test_cosine_similarity_rejects_length_mismatch():
    with pytest.raises(ValueError, match="length mismatch"):
        cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


def test_classify_picks_own_label_for_reference_vector(references):
    for label in ("Left", "Right", "Centre"):
        chosen, scores = classify(references[label], references.vectors)
        assert chosen == label
        assert scores[label] == pytest.approx(1.0)


def test_classify_returns_best_match_and_all_scores(references):
    chosen, scores = classify([0.2, 0.9, 0.4], references.vectors)

    assert chosen == "Right"
    assert set(scores) == {"Left", "Right", "Centre"}
    assert scores["Right"] > scores["Centre"] > scores["Left"]


def test_classify_tie_goes_to_earliest_label(references):
    chosen, _ = classify([0.0, 1.0, 1.0], references.vectors)
    assert chosen == "Right"

    chosen, _ = classify([1.0, 1.0, 1.0], references.vectors)
    assert chosen == "Left"
