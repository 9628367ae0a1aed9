"""Local embedding model, reference vectors and similarity classification."""

from .provider import EmbeddingProvider, SentenceTransformerProvider
from .reference import REFERENCE_SENTENCES, ReferenceSet, ReferenceStore, check_provider
from .similarity import classify, cosine_similarity

__all__ = [
    "EmbeddingProvider",
    "SentenceTransformerProvider",
    "REFERENCE_SENTENCES",
    "ReferenceSet",
    "ReferenceStore",
    "check_provider",
    "classify",
    "cosine_similarity",
]
