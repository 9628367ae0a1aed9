"""
Reference embeddings for the similarity fallback.

One canonical sentence describes each leaning. Their embeddings are computed
once, written to a JSON cache, and read back verbatim on later runs.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from ..config import EmbeddingConfig
from ..core.types import CENTRE, LABELS, LEFT, RIGHT, Embedding
from ..errors import ReferenceInitError, ReferenceStoreNotInitialized
from .provider import EmbeddingProvider

logger = logging.getLogger(__name__)

REFERENCE_SENTENCES: dict[str, str] = {
    LEFT: "Progressive policies focusing on social welfare and environmental protection",
    RIGHT: "Conservative values emphasising free market and traditional principles",
    CENTRE: "Balanced approach considering multiple viewpoints and moderate policies",
}


@dataclass(frozen=True)
class ReferenceSet:
    """Read-only label -> embedding mapping for Left, Right and Centre."""

    vectors: Mapping[str, Embedding]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReferenceSet:
        vectors = {label: tuple(float(v) for v in data[label]) for label in LABELS}
        return cls(vectors=MappingProxyType(vectors))

    def __getitem__(self, label: str) -> Embedding:
        return self.vectors[label]

    def to_json(self) -> dict[str, list[float]]:
        return {label: list(self.vectors[label]) for label in LABELS}


class ReferenceStore:
    """Loads or computes the ReferenceSet exactly once.

    Attributes:
        cache_path: JSON file holding the cached reference vectors
        provider: Embedding provider used when the cache is missing
    """

    def __init__(self, cache_path: Path, provider: EmbeddingProvider):
        self.cache_path = cache_path
        self.provider = provider
        self._references: ReferenceSet | None = None

    @classmethod
    def from_config(cls, cfg: EmbeddingConfig, provider: EmbeddingProvider) -> ReferenceStore:
        return cls(Path(cfg.cache_dir) / cfg.cache_filename, provider)

    @property
    def initialized(self) -> bool:
        return self._references is not None

    def initialize(self) -> ReferenceSet:
        """Load the cached references, or compute and cache them.

        Raises:
            ReferenceInitError: If the cache is malformed or embedding fails
        """
        if self._references is not None:
            return self._references

        if self.cache_path.exists():
            logger.info("Loading cached reference embeddings from %s", self.cache_path)
            self._references = self._load()
        else:
            logger.info("Computing reference embeddings...")
            self._references = self._compute()
            self._save(self._references)
            logger.info("Reference embeddings cached to %s", self.cache_path)
        return self._references

    def get(self) -> ReferenceSet:
        if self._references is None:
            raise ReferenceStoreNotInitialized(
                "Reference embeddings not initialised. Call initialize() first."
            )
        return self._references

    def _load(self) -> ReferenceSet:
        try:
            data = json.loads(self.cache_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ReferenceInitError(f"Cannot read reference cache {self.cache_path}: {exc}") from exc
        _check_shape(data, self.cache_path)
        return ReferenceSet.from_mapping(data)

    def _compute(self) -> ReferenceSet:
        vectors: dict[str, Embedding] = {}
        for label in LABELS:
            try:
                vectors[label] = tuple(self.provider.embed(REFERENCE_SENTENCES[label]))
            except Exception as exc:  # noqa: BLE001
                raise ReferenceInitError(f"Failed to embed {label} reference: {exc}") from exc
            if not vectors[label]:
                raise ReferenceInitError(f"Embedding provider returned an empty {label} vector")
        return ReferenceSet.from_mapping(vectors)

    def _save(self, references: ReferenceSet) -> None:
        try:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            self.cache_path.write_text(json.dumps(references.to_json()), encoding="utf-8")
        except OSError as exc:
            raise ReferenceInitError(f"Cannot write reference cache {self.cache_path}: {exc}") from exc


def _check_shape(data: Any, path: Path) -> None:
    if not isinstance(data, dict):
        raise ReferenceInitError(f"Reference cache {path} is not a JSON object")
    for label in LABELS:
        vector = data.get(label)
        if not isinstance(vector, list) or not vector:
            raise ReferenceInitError(f"Reference cache {path} has no vector for {label}")
        if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in vector):
            raise ReferenceInitError(f"Reference cache {path} has non-numeric values for {label}")


def check_provider(provider: EmbeddingProvider, references: ReferenceSet) -> None:
    """Embed one reference sentence to confirm the provider works.

    A cached ReferenceSet is loaded without touching the model, so this is
    the point where a missing or broken model is caught. The vector must
    also match the cached dimensions.

    Raises:
        ReferenceInitError: If embedding fails or the dimensions differ
    """
    try:
        vector = provider.embed(REFERENCE_SENTENCES[CENTRE])
    except Exception as exc:  # noqa: BLE001
        raise ReferenceInitError(f"Embedding model is not usable: {exc}") from exc
    expected = len(references[CENTRE])
    if len(vector) != expected:
        raise ReferenceInitError(
            f"Embedding model returns {len(vector)} dimensions but the reference "
            f"cache holds {expected}; delete the cache to recompute it"
        )
