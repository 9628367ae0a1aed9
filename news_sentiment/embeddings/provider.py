"""Text embedding providers used by the similarity fallback."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging

import numpy as np

from ..config import EmbeddingConfig
from ..core.types import Embedding

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Produces a fixed-length vector for a piece of text."""

    @abstractmethod
    def embed(self, text: str) -> Embedding:
        """Return the embedding for ``text``."""
        raise NotImplementedError


class SentenceTransformerProvider(EmbeddingProvider):
    """Local sentence-transformers model, loaded on first use.

    The default model is a distilled multilingual Universal Sentence
    Encoder producing 512-dimensional vectors.
    """

    def __init__(self, cfg: EmbeddingConfig):
        self.cfg = cfg
        self._model = None

    @property
    def model(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            logger.info("Loading embedding model %s...", self.cfg.model_name)
            self._model = SentenceTransformer(self.cfg.model_name, device=self.cfg.device)
            logger.info(
                "Embedding model loaded (dim=%s)",
                self._model.get_sentence_embedding_dimension(),
            )
        return self._model

    def embed(self, text: str) -> Embedding:
        vector = self.model.encode(text, convert_to_numpy=True, show_progress_bar=False)
        return tuple(float(value) for value in np.asarray(vector, dtype=np.float64).ravel())
