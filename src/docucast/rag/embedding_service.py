"""Text embedding service using sentence-transformers.

This module provides single-text embedding with lazy model loading and
device detection, plus a dimension-adjustment helper for stores built with a
different vector size.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
from sentence_transformers import SentenceTransformer
import torch

from .exceptions import EmbeddingError


logger = logging.getLogger(__name__)


def adjust_vector_dimension(vector: Sequence[float], target_dimension: int) -> List[float]:
    """Pad with zeros or truncate a vector to ``target_dimension``.

    This is a lossy compatibility shim: components beyond the original
    dimension carry no meaning, and truncation discards information.

    Args:
        vector: Source vector
        target_dimension: Required length

    Returns:
        New list of exactly ``target_dimension`` floats
    """
    if target_dimension <= 0:
        raise ValueError(f"target_dimension must be positive, got {target_dimension}")
    values = [float(v) for v in vector]
    if len(values) >= target_dimension:
        return values[:target_dimension]
    return values + [0.0] * (target_dimension - len(values))


class EmbeddingService:
    """Service for generating text embeddings using sentence-transformers.

    Implements the EmbeddingProvider interface. Failures surface as
    EmbeddingError and are never retried here.

    Attributes:
        model_name: Name of the sentence-transformer model
        cache_dir: Directory to cache downloaded models
        device: Compute device (cuda, mps, or cpu)
    """

    def __init__(
        self,
        model_name: str = "all-mpnet-base-v2",
        cache_dir: Optional[str] = None,
        device: Optional[str] = None,
    ):
        """Initialize the embedding service.

        Args:
            model_name: Sentence-transformer model name (default: all-mpnet-base-v2)
            cache_dir: Directory to cache models (default: None, uses default cache)
            device: Device to run model on (default: None, auto-detect)
        """
        self.model_name = model_name
        self.cache_dir = cache_dir
        self._model: Optional[SentenceTransformer] = None

        # Detect device if not specified
        if device is None:
            if torch.cuda.is_available():
                self.device = "cuda"
            elif torch.backends.mps.is_available():
                self.device = "mps"
            else:
                self.device = "cpu"
        else:
            self.device = device

        logger.info(f"EmbeddingService initialized with model={model_name}, device={self.device}")

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the sentence-transformer model.

        Raises:
            EmbeddingError: If model fails to load
        """
        if self._model is None:
            try:
                logger.info(f"Loading sentence-transformer model: {self.model_name}")
                self._model = SentenceTransformer(
                    self.model_name,
                    cache_folder=self.cache_dir,
                    device=self.device,
                )
                logger.info(f"Model loaded successfully on device: {self.device}")
            except Exception as e:
                logger.error(f"Failed to load model {self.model_name}: {e}")
                raise EmbeddingError(f"Could not load embedding model: {e}") from e

        return self._model

    def embed(self, text: str) -> List[float]:
        """Generate the embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector in the model's native dimension

        Raises:
            EmbeddingError: If text is empty or generation fails
        """
        if not text or not text.strip():
            raise EmbeddingError("Text cannot be empty")

        model = self.model
        try:
            embedding = model.encode(
                text,
                convert_to_numpy=True,
                show_progress_bar=False,
            )
        except Exception as e:
            logger.error(f"Failed to generate embedding: {e}")
            raise EmbeddingError(f"Embedding generation failed: {e}") from e

        return np.asarray(embedding, dtype=float).tolist()
