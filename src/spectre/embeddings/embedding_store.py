"""
Embedding store: one vector per record, in record order.

Wraps a single batched provider request and checks the paired-sequence
contract at the boundary: the provider must return exactly one vector per
text, every vector with the expected width.
"""

import time
import numpy as np
from typing import List, Optional, Sequence
from dataclasses import dataclass

from spectre.core.logger import get_logger
from spectre.core.errors import DimensionMismatchError, InvalidParameterError
from .providers import EmbeddingProvider
from .records import Record, EmbeddingMatrix

logger = get_logger(__name__)

@dataclass
class EmbeddingStoreConfig:
    """Configuration for the embedding store"""
    expected_dimension: Optional[int] = 1536  # None adopts the first vector's width


class EmbeddingStore:
    """Builds an EmbeddingMatrix from records through an injected provider"""

    def __init__(self, provider: EmbeddingProvider, config: Optional[EmbeddingStoreConfig] = None):
        self.provider = provider
        self.config = config or EmbeddingStoreConfig()

    def embed_texts(self, texts: Sequence[str]) -> List[np.ndarray]:
        """
        Embed texts with one provider request and validate the response.

        Args:
            texts: Ordered texts

        Returns:
            Vectors in the same order as ``texts``

        Raises:
            InvalidParameterError: if ``texts`` is empty
            DimensionMismatchError: on count or width mismatch
            ProviderError: if the provider request fails
        """
        if not texts:
            raise InvalidParameterError("Cannot embed an empty set of texts")

        logger.info(f"Requesting embeddings for {len(texts)} texts from {self.provider.model_name}")
        start_time = time.time()

        vectors = self.provider.embed(list(texts))

        if len(vectors) != len(texts):
            logger.error(f"Provider returned {len(vectors)} vectors for {len(texts)} texts")
            raise DimensionMismatchError(
                f"Provider returned {len(vectors)} vectors for {len(texts)} texts",
                expected=len(texts),
                actual=len(vectors),
            )

        expected = self.config.expected_dimension
        if expected is None:
            expected = len(vectors[0])

        for position, vector in enumerate(vectors):
            width = len(vector)
            if width != expected:
                logger.error(f"Vector {position} has dimension {width}, expected {expected}")
                raise DimensionMismatchError(
                    f"Vector {position} has dimension {width}, expected {expected}",
                    expected=expected,
                    actual=width,
                )

        logger.info(
            f"Embedding complete: {len(vectors)}x{expected} in {time.time() - start_time:.2f}s"
        )
        return vectors

    def assemble_matrix(self, records: Sequence[Record]) -> EmbeddingMatrix:
        """
        Embed records and stack the vectors in input order.

        Args:
            records: Records whose ``text`` is embedded

        Returns:
            Read-only EmbeddingMatrix whose row i belongs to records[i]
        """
        vectors = self.embed_texts([record.text for record in records])
        return EmbeddingMatrix(records, np.vstack(vectors), model_name=self.provider.model_name)
