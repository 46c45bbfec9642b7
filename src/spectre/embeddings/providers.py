"""
Embedding providers.

A provider turns an ordered list of texts into an ordered list of vectors,
one per text. Credentials are passed in explicitly so the rest of the
pipeline can be exercised with any object that implements ``embed``.
"""

import os
import time
import numpy as np
from abc import ABC, abstractmethod
from typing import List, Optional, Any
from enum import Enum

import openai
from openai import OpenAI

# Set tokenizers parallelism to avoid forking warnings
os.environ.setdefault('TOKENIZERS_PARALLELISM', 'false')

try:
    from sentence_transformers import SentenceTransformer
    SENTENCE_TRANSFORMERS_AVAILABLE = True
except ImportError:
    SENTENCE_TRANSFORMERS_AVAILABLE = False

from spectre.core.logger import get_logger
from spectre.core.errors import ProviderError

logger = get_logger(__name__)

class SupportedModels(Enum):
    """Known embedding models"""
    # OpenAI models (requires API key)
    OPENAI_ADA_002 = "text-embedding-ada-002"  # 1536D
    OPENAI_3_SMALL = "text-embedding-3-small"  # 1536D
    OPENAI_3_LARGE = "text-embedding-3-large"  # 3072D

    # Local sentence-transformers models
    ALL_MINILM_L6_V2 = "sentence-transformers/all-MiniLM-L6-v2"  # 384D
    E5_BASE_MULTILINGUAL = "intfloat/multilingual-e5-base"  # 768D

MODEL_DIMENSIONS = {
    SupportedModels.OPENAI_ADA_002.value: 1536,
    SupportedModels.OPENAI_3_SMALL.value: 1536,
    SupportedModels.OPENAI_3_LARGE.value: 3072,
    SupportedModels.ALL_MINILM_L6_V2.value: 384,
    SupportedModels.E5_BASE_MULTILINGUAL.value: 768,
}

OPENAI_MODELS = {
    SupportedModels.OPENAI_ADA_002.value,
    SupportedModels.OPENAI_3_SMALL.value,
    SupportedModels.OPENAI_3_LARGE.value,
}


def get_model_dimension(model_name: str) -> Optional[int]:
    """Known output width of a model, or None if unknown"""
    return MODEL_DIMENSIONS.get(model_name)


class EmbeddingProvider(ABC):
    """Boundary to an external embedding service"""

    model_name: str

    @abstractmethod
    def embed(self, texts: List[str]) -> List[np.ndarray]:
        """
        Embed texts in one batched request.

        Args:
            texts: Ordered texts to embed

        Returns:
            One vector per text, in the same order as ``texts``
        """


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """
    OpenAI embeddings API provider.

    Issues a single ``embeddings.create`` call per ``embed`` and restores
    request order from the per-item ``index`` field of the response. Retries
    are disabled; any API or transport failure is raised as ProviderError.
    """

    def __init__(self,
                 api_key: Optional[str],
                 model_name: str = SupportedModels.OPENAI_ADA_002.value,
                 timeout: float = 60.0,
                 client: Optional[Any] = None):
        self.model_name = model_name
        self.timeout = timeout

        if client is not None:
            self.client = client
        else:
            if not api_key:
                raise ProviderError("OpenAI API key required for OpenAI models")
            self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

        logger.info(f"Initialized OpenAI embedding provider: {self.model_name}")

    def embed(self, texts: List[str]) -> List[np.ndarray]:
        if not texts:
            return []

        # Clean texts for OpenAI
        cleaned_texts = [text.replace("\n", " ") for text in texts]

        start_time = time.time()
        try:
            response = self.client.embeddings.create(
                model=self.model_name,
                input=cleaned_texts
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI embedding request failed: {e}")
            raise ProviderError(f"OpenAI embedding request failed: {e}") from e

        items = sorted(response.data, key=lambda item: item.index)
        embeddings = [np.asarray(item.embedding, dtype=np.float32) for item in items]

        logger.info(
            f"OpenAI returned {len(embeddings)} embeddings for {len(texts)} texts "
            f"in {time.time() - start_time:.2f}s"
        )
        return embeddings


class SentenceTransformerProvider(EmbeddingProvider):
    """Local sentence-transformers provider (no credentials needed)"""

    def __init__(self,
                 model_name: str = SupportedModels.ALL_MINILM_L6_V2.value,
                 device: str = "cpu",
                 batch_size: int = 32,
                 model: Optional[Any] = None):
        self.model_name = model_name
        self.batch_size = batch_size

        if model is not None:
            self.model = model
        else:
            if not SENTENCE_TRANSFORMERS_AVAILABLE:
                raise ImportError(
                    "sentence-transformers not available. Install with: pip install spectre[local]"
                )
            logger.info(f"Loading embedding model: {model_name}")
            self.model = SentenceTransformer(model_name, device=device)

        logger.info(f"Model loaded: {self.model_name}")

    def embed(self, texts: List[str]) -> List[np.ndarray]:
        if not texts:
            return []

        try:
            embeddings = self.model.encode(
                list(texts),
                batch_size=self.batch_size,
                normalize_embeddings=False
            )
        except (RuntimeError, OSError) as e:
            logger.error(f"Local embedding failed: {e}")
            raise ProviderError(f"Local embedding failed: {e}") from e

        return [np.asarray(embedding, dtype=np.float32) for embedding in embeddings]


def create_provider(model_name: str,
                    api_key: Optional[str] = None,
                    timeout: float = 60.0) -> EmbeddingProvider:
    """Pick a provider implementation for a model name"""
    if model_name in OPENAI_MODELS:
        return OpenAIEmbeddingProvider(api_key=api_key, model_name=model_name, timeout=timeout)
    return SentenceTransformerProvider(model_name=model_name)
