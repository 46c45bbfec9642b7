"""
SPECTRE embeddings

Typed records, embedding providers and the embedding store that pairs them.
"""

from .records import (
    Record,
    EmbeddingMatrix
)

from .providers import (
    EmbeddingProvider,
    OpenAIEmbeddingProvider,
    SentenceTransformerProvider,
    SupportedModels,
    create_provider,
    get_model_dimension
)

from .embedding_store import (
    EmbeddingStore,
    EmbeddingStoreConfig
)

__all__ = [
    # Data model
    'Record',
    'EmbeddingMatrix',

    # Providers
    'EmbeddingProvider',
    'OpenAIEmbeddingProvider',
    'SentenceTransformerProvider',
    'SupportedModels',
    'create_provider',
    'get_model_dimension',

    # Store
    'EmbeddingStore',
    'EmbeddingStoreConfig'
]
