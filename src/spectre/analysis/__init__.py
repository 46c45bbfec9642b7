"""
SPECTRE analysis

Cosine similarity search and principal component projection over
embedding matrices, plus the pipeline that runs both.
"""

from .similarity import (
    SimilarityEngine,
    ZeroVectorPolicy,
    Neighbor,
    NeighborResult,
    normalize,
    similarity_matrix,
    nearest
)

from .projection import (
    ProjectionConfig,
    ProjectionResult,
    project,
    reconstruct,
    reconstruction_error
)

from .pipeline import (
    AnalysisPipeline,
    PipelineConfig,
    PipelineResult,
    save_artifacts
)

__all__ = [
    # Similarity
    'SimilarityEngine',
    'ZeroVectorPolicy',
    'Neighbor',
    'NeighborResult',
    'normalize',
    'similarity_matrix',
    'nearest',

    # Projection
    'ProjectionConfig',
    'ProjectionResult',
    'project',
    'reconstruct',
    'reconstruction_error',

    # Pipeline
    'AnalysisPipeline',
    'PipelineConfig',
    'PipelineResult',
    'save_artifacts'
]
