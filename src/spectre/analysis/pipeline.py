"""
End-to-end analysis pipeline.

Orchestrates dataset loading, one batched embedding request, cosine
similarity rankings and the principal component projection, then writes
the tables consumed by external visualization.
"""

import time
import pandas as pd
from pathlib import Path
from typing import Dict, Optional, Sequence, Union
from dataclasses import dataclass, field

from spectre.core.logger import get_logger, log_fields
from spectre.core.config import get_config
from spectre.core.errors import InvalidParameterError
from spectre.embeddings.records import Record, EmbeddingMatrix
from spectre.embeddings.providers import EmbeddingProvider
from spectre.embeddings.embedding_store import EmbeddingStore, EmbeddingStoreConfig
from spectre.ingestion.dataset_loader import DatasetLoader, DatasetConfig
from .similarity import SimilarityEngine, ZeroVectorPolicy
from .projection import ProjectionConfig, ProjectionResult, project

logger = get_logger(__name__)

@dataclass
class PipelineConfig:
    """Configuration for the complete analysis pipeline"""
    # Embedding configuration
    expected_dimension: Optional[int] = 1536

    # Similarity configuration
    top_k: int = 5
    zero_vector_policy: ZeroVectorPolicy = ZeroVectorPolicy.RAISE

    # Projection configuration
    n_components: int = 2
    center: bool = True
    random_state: Optional[int] = 42

    # Dataset configuration
    dataset: DatasetConfig = field(default_factory=DatasetConfig)

    @classmethod
    def from_config(cls) -> "PipelineConfig":
        """Build from environment-driven global config"""
        config = get_config()
        return cls(
            expected_dimension=config.EMBEDDING_DIM,
            top_k=config.TOP_K,
            zero_vector_policy=ZeroVectorPolicy(config.ZERO_VECTOR_POLICY),
            n_components=config.N_COMPONENTS,
            random_state=config.RANDOM_SEED,
            dataset=DatasetConfig.from_config()
        )


@dataclass
class PipelineResult:
    """Result of one pipeline run"""
    matrix: EmbeddingMatrix
    similarity: SimilarityEngine
    projection: ProjectionResult
    rankings: pd.DataFrame
    coordinates: pd.DataFrame
    processing_time: float

    @property
    def record_count(self) -> int:
        return len(self.matrix)


class AnalysisPipeline:
    """
    Complete analysis pipeline for movie descriptions.

    Steps:
    1. Load, filter and sample records (optional, when given a source)
    2. Embed all records with a single provider request
    3. Rank nearest neighbors by cosine similarity
    4. Project records onto the top principal components

    Any error aborts the run; no partial results are returned.
    """

    def __init__(self,
                 provider: EmbeddingProvider,
                 config: Optional[PipelineConfig] = None,
                 loader: Optional[DatasetLoader] = None):
        self.config = config or PipelineConfig()
        self.provider = provider
        self.loader = loader or DatasetLoader(self.config.dataset)
        self.store = EmbeddingStore(
            provider,
            EmbeddingStoreConfig(expected_dimension=self.config.expected_dimension)
        )

    def run(self, source: Union[str, Path]) -> PipelineResult:
        """Load records from a CSV path or URL and analyze them"""
        records = self.loader.load(source)
        return self.run_records(records)

    def run_records(self, records: Sequence[Record]) -> PipelineResult:
        """
        Analyze already-loaded records.

        Args:
            records: Records in the order their rows should appear

        Returns:
            PipelineResult with similarity rankings and projection
        """
        if not records:
            raise InvalidParameterError("Pipeline needs at least one record")

        logger.info(
            f"Starting analysis pipeline: {len(records)} records",
            extra=log_fields(record_count=len(records), model=self.provider.model_name)
        )
        start_time = time.time()

        # Step 1: Embeddings
        matrix = self.store.assemble_matrix(records)

        # Step 2: Similarity
        similarity = SimilarityEngine(matrix, self.config.zero_vector_policy)
        top_k = min(self.config.top_k, len(matrix) - 1)
        if top_k < self.config.top_k:
            logger.warning(f"Reducing top_k from {self.config.top_k} to {top_k} for {len(matrix)} records")
        rankings = similarity.rankings(top_k)

        # Step 3: Projection
        projection = project(
            matrix,
            self.config.n_components,
            ProjectionConfig(center=self.config.center, random_state=self.config.random_state)
        )
        coordinates = projection.to_frame(matrix.records)

        processing_time = time.time() - start_time
        logger.info(
            f"Analysis pipeline complete: {len(matrix)} records in {processing_time:.2f}s",
            extra=log_fields(
                record_count=len(matrix),
                model=self.provider.model_name,
                dimension=matrix.dimension,
                n_components=projection.n_components,
                top_k=top_k,
                processing_time=round(processing_time, 3)
            )
        )

        return PipelineResult(
            matrix=matrix,
            similarity=similarity,
            projection=projection,
            rankings=rankings,
            coordinates=coordinates,
            processing_time=processing_time
        )


def save_artifacts(result: PipelineResult, output_dir: Union[str, Path]) -> Dict[str, Path]:
    """
    Write rankings, projected coordinates and explained variance as CSV.

    Returns:
        Mapping of artifact name to written path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "rankings": output_dir / "rankings.csv",
        "projection": output_dir / "projection.csv",
        "explained_variance": output_dir / "explained_variance.csv",
    }

    result.rankings.to_csv(paths["rankings"], index=False)
    result.coordinates.to_csv(paths["projection"], index=False)
    result.projection.variance_frame().to_csv(paths["explained_variance"], index=False)

    logger.info(f"Wrote {len(paths)} artifacts to {output_dir}")
    return paths
