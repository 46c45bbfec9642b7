"""
Principal component projection of embedding matrices.

Uses scikit-learn's randomized truncated SVD so only the top-k components
are computed. Component signs are only fixed by ``flip_sign`` within one
implementation; compare absolute values or pairwise distances across runs.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Sequence, Union
from dataclasses import dataclass
from sklearn.utils.extmath import randomized_svd

from spectre.core.logger import get_logger
from spectre.core.errors import InvalidParameterError, DimensionMismatchError
from spectre.embeddings.records import EmbeddingMatrix, Record

logger = get_logger(__name__)

@dataclass
class ProjectionConfig:
    """Configuration for the randomized decomposition"""
    center: bool = True
    n_oversamples: int = 10
    n_iter: Union[int, str] = "auto"
    random_state: Optional[int] = 42


@dataclass
class ProjectionResult:
    """Truncated PCA of an ``N x D`` matrix"""
    n_components: int
    components: np.ndarray          # K x D loading vectors
    coordinates: np.ndarray         # N x K projected records
    mean: np.ndarray                # D, zeros when not centered
    singular_values: np.ndarray     # K
    explained_variance: np.ndarray  # K
    explained_variance_ratio: np.ndarray  # K

    def __post_init__(self):
        for array in (self.components, self.coordinates, self.mean,
                      self.singular_values, self.explained_variance,
                      self.explained_variance_ratio):
            array.setflags(write=False)

    @property
    def column_names(self) -> List[str]:
        return [f"pc{i}" for i in range(1, self.n_components + 1)]

    def transform(self, vectors: np.ndarray) -> np.ndarray:
        """Project new vectors into the component space"""
        vectors = np.atleast_2d(np.asarray(vectors, dtype=np.float64))
        if vectors.shape[1] != self.components.shape[1]:
            raise DimensionMismatchError(
                f"Vectors have dimension {vectors.shape[1]}, expected {self.components.shape[1]}",
                expected=self.components.shape[1],
                actual=vectors.shape[1],
            )
        return (vectors - self.mean) @ self.components.T

    def to_frame(self, records: Sequence[Record], include_text: bool = False) -> pd.DataFrame:
        """
        Coordinates table joined back to record metadata by row position.
        """
        if len(records) != self.coordinates.shape[0]:
            raise DimensionMismatchError(
                f"Got {len(records)} records for {self.coordinates.shape[0]} projected rows",
                expected=self.coordinates.shape[0],
                actual=len(records),
            )

        rows = []
        for record in records:
            row = record.to_dict()
            if not include_text:
                row.pop("text", None)
            rows.append(row)

        frame = pd.DataFrame(rows)
        coordinates = pd.DataFrame(self.coordinates, columns=self.column_names)
        return pd.concat([frame.reset_index(drop=True), coordinates], axis=1)

    def variance_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            "component": self.column_names,
            "singular_value": self.singular_values,
            "explained_variance": self.explained_variance,
            "explained_variance_ratio": self.explained_variance_ratio,
        })


def _as_array(matrix: Union[np.ndarray, EmbeddingMatrix]) -> np.ndarray:
    if isinstance(matrix, EmbeddingMatrix):
        return matrix.vectors
    array = np.asarray(matrix, dtype=np.float64)
    if array.ndim != 2:
        raise InvalidParameterError(f"Expected a 2-dimensional matrix, got shape {array.shape}")
    return array


def project(matrix: Union[np.ndarray, EmbeddingMatrix],
            k: int,
            config: Optional[ProjectionConfig] = None) -> ProjectionResult:
    """
    Top-k principal components of the (mean-centered) matrix.

    Args:
        matrix: ``N x D`` matrix
        k: Number of components, 1 <= k <= min(N, D)
        config: Decomposition settings

    Returns:
        ProjectionResult with components, coordinates and explained variance

    Raises:
        InvalidParameterError: if k is out of range
    """
    config = config or ProjectionConfig()
    array = _as_array(matrix)
    n_samples, n_features = array.shape
    max_components = min(n_samples, n_features)

    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise InvalidParameterError(f"Number of components must be an integer, got {k!r}")
    if not 1 <= k <= max_components:
        raise InvalidParameterError(
            f"Number of components must be between 1 and {max_components}, got {k}"
        )

    if config.center:
        mean = array.mean(axis=0)
    else:
        mean = np.zeros(n_features)
    centered = array - mean

    u, s, vt = randomized_svd(
        centered,
        n_components=int(k),
        n_oversamples=config.n_oversamples,
        n_iter=config.n_iter,
        flip_sign=True,
        random_state=config.random_state,
    )

    coordinates = u * s
    dof = max(n_samples - 1, 1)
    explained_variance = (s ** 2) / dof
    total_variance = float((centered ** 2).sum()) / dof
    if total_variance > 0:
        explained_variance_ratio = explained_variance / total_variance
    else:
        explained_variance_ratio = np.zeros_like(explained_variance)

    logger.info(
        f"Projected {n_samples}x{n_features} matrix onto {k} components "
        f"(explained variance {explained_variance_ratio.sum():.3f})"
    )

    return ProjectionResult(
        n_components=int(k),
        components=vt,
        coordinates=coordinates,
        mean=mean,
        singular_values=s,
        explained_variance=explained_variance,
        explained_variance_ratio=explained_variance_ratio,
    )


def reconstruct(result: ProjectionResult) -> np.ndarray:
    """Map projected coordinates back into the original space"""
    return result.coordinates @ result.components + result.mean


def reconstruction_error(matrix: Union[np.ndarray, EmbeddingMatrix], result: ProjectionResult) -> float:
    """Frobenius norm of the difference between matrix and its reconstruction"""
    array = _as_array(matrix)
    return float(np.linalg.norm(array - reconstruct(result)))
