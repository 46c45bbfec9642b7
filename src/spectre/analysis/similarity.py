"""
Cosine similarity over embedding matrices.

Rows are L2-normalized, the all-pairs similarity matrix is the normalized
matrix times its transpose, and neighbor lookup ranks one row of that matrix.
"""

import numpy as np
import pandas as pd
from typing import List, NamedTuple, Optional, Union
from dataclasses import dataclass
from enum import Enum

from spectre.core.logger import get_logger
from spectre.core.errors import DegenerateVectorError, IndexOutOfRangeError, InvalidParameterError
from spectre.embeddings.records import EmbeddingMatrix

logger = get_logger(__name__)

ArrayLike = Union[np.ndarray, EmbeddingMatrix]


class ZeroVectorPolicy(Enum):
    """What normalization does with a zero-norm row"""
    RAISE = "raise"  # fail with DegenerateVectorError
    ZERO = "zero"    # keep the row at zero: similarity 0 to every record, itself included


class Neighbor(NamedTuple):
    """One ranked neighbor: row position and similarity score"""
    index: int
    score: float


@dataclass
class NeighborResult:
    """Neighbor resolved back to its record"""
    rank: int
    index: int
    record_id: str
    title: str
    score: float


def _as_array(matrix: ArrayLike) -> np.ndarray:
    if isinstance(matrix, EmbeddingMatrix):
        return matrix.vectors
    array = np.asarray(matrix, dtype=np.float64)
    if array.ndim != 2:
        raise InvalidParameterError(f"Expected a 2-dimensional matrix, got shape {array.shape}")
    return array


def normalize(matrix: ArrayLike, policy: ZeroVectorPolicy = ZeroVectorPolicy.RAISE) -> np.ndarray:
    """
    Divide each row by its Euclidean norm.

    Args:
        matrix: ``N x D`` matrix
        policy: Handling of zero-norm rows

    Returns:
        New ``N x D`` matrix with unit-norm rows (zero rows under ZERO policy)

    Raises:
        DegenerateVectorError: if a row has zero norm and policy is RAISE,
            or if any row holds NaN or infinite values (under either policy)
    """
    array = _as_array(matrix)
    if array.shape[1] == 0:
        raise InvalidParameterError("Cannot normalize vectors of dimension 0")

    non_finite_rows = np.flatnonzero(~np.isfinite(array).all(axis=1))
    if non_finite_rows.size:
        logger.error(f"Non-finite values in embedding rows: {non_finite_rows.tolist()}")
        raise DegenerateVectorError(
            f"Cannot normalize rows with NaN or infinite values: {non_finite_rows.tolist()}",
            rows=non_finite_rows.tolist(),
        )

    # Scale by the largest magnitude first so squaring neither overflows nor underflows
    scale = np.abs(array).max(axis=1)
    zero_rows = np.flatnonzero(scale == 0)

    if zero_rows.size:
        if policy is ZeroVectorPolicy.RAISE:
            logger.error(f"Zero-norm rows in embedding matrix: {zero_rows.tolist()}")
            raise DegenerateVectorError(
                f"Cannot normalize zero-norm rows: {zero_rows.tolist()}",
                rows=zero_rows.tolist(),
            )
        logger.warning(f"Keeping {zero_rows.size} zero-norm rows as zero vectors")

    safe_scale = np.where(scale == 0, 1.0, scale)
    scaled = array / safe_scale[:, np.newaxis]
    norms = np.linalg.norm(scaled, axis=1)
    safe_norms = np.where(norms == 0, 1.0, norms)
    return scaled / safe_norms[:, np.newaxis]


def similarity_matrix(normalized: np.ndarray) -> np.ndarray:
    """
    All-pairs cosine similarity of already-normalized rows.

    Returns:
        Symmetric ``N x N`` matrix with entries in [-1, 1]
    """
    normalized = np.asarray(normalized, dtype=np.float64)
    sim = normalized @ normalized.T
    # Exact symmetry regardless of BLAS summation order
    sim = (sim + sim.T) / 2.0
    np.clip(sim, -1.0, 1.0, out=sim)
    return sim


def nearest(sim: np.ndarray, index: int, k: int) -> List[Neighbor]:
    """
    Top-k neighbors of one row, excluding the row itself.

    Sorted by descending score; equal scores keep the lower index first.

    Raises:
        IndexOutOfRangeError: if ``index`` is outside [0, N) or ``k`` outside [0, N-1]
    """
    sim = np.asarray(sim)
    if sim.ndim != 2 or sim.shape[0] != sim.shape[1]:
        raise InvalidParameterError(f"Similarity matrix must be square, got shape {sim.shape}")

    n = sim.shape[0]
    for name, value in (("index", index), ("k", k)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise IndexOutOfRangeError(f"{name} must be an integer, got {value!r}")
    if not 0 <= index < n:
        raise IndexOutOfRangeError(f"Index {index} out of range for {n} records")
    if not 0 <= k <= n - 1:
        raise IndexOutOfRangeError(f"k={k} out of range, must be between 0 and {n - 1}")

    candidates = np.delete(np.arange(n), index)
    scores = sim[index, candidates]
    # lexsort: last key is primary
    order = np.lexsort((candidates, -scores))[:k]

    return [Neighbor(int(candidates[i]), float(scores[i])) for i in order]


class SimilarityEngine:
    """
    Cosine similarity search over an EmbeddingMatrix.

    The similarity matrix is computed once at construction; lookups by row
    position or record identifier rank a single row of it.
    """

    def __init__(self,
                 matrix: EmbeddingMatrix,
                 zero_vector_policy: ZeroVectorPolicy = ZeroVectorPolicy.RAISE):
        self.matrix = matrix
        self.zero_vector_policy = zero_vector_policy

        self.normalized = normalize(matrix, zero_vector_policy)
        self.similarities = similarity_matrix(self.normalized)
        self.similarities.setflags(write=False)

        logger.info(f"Computed {len(matrix)}x{len(matrix)} cosine similarity matrix")

    def nearest(self, index: int, k: int) -> List[Neighbor]:
        return nearest(self.similarities, index, k)

    def nearest_records(self, record_id: str, k: int) -> List[NeighborResult]:
        """Top-k neighbors of a record looked up by identifier"""
        index = self.matrix.index_of(record_id)
        results = []
        for rank, neighbor in enumerate(self.nearest(index, k), 1):
            record = self.matrix.records[neighbor.index]
            results.append(NeighborResult(
                rank=rank,
                index=neighbor.index,
                record_id=record.id,
                title=record.title,
                score=neighbor.score
            ))
        return results

    def score(self, i: int, j: int) -> float:
        n = len(self.matrix)
        for position in (i, j):
            if not 0 <= position < n:
                raise IndexOutOfRangeError(f"Index {position} out of range for {n} records")
        return float(self.similarities[i, j])

    def rankings(self, k: int, query_indices: Optional[List[int]] = None) -> pd.DataFrame:
        """
        Neighbor rankings as a flat table, one row per (query, neighbor).

        Args:
            k: Neighbors per query
            query_indices: Rows to rank for (all rows by default)

        Returns:
            DataFrame with query_index, query_id, rank, neighbor_index,
            neighbor_id, score
        """
        if query_indices is None:
            query_indices = range(len(self.matrix))

        rows = []
        records = self.matrix.records
        for query_index in query_indices:
            for rank, neighbor in enumerate(self.nearest(query_index, k), 1):
                rows.append({
                    "query_index": query_index,
                    "query_id": records[query_index].id,
                    "rank": rank,
                    "neighbor_index": neighbor.index,
                    "neighbor_id": records[neighbor.index].id,
                    "score": neighbor.score,
                })

        columns = ["query_index", "query_id", "rank", "neighbor_index", "neighbor_id", "score"]
        return pd.DataFrame(rows, columns=columns)
