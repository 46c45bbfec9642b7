"""
Typed records and the embedding matrix built from them.

Row position is the join key between records and vectors: row ``i`` of an
``EmbeddingMatrix`` always belongs to ``records[i]``.
"""

import numpy as np
from typing import List, Dict, Optional, Any, Sequence, Tuple
from dataclasses import dataclass, field
from collections import Counter

from spectre.core.errors import DimensionMismatchError, InvalidParameterError


@dataclass(frozen=True)
class Record:
    """One text document loaded from the dataset"""
    id: str
    title: str
    text: str
    language: Optional[str] = None
    rating: Optional[float] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten for tabular output"""
        row = {
            "id": self.id,
            "title": self.title,
            "text": self.text,
            "language": self.language,
            "rating": self.rating,
        }
        for key, value in self.metadata.items():
            row.setdefault(key, value)
        return row


class EmbeddingMatrix:
    """
    Read-only ``N x D`` matrix of embeddings paired with the records they
    were computed from.
    """

    def __init__(self, records: Sequence[Record], vectors: np.ndarray, model_name: Optional[str] = None):
        vectors = np.array(vectors, dtype=np.float64)

        if vectors.ndim != 2:
            raise DimensionMismatchError(
                f"Embedding matrix must be 2-dimensional, got shape {vectors.shape}"
            )
        if vectors.shape[0] != len(records):
            raise DimensionMismatchError(
                f"Got {vectors.shape[0]} vectors for {len(records)} records",
                expected=len(records),
                actual=vectors.shape[0],
            )
        if vectors.shape[0] == 0:
            raise InvalidParameterError("Embedding matrix needs at least one record")

        vectors.setflags(write=False)
        self._vectors = vectors
        self._records: Tuple[Record, ...] = tuple(records)
        self._index_by_id = {record.id: i for i, record in enumerate(self._records)}
        if len(self._index_by_id) != len(self._records):
            counts = Counter(record.id for record in self._records)
            duplicates = sorted(record_id for record_id, count in counts.items() if count > 1)
            raise InvalidParameterError(f"Duplicate record ids: {duplicates}")
        self.model_name = model_name

    @property
    def vectors(self) -> np.ndarray:
        return self._vectors

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def shape(self) -> Tuple[int, int]:
        return self._vectors.shape

    @property
    def dimension(self) -> int:
        return self._vectors.shape[1]

    def __len__(self) -> int:
        return self._vectors.shape[0]

    def index_of(self, record_id: str) -> int:
        """Row position of a record identifier"""
        try:
            return self._index_by_id[record_id]
        except KeyError:
            raise InvalidParameterError(f"Unknown record id: {record_id!r}") from None

    def record_ids(self) -> List[str]:
        return [record.id for record in self._records]

    def __repr__(self):
        return f"<EmbeddingMatrix: {len(self)}x{self.dimension}, model={self.model_name}>"
