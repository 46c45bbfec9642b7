"""Shared fixtures: deterministic fake providers and sample records."""

import numpy as np
import pandas as pd
import pytest
from typing import List, Optional

from spectre.core.errors import ProviderError
from spectre.embeddings.providers import EmbeddingProvider
from spectre.embeddings.records import Record


class FakeProvider(EmbeddingProvider):
    """Returns seeded random vectors; can drop vectors or fail on demand"""

    def __init__(self,
                 dimension: int = 16,
                 seed: int = 7,
                 drop: int = 0,
                 fail: bool = False,
                 model_name: str = "fake-embedding"):
        self.dimension = dimension
        self.seed = seed
        self.drop = drop
        self.fail = fail
        self.model_name = model_name
        self.calls: List[List[str]] = []

    def embed(self, texts: List[str]) -> List[np.ndarray]:
        self.calls.append(list(texts))
        if self.fail:
            raise ProviderError("fake provider unavailable")

        rng = np.random.default_rng(self.seed)
        vectors = rng.normal(size=(len(texts), self.dimension)).astype(np.float32)
        count = max(len(texts) - self.drop, 0)
        return [vectors[i] for i in range(count)]


class LookupProvider(EmbeddingProvider):
    """Returns a fixed vector per text"""

    model_name = "lookup-embedding"

    def __init__(self, vectors: dict):
        self.vectors = vectors

    def embed(self, texts: List[str]) -> List[np.ndarray]:
        return [np.asarray(self.vectors[text], dtype=np.float32) for text in texts]


def make_records(count: int) -> List[Record]:
    return [
        Record(
            id=str(1000 + i),
            title=f"Movie {i}",
            text=f"A haunted house story number {i}",
            language="en",
            rating=float(i % 10)
        )
        for i in range(count)
    ]


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def records():
    return make_records(30)


@pytest.fixture
def movies_csv(tmp_path):
    """Small CSV shaped like the horror movies dataset"""
    rows = []
    for i in range(40):
        rows.append({
            "id": 5000 + i,
            "original_title": f"Original {i}",
            "title": f"Horror {i}",
            "original_language": "en" if i % 4 else "es",
            "overview": "" if i % 10 == 3 else f"Something lurks in the woods, chapter {i}.",
            "release_date": f"2022-01-{(i % 28) + 1:02d}",
            "vote_average": (i % 10) + 0.5,
            "genre_names": "Horror",
        })
    rows[5]["overview"] = None

    path = tmp_path / "horror_movies.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path
