#!/usr/bin/env python3
"""
Embedding store: one batched request, count and width checks, order kept.
"""

import numpy as np
import pytest

from spectre.core.logger import get_logger
from spectre.core.errors import DimensionMismatchError, InvalidParameterError, ProviderError
from spectre.embeddings.embedding_store import EmbeddingStore, EmbeddingStoreConfig
from spectre.embeddings.records import EmbeddingMatrix, Record

from conftest import FakeProvider, LookupProvider, make_records

logger = get_logger(__name__)


class TestEmbeddingStore:
    """Paired-sequence contract between records and vectors"""

    def test_1_thousand_texts_thousand_vectors(self):
        logger.info("TEST 1: 1000 texts -> 1000 vectors")
        provider = FakeProvider(dimension=1536)
        store = EmbeddingStore(provider)

        texts = [f"text {i}" for i in range(1000)]
        vectors = store.embed_texts(texts)

        assert len(vectors) == 1000
        assert {len(v) for v in vectors} == {1536}
        assert len(provider.calls) == 1

    def test_2_short_response_fails(self):
        logger.info("TEST 2: 999 vectors for 1000 texts")
        store = EmbeddingStore(FakeProvider(dimension=1536, drop=1))

        with pytest.raises(DimensionMismatchError) as excinfo:
            store.embed_texts([f"text {i}" for i in range(1000)])

        assert excinfo.value.expected == 1000
        assert excinfo.value.actual == 999

    def test_3_wrong_width_fails(self):
        logger.info("TEST 3: Unexpected vector width")
        store = EmbeddingStore(FakeProvider(dimension=8), EmbeddingStoreConfig(expected_dimension=16))

        with pytest.raises(DimensionMismatchError) as excinfo:
            store.embed_texts(["a", "b"])
        assert excinfo.value.expected == 16
        assert excinfo.value.actual == 8

    def test_4_mixed_widths_fail_without_expected_dimension(self):
        provider = LookupProvider({"a": [1.0, 0.0, 0.0], "b": [1.0, 0.0]})
        store = EmbeddingStore(provider, EmbeddingStoreConfig(expected_dimension=None))

        with pytest.raises(DimensionMismatchError):
            store.embed_texts(["a", "b"])

    def test_5_adopts_first_width(self):
        store = EmbeddingStore(FakeProvider(dimension=12), EmbeddingStoreConfig(expected_dimension=None))
        matrix = store.assemble_matrix(make_records(5))
        assert matrix.shape == (5, 12)

    def test_6_empty_input_fails(self):
        store = EmbeddingStore(FakeProvider())
        with pytest.raises(InvalidParameterError):
            store.embed_texts([])

    def test_7_provider_errors_propagate(self):
        store = EmbeddingStore(FakeProvider(fail=True))
        with pytest.raises(ProviderError):
            store.assemble_matrix(make_records(3))

    def test_8_matrix_rows_follow_record_order(self):
        logger.info("TEST 8: Row order")
        records = [
            Record(id="a", title="A", text="first"),
            Record(id="b", title="B", text="second"),
            Record(id="c", title="C", text="third"),
        ]
        provider = LookupProvider({
            "first": [1.0, 0.0],
            "second": [0.0, 1.0],
            "third": [1.0, 1.0],
        })
        store = EmbeddingStore(provider, EmbeddingStoreConfig(expected_dimension=2))

        matrix = store.assemble_matrix(records)

        assert isinstance(matrix, EmbeddingMatrix)
        assert matrix.record_ids() == ["a", "b", "c"]
        assert np.array_equal(matrix.vectors, [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        assert matrix.index_of("c") == 2
        assert matrix.model_name == "lookup-embedding"


class TestEmbeddingMatrix:
    """Read-only matrix construction checks"""

    def test_1_read_only(self):
        matrix = EmbeddingMatrix(make_records(2), np.ones((2, 3)))
        with pytest.raises(ValueError):
            matrix.vectors[0, 0] = 5.0

    def test_2_row_count_must_match_records(self):
        with pytest.raises(DimensionMismatchError):
            EmbeddingMatrix(make_records(3), np.ones((2, 3)))

    def test_3_must_be_two_dimensional(self):
        with pytest.raises(DimensionMismatchError):
            EmbeddingMatrix(make_records(3), np.ones(3))

    def test_4_unknown_id(self):
        matrix = EmbeddingMatrix(make_records(2), np.ones((2, 3)))
        with pytest.raises(InvalidParameterError):
            matrix.index_of("missing")

    def test_5_source_array_not_aliased(self):
        source = np.ones((2, 3))
        matrix = EmbeddingMatrix(make_records(2), source)
        source[0, 0] = 9.0
        assert matrix.vectors[0, 0] == 1.0

    def test_6_duplicate_ids_rejected(self):
        records = make_records(3) + [Record(id="1001", title="Copy", text="copy")]
        with pytest.raises(InvalidParameterError) as excinfo:
            EmbeddingMatrix(records, np.ones((4, 3)))
        assert "1001" in str(excinfo.value)
