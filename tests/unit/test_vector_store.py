"""
Tests for the VectorStore class.

This module tests upsert/get/remove/query semantics, the matrix/record
alignment invariant and persistence round trips.
"""
import shutil
import sqlite3
import tempfile
import unittest
from contextlib import closing
from pathlib import Path
from unittest.mock import MagicMock

import numpy as np
import pytest

from nano_vectordb.core.errors import (
    CorruptDataError,
    DimensionMismatchError,
    StorageIOError,
    ValidationError,
    ZeroNormVectorError,
)
from nano_vectordb.core.vector_store import VectorStore, hash_vector
from nano_vectordb.metrics import MetricType
from nano_vectordb.model import Record
from nano_vectordb.serialization import CodecType, JsonDocumentCodec, StoreDocument
from nano_vectordb.storage.backends.sqlite import SqliteStorage
from nano_vectordb.storage.backends.mmap import MMapStorage
from nano_vectordb.storage.interfaces import StorageLoad


def _ranking_records():
    return [
        Record(id="a", vector=[1, 0, 0, 0]),
        Record(id="b", vector=[0, 1, 0, 0]),
        Record(id="c", vector=[0.9, 0.1, 0, 0]),
    ]


class TestVectorStore(unittest.TestCase):
    """Test cases for in-memory VectorStore operations."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.dimension = 4
        self.store = VectorStore(self.dimension, storage_file=None)

    def _assert_aligned(self, store):
        self.assertEqual(store.matrix.shape, (store.size(), store.embedding_dim))
        for row, record in enumerate(store.records):
            self.assertEqual(record.dimension, store.embedding_dim)
            np.testing.assert_array_equal(store.matrix[row], record.vector)

    def test_initialization(self):
        """Test a fresh store is empty with default auxiliary data."""
        self.assertEqual(self.store.embedding_dim, 4)
        self.assertEqual(self.store.metric_type, MetricType.COSINE)
        self.assertEqual(self.store.size(), 0)
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.store.get_additional_data(), {})
        self.assertEqual(self.store.matrix.shape, (0, 4))

    def test_non_positive_embedding_dim_rejected(self):
        """Test that a non-positive dimension is a validation error."""
        for bad in (0, -3):
            with self.assertRaises(ValidationError):
                VectorStore(bad, storage_file=None)

    def test_query_ranking(self):
        """Test cosine ranking orders records by descending similarity."""
        self.store.upsert(_ranking_records())

        results = self.store.query([1, 0, 0, 0], top_k=3)

        self.assertEqual([result.id for result in results], ["a", "c", "b"])
        self.assertAlmostEqual(results[0].score, 1.0, places=5)
        self.assertAlmostEqual(results[1].score, 0.9 / np.sqrt(0.82), places=5)
        self.assertAlmostEqual(results[2].score, 0.0, places=5)

    def test_query_threshold_stops_early(self):
        """Test that results stop at the first score below the threshold."""
        self.store.upsert(_ranking_records())

        results = self.store.query([1, 0, 0, 0], top_k=3, threshold=0.995)
        self.assertEqual([result.id for result in results], ["a"])

        results = self.store.query([1, 0, 0, 0], top_k=3, threshold=0.95)
        self.assertEqual([result.id for result in results], ["a", "c"])

    def test_query_top_k_truncates(self):
        """Test that at most top_k results are returned."""
        self.store.upsert(_ranking_records())

        results = self.store.query([1, 0, 0, 0], top_k=1)
        self.assertEqual([result.id for result in results], ["a"])
        self.assertEqual(self.store.query([1, 0, 0, 0], top_k=0), [])

    def test_query_with_predicate(self):
        """Test that the predicate restricts the candidate set."""
        self.store.upsert(_ranking_records())

        results = self.store.query([1, 0, 0, 0], top_k=3, predicate=lambda record: record.id != "a")
        self.assertEqual([result.id for result in results], ["c", "b"])

        results = self.store.query([1, 0, 0, 0], predicate=lambda record: False)
        self.assertEqual(results, [])

    def test_query_empty_store(self):
        """Test that querying an empty store returns no results."""
        self.assertEqual(self.store.query([1, 0, 0, 0]), [])

    def test_query_dimension_mismatch(self):
        """Test that a wrong-length query is rejected."""
        self.store.upsert(_ranking_records())
        with self.assertRaises(DimensionMismatchError) as ctx:
            self.store.query([1, 0, 0])
        self.assertEqual(ctx.exception.expected, 4)
        self.assertEqual(ctx.exception.actual, 3)

    def test_zero_query_scores_zero(self):
        """Test that a zero query is scored at maximal cosine distance."""
        self.store.upsert(_ranking_records())
        results = self.store.query([0, 0, 0, 0], top_k=3)
        self.assertEqual(len(results), 3)
        for result in results:
            self.assertAlmostEqual(result.score, 0.0)

    def test_l2_scores_are_negated_distances(self):
        """Test L2 scoring so that closer records rank higher."""
        store = VectorStore(2, metric="l2", storage_file=None)
        store.upsert([
            Record(id="near", vector=[1.0, 1.0]),
            Record(id="far", vector=[4.0, 5.0]),
        ])

        results = store.query([1.0, 2.0], top_k=2)

        self.assertEqual([result.id for result in results], ["near", "far"])
        self.assertAlmostEqual(results[0].score, -1.0)
        self.assertAlmostEqual(results[1].score, -18.0)
        # L2 rows are stored as given
        np.testing.assert_array_equal(store.get(["far"])[0].vector, [4.0, 5.0])

    def test_upsert_normalizes_under_cosine(self):
        """Test that cosine stores keep unit-length rows."""
        self.store.upsert([Record(id="x", vector=[3, 4, 0, 0])])
        np.testing.assert_allclose(self.store.get(["x"])[0].vector, [0.6, 0.8, 0, 0], rtol=1e-6)

    def test_upsert_idempotence(self):
        """Test that re-upserting an id replaces the vector in place."""
        self.store.upsert(_ranking_records())
        report = self.store.upsert([Record(id="b", vector=[0, 0, 1, 0])])

        self.assertEqual(report, {"update": ["b"], "insert": []})
        self.assertEqual(self.store.size(), 3)
        self.assertEqual(self.store.ids, ["a", "b", "c"])
        np.testing.assert_array_equal(self.store.get(["b"])[0].vector, [0, 0, 1, 0])
        self._assert_aligned(self.store)

    def test_upsert_last_duplicate_wins(self):
        """Test that the last of several records sharing an id wins."""
        self.store.upsert([
            Record(id="x", vector=[1, 0, 0, 0]),
            Record(id="y", vector=[0, 1, 0, 0]),
            Record(id="x", vector=[0, 0, 0, 1]),
        ])

        self.assertEqual(self.store.ids, ["x", "y"])
        np.testing.assert_array_equal(self.store.get(["x"])[0].vector, [0, 0, 0, 1])

    def test_empty_id_hashing(self):
        """Test that identical vectors with empty ids collapse to one record."""
        report = self.store.upsert([
            Record(id="", vector=[1, 2, 3, 4]),
            {"vector": [1, 2, 3, 4]},
        ])

        self.assertEqual(self.store.size(), 1)
        expected_id = hash_vector(np.array([1, 2, 3, 4], dtype=np.float32))
        self.assertEqual(report["insert"], [expected_id])

        # A later upsert of the same content maps to the same id
        self.store.upsert([{"id": "", "vector": [1, 2, 3, 4]}])
        self.assertEqual(self.store.ids, [expected_id])

    def test_upsert_dimension_mismatch_is_atomic(self):
        """Test that a bad vector rejects the whole batch."""
        self.store.upsert(_ranking_records())

        with self.assertRaises(DimensionMismatchError) as ctx:
            self.store.upsert([
                Record(id="d", vector=[0, 0, 0, 1]),
                Record(id="e", vector=[1, 2]),
            ])

        self.assertEqual(ctx.exception.record_id, "e")
        self.assertEqual(self.store.ids, ["a", "b", "c"])
        self._assert_aligned(self.store)

    def test_upsert_zero_vector_under_cosine(self):
        """Test that a zero vector cannot be normalized."""
        with self.assertRaises(ZeroNormVectorError):
            self.store.upsert([Record(id="zero", vector=[0, 0, 0, 0])])
        self.assertEqual(self.store.size(), 0)

    def test_get_returns_store_order(self):
        """Test that get ignores request order and unknown ids."""
        self.store.upsert(_ranking_records())

        records = self.store.get(["c", "missing", "a"])

        self.assertEqual([record.id for record in records], ["a", "c"])
        self.assertEqual(self.store.get(["missing"]), [])

    def test_remove_correctness(self):
        """Test removing records compacts the matrix and keeps survivor order."""
        store = VectorStore(8, storage_file=None)
        rng = np.random.default_rng(7)
        store.upsert([
            Record(id=str(i), vector=rng.random(8, dtype=np.float32) + 0.1) for i in range(100)
        ])

        removed = store.remove(["0", "50", "90", "not-there"])

        self.assertEqual(removed, 3)
        self.assertEqual(store.size(), 97)
        self.assertEqual(store.get(["0", "50", "90"]), [])
        expected = [str(i) for i in range(100) if i not in (0, 50, 90)]
        self.assertEqual(store.ids, expected)
        self._assert_aligned(store)

    def test_remove_all_then_upsert(self):
        """Test the store stays usable after removing every record."""
        self.store.upsert(_ranking_records())
        self.assertEqual(self.store.remove(["a", "b", "c"]), 3)
        self.assertEqual(self.store.matrix.shape, (0, 4))

        self.store.upsert([Record(id="z", vector=[0, 0, 1, 0])])
        self.assertEqual(self.store.ids, ["z"])
        self._assert_aligned(self.store)

    def test_remove_unknown_ids(self):
        """Test that removing unknown ids is a no-op."""
        self.store.upsert(_ranking_records())
        self.assertEqual(self.store.remove(["nope"]), 0)
        self.assertEqual(self.store.size(), 3)

    def test_invariant_after_mixed_operations(self):
        """Test alignment over a random sequence of upserts and removes."""
        rng = np.random.default_rng(3)
        for step in range(30):
            ids = [f"r{i}" for i in rng.integers(0, 20, size=5)]
            if step % 3 == 2:
                self.store.remove(ids)
            else:
                self.store.upsert([
                    Record(id=record_id, vector=rng.random(4) + 0.1) for record_id in ids
                ])
            self._assert_aligned(self.store)
            self.assertEqual(len(set(self.store.ids)), self.store.size())

    def test_matrix_is_read_only(self):
        """Test that the exposed matrix cannot be mutated."""
        self.store.upsert(_ranking_records())
        with self.assertRaises(ValueError):
            self.store.matrix[0, 0] = 5.0

    def test_initialize_metric_renormalizes(self):
        """Test switching from L2 to cosine normalizes existing rows."""
        store = VectorStore(2, metric=MetricType.L2, storage_file=None)
        store.upsert([Record(id="x", vector=[3.0, 4.0])])

        store.initialize_metric("cosine")

        self.assertEqual(store.metric_type, MetricType.COSINE)
        np.testing.assert_allclose(store.get(["x"])[0].vector, [0.6, 0.8], rtol=1e-6)

    def test_failed_metric_switch_leaves_store_unchanged(self):
        """Test that a zero row aborts the switch to cosine without side effects."""
        store = VectorStore(2, metric=MetricType.L2, storage_file=None)
        store.upsert([
            Record(id="z", vector=[0.0, 0.0]),
            Record(id="x", vector=[3.0, 4.0]),
        ])
        before = store.matrix.copy()

        with self.assertRaises(ZeroNormVectorError):
            store.initialize_metric("cosine")

        self.assertEqual(store.metric_type, MetricType.L2)
        np.testing.assert_array_equal(store.matrix, before)
        np.testing.assert_array_equal(store.get(["x"])[0].vector, [3.0, 4.0])
        self.assertEqual(store.query([3.0, 4.0], top_k=1)[0].id, "x")

    def test_additional_data_accessors(self):
        """Test auxiliary data is a plain accessor pair."""
        self.store.set_additional_data({"owner": "alice", "tags": [1, 2]})
        self.assertEqual(self.store.get_additional_data(), {"owner": "alice", "tags": [1, 2]})
        self.store.additional_data = None
        self.assertIsNone(self.store.get_additional_data())

    def test_save_without_storage_file(self):
        """Test that a memory-only store cannot be saved."""
        with self.assertRaises(ValidationError):
            self.store.save()

    def test_document_round_trip(self):
        """Test rebuilding a store from its document."""
        self.store.upsert(_ranking_records())
        self.store.set_additional_data({"k": "v"})

        restored = VectorStore.from_document(self.store.to_document())

        self.assertEqual(restored.ids, self.store.ids)
        np.testing.assert_allclose(restored.matrix, self.store.matrix, rtol=1e-6)
        self.assertEqual(restored.get_additional_data(), {"k": "v"})

    def test_document_row_count_mismatch(self):
        """Test that an inconsistent document is rejected."""
        document = StoreDocument(embedding_dim=4, ids=["a", "b"],
                                 matrix=np.ones((1, 4), dtype=np.float32))
        with self.assertRaises(CorruptDataError):
            VectorStore(4, storage_file=None, document=document)

    def test_document_zero_row_under_cosine(self):
        """Test that a persisted zero row cannot be normalized on load."""
        document = StoreDocument(embedding_dim=2, ids=["z"],
                                 matrix=np.zeros((1, 2), dtype=np.float32))
        with self.assertRaises(ZeroNormVectorError):
            VectorStore(2, storage_file=None, document=document)


class TestVectorStorePersistence(unittest.TestCase):
    """Test cases for saving and loading a VectorStore."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def _path(self, name):
        return str(Path(self.test_dir) / name)

    def _populated(self, path, **kwargs):
        store = VectorStore(4, storage_file=path, **kwargs)
        store.upsert(_ranking_records())
        store.set_additional_data({"source": "test", "version": 2})
        store.save()
        return store

    def _assert_same(self, original, loaded):
        self.assertEqual(loaded.ids, original.ids)
        np.testing.assert_allclose(loaded.matrix, original.matrix, rtol=1e-6)
        self.assertEqual(loaded.get_additional_data(), original.get_additional_data())

    def test_missing_file_starts_empty(self):
        """Test that a store without a persisted file starts empty."""
        store = VectorStore(4, storage_file=self._path("absent.json"))
        self.assertEqual(store.size(), 0)
        self.assertFalse(Path(self._path("absent.json")).exists())

    def test_json_round_trip(self):
        """Test save and reload through the default JSON codec."""
        path = self._path("store.json")
        original = self._populated(path)

        loaded = VectorStore(4, storage_file=path)

        self._assert_same(original, loaded)
        self.assertEqual(loaded.query([1, 0, 0, 0], top_k=1)[0].id, "a")

    def test_binary_round_trip(self):
        """Test save and reload through the binary codec."""
        path = self._path("store.nvdb")
        original = self._populated(path, codec=CodecType.BINARY)

        loaded = VectorStore(4, storage_file=path, codec="binary")

        self._assert_same(original, loaded)

    def test_mmap_round_trip(self):
        """Test save and reload through memory-mapped storage."""
        path = self._path("store.json")
        original = self._populated(path, storage=MMapStorage())

        loaded = VectorStore(4, storage_file=path, storage=MMapStorage())

        self._assert_same(original, loaded)

    def test_sqlite_round_trip(self):
        """Test save and reload through the record-native SQLite backend."""
        path = self._path("store.db")
        original = self._populated(path, storage=SqliteStorage())

        loaded = VectorStore(4, storage_file=path, storage=SqliteStorage())

        self._assert_same(original, loaded)

    def test_empty_store_round_trip(self):
        """Test that an empty store persists and reloads."""
        path = self._path("empty.json")
        VectorStore(4, storage_file=path).save()

        loaded = VectorStore(4, storage_file=path)

        self.assertEqual(loaded.size(), 0)
        self.assertEqual(loaded.get_additional_data(), {})

    def test_dimension_mismatch_on_load(self):
        """Test that loading a document of another dimension is corrupt."""
        path = self._path("store.json")
        self._populated(path)

        with self.assertRaises(CorruptDataError):
            VectorStore(8, storage_file=path)

    def test_corrupt_file_on_load(self):
        """Test that a malformed persisted document is reported."""
        path = self._path("store.json")
        Path(path).write_text('{"embedding_dim": 4, "data": []}')

        with self.assertRaises(CorruptDataError):
            VectorStore(4, storage_file=path)

    def test_native_write_failure_falls_back_to_codec(self):
        """Test that a failing native write persists the codec document instead."""
        path = self._path("store.db")
        storage = SqliteStorage()
        storage.write_records = MagicMock(side_effect=StorageIOError("disk full"))

        original = self._populated(path, storage=storage)

        # The fallback wrote a JSON document at the same location
        document = JsonDocumentCodec().decode(Path(path).read_bytes())
        self.assertEqual(document.ids, original.ids)

        # Native read fails on the JSON file and the codec path takes over
        loaded = VectorStore(4, storage_file=path, storage=SqliteStorage())
        self._assert_same(original, loaded)

    def test_sqlite_mixed_row_dimensions_on_load(self):
        """Test that SQLite rows of mixed dimensions are reported as corrupt data."""
        path = self._path("store.db")
        self._populated(path, storage=SqliteStorage())
        with closing(sqlite3.connect(path)) as conn:
            with conn:
                conn.execute("UPDATE vectors SET dim = 3, vec = ? WHERE id = 'b'",
                             (np.ones(3, dtype="<f4").tobytes(),))

        with self.assertRaises(CorruptDataError):
            VectorStore(4, storage_file=path, storage=SqliteStorage())

    def test_mismatched_native_records_are_corrupt(self):
        """Test that a record backend returning mixed dimensions is rejected."""
        storage = MagicMock()
        storage.supports_records = True
        storage.read_records.return_value = StorageLoad(
            embedding_dim=4,
            records=[Record(id="a", vector=[1, 0, 0, 0]), Record(id="b", vector=[1, 0, 0])],
        )

        with self.assertRaises(CorruptDataError):
            VectorStore(4, storage_file=self._path("store.db"), storage=storage)

    def test_codec_error_propagates(self):
        """Test that write failures from a byte backend propagate."""
        storage = MagicMock()
        storage.supports_records = False
        storage.read.return_value = b""
        storage.write.side_effect = StorageIOError("read-only filesystem")

        store = VectorStore(4, storage_file=self._path("x.json"), storage=storage)
        with self.assertRaises(StorageIOError):
            store.save()


@pytest.mark.parametrize("metric", ["cosine", "l2"])
def test_save_reload_query_matches(tmp_path, metric):
    """Test that a reloaded store answers queries like the original."""
    rng = np.random.default_rng(11)
    path = str(tmp_path / "store.json")
    store = VectorStore(16, metric=metric, storage_file=path)
    store.upsert([Record(id=f"id-{i}", vector=rng.random(16) + 0.05) for i in range(50)])
    store.save()

    loaded = VectorStore(16, metric=metric, storage_file=path)
    query = rng.random(16)

    expected = [result.id for result in store.query(query, top_k=5)]
    assert [result.id for result in loaded.query(query, top_k=5)] == expected
