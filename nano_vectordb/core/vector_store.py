"""
Single-tenant in-memory vector store.

This module provides the VectorStore: an ordered list of records kept aligned
with a dense float32 matrix (row i is the vector of record i), ranked
nearest-neighbour search under a pluggable metric, and persistence through a
storage backend plus document codec.
"""

import hashlib
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import numpy as np

from nano_vectordb.core.errors import (
    CorruptDataError,
    DimensionMismatchError,
    ValidationError,
    ZeroNormVectorError,
)
from nano_vectordb.metrics.factory import MetricSpec, create_metric
from nano_vectordb.metrics.interfaces import MetricInterface, MetricType
from nano_vectordb.model import JsonValue, QueryResult, Record, VectorLike, as_vector
from nano_vectordb.serialization.factory import CodecSpec, create_codec
from nano_vectordb.serialization.interfaces import (
    CodecType,
    DocumentCodecInterface,
    FLOAT_DTYPE,
    StoreDocument,
)
from nano_vectordb.storage.backends.file import FileStorage
from nano_vectordb.storage.interfaces import StorageInterface

DEFAULT_STORAGE_FILE = "nano-vectordb.json"

RecordLike = Union[Record, Dict[str, Any]]
RecordFilter = Callable[[Record], bool]


def hash_vector(vector: np.ndarray) -> str:
    """Deterministic content hash of a vector's float32 components."""
    return hashlib.md5(np.ascontiguousarray(vector, dtype=FLOAT_DTYPE).tobytes()).hexdigest()


def normalize_vector(vector: np.ndarray, record_id: Optional[str] = None) -> np.ndarray:
    """
    Scale a vector to unit length.

    Raises:
        ZeroNormVectorError: If the vector has zero norm
    """
    norm = float(np.linalg.norm(vector))
    if norm == 0.0:
        raise ZeroNormVectorError(record_id)
    return (vector / norm).astype(np.float32)


def _vector_length(vector: np.ndarray) -> int:
    return int(vector.shape[0]) if vector.ndim == 1 else int(vector.size)


class VectorStore:
    """
    In-memory vector store with ranked similarity search.

    Invariant: after every public operation the matrix has exactly one row per
    record, in record order, and every row has length embedding_dim. Under the
    cosine metric all rows are unit length.

    The store performs no locking; callers serialize access themselves.
    """

    def __init__(
        self,
        embedding_dim: int,
        metric: MetricSpec = MetricType.COSINE,
        storage_file: Optional[str] = DEFAULT_STORAGE_FILE,
        storage: Optional[StorageInterface] = None,
        codec: Optional[CodecSpec] = None,
        document: Optional[StoreDocument] = None,
    ):
        """
        Initialize the vector store.

        Args:
            embedding_dim: Fixed length of every vector in the store
            metric: Metric strategy, MetricType or metric name (default: cosine)
            storage_file: Location the store loads from and saves to (None for memory-only)
            storage: Storage backend (default: plain file storage)
            codec: Document codec, CodecType or codec name (default: JSON)
            document: Persisted document to restore instead of reading storage_file

        Raises:
            ValidationError: If embedding_dim is not a positive integer
            CorruptDataError: If the persisted document is inconsistent
        """
        if isinstance(embedding_dim, bool) or not isinstance(embedding_dim, int) or embedding_dim <= 0:
            raise ValidationError(f"Embedding dimension must be a positive integer, got {embedding_dim!r}")

        self.logger = logging.getLogger(__name__)

        self._embedding_dim = embedding_dim
        self._metric: MetricInterface = create_metric(metric)
        self._storage_file = storage_file
        self._storage: StorageInterface = storage or FileStorage()
        self._codec: DocumentCodecInterface = create_codec(codec or CodecType.JSON)
        self._fallback_storage = FileStorage()

        # Storage structures
        self._records: List[Record] = []
        self._matrix = np.empty((0, embedding_dim), dtype=np.float32)
        self._index: Dict[str, int] = {}
        self._additional_data: JsonValue = {}

        if document is None and storage_file:
            document = self._load_document()

        if document is not None:
            self._restore(document)

        self._pre_process()

        self.logger.info(
            f"Initialized vector store: embedding_dim={embedding_dim}, "
            f"metric={self._metric.metric_type.value}, storage_file={storage_file}, "
            f"records={len(self._records)}"
        )

    @classmethod
    def from_document(
        cls,
        document: StoreDocument,
        metric: MetricSpec = MetricType.COSINE,
        storage_file: Optional[str] = None,
        storage: Optional[StorageInterface] = None,
        codec: Optional[CodecSpec] = None,
        embedding_dim: Optional[int] = None,
    ) -> "VectorStore":
        """
        Reconstruct a store from a decoded document.

        Args:
            document: Decoded store document
            metric: Metric strategy for the rebuilt store
            storage_file: Location later saves go to (None for memory-only)
            storage: Storage backend for later saves
            codec: Document codec for later saves
            embedding_dim: Expected dimension (defaults to the document's own)

        Returns:
            A new VectorStore holding the document's records
        """
        return cls(
            embedding_dim if embedding_dim is not None else document.embedding_dim,
            metric=metric,
            storage_file=storage_file,
            storage=storage,
            codec=codec,
            document=document,
        )

    @classmethod
    def from_config(cls, config_manager=None) -> "VectorStore":
        """Build a store from the vector_store and storage sections of the configuration."""
        from nano_vectordb.config import get_config
        from nano_vectordb.storage.factory import create_storage

        config = (config_manager or get_config()).config
        return cls(
            config.vector_store.embedding_dim,
            metric=config.vector_store.metric,
            storage_file=config.vector_store.storage_file,
            storage=create_storage(config.storage.backend),
            codec=config.storage.codec,
        )

    # Properties

    @property
    def embedding_dim(self) -> int:
        return self._embedding_dim

    @property
    def metric(self) -> MetricInterface:
        return self._metric

    @property
    def metric_type(self) -> MetricType:
        return self._metric.metric_type

    @property
    def storage_file(self) -> Optional[str]:
        return self._storage_file

    @property
    def storage(self) -> StorageInterface:
        return self._storage

    @property
    def codec(self) -> DocumentCodecInterface:
        return self._codec

    @property
    def ids(self) -> List[str]:
        return [record.id for record in self._records]

    @property
    def records(self) -> List[Record]:
        return list(self._records)

    @property
    def matrix(self) -> np.ndarray:
        """Read-only view of the dense matrix."""
        view = self._matrix.view()
        view.setflags(write=False)
        return view

    @property
    def additional_data(self) -> JsonValue:
        return self._additional_data

    @additional_data.setter
    def additional_data(self, value: JsonValue):
        self._additional_data = value

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._index

    def __repr__(self) -> str:
        return (f"VectorStore(embedding_dim={self._embedding_dim}, "
                f"metric={self._metric.metric_type.value!r}, size={len(self._records)})")

    # Strategy configuration

    def initialize_metric(self, metric: MetricSpec):
        """
        Switch the metric strategy.

        Rows are normalized again when the new metric is cosine. If a row
        cannot be normalized the store keeps its previous metric and rows.

        Raises:
            ZeroNormVectorError: If switching to cosine meets a zero row
        """
        self._pre_process(create_metric(metric))

    def initialize_storage(self, storage: StorageInterface, storage_file: Optional[str] = None):
        """Switch the storage backend, optionally moving the store to a new location."""
        self._storage = storage
        if storage_file is not None:
            self._storage_file = storage_file

    def initialize_codec(self, codec: CodecSpec):
        """Switch the document codec used by later saves."""
        self._codec = create_codec(codec)

    # Record operations

    def upsert(self, records: Iterable[RecordLike]) -> Dict[str, List[str]]:
        """
        Insert or replace records.

        A record with an empty id is keyed by a content hash of its vector, so
        identical vectors collapse to one record. The last of several records
        sharing an id wins. Existing ids are replaced in place; new ids are
        appended in first-seen order.

        Args:
            records: Records (or dicts with 'id' and 'vector' keys)

        Returns:
            Dictionary with the 'update' and 'insert' id lists

        Raises:
            DimensionMismatchError: If any vector length differs from embedding_dim
            ZeroNormVectorError: If a zero vector is upserted under the cosine metric
        """
        incoming: Dict[str, np.ndarray] = {}

        # Validate everything before touching the store
        for position, item in enumerate(records):
            record = item if isinstance(item, Record) else Record.from_dict(item)
            vector = record.vector
            if vector.ndim != 1 or vector.shape[0] != self._embedding_dim:
                raise DimensionMismatchError(
                    self._embedding_dim,
                    _vector_length(vector),
                    record_id=record.id or f"#{position}",
                    operation="upsert",
                )
            record_id = record.id or hash_vector(vector)
            if self._metric.requires_normalization:
                vector = normalize_vector(vector, record_id)
            incoming[record_id] = vector

        updated: List[str] = []
        inserted: List[str] = []
        for record_id, vector in incoming.items():
            row = self._index.get(record_id)
            if row is None:
                inserted.append(record_id)
                continue
            self._matrix[row] = vector
            self._records[row] = Record(id=record_id, vector=vector)
            updated.append(record_id)

        if inserted:
            new_rows = np.vstack([incoming[record_id] for record_id in inserted]).astype(np.float32)
            start = len(self._records)
            self._matrix = np.vstack([self._matrix, new_rows])
            for offset, record_id in enumerate(inserted):
                self._records.append(Record(id=record_id, vector=new_rows[offset]))
                self._index[record_id] = start + offset

        self._check_invariant("upsert")
        self.logger.debug(f"Upsert summary: updated={len(updated)}, inserted={len(inserted)}")
        return {"update": updated, "insert": inserted}

    def get(self, ids: Iterable[str]) -> List[Record]:
        """
        Retrieve records by id.

        Args:
            ids: Ids to look up; unknown ids are ignored

        Returns:
            Matching records in store order
        """
        if isinstance(ids, str):
            ids = [ids]
        wanted = set(ids)
        return [record for record in self._records if record.id in wanted]

    def remove(self, ids: Iterable[str]) -> int:
        """
        Delete records by id, keeping the relative order of the survivors.

        Args:
            ids: Ids to delete; unknown ids are ignored

        Returns:
            Number of records removed
        """
        if isinstance(ids, str):
            ids = [ids]
        wanted = set(ids)
        keep = [row for row, record in enumerate(self._records) if record.id not in wanted]
        removed = len(self._records) - len(keep)
        if removed == 0:
            return 0

        self._matrix = self._matrix[np.asarray(keep, dtype=np.intp)]
        self._records = [self._records[row] for row in keep]
        self._rebuild_index()

        self._check_invariant("remove")
        self.logger.debug(f"Removed {removed} records, {len(self._records)} remain")
        return removed

    def query(
        self,
        vector: VectorLike,
        top_k: int = 10,
        threshold: Optional[float] = None,
        predicate: Optional[RecordFilter] = None,
    ) -> List[QueryResult]:
        """
        Rank records by similarity to a query vector.

        Scores are 1 - distance under the cosine metric and -distance otherwise,
        so higher is always better. Results come in descending score order and
        stop at the first score below threshold.

        Args:
            vector: Query vector of length embedding_dim
            top_k: Maximum number of results
            threshold: Optional minimum score
            predicate: Optional filter; only records it accepts are candidates

        Returns:
            List of QueryResult

        Raises:
            DimensionMismatchError: If the query length differs from embedding_dim
        """
        query = as_vector(vector)
        if query.ndim != 1 or query.shape[0] != self._embedding_dim:
            raise DimensionMismatchError(
                self._embedding_dim, _vector_length(query), operation="query"
            )

        if top_k <= 0 or not self._records:
            return []

        if predicate is None:
            candidates = np.arange(len(self._records))
        else:
            candidates = np.asarray(
                [row for row, record in enumerate(self._records) if predicate(record)],
                dtype=np.intp,
            )
            if candidates.size == 0:
                return []

        if self._metric.requires_normalization:
            norm = float(np.linalg.norm(query))
            # A zero query scores 0.0 against everything through the metric
            if norm > 0.0:
                query = query / norm

        distances = self._metric.distances(query, self._matrix[candidates])
        scores = self._metric.score(distances)
        order = np.argsort(-scores, kind="stable")[:top_k]

        results = []
        for position in order:
            score = float(scores[position])
            if threshold is not None and score < threshold:
                break
            results.append(QueryResult(record=self._records[candidates[position]], score=score))
        return results

    def size(self) -> int:
        """Return the number of records."""
        return len(self._records)

    # Additional data

    def get_additional_data(self) -> JsonValue:
        """Return the opaque additional data persisted with the store."""
        return self._additional_data

    def set_additional_data(self, data: JsonValue):
        """Replace the opaque additional data persisted with the store."""
        self._additional_data = data

    # Persistence

    def to_document(self) -> StoreDocument:
        """Snapshot the store as a codec-level document."""
        return StoreDocument(
            embedding_dim=self._embedding_dim,
            ids=self.ids,
            matrix=self._matrix.copy(),
            additional_data=self._additional_data,
        )

    def save(self):
        """
        Persist the store to its storage file.

        A record-native backend is tried first; if it fails the document is
        written through plain file storage and the codec instead.

        Raises:
            ValidationError: If the store has no storage file
            StorageIOError: If the backend write fails
        """
        if not self._storage_file:
            raise ValidationError("Cannot save a memory-only vector store (no storage_file)")

        if self._storage.supports_records:
            try:
                self._storage.write_records(
                    self._storage_file, list(self._records), self._embedding_dim,
                    self._additional_data,
                )
                self.logger.debug(f"Saved {len(self._records)} records to {self._storage_file}")
                return
            except Exception as e:
                self.logger.warning(
                    f"Native record write to {self._storage_file} failed ({e}); "
                    f"falling back to {self._codec.codec_type.value} document"
                )
                self._fallback_storage.write(self._storage_file, self._codec.encode(self.to_document()))
                return

        self._storage.write(self._storage_file, self._codec.encode(self.to_document()))
        self.logger.debug(f"Saved {len(self._records)} records to {self._storage_file}")

    def _load_document(self) -> Optional[StoreDocument]:
        """Read the persisted document, or None when nothing is stored yet."""
        if self._storage.supports_records:
            try:
                loaded = self._storage.read_records(self._storage_file)
            except Exception as e:
                self.logger.warning(
                    f"Native record read from {self._storage_file} failed ({e}); "
                    f"retrying as {self._codec.codec_type.value} document"
                )
                return self._read_encoded_document(self._fallback_storage)

            if loaded.is_empty:
                return None
            for record in loaded.records:
                if record.dimension != loaded.embedding_dim:
                    raise CorruptDataError(
                        f"Record '{record.id}' in {self._storage_file} has dim "
                        f"{record.dimension}, expected {loaded.embedding_dim}"
                    )
            if loaded.records:
                matrix = np.vstack([record.vector for record in loaded.records])
            else:
                matrix = np.empty((0, loaded.embedding_dim), dtype=np.float32)
            return StoreDocument(
                embedding_dim=loaded.embedding_dim,
                ids=[record.id for record in loaded.records],
                matrix=matrix,
                additional_data=loaded.additional_data,
            )

        return self._read_encoded_document(self._storage)

    def _read_encoded_document(self, storage: StorageInterface) -> Optional[StoreDocument]:
        data = storage.read(self._storage_file)
        if not data:
            return None
        return self._codec.decode(data)

    def _restore(self, document: StoreDocument):
        """Rebuild records and matrix from a document."""
        if document.embedding_dim != self._embedding_dim:
            raise CorruptDataError(
                f"Embedding dim mismatch: expected {self._embedding_dim}, "
                f"got {document.embedding_dim}"
            )

        matrix = np.array(document.matrix, dtype=np.float32)
        if matrix.ndim != 2 or matrix.shape[1] != self._embedding_dim:
            raise CorruptDataError(
                f"Persisted matrix has shape {matrix.shape}, expected (*, {self._embedding_dim})"
            )
        if matrix.shape[0] != len(document.ids):
            raise CorruptDataError(
                f"Matrix row count {matrix.shape[0]} does not match data size {len(document.ids)}"
            )
        if len(set(document.ids)) != len(document.ids):
            raise CorruptDataError("Persisted document contains duplicate ids")
        if any(not record_id for record_id in document.ids):
            raise CorruptDataError("Persisted document contains an empty id")

        self._matrix = matrix
        self._records = [
            Record(id=record_id, vector=matrix[row]) for row, record_id in enumerate(document.ids)
        ]
        self._rebuild_index()
        if document.additional_data is not None:
            self._additional_data = document.additional_data

    def _pre_process(self, metric: Optional[MetricInterface] = None):
        """
        Normalize every row to unit length when the metric requires it.

        The metric, matrix and records are replaced together only once
        normalization has succeeded, so a zero row leaves the store unchanged.
        """
        metric = metric or self._metric
        if not metric.requires_normalization or self._matrix.shape[0] == 0:
            self._metric = metric
            return

        norms = np.linalg.norm(self._matrix, axis=1)
        zero_rows = np.flatnonzero(norms == 0.0)
        if zero_rows.size:
            raise ZeroNormVectorError(self._records[int(zero_rows[0])].id)

        matrix = (self._matrix / norms[:, np.newaxis]).astype(np.float32)
        records = [
            Record(id=record.id, vector=matrix[row]) for row, record in enumerate(self._records)
        ]
        self._metric = metric
        self._matrix = matrix
        self._records = records

    def _rebuild_index(self):
        self._index = {record.id: row for row, record in enumerate(self._records)}

    def _check_invariant(self, operation: str):
        rows = self._matrix.shape[0]
        if rows != len(self._records) or len(self._index) != len(self._records):
            raise CorruptDataError(
                f"Matrix row count {rows} does not match data size {len(self._records)} "
                f"after {operation}"
            )
