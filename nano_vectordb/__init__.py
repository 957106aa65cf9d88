"""
nano-vectordb: an embeddable vector-similarity store.

A VectorStore keeps (id, vector) records aligned with a dense float32 matrix
and ranks them against a query under a cosine or squared-L2 metric. A
TenantCache keeps a bounded number of per-tenant stores resident, flushing
the earliest admitted store to disk when it must make room.
"""

from nano_vectordb.core.errors import (
    VectorDBError,
    ValidationError,
    DimensionMismatchError,
    NotFoundError,
    CorruptDataError,
    ZeroNormVectorError,
    StorageIOError,
    TenantPersistenceError,
)
from nano_vectordb.core.id_generator import (
    IdGeneratorInterface,
    RandomIdGenerator,
    UuidIdGenerator,
)
from nano_vectordb.core.vector_store import VectorStore
from nano_vectordb.core.tenant_cache import TenantCache
from nano_vectordb.metrics import MetricType, create_metric
from nano_vectordb.model import QueryResult, Record
from nano_vectordb.serialization import CodecType, StoreDocument, create_codec
from nano_vectordb.storage import StorageType, create_storage

__version__ = "0.1.0"

__all__ = [
    "VectorStore",
    "TenantCache",
    "Record",
    "QueryResult",
    "MetricType",
    "CodecType",
    "StorageType",
    "StoreDocument",
    "create_metric",
    "create_codec",
    "create_storage",
    "IdGeneratorInterface",
    "RandomIdGenerator",
    "UuidIdGenerator",
    "VectorDBError",
    "ValidationError",
    "DimensionMismatchError",
    "NotFoundError",
    "CorruptDataError",
    "ZeroNormVectorError",
    "StorageIOError",
    "TenantPersistenceError",
]
