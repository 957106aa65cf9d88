"""
Core vector store engine and tenant cache.

Only the error hierarchy is re-exported here; the store and cache live in
nano_vectordb.core.vector_store and nano_vectordb.core.tenant_cache and are
exported from the top-level package.
"""

from .errors import (
    VectorDBError,
    ValidationError,
    DimensionMismatchError,
    NotFoundError,
    CorruptDataError,
    ZeroNormVectorError,
    StorageIOError,
    TenantPersistenceError,
)

__all__ = [
    "VectorDBError",
    "ValidationError",
    "DimensionMismatchError",
    "NotFoundError",
    "CorruptDataError",
    "ZeroNormVectorError",
    "StorageIOError",
    "TenantPersistenceError",
]
