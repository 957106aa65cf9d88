"""
Exception hierarchy for the vector database.

Every error raised by the vector store, the tenant cache, the codecs and the
storage backends derives from VectorDBError so callers can catch them as a family.
"""

from typing import Optional


class VectorDBError(Exception):
    """Base exception for vector database related errors."""
    pass


class ValidationError(VectorDBError, ValueError):
    """Exception raised for invalid arguments or configuration."""
    pass


class DimensionMismatchError(ValidationError):
    """Exception raised when a vector does not match the embedding dimension."""

    def __init__(self, expected: int, actual: int, record_id: Optional[str] = None,
                 operation: Optional[str] = None):
        where = f" in {operation}" if operation else ""
        which = f" for record '{record_id}'" if record_id else ""
        super().__init__(
            f"Vector dimension mismatch{where}{which}: expected {expected}, got {actual}"
        )
        self.expected = expected
        self.actual = actual
        self.record_id = record_id


class NotFoundError(VectorDBError, LookupError):
    """Exception raised when a tenant is neither resident nor persisted."""

    def __init__(self, tenant_id: str):
        super().__init__(f"Tenant not found: {tenant_id}")
        self.tenant_id = tenant_id


class CorruptDataError(VectorDBError):
    """Exception raised for malformed or inconsistent persisted data."""
    pass


class ZeroNormVectorError(CorruptDataError):
    """Exception raised when a vector cannot be normalized to unit length."""

    def __init__(self, record_id: Optional[str] = None):
        which = f" '{record_id}'" if record_id else ""
        super().__init__(f"Cannot normalize zero-norm vector{which} for cosine metric")
        self.record_id = record_id


class StorageIOError(VectorDBError, OSError):
    """Exception raised when the underlying byte store fails to read or write."""
    pass


class TenantPersistenceError(StorageIOError):
    """Exception raised when flushing a tenant store to durable storage fails."""

    def __init__(self, tenant_id: str, cause: Exception):
        super().__init__(f"Failed to save tenant '{tenant_id}': {cause}")
        self.tenant_id = tenant_id
        self.cause = cause
