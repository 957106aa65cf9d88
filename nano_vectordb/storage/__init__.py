"""
Storage layer for the vector database.

This module provides abstract interfaces and concrete implementations
for the durable backends vector stores are persisted to.
"""

from .interfaces import StorageType, StorageLoad, StorageInterface, RecordStorageInterface
from .factory import create_storage, list_available_backends, is_backend_available

__all__ = [
    "StorageType",
    "StorageLoad",
    "StorageInterface",
    "RecordStorageInterface",
    "create_storage",
    "list_available_backends",
    "is_backend_available",
]
