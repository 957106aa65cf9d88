"""
Storage interfaces for the vector database.
"""

from .storage_interface import (
    StorageType,
    StorageLoad,
    StorageInterface,
    RecordStorageInterface,
)

__all__ = ["StorageType", "StorageLoad", "StorageInterface", "RecordStorageInterface"]
