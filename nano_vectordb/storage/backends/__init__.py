"""
Storage backend implementations for the vector database.

This module contains concrete implementations of storage backends
that implement the abstract storage interfaces.
"""

from .file import FileStorage
from .mmap import MMapStorage
from .sqlite import SqliteStorage

__all__ = ['FileStorage', 'MMapStorage', 'SqliteStorage']
