"""
SQLite storage backend implementation.

This module provides a SQLite-based implementation of the record
storage interface for single-user deployments requiring native row storage.
"""

from .sqlite_storage import SqliteStorage

__all__ = ["SqliteStorage"]
