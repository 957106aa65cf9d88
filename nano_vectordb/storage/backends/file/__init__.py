"""
Plain file storage backend implementation.

This module provides a lightweight file-based implementation of the
storage interface for development, testing, and small deployments.
"""

from .file_storage import FileStorage

__all__ = ['FileStorage']
