"""
Memory-mapped file storage backend implementation.
"""

from .mmap_storage import MMapStorage

__all__ = ['MMapStorage']
