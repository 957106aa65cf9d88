"""
Storage factory for creating storage backend instances.

This module provides a factory function to instantiate the appropriate
storage backend based on configuration settings.
"""
import logging
from typing import Dict, Any, Optional, List, Union

from nano_vectordb.core.errors import ValidationError
from nano_vectordb.storage.interfaces import StorageInterface, StorageType


class StorageFactory:
    """
    Factory class for creating storage backend instances.

    This factory creates and configures storage backends based on the
    application configuration, providing a unified way to instantiate
    different storage implementations.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._backends = {}
        self._register_backends()

    def _register_backends(self):
        """Register available storage backends."""
        from nano_vectordb.storage.backends.file import FileStorage
        from nano_vectordb.storage.backends.mmap import MMapStorage
        from nano_vectordb.storage.backends.sqlite import SqliteStorage

        self._backends[StorageType.FILE] = FileStorage
        self._backends[StorageType.MMAP] = MMapStorage
        self._backends[StorageType.SQLITE] = SqliteStorage

    def create_storage(self, backend_type: Optional[Union[str, StorageType]] = None,
                       config_override: Optional[Dict[str, Any]] = None) -> StorageInterface:
        """
        Create a storage backend instance.

        Args:
            backend_type: Type of backend to create ('file', 'mmap', 'sqlite').
                         If None, uses configuration setting.
            config_override: Optional configuration override for the backend.

        Returns:
            Configured storage backend instance

        Raises:
            ValidationError: If the backend type is not supported
        """
        if backend_type is None:
            from nano_vectordb.config import get_config
            backend_type = get_config().config.storage.backend

        try:
            backend_type = StorageType.parse(backend_type)
        except ValueError:
            raise ValidationError(f"Unsupported backend type '{backend_type}'. "
                                  f"Available backends: {self.list_available_backends()}")

        backend_class = self._backends[backend_type]
        backend_config = dict(config_override or {})

        if backend_type == StorageType.SQLITE:
            return self._create_sqlite_storage(backend_class, backend_config)
        return backend_class()

    def _create_sqlite_storage(self, backend_class, config: Dict[str, Any]):
        """Create SQLite storage instance with proper configuration."""
        return backend_class(timeout=config.get('timeout', 5.0))

    def list_available_backends(self) -> List[str]:
        """
        List all available storage backends.

        Returns:
            List of backend type names
        """
        return [backend_type.value for backend_type in self._backends]

    def is_backend_available(self, backend_type: str) -> bool:
        """
        Check if a specific backend is available.

        Args:
            backend_type: Type of backend to check

        Returns:
            True if backend is available, False otherwise
        """
        return backend_type in self.list_available_backends()


# Global factory instance
_storage_factory = StorageFactory()


def create_storage(backend_type: Optional[Union[str, StorageType]] = None,
                   config_override: Optional[Dict[str, Any]] = None) -> StorageInterface:
    """
    Create a storage backend instance using the global factory.

    Args:
        backend_type: Type of backend to create ('file', 'mmap', 'sqlite').
                     If None, uses configuration setting.
        config_override: Optional configuration override for the backend.

    Returns:
        Configured storage backend instance
    """
    return _storage_factory.create_storage(backend_type, config_override)


def list_available_backends() -> List[str]:
    """List all available storage backends."""
    return _storage_factory.list_available_backends()


def is_backend_available(backend_type: str) -> bool:
    """Check if a specific backend is available."""
    return _storage_factory.is_backend_available(backend_type)
