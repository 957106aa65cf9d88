"""
Abstract interfaces for storage backends.

Byte-oriented backends move opaque encoded documents to and from a location.
Record-oriented backends additionally store ids, vectors and additional data
natively (one row per record), bypassing document encoding.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from nano_vectordb.model import JsonValue, Record


class StorageType(Enum):
    """Supported storage backends."""
    FILE = "file"
    MMAP = "mmap"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, value) -> "StorageType":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass
class StorageLoad:
    """Result of a native record read."""

    embedding_dim: int = 0
    records: List[Record] = field(default_factory=list)
    additional_data: JsonValue = None

    @property
    def is_empty(self) -> bool:
        """True when the location held no persisted store."""
        return self.embedding_dim <= 0 and not self.records


class StorageInterface(ABC):
    """
    Abstract base class for byte storage backends.

    read() returns empty bytes for a location that does not exist; every other
    failure is raised as StorageIOError.
    """

    @property
    @abstractmethod
    def storage_type(self) -> StorageType:
        """Return the backend variant."""
        pass

    @property
    def supports_records(self) -> bool:
        """Whether the backend implements the native record API."""
        return False

    @property
    def file_extension(self) -> Optional[str]:
        """Extension the backend imposes on its locations, or None to defer to the codec."""
        return None

    @abstractmethod
    def write(self, location: str, data: bytes) -> None:
        """
        Write bytes to a location, replacing previous content.

        Raises:
            StorageIOError: If the write fails
        """
        pass

    @abstractmethod
    def read(self, location: str) -> bytes:
        """
        Read all bytes stored at a location.

        Returns:
            Stored bytes, or b"" if nothing is stored there

        Raises:
            StorageIOError: If the read fails
        """
        pass

    @abstractmethod
    def exists(self, location: str) -> bool:
        """Check whether a location holds persisted data."""
        pass

    @abstractmethod
    def delete(self, location: str) -> bool:
        """
        Remove the data stored at a location.

        Returns:
            True if something was removed, False if the location did not exist

        Raises:
            StorageIOError: If removal fails
        """
        pass


class RecordStorageInterface(StorageInterface):
    """Storage backend with native row storage for records."""

    @property
    def supports_records(self) -> bool:
        return True

    @abstractmethod
    def write_records(self, location: str, records: List[Record], embedding_dim: int,
                      additional_data: JsonValue) -> None:
        """
        Replace the records and additional data stored at a location.

        Raises:
            StorageIOError: If the write fails
        """
        pass

    @abstractmethod
    def read_records(self, location: str) -> StorageLoad:
        """
        Read records and additional data from a location.

        Returns:
            StorageLoad, empty if nothing is stored there

        Raises:
            StorageIOError: If the read fails
        """
        pass
