"""
Abstract interface for store document codecs.

A codec converts the persisted document of a vector store (embedding dimension,
ordered ids, row-major float32 matrix and additional data) to and from bytes.
Byte transport itself is delegated to a storage backend.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List

import numpy as np

from nano_vectordb.core.errors import CorruptDataError
from nano_vectordb.model import JsonValue

# Persisted float layout: little-endian float32, row-major
FLOAT_DTYPE = np.dtype("<f4")


class CodecType(Enum):
    """Supported document codecs."""
    JSON = "json"
    BINARY = "binary"

    @classmethod
    def parse(cls, value) -> "CodecType":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


@dataclass
class StoreDocument:
    """Backend-independent persisted form of a vector store."""

    embedding_dim: int
    ids: List[str] = field(default_factory=list)
    matrix: np.ndarray = None
    additional_data: JsonValue = None

    def __post_init__(self):
        if self.matrix is None:
            self.matrix = np.empty((0, self.embedding_dim), dtype=np.float32)

    @property
    def rows(self) -> int:
        return len(self.ids)


class DocumentCodecInterface(ABC):
    """
    Abstract base class for document codecs.

    All codecs must round-trip a StoreDocument losslessly and raise
    CorruptDataError for any structurally invalid input.
    """

    @property
    @abstractmethod
    def codec_type(self) -> CodecType:
        """Return the codec variant."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension used for documents in this encoding."""
        pass

    @abstractmethod
    def encode(self, document: StoreDocument) -> bytes:
        """
        Encode a document.

        Args:
            document: Store document to encode

        Returns:
            Encoded bytes
        """
        pass

    @abstractmethod
    def decode(self, data: bytes) -> StoreDocument:
        """
        Decode a document.

        Args:
            data: Encoded bytes

        Returns:
            Decoded store document

        Raises:
            CorruptDataError: If the data is malformed or inconsistent
        """
        pass

    # Shared helpers for concrete codecs

    @staticmethod
    def matrix_to_bytes(matrix: np.ndarray) -> bytes:
        """Serialize a matrix as a row-major little-endian float32 buffer."""
        return np.ascontiguousarray(matrix, dtype=FLOAT_DTYPE).tobytes()

    @staticmethod
    def matrix_from_bytes(buffer: bytes, embedding_dim: int, rows: int) -> np.ndarray:
        """
        Rebuild a (rows, embedding_dim) float32 matrix from a raw buffer.

        Raises:
            CorruptDataError: If the buffer length does not fit the declared shape
        """
        row_bytes = embedding_dim * FLOAT_DTYPE.itemsize
        if len(buffer) % row_bytes != 0:
            raise CorruptDataError(
                f"Matrix buffer of {len(buffer)} bytes is not a multiple of "
                f"embedding_dim * 4 = {row_bytes}"
            )
        buffer_rows = len(buffer) // row_bytes
        if buffer_rows != rows:
            raise CorruptDataError(
                f"Matrix has {buffer_rows} rows but {rows} ids were persisted"
            )
        matrix = np.frombuffer(buffer, dtype=FLOAT_DTYPE).astype(np.float32)
        return matrix.reshape(rows, embedding_dim)

    @staticmethod
    def validate_embedding_dim(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise CorruptDataError(f"Invalid embedding_dim in document: {value!r}")
        return value

    @staticmethod
    def validate_ids(entries: Any, key: str) -> List[str]:
        if not isinstance(entries, list):
            raise CorruptDataError(f"Document field '{key}' must be a list")
        ids = []
        for position, entry in enumerate(entries):
            if isinstance(entry, dict):
                if "id" not in entry:
                    raise CorruptDataError(f"Data entry {position} missing 'id' field")
                entry = entry["id"]
            if not isinstance(entry, str):
                raise CorruptDataError(f"Data entry {position} has a non-string id: {entry!r}")
            ids.append(entry)
        return ids
