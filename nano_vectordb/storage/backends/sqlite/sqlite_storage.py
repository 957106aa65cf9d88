"""
SQLite storage implementation for vector stores.

This module provides a SQLite-based implementation of the RecordStorageInterface
using relational tables to store one row per record. Good balance between
simplicity and durability for single-user deployments.

Schema:
    meta(key TEXT PRIMARY KEY, value TEXT)            -- embedding_dim, additional_data
    vectors(position INTEGER, id TEXT, dim INTEGER, vec BLOB)
"""

import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import List

import numpy as np

from nano_vectordb.core.errors import CorruptDataError, StorageIOError
from nano_vectordb.model import JsonValue, Record
from nano_vectordb.serialization.interfaces import FLOAT_DTYPE
from nano_vectordb.storage.interfaces import (
    RecordStorageInterface,
    StorageLoad,
    StorageType,
)


class SqliteStorage(RecordStorageInterface):
    """
    SQLite-based implementation of the RecordStorageInterface.

    Every write replaces the full content of the database in a single
    transaction. Vectors are stored as raw little-endian float32 BLOBs.
    """

    def __init__(self, timeout: float = 5.0):
        """
        Initialize SqliteStorage.

        Args:
            timeout: Seconds to wait for a locked database before failing
        """
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

    @property
    def storage_type(self) -> StorageType:
        return StorageType.SQLITE

    @property
    def file_extension(self) -> str:
        return ".db"

    def _connect(self, location: str) -> sqlite3.Connection:
        return sqlite3.connect(location, timeout=self.timeout)

    def _create_tables(self, conn: sqlite3.Connection):
        """Create database tables if they don't exist."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS vectors (
                position INTEGER NOT NULL,
                id TEXT PRIMARY KEY,
                dim INTEGER NOT NULL,
                vec BLOB NOT NULL
            )
        """
        )

    def write_records(self, location: str, records: List[Record], embedding_dim: int,
                      additional_data: JsonValue) -> None:
        for record in records:
            if record.dimension != embedding_dim:
                raise CorruptDataError(
                    f"SqliteStorage: record '{record.id}' has dim {record.dimension}, "
                    f"expected {embedding_dim}"
                )

        rows = [
            (position, record.id, embedding_dim,
             sqlite3.Binary(np.ascontiguousarray(record.vector, dtype=FLOAT_DTYPE).tobytes()))
            for position, record in enumerate(records)
        ]
        meta = [
            ("embedding_dim", str(embedding_dim)),
            ("additional_data", json.dumps(additional_data)),
        ]

        try:
            Path(location).parent.mkdir(parents=True, exist_ok=True)
            with closing(self._connect(location)) as conn:
                with conn:
                    self._create_tables(conn)
                    conn.execute("DELETE FROM vectors")
                    conn.executemany(
                        "INSERT INTO vectors(position, id, dim, vec) VALUES (?, ?, ?, ?)", rows
                    )
                    conn.executemany("REPLACE INTO meta(key, value) VALUES (?, ?)", meta)
            self.logger.debug(f"Wrote {len(rows)} records to {location}")
        except (sqlite3.Error, OSError) as e:
            self.logger.error(f"Failed to write records to {location}: {e}")
            raise StorageIOError(f"SqliteStorage: write failed for {location}: {e}") from e

    def read_records(self, location: str) -> StorageLoad:
        if not Path(location).exists():
            return StorageLoad()

        try:
            with closing(self._connect(location)) as conn:
                self._create_tables(conn)
                meta = dict(conn.execute(
                    "SELECT key, value FROM meta WHERE key IN ('embedding_dim', 'additional_data')"
                ).fetchall())
                rows = conn.execute(
                    "SELECT id, dim, vec FROM vectors ORDER BY position"
                ).fetchall()
        except sqlite3.Error as e:
            self.logger.error(f"Failed to read records from {location}: {e}")
            raise StorageIOError(f"SqliteStorage: read failed for {location}: {e}") from e

        result = StorageLoad()
        try:
            if "embedding_dim" in meta:
                result.embedding_dim = int(meta["embedding_dim"])
            if "additional_data" in meta:
                result.additional_data = json.loads(meta["additional_data"])
        except ValueError as e:
            raise CorruptDataError(f"SqliteStorage: invalid metadata in {location}: {e}") from e

        for record_id, dim, blob in rows:
            if result.embedding_dim and dim != result.embedding_dim:
                raise CorruptDataError(
                    f"SqliteStorage: record '{record_id}' has dim {dim}, "
                    f"expected {result.embedding_dim}"
                )
            if blob is None or len(blob) != dim * FLOAT_DTYPE.itemsize:
                raise CorruptDataError(
                    f"SqliteStorage: blob size mismatch for record '{record_id}'"
                )
            vector = np.frombuffer(blob, dtype=FLOAT_DTYPE).astype(np.float32)
            result.records.append(Record(id=record_id, vector=vector))

        if result.embedding_dim == 0 and result.records:
            result.embedding_dim = result.records[0].dimension
        return result

    # Byte-oriented API is unused by a row backend

    def write(self, location: str, data: bytes) -> None:
        raise StorageIOError("SqliteStorage: write(bytes) unsupported; use write_records")

    def read(self, location: str) -> bytes:
        return b""

    def exists(self, location: str) -> bool:
        return Path(location).is_file()

    def delete(self, location: str) -> bool:
        try:
            Path(location).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"SqliteStorage: cannot remove {location}: {e}") from e
