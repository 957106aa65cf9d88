"""
Plain file storage implementation.

Stores each encoded document as a single file on the local filesystem.
Ideal for development, testing, and small deployments.
"""
import logging
import os
from pathlib import Path

from nano_vectordb.core.errors import StorageIOError
from nano_vectordb.storage.interfaces import StorageInterface, StorageType


class FileStorage(StorageInterface):
    """
    File-based implementation of the StorageInterface.

    Writes go to a temporary sibling file that is renamed over the target, so a
    failed write never leaves a truncated document behind.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @property
    def storage_type(self) -> StorageType:
        return StorageType.FILE

    def write(self, location: str, data: bytes) -> None:
        path = Path(location)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
            self.logger.debug(f"Wrote {len(data)} bytes to {path}")
        except OSError as e:
            self.logger.error(f"Failed to write {path}: {e}")
            raise StorageIOError(f"FileStorage: cannot write {location}: {e}") from e

    def read(self, location: str) -> bytes:
        path = Path(location)
        if not path.exists():
            return b""
        try:
            return path.read_bytes()
        except OSError as e:
            self.logger.error(f"Failed to read {path}: {e}")
            raise StorageIOError(f"FileStorage: cannot read {location}: {e}") from e

    def exists(self, location: str) -> bool:
        return Path(location).is_file()

    def delete(self, location: str) -> bool:
        path = Path(location)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"FileStorage: cannot remove {location}: {e}") from e
