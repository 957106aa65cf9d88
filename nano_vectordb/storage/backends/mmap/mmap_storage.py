"""
Memory-mapped file storage implementation.

Reads and writes documents through mmap, which lets the operating system page
large matrices in and out instead of copying them through userspace buffers.
"""
import logging
import mmap
import os
from pathlib import Path

from nano_vectordb.core.errors import StorageIOError
from nano_vectordb.storage.interfaces import StorageInterface, StorageType


class MMapStorage(StorageInterface):
    """Memory-mapped file implementation of the StorageInterface."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @property
    def storage_type(self) -> StorageType:
        return StorageType.MMAP

    def write(self, location: str, data: bytes) -> None:
        path = Path(location)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w+b") as f:
                # mmap cannot map a zero-length file
                if data:
                    f.truncate(len(data))
                    with mmap.mmap(f.fileno(), len(data), access=mmap.ACCESS_WRITE) as mapped:
                        mapped[:] = data
                        mapped.flush()
            os.replace(tmp_path, path)
            self.logger.debug(f"Mapped {len(data)} bytes to {path}")
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to write {path}: {e}")
            tmp_path.unlink(missing_ok=True)
            raise StorageIOError(f"MMapStorage: cannot write {location}: {e}") from e

    def read(self, location: str) -> bytes:
        path = Path(location)
        if not path.exists():
            return b""
        try:
            with open(path, "rb") as f:
                size = os.fstat(f.fileno()).st_size
                if size == 0:
                    return b""
                with mmap.mmap(f.fileno(), size, access=mmap.ACCESS_READ) as mapped:
                    return bytes(mapped)
        except (OSError, ValueError) as e:
            self.logger.error(f"Failed to read {path}: {e}")
            raise StorageIOError(f"MMapStorage: cannot read {location}: {e}") from e

    def exists(self, location: str) -> bool:
        return Path(location).is_file()

    def delete(self, location: str) -> bool:
        try:
            Path(location).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageIOError(f"MMapStorage: cannot remove {location}: {e}") from e
