"""
Bounded multi-tenant cache of vector stores.

The TenantCache keeps at most max_capacity VectorStores resident in memory.
Tenants are admitted in FIFO order; when admission would overflow the cache,
the earliest admitted tenant is flushed to durable storage and then dropped.
Evicted tenants are reloaded lazily by get_tenant.
"""

import logging
import os
from collections import deque
from typing import Deque, Dict, List, Optional

from nano_vectordb.core.errors import (
    NotFoundError,
    TenantPersistenceError,
    ValidationError,
    VectorDBError,
)
from nano_vectordb.core.id_generator import (
    IdGeneratorInterface,
    RandomIdGenerator,
    UuidIdGenerator,
)
from nano_vectordb.core.vector_store import VectorStore
from nano_vectordb.metrics.factory import MetricSpec, create_metric
from nano_vectordb.metrics.interfaces import MetricInterface, MetricType
from nano_vectordb.serialization.factory import CodecSpec, create_codec
from nano_vectordb.serialization.interfaces import CodecType, DocumentCodecInterface
from nano_vectordb.storage.backends.file import FileStorage
from nano_vectordb.storage.interfaces import StorageInterface

DEFAULT_STORAGE_DIR = "./nano_multi_tenant_storage"
DEFAULT_MAX_CAPACITY = 1000
TENANT_FILE_PREFIX = "nanovdb_"


class TenantCache:
    """
    FIFO-bounded cache of per-tenant VectorStores.

    The cache exclusively owns every resident store. A store handed out by
    get_tenant stays valid only until the next create_tenant or get_tenant
    call, either of which may evict it.
    """

    def __init__(
        self,
        embedding_dim: int,
        metric: MetricSpec = MetricType.COSINE,
        max_capacity: int = DEFAULT_MAX_CAPACITY,
        storage_dir: str = DEFAULT_STORAGE_DIR,
        id_generator: Optional[IdGeneratorInterface] = None,
        storage: Optional[StorageInterface] = None,
        codec: Optional[CodecSpec] = None,
    ):
        """
        Initialize the tenant cache.

        Args:
            embedding_dim: Embedding dimension shared by every tenant store
            metric: Default metric for tenant stores
            max_capacity: Maximum number of resident stores
            storage_dir: Directory tenant stores are persisted to
            id_generator: Tenant id source (default: uuid4 ids)
            storage: Default storage backend for tenant stores
            codec: Default document codec for tenant stores

        Raises:
            ValidationError: If embedding_dim or max_capacity is not positive,
                or storage_dir is empty
        """
        if isinstance(embedding_dim, bool) or not isinstance(embedding_dim, int) or embedding_dim <= 0:
            raise ValidationError(f"Embedding dimension must be a positive integer, got {embedding_dim!r}")
        if isinstance(max_capacity, bool) or not isinstance(max_capacity, int) or max_capacity <= 0:
            raise ValidationError(f"Max capacity must be a positive integer, got {max_capacity!r}")
        if not storage_dir:
            raise ValidationError("Storage directory must not be empty")

        self.logger = logging.getLogger(__name__)

        self._embedding_dim = embedding_dim
        self._max_capacity = max_capacity
        self._storage_dir = storage_dir
        self._id_generator = id_generator or UuidIdGenerator()

        # Defaults applied to every created or loaded store
        self._metric: MetricInterface = create_metric(metric)
        self._storage: StorageInterface = storage or FileStorage()
        self._codec: DocumentCodecInterface = create_codec(codec or CodecType.JSON)

        self._resident: Dict[str, VectorStore] = {}
        self._admission_queue: Deque[str] = deque()

        self.logger.info(
            f"Initialized tenant cache: embedding_dim={embedding_dim}, "
            f"max_capacity={max_capacity}, storage_dir={storage_dir}"
        )

    @classmethod
    def from_config(cls, config_manager=None) -> "TenantCache":
        """Build a cache from the vector_store, tenant_cache and storage configuration."""
        from nano_vectordb.config import get_config
        from nano_vectordb.storage.factory import create_storage

        config = (config_manager or get_config()).config
        seed = config.tenant_cache.id_seed
        return cls(
            config.vector_store.embedding_dim,
            metric=config.vector_store.metric,
            max_capacity=config.tenant_cache.max_capacity,
            storage_dir=config.tenant_cache.storage_dir,
            id_generator=RandomIdGenerator(seed) if seed is not None else UuidIdGenerator(),
            storage=create_storage(config.storage.backend),
            codec=config.storage.codec,
        )

    # Properties

    @property
    def embedding_dim(self) -> int:
        return self._embedding_dim

    @property
    def max_capacity(self) -> int:
        return self._max_capacity

    @property
    def storage_dir(self) -> str:
        return self._storage_dir

    @property
    def resident_tenant_ids(self) -> List[str]:
        """Resident tenant ids in admission order."""
        return list(self._admission_queue)

    def __len__(self) -> int:
        return len(self._resident)

    def __contains__(self, tenant_id: str) -> bool:
        return self.contain_tenant(tenant_id)

    def __enter__(self) -> "TenantCache":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.save()
        return False

    # Default strategies

    def set_default_metric(self, metric: MetricSpec):
        self._metric = create_metric(metric)

    def set_default_storage(self, storage: StorageInterface):
        self._storage = storage

    def set_default_codec(self, codec: CodecSpec):
        self._codec = create_codec(codec)

    # Tenant operations

    def location_for(self, tenant_id: str) -> str:
        """Durable location of a tenant's store under the current defaults."""
        extension = self._storage.file_extension or self._codec.file_extension
        return os.path.join(self._storage_dir, f"{TENANT_FILE_PREFIX}{tenant_id}{extension}")

    def contain_tenant(self, tenant_id: str) -> bool:
        """Return True if the tenant is resident or persisted."""
        return tenant_id in self._resident or self._storage.exists(self.location_for(tenant_id))

    def create_tenant(self) -> str:
        """
        Create and admit an empty store under a fresh tenant id.

        Returns:
            The new tenant id

        Raises:
            TenantPersistenceError: If evicting the oldest tenant fails
        """
        tenant_id = self._id_generator.generate(self.contain_tenant)
        self._admit(tenant_id, self._build_store(tenant_id))
        self.logger.info(f"Created tenant {tenant_id}")
        return tenant_id

    def get_tenant(self, tenant_id: str) -> VectorStore:
        """
        Return a tenant's store, loading it from durable storage if needed.

        Re-fetching a resident tenant does not change its admission position.

        Raises:
            NotFoundError: If the tenant is neither resident nor persisted
            TenantPersistenceError: If evicting the oldest tenant fails
        """
        store = self._resident.get(tenant_id)
        if store is not None:
            return store

        if not self._storage.exists(self.location_for(tenant_id)):
            raise NotFoundError(tenant_id)

        store = self._build_store(tenant_id)
        self._admit(tenant_id, store)
        self.logger.info(f"Loaded tenant {tenant_id} with {store.size()} records")
        return store

    def delete_tenant(self, tenant_id: str):
        """
        Delete a tenant from memory and durable storage.

        Raises:
            NotFoundError: If the tenant is neither resident nor persisted
        """
        if not self.contain_tenant(tenant_id):
            raise NotFoundError(tenant_id)

        if tenant_id in self._resident:
            del self._resident[tenant_id]
            self._admission_queue.remove(tenant_id)

        self._storage.delete(self.location_for(tenant_id))
        self.logger.info(f"Deleted tenant {tenant_id}")

    def save(self):
        """
        Persist every resident store.

        Raises:
            TenantPersistenceError: On the first store that fails to save
        """
        for tenant_id in list(self._admission_queue):
            self._flush(tenant_id)
        self.logger.debug(f"Saved {len(self._admission_queue)} resident tenants")

    # Internals

    def _build_store(self, tenant_id: str) -> VectorStore:
        return VectorStore(
            self._embedding_dim,
            metric=self._metric,
            storage_file=self.location_for(tenant_id),
            storage=self._storage,
            codec=self._codec,
        )

    def _flush(self, tenant_id: str):
        try:
            self._resident[tenant_id].save()
        except (VectorDBError, OSError) as e:
            self.logger.error(f"Failed to save tenant {tenant_id}: {e}")
            raise TenantPersistenceError(tenant_id, e) from e

    def _admit(self, tenant_id: str, store: VectorStore):
        """
        Make a store resident, evicting the earliest admitted tenant on overflow.

        The evicted store is flushed before it is dropped; if the flush fails
        nothing changes and the admission is aborted.
        """
        if len(self._resident) >= self._max_capacity:
            evicted_id = self._admission_queue[0]
            self._flush(evicted_id)
            self._admission_queue.popleft()
            del self._resident[evicted_id]
            self.logger.info(f"Evicted tenant {evicted_id}")

        self._resident[tenant_id] = store
        self._admission_queue.append(tenant_id)
