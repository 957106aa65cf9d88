#!/usr/bin/env python3
"""
Multi-tenant cache example for nano-vectordb.

Creates more tenants than the cache can hold to show FIFO eviction with
flush-to-disk and lazy reloading of evicted tenants.
"""

import os
import sys
import tempfile

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nano_vectordb import RandomIdGenerator, Record, TenantCache
from nano_vectordb.config import LoggingConfig, LogLevel, setup_logging
from nano_vectordb.storage.backends.sqlite import SqliteStorage


def main():
    setup_logging(LoggingConfig(level=LogLevel.INFO))
    rng = np.random.default_rng(1)

    with tempfile.TemporaryDirectory() as storage_dir:
        with TenantCache(32, max_capacity=2, storage_dir=storage_dir,
                         id_generator=RandomIdGenerator(seed=2024),
                         storage=SqliteStorage()) as cache:
            tenants = []
            for index in range(4):
                tenant_id = cache.create_tenant()
                store = cache.get_tenant(tenant_id)
                store.upsert([Record(id=f"t{index}-{i}", vector=rng.random(32)) for i in range(10)])
                tenants.append(tenant_id)
                print(f"🏠 Created tenant {tenant_id}; resident: {cache.resident_tenant_ids}")

            first = tenants[0]
            print(f"\n📂 {first} resident? {first in cache.resident_tenant_ids}; "
                  f"persisted? {cache.contain_tenant(first)}")

            store = cache.get_tenant(first)
            print(f"🔄 Reloaded {first} with {store.size()} records; "
                  f"resident: {cache.resident_tenant_ids}")

            cache.delete_tenant(tenants[1])
            print(f"🗑️  Deleted {tenants[1]}; still known? {cache.contain_tenant(tenants[1])}")

        print(f"\n💾 Files on disk: {sorted(os.listdir(storage_dir))}")


if __name__ == "__main__":
    main()
