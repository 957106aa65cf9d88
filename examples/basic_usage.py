#!/usr/bin/env python3
"""
Basic usage examples for nano-vectordb.

This script demonstrates the fundamental operations:
- Upserting records (with explicit and content-derived ids)
- Ranked similarity queries with top_k, threshold and a filter
- Removing records
- Saving and reloading a store
"""

import os
import sys
import tempfile

import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nano_vectordb import Record, VectorStore
from nano_vectordb.config import LoggingConfig, LogLevel, setup_logging


def populate(store: VectorStore, count: int = 200):
    """Fill the store with random vectors."""
    print(f"\n📥 Upserting {count} random records...")
    rng = np.random.default_rng(0)
    records = [Record(id=f"doc-{i}", vector=rng.random(store.embedding_dim)) for i in range(count)]
    report = store.upsert(records)
    print(f"   inserted={len(report['insert'])} updated={len(report['update'])}")

    # An empty id is replaced by a hash of the vector content
    report = store.upsert([{"vector": rng.random(store.embedding_dim)}])
    print(f"   content-addressed id: {report['insert'][0]}")
    return rng


def run_queries(store: VectorStore, rng):
    """Run a few ranked queries."""
    print("\n🔎 Querying...")
    query = rng.random(store.embedding_dim)

    for result in store.query(query, top_k=3):
        print(f"   {result.id}: score={result.score:.4f}")

    strict = store.query(query, top_k=10, threshold=0.8)
    print(f"   {len(strict)} results with score >= 0.8")

    even_only = store.query(query, top_k=3,
                            predicate=lambda record: record.id.endswith(("0", "2", "4", "6", "8")))
    print(f"   filtered: {[result.id for result in even_only]}")


def main():
    setup_logging(LoggingConfig(level=LogLevel.INFO))

    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "nano-vectordb.json")

        store = VectorStore(64, storage_file=path)
        rng = populate(store)
        run_queries(store, rng)

        removed = store.remove(["doc-0", "doc-1", "doc-missing"])
        print(f"\n🗑️  Removed {removed} records, {store.size()} remain")

        store.set_additional_data({"description": "basic usage example"})
        store.save()
        print(f"\n💾 Saved to {path} ({os.path.getsize(path)} bytes)")

        reloaded = VectorStore(64, storage_file=path)
        print(f"✅ Reloaded {reloaded.size()} records, "
              f"additional data: {reloaded.get_additional_data()}")


if __name__ == "__main__":
    main()
