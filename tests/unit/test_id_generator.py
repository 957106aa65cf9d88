"""
Tests for tenant id generators.
"""
import pytest

from nano_vectordb.core.errors import VectorDBError
from nano_vectordb.core.id_generator import (
    IdGeneratorInterface,
    RandomIdGenerator,
    UuidIdGenerator,
)


def test_seeded_generator_is_reproducible():
    first = RandomIdGenerator(seed=5)
    second = RandomIdGenerator(seed=5)
    assert [first.generate() for _ in range(5)] == [second.generate() for _ in range(5)]


def test_generator_skips_existing_ids():
    taken = RandomIdGenerator(seed=1).generate()
    generator = RandomIdGenerator(seed=1)

    fresh = generator.generate(exists=lambda candidate: candidate == taken)

    assert fresh != taken


def test_uuid_generator_produces_distinct_hex_ids():
    generator = UuidIdGenerator()
    ids = {generator.generate() for _ in range(50)}
    assert len(ids) == 50
    assert all(len(tenant_id) == 32 for tenant_id in ids)


def test_exhausted_generator_raises():
    class ConstantIdGenerator(IdGeneratorInterface):
        max_attempts = 3

        def _candidate(self):
            return "same"

    with pytest.raises(VectorDBError):
        ConstantIdGenerator().generate(exists=lambda candidate: True)
