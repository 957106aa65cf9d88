"""
Configuration file for pytest.

This file configures pytest to properly load environment variables
and provides shared fixtures for tests.
"""

import numpy as np
import pytest
import dotenv

from nano_vectordb.core.id_generator import RandomIdGenerator

# Load environment variables from .env file
dotenv.load_dotenv()


@pytest.fixture
def rng():
    """Deterministic random source for test vectors."""
    return np.random.default_rng(1234)


@pytest.fixture
def seeded_id_generator():
    """Tenant id generator with a reproducible id sequence."""
    return RandomIdGenerator(seed=42)


@pytest.fixture
def storage_dir(tmp_path):
    """Per-test directory for persisted stores."""
    path = tmp_path / "storage"
    path.mkdir()
    return path
