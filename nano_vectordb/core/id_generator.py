"""
Tenant id generators.

A generator is handed a predicate telling it which ids are already known
(resident or persisted) and must return one that is not.
"""

import random
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Optional

from nano_vectordb.core.errors import VectorDBError

IdExists = Callable[[str], bool]


class IdGeneratorInterface(ABC):
    """Abstract base class for tenant id generators."""

    max_attempts: int = 100

    @abstractmethod
    def _candidate(self) -> str:
        """Produce one candidate id."""
        pass

    def generate(self, exists: Optional[IdExists] = None) -> str:
        """
        Generate an id that is not yet in use.

        Args:
            exists: Predicate returning True for ids already taken

        Returns:
            A fresh id

        Raises:
            VectorDBError: If no free id was found within max_attempts
        """
        for _ in range(self.max_attempts):
            candidate = self._candidate()
            if exists is None or not exists(candidate):
                return candidate
        raise VectorDBError(f"Could not generate a unique id in {self.max_attempts} attempts")


class UuidIdGenerator(IdGeneratorInterface):
    """Random uuid4 hex ids."""

    def _candidate(self) -> str:
        return uuid.uuid4().hex


class RandomIdGenerator(IdGeneratorInterface):
    """
    64-bit random hex ids from a private, optionally seeded, random source.

    Seeding makes the id sequence reproducible, which is what tests rely on.
    """

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def _candidate(self) -> str:
        return format(self._random.getrandbits(64), "x")
