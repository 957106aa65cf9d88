"""
Abstract interface for distance metrics.

This module defines the base interface that all metric strategies must implement,
enabling the vector store to rank records under different notions of similarity.
"""

from abc import ABC, abstractmethod
from enum import Enum

import numpy as np


class MetricType(Enum):
    """Supported distance metrics."""
    COSINE = "cosine"
    L2 = "l2"  # Squared Euclidean

    @classmethod
    def parse(cls, value) -> "MetricType":
        """Parse a metric name case-insensitively ('cosine', 'COSINE', 'l2', ...)."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class MetricInterface(ABC):
    """
    Abstract base class for metric strategies.

    A metric computes a distance between two vectors of the same length; lower
    is closer. The metric_type property is the explicit variant tag the vector
    store uses to decide on normalization and score conversion.
    """

    @property
    @abstractmethod
    def metric_type(self) -> MetricType:
        """Return the variant tag of this metric."""
        pass

    @property
    def requires_normalization(self) -> bool:
        """Whether stored and query vectors are normalized to unit length."""
        return self.metric_type is MetricType.COSINE

    @abstractmethod
    def distance(self, a: np.ndarray, b: np.ndarray) -> float:
        """
        Compute the distance between two vectors.

        Args:
            a: First vector
            b: Second vector

        Returns:
            Distance between the two vectors
        """
        pass

    @abstractmethod
    def distances(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        """
        Compute the distance between a query vector and every row of a matrix.

        Args:
            query: Query vector of shape (dim,)
            matrix: Stored vectors of shape (rows, dim)

        Returns:
            Array of shape (rows,) with one distance per row
        """
        pass

    def score(self, distance):
        """
        Convert a distance (or array of distances) to a ranking score.

        Cosine scores are the similarity 1 - distance; every other metric
        scores as the negated distance, so a higher score is always better.
        """
        if self.metric_type is MetricType.COSINE:
            return 1.0 - distance
        return -distance

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
