"""
Squared Euclidean (L2) distance metric.
"""

import numpy as np

from nano_vectordb.metrics.interfaces import MetricInterface, MetricType


class L2Metric(MetricInterface):
    """Squared Euclidean distance |a - b|^2."""

    @property
    def metric_type(self) -> MetricType:
        return MetricType.L2

    def distance(self, a: np.ndarray, b: np.ndarray) -> float:
        diff = np.asarray(a, dtype=np.float32) - np.asarray(b, dtype=np.float32)
        return float(np.dot(diff, diff))

    def distances(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        if matrix.shape[0] == 0:
            return np.empty((0,), dtype=np.float32)
        diff = matrix - query
        return np.einsum("ij,ij->i", diff, diff)
