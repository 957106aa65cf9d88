"""
Cosine distance metric.
"""

import numpy as np

from nano_vectordb.metrics.interfaces import MetricInterface, MetricType


class CosineMetric(MetricInterface):
    """Cosine distance: 1 - (a.b) / (|a| |b|), or 1.0 when either norm is zero."""

    @property
    def metric_type(self) -> MetricType:
        return MetricType.COSINE

    def distance(self, a: np.ndarray, b: np.ndarray) -> float:
        denom = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
        if denom == 0.0:
            return 1.0
        return 1.0 - float(np.dot(a, b)) / denom

    def distances(self, query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
        if matrix.shape[0] == 0:
            return np.empty((0,), dtype=np.float32)

        query_norm = np.linalg.norm(query)
        row_norms = np.linalg.norm(matrix, axis=1)
        denom = row_norms * query_norm
        dots = matrix @ query

        result = np.ones(matrix.shape[0], dtype=np.float32)
        nonzero = denom != 0.0
        result[nonzero] = 1.0 - dots[nonzero] / denom[nonzero]
        return result
