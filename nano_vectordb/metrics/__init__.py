"""
Distance metrics used to rank records by similarity.
"""

from .interfaces import MetricInterface, MetricType
from .cosine_metric import CosineMetric
from .l2_metric import L2Metric
from .factory import create_metric, list_available_metrics

__all__ = [
    "MetricInterface",
    "MetricType",
    "CosineMetric",
    "L2Metric",
    "create_metric",
    "list_available_metrics",
]
