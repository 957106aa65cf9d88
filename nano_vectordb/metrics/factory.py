"""
Metric factory for creating metric strategy instances.

This module provides a factory to instantiate the appropriate metric
strategy from a MetricType, a metric name, or an existing strategy.
"""
import logging
from typing import Dict, List, Type, Union

from nano_vectordb.core.errors import ValidationError
from nano_vectordb.metrics.interfaces import MetricInterface, MetricType
from nano_vectordb.metrics.cosine_metric import CosineMetric
from nano_vectordb.metrics.l2_metric import L2Metric


MetricSpec = Union[MetricType, str, MetricInterface]


class MetricFactory:
    """
    Factory class for creating metric strategies.

    Strategies are selected once, at construction time of the store that uses them.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._metrics: Dict[MetricType, Type[MetricInterface]] = {}
        self._register_metrics()

    def _register_metrics(self):
        """Register available metric strategies."""
        self._metrics[MetricType.COSINE] = CosineMetric
        self._metrics[MetricType.L2] = L2Metric

    def create_metric(self, metric: MetricSpec) -> MetricInterface:
        """
        Create a metric strategy.

        Args:
            metric: MetricType, metric name ('cosine', 'l2') or a ready strategy instance.

        Returns:
            Metric strategy instance

        Raises:
            ValidationError: If the metric is not supported
        """
        if isinstance(metric, MetricInterface):
            return metric

        try:
            metric_type = MetricType.parse(metric)
        except ValueError:
            available = [m.value for m in self._metrics]
            raise ValidationError(
                f"Unsupported metric '{metric}'. Available metrics: {available}"
            )

        return self._metrics[metric_type]()

    def list_available_metrics(self) -> List[str]:
        """
        List all available metrics.

        Returns:
            List of metric names
        """
        return [metric_type.value for metric_type in self._metrics]


# Global factory instance
_metric_factory = MetricFactory()


def create_metric(metric: MetricSpec) -> MetricInterface:
    """Create a metric strategy using the global factory."""
    return _metric_factory.create_metric(metric)


def list_available_metrics() -> List[str]:
    """List all available metric names."""
    return _metric_factory.list_available_metrics()
