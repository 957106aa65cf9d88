"""
Interfaces for metric implementations.
"""

from .metric_interface import MetricInterface, MetricType

__all__ = ["MetricInterface", "MetricType"]
