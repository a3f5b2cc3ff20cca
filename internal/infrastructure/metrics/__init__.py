"""
Metrics infrastructure package.
"""
from .log_sink import LoggingMetricsSink
from .prometheus import PrometheusMetricsSink

__all__ = ["LoggingMetricsSink", "PrometheusMetricsSink"]
