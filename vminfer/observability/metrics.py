# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Metrics Collector for vminfer

Records the wall-clock duration of entry function calls.

Example:
    from vminfer.observability import MetricsCollector, InferenceMetrics

    collector = MetricsCollector()
    collector.record_inference(InferenceMetrics(latency_us=812.0))
    print(collector.get_summary())
"""

from dataclasses import dataclass
from typing import Optional
import numpy as np


@dataclass
class InferenceMetrics:
    """
    Metrics for a single entry function call.

    Attributes:
        latency_us: Call duration in microseconds
        model_name: Optional model identifier
    """

    latency_us: float
    model_name: Optional[str] = None


class MetricsCollector:
    """
    Collects per-call latencies and summarizes them.

    Not thread-safe; one collector per pipeline.
    """

    def __init__(self):
        self._latency_histogram: list[float] = []
        self._error_count: int = 0

    def record_inference(self, metrics: InferenceMetrics) -> None:
        if metrics.latency_us < 0:
            raise ValueError(f"Latency must be non-negative, got {metrics.latency_us}")
        self._latency_histogram.append(metrics.latency_us)

    def record_error(self) -> None:
        """Record a failed call."""
        self._error_count += 1

    @property
    def inference_count(self) -> int:
        return len(self._latency_histogram)

    def get_summary(self) -> dict:
        """
        Get summary statistics.

        Returns:
            Dictionary with latency percentiles and counts
        """
        if not self._latency_histogram:
            return {
                "total_inferences": 0,
                "error_count": self._error_count,
            }

        latencies = np.array(self._latency_histogram)

        return {
            "total_inferences": len(self._latency_histogram),
            "error_count": self._error_count,
            "latency_mean_us": float(np.mean(latencies)),
            "latency_std_us": float(np.std(latencies)),
            "latency_min_us": float(np.min(latencies)),
            "latency_max_us": float(np.max(latencies)),
            "latency_p50_us": float(np.percentile(latencies, 50)),
            "latency_p90_us": float(np.percentile(latencies, 90)),
            "latency_p99_us": float(np.percentile(latencies, 99)),
        }

    def reset(self) -> None:
        self._latency_histogram.clear()
        self._error_count = 0
