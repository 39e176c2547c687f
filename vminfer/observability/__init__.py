# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Observability Module

Components:
- setup_logging: Structured text/JSON logging for the vminfer logger
- MetricsCollector: Entry function latency statistics
"""

from .logger import (
    Verbosity,
    LogEntry,
    StructuredFormatter,
    setup_logging,
    verbosity_from_env,
)

from .metrics import (
    InferenceMetrics,
    MetricsCollector,
)

__all__ = [
    # Logger
    "Verbosity",
    "LogEntry",
    "StructuredFormatter",
    "setup_logging",
    "verbosity_from_env",
    # Metrics
    "InferenceMetrics",
    "MetricsCollector",
]
