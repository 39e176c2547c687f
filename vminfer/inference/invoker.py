# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Entry function invocation with wall-clock timing.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from ..observability.metrics import InferenceMetrics, MetricsCollector
from ..runtime.binding import DeviceTensor
from ..runtime.context import ExecutionContext

logger = logging.getLogger("vminfer.inference.invoker")


@dataclass
class InvocationResult:
    """Raw output handle of one entry call and how long it took."""

    output: Any
    latency_us: float


class Invoker:
    """Calls the context's entry function; synchronous, no timeout."""

    def __init__(
        self,
        context: ExecutionContext,
        metrics: Optional[MetricsCollector] = None,
        model_name: Optional[str] = None,
    ):
        self.context = context
        self.metrics = metrics
        self.model_name = model_name

    def invoke(self, *tensors: DeviceTensor) -> InvocationResult:
        """
        Run one forward pass.

        Args:
            tensors: Bound tensors in the model's positional order
        """
        handles = [tensor.handle for tensor in tensors]

        start = time.perf_counter()
        try:
            output = self.context.invoke(*handles)
        except Exception:
            if self.metrics is not None:
                self.metrics.record_error()
            raise
        latency_us = (time.perf_counter() - start) * 1e6

        logger.debug(
            f"Entry '{self.context.config.entry}' returned",
            extra={"duration_us": latency_us},
        )
        if self.metrics is not None:
            self.metrics.record_inference(
                InferenceMetrics(latency_us=latency_us, model_name=self.model_name)
            )
        return InvocationResult(output=output, latency_us=latency_us)
