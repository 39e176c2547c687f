# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
End-to-end classification pipeline.

    files -> host buffers -> device tensors -> entry call
          -> output tensor -> host vector -> label

Example:
    pipeline = InferencePipeline.from_config(get_preset("cifar10").with_input("cat.bin"))
    report = pipeline.run()
    print(report.classification.label)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import numpy as np

from ..backends import RuntimeBackend, create_backend
from ..config import ModelConfig
from ..core.tensor import HostBuffer
from ..errors import ConfigurationError
from ..io.buffer_loader import load_tensor
from ..observability.metrics import MetricsCollector
from ..runtime.binding import TensorBinder
from ..runtime.context import ExecutionContext, Stage
from .classifier import ClassificationResult, Classifier
from .invoker import Invoker

logger = logging.getLogger("vminfer.inference.pipeline")


@dataclass
class PredictionReport:
    """Outcome of one pipeline run."""

    model_name: str
    module: str
    classification: ClassificationResult
    latency_us: float
    stage: Stage = Stage.CLASSIFIED

    @property
    def label(self) -> str:
        return self.classification.label

    @property
    def scores(self) -> np.ndarray:
        return self.classification.scores

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model_name,
            "module": self.module,
            "latency_us": self.latency_us,
            **self.classification.to_dict(),
        }


class InferencePipeline:
    """
    Runs a model configuration against an execution context.

    The context is created once; every ``run`` loads buffers, binds fresh
    tensors, invokes the entry and classifies the result.

    ``stage`` is the context's setup stage. Each run tracks its own stage,
    starting from there, and the report carries where it ended.
    """

    def __init__(
        self,
        config: ModelConfig,
        context: ExecutionContext,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.config = config
        self.context = context
        self.metrics = metrics if metrics is not None else MetricsCollector()
        self.classifier = Classifier(config.labels)
        self.invoker = Invoker(context, metrics=self.metrics, model_name=config.name)

    @property
    def stage(self) -> Stage:
        return self.context.stage

    @classmethod
    def from_config(
        cls,
        config: ModelConfig,
        backend: Optional[RuntimeBackend] = None,
        metrics: Optional[MetricsCollector] = None,
    ) -> InferencePipeline:
        """
        Validate ``config`` and create its execution context.

        Raises:
            ConfigurationError: If the configuration is inconsistent
            ModuleLoadError: If the artifact cannot be loaded
            MissingEntryPointError: If the artifact lacks a required function
        """
        config.validate()
        context = ExecutionContext.create(
            config.artifact,
            config=config.context_config(),
            backend=backend if backend is not None else create_backend(config.backend),
        )
        return cls(config, context, metrics=metrics)

    def load_buffers(self) -> list[HostBuffer]:
        """Load every argument's file, in positional order."""
        return [
            load_tensor(spec.descriptor(), self.config.resolve_file(spec))
            for spec in self.config.arguments
        ]

    def run(self, buffers: Optional[Sequence[HostBuffer]] = None) -> PredictionReport:
        """
        Classify one input.

        Args:
            buffers: Host buffers in positional order (default: loaded from
                the configured files)

        Raises:
            ConfigurationError: If the number of buffers differs from the
                number of configured arguments
        """
        if buffers is None:
            buffers = self.load_buffers()
        if len(buffers) != len(self.config.arguments):
            raise ConfigurationError(
                f"model '{self.config.name}' takes {len(self.config.arguments)} "
                f"arguments but {len(buffers)} buffers were given",
                config_key="arguments",
            )

        stage = self.context.stage
        binder = TensorBinder(self.context)
        try:
            tensors = [
                binder.bind(spec.descriptor(), buffer)
                for spec, buffer in zip(self.config.arguments, buffers)
            ]
            stage = Stage.INPUT_BOUND

            result = self.invoker.invoke(*tensors)
            stage = Stage.INVOKED

            output = binder.adopt(result.output, self.config.output_descriptor())
            values = binder.harvest(output, self.classifier.num_classes)
            stage = Stage.OUTPUT_HARVESTED
        except Exception:
            logger.debug(f"Run of '{self.config.name}' failed after {stage.name}")
            raise
        finally:
            binder.release()

        classification = self.classifier.classify(values)
        stage = Stage.CLASSIFIED
        logger.info(
            f"Predicted '{classification.label}' (index {classification.index})",
            extra={"duration_us": result.latency_us},
        )

        return PredictionReport(
            model_name=self.config.name,
            module=self.context.describe(),
            classification=classification,
            latency_us=result.latency_us,
            stage=stage,
        )
