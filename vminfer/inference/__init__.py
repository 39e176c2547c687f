# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer inference: entry invocation, arg-max classification and the
end-to-end pipeline.
"""

from .classifier import ClassificationResult, Classifier, argmax
from .invoker import InvocationResult, Invoker
from .pipeline import InferencePipeline, PredictionReport

__all__ = [
    "ClassificationResult",
    "Classifier",
    "argmax",
    "InvocationResult",
    "Invoker",
    "InferencePipeline",
    "PredictionReport",
]
