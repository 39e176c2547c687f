# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer: Single-pass classification with compiled Relax VM modules

Loads a model compiled ahead of time into a shared module, binds raw
float32 weight and input files to runtime tensors, runs the entry
function once and reports the arg-max label.

Example:
    import vminfer

    config = vminfer.get_preset("cifar10").with_input("images/cat.bin")
    report = vminfer.InferencePipeline.from_config(config).run()
    print(report.label)
"""

__version__ = "0.1.0"
__author__ = "Wahyu Ardiansyah"

from .errors import (
    VMInferError,
    BufferIOError,
    ModuleLoadError,
    MissingEntryPointError,
    ConfigurationError,
    SizeMismatchWarning,
)

from .core import AllocatorType, DataType, Device, DeviceKind, HostBuffer, Shape, TensorDescriptor

from .io import load_bin

from .runtime import ContextConfig, ExecutionContext, Stage, TensorBinder

from .inference import Classifier, InferencePipeline, PredictionReport, argmax

from .config import ModelConfig, TensorSpec, PRESETS, get_preset, load_config

from .observability import Verbosity, setup_logging

__all__ = [
    "__version__",
    # Errors
    "VMInferError",
    "BufferIOError",
    "ModuleLoadError",
    "MissingEntryPointError",
    "ConfigurationError",
    "SizeMismatchWarning",
    # Core
    "AllocatorType",
    "DataType",
    "Device",
    "DeviceKind",
    "HostBuffer",
    "Shape",
    "TensorDescriptor",
    # Pipeline
    "load_bin",
    "ContextConfig",
    "ExecutionContext",
    "Stage",
    "TensorBinder",
    "Classifier",
    "InferencePipeline",
    "PredictionReport",
    "argmax",
    # Configuration
    "ModelConfig",
    "TensorSpec",
    "PRESETS",
    "get_preset",
    "load_config",
    # Observability
    "Verbosity",
    "setup_logging",
]
