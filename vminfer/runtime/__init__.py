# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Runtime Module

Components:
- ExecutionContext: Loaded and initialized virtual machine
- ContextConfig: Device and allocator selection
- TensorBinder: Host buffer to device tensor binding
"""

from .context import (
    DEFAULT_ENTRY,
    VM_INITIALIZATION,
    VM_LOAD_EXECUTABLE,
    ContextConfig,
    ExecutionContext,
    Stage,
)
from .binding import DeviceTensor, TensorBinder

__all__ = [
    "DEFAULT_ENTRY",
    "VM_INITIALIZATION",
    "VM_LOAD_EXECUTABLE",
    "ContextConfig",
    "ExecutionContext",
    "Stage",
    "DeviceTensor",
    "TensorBinder",
]
