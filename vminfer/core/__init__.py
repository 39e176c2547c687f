# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""vminfer core types."""

from .types import (
    AllocatorType,
    DataType,
    Device,
    DeviceKind,
    Shape,
    dtype_size,
    parse_allocator,
)
from .tensor import HostBuffer, TensorDescriptor

__all__ = [
    "AllocatorType",
    "DataType",
    "Device",
    "DeviceKind",
    "Shape",
    "dtype_size",
    "parse_allocator",
    "HostBuffer",
    "TensorDescriptor",
]
