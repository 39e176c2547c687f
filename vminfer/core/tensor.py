# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tensor descriptors and host buffers.
"""

from dataclasses import dataclass, field

import numpy as np

from .types import DataType, Shape, dtype_size


@dataclass(frozen=True)
class TensorDescriptor:
    """
    Describes a tensor's metadata without holding actual data.

    Used to allocate device tensors and to size host buffers.
    """

    name: str = ""
    shape: Shape = field(default_factory=Shape)
    dtype: DataType = DataType.Float32

    @classmethod
    def of(cls, name: str, dims, dtype: DataType = DataType.Float32) -> "TensorDescriptor":
        """Build a descriptor from a plain sequence of dimensions."""
        return cls(name=name, shape=Shape(tuple(int(d) for d in dims)), dtype=dtype)

    def numel(self) -> int:
        return self.shape.numel()

    def size_bytes(self) -> int:
        """Calculate the size in bytes."""
        return self.shape.numel() * dtype_size(self.dtype)

    def __repr__(self) -> str:
        return (
            f"TensorDescriptor(name='{self.name}', "
            f"shape={self.shape}, dtype={self.dtype.value})"
        )


@dataclass
class HostBuffer:
    """
    Flat float32 data in host memory with a declared logical shape.

    ``data`` always holds exactly ``shape.numel()`` elements.
    """

    data: np.ndarray
    shape: Shape
    source: str = ""

    def __post_init__(self):
        self.data.setflags(write=False)

    @property
    def numel(self) -> int:
        return int(self.data.size)

    @property
    def nbytes(self) -> int:
        return int(self.data.nbytes)

    def reshaped(self) -> np.ndarray:
        """View the flat data with the declared shape."""
        return self.data.reshape(self.shape.dims)
