# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tensor Binding Layer - host buffers in, device tensors out and back.

Tensors bound here live for a single inference call. The binder does not
re-check that a host buffer matches the tensor it is copied into beyond
the reshape the copy itself needs; the loader already sized the buffer
from the same shape.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from ..core.tensor import HostBuffer, TensorDescriptor
from .context import ExecutionContext

logger = logging.getLogger("vminfer.runtime.binding")


@dataclass
class DeviceTensor:
    """A runtime tensor plus the descriptor it was allocated from."""

    descriptor: TensorDescriptor
    handle: Any

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def nbytes(self) -> int:
        return self.descriptor.size_bytes()


class TensorBinder:
    """
    Allocates device tensors in an execution context and moves data.

    Example:
        binder = TensorBinder(context)
        img = binder.bind(TensorDescriptor.of("img", (1, 784)), host_buffer)
        out = binder.adopt(context.invoke(img.handle), output_descriptor)
        values = binder.harvest(out, 10)
    """

    def __init__(self, context: ExecutionContext):
        self.context = context
        self._tensors: dict[str, DeviceTensor] = {}
        self._total_bytes = 0
        self._peak_bytes = 0

    def allocate(self, descriptor: TensorDescriptor) -> DeviceTensor:
        """Allocate an uninitialized tensor on the context's device."""
        handle = self.context.backend.empty(descriptor, self.context.device)
        return self._track(DeviceTensor(descriptor=descriptor, handle=handle))

    def bind(self, descriptor: TensorDescriptor, host: HostBuffer) -> DeviceTensor:
        """Allocate a tensor for ``descriptor`` and copy ``host`` into it."""
        tensor = self.allocate(descriptor)
        self.context.backend.copy_to_device(
            tensor.handle, host.data.reshape(descriptor.shape.dims)
        )
        logger.debug(f"Bound {descriptor!r} ({tensor.nbytes} bytes)")
        return tensor

    def adopt(self, handle: Any, descriptor: TensorDescriptor) -> DeviceTensor:
        """Track a tensor the runtime allocated, such as an entry's result."""
        return self._track(DeviceTensor(descriptor=descriptor, handle=handle))

    def read_back(self, tensor: DeviceTensor) -> np.ndarray:
        """Copy a whole tensor to host memory."""
        return np.asarray(self.context.backend.copy_to_host(tensor.handle))

    def harvest(self, tensor: DeviceTensor, count: int) -> np.ndarray:
        """
        Copy the first ``count`` elements of ``tensor`` into a flat host vector.

        Args:
            tensor: Output tensor of the entry function
            count: Number of elements to keep (the label table length)
        """
        values = self.read_back(tensor).astype(np.float32, copy=False).reshape(-1)
        return values[:count].copy()

    def get(self, name: str) -> Optional[DeviceTensor]:
        return self._tensors.get(name)

    def release(self) -> None:
        """Drop every tensor bound by this binder."""
        self._tensors.clear()
        self._total_bytes = 0

    def _track(self, tensor: DeviceTensor) -> DeviceTensor:
        previous = self._tensors.get(tensor.name)
        if previous is not None:
            self._total_bytes -= previous.nbytes
        self._tensors[tensor.name] = tensor
        self._total_bytes += tensor.nbytes
        self._peak_bytes = max(self._peak_bytes, self._total_bytes)
        return tensor

    @property
    def memory_usage_mb(self) -> float:
        """Bytes currently bound, in MB."""
        return self._total_bytes / (1024 * 1024)

    @property
    def peak_memory_mb(self) -> float:
        """Peak bytes bound, in MB."""
        return self._peak_bytes / (1024 * 1024)

    def summary(self) -> dict:
        """Get binding summary."""
        return {
            "num_tensors": len(self._tensors),
            "device": str(self.context.device),
            "memory_mb": self.memory_usage_mb,
            "peak_memory_mb": self.peak_memory_mb,
            "tensors": {
                name: {
                    "shape": tensor.descriptor.shape.dims,
                    "dtype": tensor.descriptor.dtype.value,
                    "memory_kb": tensor.nbytes / 1024,
                }
                for name, tensor in self._tensors.items()
            },
        }
