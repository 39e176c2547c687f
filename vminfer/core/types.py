# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Core Types

Device descriptors, allocator selection, data types and shapes shared by
the loader, the execution context and the binding layer. Numeric codes
follow DLPack device types and the Relax VM allocator enumeration so they
can be passed to ``vm_initialization`` unchanged.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from ..errors import ConfigurationError


class DataType(Enum):
    """Supported data types for tensors."""

    Float32 = "float32"
    Float16 = "float16"
    Float64 = "float64"
    Int32 = "int32"
    Int64 = "int64"


def dtype_size(dtype: DataType) -> int:
    """Get the size in bytes for a data type."""
    sizes = {
        DataType.Float32: 4,
        DataType.Float16: 2,
        DataType.Float64: 8,
        DataType.Int32: 4,
        DataType.Int64: 8,
    }
    return sizes.get(dtype, 0)


class DeviceKind(IntEnum):
    """DLPack device type codes."""

    CPU = 1
    CUDA = 2
    CUDA_HOST = 3
    OPENCL = 4
    VULKAN = 7
    METAL = 8
    ROCM = 10


class AllocatorType(IntEnum):
    """Memory allocator kinds understood by ``vm_initialization``."""

    NAIVE = 1
    POOLED = 2


@dataclass(frozen=True)
class Device:
    """A device descriptor: kind plus index."""

    kind: DeviceKind = DeviceKind.CPU
    index: int = 0

    @classmethod
    def parse(cls, spec: str) -> "Device":
        """
        Parse a device string such as ``"cpu"``, ``"cpu:0"`` or ``"cuda:1"``.

        Raises:
            ConfigurationError: If the kind is unknown or the index is invalid
        """
        name, _, index = spec.strip().partition(":")
        try:
            kind = DeviceKind[name.upper()]
        except KeyError:
            raise ConfigurationError(
                f"unknown device kind '{name}'", config_key="device", config_value=spec
            ) from None

        if not index:
            return cls(kind=kind, index=0)
        try:
            device_index = int(index)
        except ValueError:
            raise ConfigurationError(
                f"invalid device index '{index}'", config_key="device", config_value=spec
            ) from None
        if device_index < 0:
            raise ConfigurationError(
                "device index must be non-negative", config_key="device", config_value=spec
            )
        return cls(kind=kind, index=device_index)

    def __str__(self) -> str:
        return f"{self.kind.name.lower()}:{self.index}"


def parse_allocator(name: str) -> AllocatorType:
    """Map ``"pooled"`` / ``"naive"`` to an AllocatorType."""
    try:
        return AllocatorType[name.strip().upper()]
    except KeyError:
        raise ConfigurationError(
            f"unknown allocator '{name}'", config_key="allocator", config_value=name
        ) from None


@dataclass(frozen=True)
class Shape:
    """Represents tensor dimensions."""

    dims: tuple[int, ...] = field(default_factory=tuple)

    def rank(self) -> int:
        """Get number of dimensions."""
        return len(self.dims)

    def numel(self) -> int:
        """Get total number of elements."""
        result = 1
        for d in self.dims:
            result *= d
        return result

    def __str__(self) -> str:
        return "(" + ", ".join(str(d) for d in self.dims) + ")"
