# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Raw Buffer Loader - reads flat float32 blobs into host memory.

Weight, bias and input files are headerless little-endian IEEE-754
float32 arrays. A file whose size disagrees with the declared element
count is accepted: the first ``min(size, expected)`` bytes are copied and
any remaining elements stay zero. The mismatch is reported through
``SizeMismatchWarning`` and the ``vminfer.io`` logger but never aborts.

Example:
    buf = load_bin("weights/w0.bin", 128 * 784)
    w0 = buf.reshaped()
"""

import logging
import os
import warnings
from typing import Optional, Sequence, Union

import numpy as np

from ..core.tensor import HostBuffer, TensorDescriptor
from ..core.types import Shape
from ..errors import BufferIOError, SizeMismatchWarning

logger = logging.getLogger("vminfer.io")

FLOAT32_BYTES = 4

PathLike = Union[str, "os.PathLike[str]"]


def load_bin(
    path: PathLike,
    expected_elems: int,
    shape: Optional[Sequence[int]] = None,
) -> HostBuffer:
    """
    Load a flat float32 file into a HostBuffer of exactly ``expected_elems``.

    Args:
        path: File to read
        expected_elems: Number of float32 elements the caller expects
        shape: Logical shape of the buffer (default: 1-D)

    Returns:
        HostBuffer holding ``expected_elems`` float32 values

    Raises:
        BufferIOError: If the file cannot be opened
    """
    path = os.fspath(path)
    expected_bytes = expected_elems * FLOAT32_BYTES

    try:
        handle = open(path, "rb")
    except OSError as e:
        raise BufferIOError(path, reason=e.strerror or str(e)) from e

    with handle:
        size = os.fstat(handle.fileno()).st_size
        if size != expected_bytes:
            message = f"expected {expected_bytes} bytes, got {size} bytes"
            logger.warning(f"{path}: {message}")
            warnings.warn(f"{path}: {message}", SizeMismatchWarning, stacklevel=2)
        raw = handle.read(min(size, expected_bytes))

    staging = bytearray(expected_bytes)
    staging[: len(raw)] = raw
    data = np.frombuffer(staging, dtype="<f4").astype(np.float32)

    dims = tuple(shape) if shape is not None else (expected_elems,)
    logger.debug(f"Loaded {len(raw)} bytes from {path} as {dims}")
    return HostBuffer(data=data, shape=Shape(dims), source=path)


def load_tensor(descriptor: TensorDescriptor, path: PathLike) -> HostBuffer:
    """Load the file backing ``descriptor``, sized from its shape."""
    return load_bin(path, descriptor.numel(), shape=descriptor.shape.dims)
