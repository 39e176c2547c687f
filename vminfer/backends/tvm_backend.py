# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Apache TVM runtime backend.

Loads Relax VM executables exported with ``tvm.relax.build(...).export_library``
through ``tvm.runtime.load_module`` and allocates tensors with
``tvm.nd.empty``. TVM is imported lazily so the rest of vminfer works
without it installed.
"""

import importlib.util
import logging
import os
from typing import Any, Callable, Optional

import numpy as np

from ..core.tensor import TensorDescriptor
from ..core.types import Device
from ..errors import ModuleLoadError
from .base import RuntimeBackend

logger = logging.getLogger("vminfer.backends.tvm")


class TVMModule:
    """RuntimeModule view of a ``tvm.runtime.Module``."""

    def __init__(self, module: Any):
        self._module = module

    @property
    def raw(self) -> Any:
        return self._module

    def get_function(self, name: str) -> Optional[Callable[..., Any]]:
        # TVM raises AttributeError for unknown symbols
        try:
            return self._module.get_function(name)
        except AttributeError:
            return None

    def describe(self) -> str:
        return str(self._module)


class TVMBackend(RuntimeBackend):
    """Runtime backend built on ``tvm.runtime``."""

    @property
    def name(self) -> str:
        return "tvm"

    def is_available(self) -> bool:
        try:
            return importlib.util.find_spec("tvm") is not None
        except (ImportError, ValueError):
            return False

    def version(self) -> str:
        if not self.is_available():
            return "not installed"
        try:
            tvm = self._import_tvm()
        except ModuleLoadError:
            return "unavailable"
        return getattr(tvm, "__version__", "unknown")

    def _import_tvm(self):
        try:
            import tvm
        except ImportError as e:
            raise ModuleLoadError(
                "Apache TVM is not installed",
                backend=self.name,
                suggestions=["Install TVM: pip install 'vminfer[tvm]'"],
            ) from e
        return tvm

    def load_module(self, path: str) -> TVMModule:
        if not os.path.exists(path):
            raise ModuleLoadError("artifact not found", path=path, backend=self.name)

        tvm = self._import_tvm()
        try:
            module = tvm.runtime.load_module(path)
        except Exception as e:
            first_line = str(e).strip().splitlines()[0] if str(e).strip() else type(e).__name__
            raise ModuleLoadError(first_line, path=path, backend=self.name) from e

        logger.info(f"Loaded {path}")
        return TVMModule(module)

    def as_module(self, obj: Any) -> TVMModule:
        if isinstance(obj, TVMModule):
            return obj
        return TVMModule(obj)

    def empty(self, descriptor: TensorDescriptor, device: Device) -> Any:
        tvm = self._import_tvm()
        return tvm.nd.empty(
            descriptor.shape.dims,
            dtype=descriptor.dtype.value,
            device=tvm.device(int(device.kind), device.index),
        )

    def copy_to_device(self, tensor: Any, host: np.ndarray) -> None:
        tensor.copyfrom(host)

    def copy_to_host(self, tensor: Any) -> np.ndarray:
        return tensor.numpy()
