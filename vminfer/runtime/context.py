# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Execution Context - a loaded and initialized Relax virtual machine.

Creating a context walks the artifact through three capabilities:
1. load-executable: ``vm_load_executable`` on the artifact yields the VM module
2. initialize: ``vm_initialization`` configures device and host memory pools
3. invoke: the computation entry (``main`` by default) runs a forward pass

Any failure while creating the context is fatal. Once initialized the
context is never mutated; it is not re-entrant and callers running
inference from several threads must serialize access to it.

Example:
    context = ExecutionContext.create("./libtvm_model.so")
    output = context.invoke(image_tensor)
"""

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional

from ..backends import RuntimeBackend, RuntimeModule, create_backend
from ..core.types import AllocatorType, Device
from ..errors import MissingEntryPointError

logger = logging.getLogger("vminfer.runtime.context")

VM_LOAD_EXECUTABLE = "vm_load_executable"
VM_INITIALIZATION = "vm_initialization"
DEFAULT_ENTRY = "main"


class Stage(IntEnum):
    """Pipeline stages. Stages only move forward."""

    UNINITIALIZED = 0
    MODULE_LOADED = 1
    VM_CREATED = 2
    VM_INITIALIZED = 3
    INPUT_BOUND = 4
    INVOKED = 5
    OUTPUT_HARVESTED = 6
    CLASSIFIED = 7


@dataclass(frozen=True)
class ContextConfig:
    """
    Device and allocator selection for the virtual machine.

    Attributes:
        device: Device the model runs on
        allocator: Allocator for the device arena
        host_device: Device used for host staging
        host_allocator: Allocator for the host staging arena
        entry: Name of the computation entry function
    """

    device: Device = field(default_factory=Device)
    allocator: AllocatorType = AllocatorType.POOLED
    host_device: Device = field(default_factory=Device)
    host_allocator: AllocatorType = AllocatorType.POOLED
    entry: str = DEFAULT_ENTRY

    def init_args(self) -> tuple[int, int, int, int, int, int]:
        """Positional arguments for ``vm_initialization``."""
        return (
            int(self.device.kind),
            int(self.device.index),
            int(self.allocator),
            int(self.host_device.kind),
            int(self.host_device.index),
            int(self.host_allocator),
        )


class ExecutionContext:
    """
    Holds the virtual machine instance and its resolved entry function.

    Use ``ExecutionContext.create`` to build a ready-to-invoke context.
    """

    def __init__(
        self,
        backend: Optional[RuntimeBackend] = None,
        config: Optional[ContextConfig] = None,
    ):
        """
        Args:
            backend: Runtime backend (default: the registry default, TVM)
            config: Device/allocator configuration
        """
        self.backend = backend if backend is not None else create_backend()
        self.config = config or ContextConfig()
        self.artifact_path: Optional[str] = None
        self._stage = Stage.UNINITIALIZED
        self._module: Optional[RuntimeModule] = None
        self._vm: Optional[RuntimeModule] = None
        self._entry: Optional[Callable[..., Any]] = None

    @classmethod
    def create(
        cls,
        artifact_path,
        config: Optional[ContextConfig] = None,
        backend: Optional[RuntimeBackend] = None,
    ) -> "ExecutionContext":
        """
        Load an artifact and return an initialized context.

        Raises:
            ModuleLoadError: If the artifact cannot be loaded
            MissingEntryPointError: If a required function is not exported
        """
        context = cls(backend=backend, config=config)
        context.initialize(artifact_path)
        return context

    @property
    def stage(self) -> Stage:
        return self._stage

    @property
    def device(self) -> Device:
        return self.config.device

    @property
    def is_ready(self) -> bool:
        return self._stage >= Stage.VM_INITIALIZED and self._entry is not None

    def initialize(self, artifact_path) -> None:
        """Run load-executable and initialize, then resolve the entry."""
        if self._stage != Stage.UNINITIALIZED:
            raise RuntimeError("ExecutionContext is already initialized")

        self.artifact_path = os.fspath(artifact_path)

        self._module = self.backend.load_module(self.artifact_path)
        self._advance(Stage.MODULE_LOADED)

        self._vm = self._load_executable()
        self._advance(Stage.VM_CREATED)

        self._initialize_vm()
        self._advance(Stage.VM_INITIALIZED)

        self._entry = self._resolve(self._vm, self.config.entry)
        logger.info(
            f"VM ready: entry '{self.config.entry}' on {self.config.device} "
            f"({self.config.allocator.name.lower()} allocator)"
        )

    def _load_executable(self) -> RuntimeModule:
        vm_load_executable = self._resolve(self._module, VM_LOAD_EXECUTABLE)
        return self.backend.as_module(vm_load_executable())

    def _initialize_vm(self) -> None:
        vm_initialization = self._resolve(self._vm, VM_INITIALIZATION)
        vm_initialization(*self.config.init_args())

    def _resolve(self, module: RuntimeModule, symbol: str) -> Callable[..., Any]:
        func = module.get_function(symbol)
        if func is None:
            raise MissingEntryPointError(symbol, path=self.artifact_path)
        logger.debug(f"Resolved '{symbol}'")
        return func

    def _advance(self, stage: Stage) -> None:
        if stage < self._stage:
            raise RuntimeError(f"Cannot move from {self._stage.name} back to {stage.name}")
        self._stage = stage

    def invoke(self, *tensors: Any) -> Any:
        """
        Call the computation entry with tensors in the model's positional order.

        Blocks until the forward pass completes.
        """
        if not self.is_ready:
            raise RuntimeError("ExecutionContext is not initialized")
        return self._entry(*tensors)

    def describe(self) -> str:
        """Description of the loaded artifact module."""
        if self._module is None:
            return "<no module loaded>"
        return self._module.describe()

    def summary(self) -> dict:
        """Get execution context summary."""
        return {
            "artifact": self.artifact_path,
            "backend": self.backend.name,
            "stage": self._stage.name,
            "device": str(self.config.device),
            "allocator": self.config.allocator.name.lower(),
            "host_device": str(self.config.host_device),
            "host_allocator": self.config.host_allocator.name.lower(),
            "entry": self.config.entry,
        }
