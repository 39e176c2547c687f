# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer Runtime Backend Base Classes

A runtime backend is the native mechanism that loads a compiled artifact
and owns device memory. The execution context talks to it only through
this interface, so the pipeline never imports a runtime library itself.

Contract:
- load_module(): Load an artifact file as a dynamically resolvable module
- as_module(): Wrap a module object returned by an artifact function
- empty(): Allocate an uninitialized device tensor
- copy_to_device()/copy_to_host(): Data transfer

Modules returned by a backend satisfy ``RuntimeModule``: named function
lookup returning ``None`` when the symbol is absent.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Protocol, runtime_checkable
import logging

import numpy as np

from ..core.tensor import TensorDescriptor
from ..core.types import Device

logger = logging.getLogger("vminfer.backends")


@runtime_checkable
class RuntimeModule(Protocol):
    """A loaded module exposing functions by name."""

    def get_function(self, name: str) -> Optional[Callable[..., Any]]:
        """Return the exported function or None if it does not exist."""
        ...

    def describe(self) -> str:
        """Human-readable description of the module."""
        ...


class RuntimeBackend(ABC):
    """
    Abstract base class for artifact runtimes.

    Thread Safety: None. One backend instance serves one execution context.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier (e.g., "tvm")."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the runtime library can be used.

        This method must NOT raise exceptions.
        """
        pass

    def version(self) -> str:
        """Runtime library version, or "unknown"."""
        return "unknown"

    @abstractmethod
    def load_module(self, path: str) -> RuntimeModule:
        """Load a compiled artifact.

        Raises:
            ModuleLoadError: If the file is missing or not loadable.
        """
        pass

    @abstractmethod
    def as_module(self, obj: Any) -> RuntimeModule:
        """Wrap a module object produced by an artifact function."""
        pass

    @abstractmethod
    def empty(self, descriptor: TensorDescriptor, device: Device) -> Any:
        """Allocate an uninitialized tensor on ``device``."""
        pass

    @abstractmethod
    def copy_to_device(self, tensor: Any, host: np.ndarray) -> None:
        """Copy a host array with the tensor's shape into ``tensor``."""
        pass

    @abstractmethod
    def copy_to_host(self, tensor: Any) -> np.ndarray:
        """Copy ``tensor`` into a new host array."""
        pass

    def __repr__(self) -> str:
        status = "available" if self.is_available() else "unavailable"
        return f"<{self.__class__.__name__}({self.name}, {status})>"
