# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
vminfer runtime backends.

Example:
    from vminfer.backends import create_backend

    backend = create_backend("tvm")
    module = backend.load_module("./libtvm_model.so")
"""

from .base import RuntimeBackend, RuntimeModule
from .tvm_backend import TVMBackend, TVMModule
from .registry import (
    DEFAULT_BACKEND,
    create_backend,
    list_available,
    list_backends,
    register_backend,
    unregister_backend,
)


def is_tvm_available() -> bool:
    """Check if Apache TVM can be imported."""
    return TVMBackend().is_available()


__all__ = [
    "RuntimeBackend",
    "RuntimeModule",
    "TVMBackend",
    "TVMModule",
    "DEFAULT_BACKEND",
    "create_backend",
    "list_available",
    "list_backends",
    "register_backend",
    "unregister_backend",
    "is_tvm_available",
]
