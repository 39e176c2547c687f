# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Backend Registry

Maps backend names to RuntimeBackend classes. Built-in: "tvm".
Additional backends (or test doubles) register by name.
"""

import logging
from typing import Dict, List, Type

from ..errors import ConfigurationError
from .base import RuntimeBackend
from .tvm_backend import TVMBackend

logger = logging.getLogger("vminfer.backends.registry")

DEFAULT_BACKEND = "tvm"

_backend_classes: Dict[str, Type[RuntimeBackend]] = {
    "tvm": TVMBackend,
}


def register_backend(name: str, backend_class: Type[RuntimeBackend]) -> None:
    """
    Register a backend class.

    Args:
        name: Backend name used by ``create_backend``.
        backend_class: RuntimeBackend subclass.
    """
    _backend_classes[name.lower()] = backend_class
    logger.debug(f"Registered backend class: {name}")


def unregister_backend(name: str) -> None:
    """Remove a registered backend. Unknown names are ignored."""
    _backend_classes.pop(name.lower(), None)


def create_backend(name: str = DEFAULT_BACKEND) -> RuntimeBackend:
    """
    Instantiate a backend by name.

    Raises:
        ConfigurationError: If no backend of that name is registered.
    """
    try:
        backend_class = _backend_classes[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"unknown runtime backend '{name}'",
            config_key="backend",
            config_value=name,
        ) from None
    return backend_class()


def list_backends() -> List[str]:
    """Get list of registered backend names."""
    return sorted(_backend_classes)


def list_available() -> List[str]:
    """Get list of registered backends whose runtime library is importable."""
    return [name for name in list_backends() if _backend_classes[name]().is_available()]
