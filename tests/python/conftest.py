# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Pytest configuration for vminfer Python tests.
"""

import logging
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the project root to sys.path so we can import vminfer
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

# Skip test modules that require optional dependencies not installed
collect_ignore = []

# Check for hypothesis
try:
    import hypothesis  # noqa: F401
except ImportError:
    collect_ignore.append("test_property_based.py")


@pytest.fixture(autouse=True)
def _propagate_vminfer_logs():
    """Let caplog see vminfer records even after setup_logging ran."""
    logger = logging.getLogger("vminfer")
    yield
    for handler in list(logger.handlers):
        if getattr(handler, "_vminfer_handler", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def write_floats(tmp_path):
    """Write float32 values (little-endian) to a file and return its path."""

    def _write(name, values):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        np.asarray(values, dtype="<f4").tofile(path)
        return path

    return _write


@pytest.fixture
def mlp_weights(write_floats):
    """Fashion-MNIST sized weight and input files under ``weights/``."""
    rng = np.random.default_rng(0)
    arrays = {
        "input_img": rng.random((1, 784), dtype=np.float32),
        "w0": rng.standard_normal((128, 784), dtype=np.float32) * 0.05,
        "b0": rng.standard_normal(128, dtype=np.float32) * 0.1,
        "w1": rng.standard_normal((10, 128), dtype=np.float32) * 0.1,
        "b1": rng.standard_normal(10, dtype=np.float32) * 0.1,
    }
    for name, array in arrays.items():
        write_floats(f"weights/{name}.bin", array.reshape(-1))
    return arrays
