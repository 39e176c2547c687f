# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""Raw buffer loading."""

from .buffer_loader import FLOAT32_BYTES, load_bin, load_tensor

__all__ = ["FLOAT32_BYTES", "load_bin", "load_tensor"]
