# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for the Raw Buffer Loader

Validates:
- Exact-size files load unchanged
- Short files are zero-padded, long files truncated
- Size mismatches warn but never fail
- Open failures raise BufferIOError
"""

import logging
import os
import warnings

import numpy as np
import pytest

from vminfer.core import TensorDescriptor
from vminfer.errors import BufferIOError, SizeMismatchWarning
from vminfer.io import FLOAT32_BYTES, load_bin, load_tensor


class TestExactSize:
    """Files whose size matches the declared element count."""

    def test_values_loaded(self, write_floats):
        path = write_floats("b1.bin", [0.5, -1.25, 3.0, 0.0])

        with warnings.catch_warnings():
            warnings.simplefilter("error", SizeMismatchWarning)
            buf = load_bin(path, 4)

        np.testing.assert_array_equal(buf.data, [0.5, -1.25, 3.0, 0.0])
        assert buf.data.dtype == np.float32
        assert buf.numel == 4
        assert buf.nbytes == 4 * FLOAT32_BYTES

    def test_shape_applied(self, write_floats):
        path = write_floats("w.bin", np.arange(6, dtype=np.float32))
        buf = load_bin(path, 6, shape=(2, 3))

        assert buf.shape.dims == (2, 3)
        np.testing.assert_array_equal(buf.reshaped(), [[0, 1, 2], [3, 4, 5]])

    def test_default_shape_is_flat(self, write_floats):
        path = write_floats("w.bin", np.ones(3))
        assert load_bin(path, 3).shape.dims == (3,)

    def test_buffer_is_read_only(self, write_floats):
        path = write_floats("w.bin", np.ones(3))
        buf = load_bin(path, 3)
        with pytest.raises(ValueError):
            buf.data[0] = 2.0

    def test_little_endian(self, tmp_path):
        """Files are little-endian regardless of host byte order."""
        path = tmp_path / "le.bin"
        path.write_bytes(bytes.fromhex("0000c03f"))
        assert load_bin(path, 1).data[0] == np.float32(1.5)

    def test_load_tensor_uses_descriptor(self, write_floats):
        path = write_floats("img.bin", np.arange(12, dtype=np.float32))
        buf = load_tensor(TensorDescriptor.of("img", (1, 3, 2, 2)), path)

        assert buf.numel == 12
        assert buf.reshaped().shape == (1, 3, 2, 2)
        assert buf.source == os.fspath(path)


class TestSizeMismatch:
    """Files whose size disagrees with the declared element count."""

    def test_short_file_zero_padded(self, write_floats):
        path = write_floats("short.bin", [1.0, 2.0, 3.0])

        with pytest.warns(SizeMismatchWarning, match="expected 24 bytes, got 12 bytes"):
            buf = load_bin(path, 6)

        np.testing.assert_array_equal(buf.data, [1.0, 2.0, 3.0, 0.0, 0.0, 0.0])

    def test_long_file_truncated(self, write_floats):
        path = write_floats("long.bin", [1.0, 2.0, 3.0, 4.0, 5.0])

        with pytest.warns(SizeMismatchWarning, match="expected 8 bytes, got 20 bytes"):
            buf = load_bin(path, 2)

        np.testing.assert_array_equal(buf.data, [1.0, 2.0])

    def test_empty_file_all_zero(self, tmp_path):
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")

        with pytest.warns(SizeMismatchWarning):
            buf = load_bin(path, 4)

        np.testing.assert_array_equal(buf.data, np.zeros(4, dtype=np.float32))

    def test_partial_trailing_float_copied_bytewise(self, tmp_path):
        """A trailing partial float keeps its bytes; the rest stay zero."""
        full = np.array([2.0], dtype="<f4").tobytes()
        partial = np.array([-7.5], dtype="<f4").tobytes()[:2]
        path = tmp_path / "odd.bin"
        path.write_bytes(full + partial)

        with pytest.warns(SizeMismatchWarning):
            buf = load_bin(path, 3)

        expected = bytearray(12)
        expected[:6] = full + partial
        assert buf.data.tobytes() == bytes(expected)
        assert buf.data[0] == 2.0
        assert buf.data[2] == 0.0

    def test_mismatch_logged(self, write_floats, caplog):
        path = write_floats("short.bin", [1.0])

        with caplog.at_level(logging.WARNING, logger="vminfer.io"):
            with pytest.warns(SizeMismatchWarning):
                load_bin(path, 2)

        assert any("expected 8 bytes, got 4 bytes" in r.getMessage() for r in caplog.records)


class TestOpenFailure:
    """Unopenable files abort loading."""

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.bin"

        with pytest.raises(BufferIOError) as exc_info:
            load_bin(missing, 4)

        assert exc_info.value.path == os.fspath(missing)
        assert isinstance(exc_info.value, IOError)

    def test_directory_is_not_a_buffer(self, tmp_path):
        with pytest.raises(BufferIOError):
            load_bin(tmp_path, 4)
