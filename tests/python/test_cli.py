# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for the vminfer command line interface.
"""

import json

import numpy as np
import pytest

from fake_runtime import FakeBackend, make_artifact, mlp_forward
from vminfer import __version__
from vminfer.backends import register_backend, unregister_backend
from vminfer.cli import main


@pytest.fixture
def fake_backend():
    backend = FakeBackend({"model.so": make_artifact(mlp_forward)})
    register_backend("fake", lambda: backend)
    yield backend
    unregister_backend("fake")


def run_mlp(tmp_path, *extra):
    return main(
        [
            "run",
            "--preset",
            "fashion-mnist-mlp",
            "--backend",
            "fake",
            "--model",
            "model.so",
            "--weights-dir",
            str(tmp_path),
            *extra,
        ]
    )


class TestRunCommand:
    """Tests for `vminfer run`."""

    def test_prints_prediction(self, tmp_path, mlp_weights, fake_backend, capsys):
        assert run_mlp(tmp_path, "--time") == 0

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Module(library, 0x2)"
        assert out[1].startswith("Time taken by function: ")
        assert out[1].endswith(" microseconds")
        assert out[2] == "Output C:"
        assert len(out[3].split()) == 10
        assert out[4].startswith("Max value: ")
        assert out[5].startswith("Predicted label: ")

    def test_no_timing_by_default(self, tmp_path, mlp_weights, fake_backend, capsys):
        assert run_mlp(tmp_path) == 0
        assert "Time taken" not in capsys.readouterr().out

    def test_json_output(self, tmp_path, mlp_weights, fake_backend, capsys):
        assert run_mlp(tmp_path, "--json") == 0

        data = json.loads(capsys.readouterr().out)
        expected = mlp_forward(*(mlp_weights[k] for k in ("input_img", "w0", "b0", "w1", "b1")))
        assert data["model"] == "fashion-mnist-mlp"
        assert data["index"] == int(np.argmax(expected))
        assert len(data["scores"]) == 10

    def test_repeat_reports_summary(self, tmp_path, mlp_weights, fake_backend, capsys):
        assert run_mlp(tmp_path, "--repeat", "3") == 0

        assert "Runs: 3" in capsys.readouterr().out
        assert len(fake_backend.allocations) == 15

    def test_repeat_must_be_positive(self, tmp_path, mlp_weights, fake_backend):
        assert run_mlp(tmp_path, "--repeat", "0") == 2

    def test_input_override(self, tmp_path, mlp_weights, fake_backend, write_floats, capsys):
        other = write_floats("other.bin", np.zeros(784))
        assert run_mlp(tmp_path, "--input", str(other), "--json") == 0

        data = json.loads(capsys.readouterr().out)
        hidden = np.maximum(mlp_weights["b0"], 0.0)
        expected = hidden @ mlp_weights["w1"].T + mlp_weights["b1"]
        np.testing.assert_allclose(data["scores"], expected, rtol=1e-5)

    def test_missing_artifact_exits_nonzero(self, tmp_path, mlp_weights, fake_backend, capsys):
        assert run_mlp(tmp_path, "--model", "missing.so") == 1

        captured = capsys.readouterr()
        assert "Module load failed" in captured.err
        assert "Predicted label" not in captured.out

    def test_missing_weight_exits_nonzero(self, tmp_path, mlp_weights, fake_backend, capsys):
        (tmp_path / "weights" / "b0.bin").unlink()

        assert run_mlp(tmp_path) == 1
        assert "Cannot open" in capsys.readouterr().err

    def test_short_weight_logged(self, tmp_path, mlp_weights, fake_backend, write_floats, capsys):
        write_floats("weights/b1.bin", [1.0])

        assert run_mlp(tmp_path) == 0

        captured = capsys.readouterr()
        assert "[WARNING] [vminfer.io]" in captured.err
        assert "expected 40 bytes, got 4 bytes" in captured.err
        assert "Predicted label" in captured.out

    def test_cifar10_without_input(self, fake_backend, capsys):
        fake_backend.artifacts["cifar.so"] = make_artifact(lambda img: img)
        code = main(["run", "--preset", "cifar10", "--backend", "fake", "--model", "cifar.so"])

        assert code == 1
        assert "no file given for argument 'input_img'" in capsys.readouterr().err

    def test_unknown_backend(self, tmp_path, mlp_weights, capsys):
        assert run_mlp(tmp_path, "--backend", "nope") == 1
        assert "unknown runtime backend" in capsys.readouterr().err


class TestOtherCommands:
    """Tests for version, info and presets."""

    def test_version(self, capsys):
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == f"vminfer v{__version__}"

    def test_presets(self, capsys):
        assert main(["presets"]) == 0
        out = capsys.readouterr().out
        assert "cifar10: ./libtvm_model.so" in out
        assert "fashion-mnist-mlp: ./linear_relu_mnist.so" in out

    def test_info(self, capsys):
        assert main(["--info"]) == 0
        out = capsys.readouterr().out
        assert "vminfer Version:" in out
        assert "Backend tvm:" in out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: vminfer" in capsys.readouterr().out
