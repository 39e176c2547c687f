# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Tests for model configuration and presets.
"""

import json
import os

import pytest

from vminfer.config import (
    CIFAR10_LABELS,
    FASHION_MNIST_LABELS,
    PRESETS,
    ModelConfig,
    TensorSpec,
    get_preset,
    load_config,
)
from vminfer.core import AllocatorType, DeviceKind
from vminfer.errors import ConfigurationError


class TestPresets:
    """Tests for built-in presets."""

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_presets_validate(self, name):
        assert get_preset(name).validate() is PRESETS[name]

    def test_fashion_mnist_argument_order(self):
        config = get_preset("fashion-mnist-mlp")

        assert [a.name for a in config.arguments] == ["input_img", "w0", "b0", "w1", "b1"]
        assert [a.shape for a in config.arguments] == [
            (1, 784),
            (128, 784),
            (128,),
            (10, 128),
            (10,),
        ]
        assert config.labels == FASHION_MNIST_LABELS
        assert config.artifact == "./linear_relu_mnist.so"

    def test_cifar10_needs_input_path(self):
        config = get_preset("cifar10")

        assert config.arguments[0].shape == (1, 3, 32, 32)
        assert config.labels == CIFAR10_LABELS
        with pytest.raises(ConfigurationError):
            config.resolve_file(config.arguments[0])

    def test_unknown_preset(self):
        with pytest.raises(ConfigurationError, match="unknown preset"):
            get_preset("imagenet")


class TestModelConfig:
    """Tests for ModelConfig."""

    def test_with_input_replaces_first_argument(self):
        config = get_preset("cifar10").with_input("cat.bin")

        assert config.arguments[0].file == "cat.bin"
        assert get_preset("cifar10").arguments[0].file is None

    def test_resolve_file_relative_to_data_dir(self, tmp_path):
        config = get_preset("fashion-mnist-mlp").replace(data_dir=str(tmp_path))

        path = config.resolve_file(config.arguments[1])

        assert path == os.path.join(str(tmp_path), "weights", "w0.bin")

    def test_resolve_absolute_file(self, tmp_path):
        absolute = str(tmp_path / "img.bin")
        config = get_preset("cifar10").with_input(absolute).replace(data_dir="/elsewhere")

        assert config.resolve_file(config.arguments[0]) == absolute

    def test_context_config(self):
        config = get_preset("cifar10").replace(device="cpu:1", allocator="naive")
        context_config = config.context_config()

        assert context_config.device.kind == DeviceKind.CPU
        assert context_config.device.index == 1
        assert context_config.allocator == AllocatorType.NAIVE
        assert context_config.host_allocator == AllocatorType.POOLED
        assert context_config.entry == "main"

    def test_label_count_must_match_output(self):
        config = get_preset("cifar10").replace(output_shape=(1, 100))
        with pytest.raises(ConfigurationError, match="100 elements but there are 10 labels"):
            config.validate()

    def test_empty_labels_rejected(self):
        with pytest.raises(ConfigurationError, match="label table is empty"):
            get_preset("cifar10").replace(labels=()).validate()

    def test_bad_shape_rejected(self):
        config = get_preset("cifar10").replace(arguments=(TensorSpec("img", (1, 0)),))
        with pytest.raises(ConfigurationError, match="invalid shape"):
            config.validate()

    def test_bad_device_rejected(self):
        with pytest.raises(ConfigurationError):
            get_preset("cifar10").replace(device="quantum:0").validate()

    def test_dict_round_trip(self):
        config = get_preset("fashion-mnist-mlp")
        assert ModelConfig.from_dict(config.to_dict()) == config

    def test_from_dict_missing_key(self):
        with pytest.raises(ConfigurationError, match="missing key"):
            ModelConfig.from_dict({"name": "x", "artifact": "m.so", "labels": ["a"]})


class TestLoadConfig:
    """Tests for JSON model descriptions."""

    def test_load(self, tmp_path):
        path = tmp_path / "letters.json"
        path.write_text(
            json.dumps(
                {
                    "artifact": "./letters.so",
                    "arguments": [{"name": "img", "shape": [1, 4], "file": "img.bin"}],
                    "output_shape": [1, 3],
                    "labels": ["A", "B", "C"],
                    "allocator": "naive",
                }
            )
        )

        config = load_config(path)

        assert config.name == "letters"
        assert config.artifact == "./letters.so"
        assert config.arguments == (TensorSpec("img", (1, 4), "img.bin"),)
        assert config.labels == ("A", "B", "C")
        assert config.allocator == "naive"

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="cannot read"):
            load_config(tmp_path / "absent.json")

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)
