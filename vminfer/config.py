# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Model configuration: artifact path, tensors to bind, labels and devices.

Configurations are immutable. Built-in presets describe the two models
this tool ships drivers for; other models are described in JSON:

    {
        "name": "fashion-mnist-mlp",
        "artifact": "./linear_relu_mnist.so",
        "arguments": [
            {"name": "input_img", "shape": [1, 784], "file": "weights/input_img.bin"},
            {"name": "w0", "shape": [128, 784], "file": "weights/w0.bin"}
        ],
        "output_shape": [1, 10],
        "labels": ["T-shirt/top", "Trouser", ...]
    }
"""

import dataclasses
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .core.tensor import TensorDescriptor
from .core.types import Device, Shape, parse_allocator
from .errors import ConfigurationError
from .runtime.context import DEFAULT_ENTRY, ContextConfig

FASHION_MNIST_LABELS = (
    "T-shirt/top",
    "Trouser",
    "Pullover",
    "Dress",
    "Coat",
    "Sandal",
    "Shirt",
    "Sneaker",
    "Bag",
    "Ankle boot",
)

CIFAR10_LABELS = (
    "plane",
    "car",
    "bird",
    "cat",
    "deer",
    "dog",
    "frog",
    "horse",
    "ship",
    "truck",
)


@dataclass(frozen=True)
class TensorSpec:
    """An entry function argument and the file it is loaded from."""

    name: str
    shape: tuple[int, ...]
    file: Optional[str] = None

    def descriptor(self) -> TensorDescriptor:
        return TensorDescriptor.of(self.name, self.shape)

    def numel(self) -> int:
        return Shape(self.shape).numel()


@dataclass(frozen=True)
class ModelConfig:
    """
    Everything needed to run one classification.

    Attributes:
        name: Model identifier
        artifact: Path of the compiled module
        arguments: Entry function arguments in positional order; the
            first one is the input image
        labels: Class labels, one per output element
        output_shape: Shape of the entry function's result
        entry: Name of the computation entry function
        device: Device string for the model ("cpu:0")
        allocator: "pooled" or "naive"
        host_device: Device string for host staging
        host_allocator: Allocator for host staging
        data_dir: Directory relative tensor files are resolved against
        backend: Runtime backend name
    """

    name: str
    artifact: str
    arguments: tuple[TensorSpec, ...]
    labels: tuple[str, ...]
    output_shape: tuple[int, ...]
    entry: str = DEFAULT_ENTRY
    device: str = "cpu:0"
    allocator: str = "pooled"
    host_device: str = "cpu:0"
    host_allocator: str = "pooled"
    data_dir: str = "."
    backend: str = "tvm"

    def validate(self) -> "ModelConfig":
        """
        Check internal consistency.

        Raises:
            ConfigurationError: On the first problem found
        """
        if not self.arguments:
            raise ConfigurationError("model has no arguments", config_key="arguments")
        if not self.labels:
            raise ConfigurationError("label table is empty", config_key="labels")

        for spec in self.arguments:
            if not spec.shape or any(d <= 0 for d in spec.shape):
                raise ConfigurationError(
                    f"argument '{spec.name}' has invalid shape",
                    config_key=f"arguments.{spec.name}.shape",
                    config_value=spec.shape,
                )

        output_elems = Shape(self.output_shape).numel()
        if not self.output_shape or output_elems != len(self.labels):
            raise ConfigurationError(
                f"output has {output_elems} elements but there are {len(self.labels)} labels",
                config_key="output_shape",
                config_value=self.output_shape,
            )

        self.context_config()
        return self

    def context_config(self) -> ContextConfig:
        return ContextConfig(
            device=Device.parse(self.device),
            allocator=parse_allocator(self.allocator),
            host_device=Device.parse(self.host_device),
            host_allocator=parse_allocator(self.host_allocator),
            entry=self.entry,
        )

    def output_descriptor(self) -> TensorDescriptor:
        return TensorDescriptor.of("output", self.output_shape)

    def resolve_file(self, spec: TensorSpec) -> str:
        """Absolute or data_dir-relative path of an argument's file."""
        if spec.file is None:
            raise ConfigurationError(
                f"no file given for argument '{spec.name}'",
                config_key=f"arguments.{spec.name}.file",
            )
        path = Path(spec.file)
        if not path.is_absolute():
            path = Path(self.data_dir) / path
        return os.fspath(path)

    def with_input(self, path: str) -> "ModelConfig":
        """Copy of this config reading the input image from ``path``."""
        first = dataclasses.replace(self.arguments[0], file=path)
        return dataclasses.replace(self, arguments=(first,) + self.arguments[1:])

    def replace(self, **changes: Any) -> "ModelConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> "ModelConfig":
        try:
            arguments = tuple(
                TensorSpec(
                    name=arg["name"],
                    shape=tuple(int(d) for d in arg["shape"]),
                    file=arg.get("file"),
                )
                for arg in data["arguments"]
            )
            known = {f.name for f in dataclasses.fields(cls)}
            options = {
                key: value
                for key, value in data.items()
                if key in known and key not in ("arguments", "labels", "output_shape")
            }
            return cls(
                arguments=arguments,
                labels=tuple(str(label) for label in data["labels"]),
                output_shape=tuple(int(d) for d in data["output_shape"]),
                **options,
            )
        except KeyError as e:
            raise ConfigurationError(f"missing key {e}", config_key=str(e.args[0])) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"malformed model description: {e}") from e

    def to_dict(self) -> dict:
        data = dataclasses.asdict(self)
        data["arguments"] = [
            {"name": a.name, "shape": list(a.shape), "file": a.file} for a in self.arguments
        ]
        data["labels"] = list(self.labels)
        data["output_shape"] = list(self.output_shape)
        return data


PRESETS: dict[str, ModelConfig] = {
    "fashion-mnist-mlp": ModelConfig(
        name="fashion-mnist-mlp",
        artifact="./linear_relu_mnist.so",
        arguments=(
            TensorSpec("input_img", (1, 784), "weights/input_img.bin"),
            TensorSpec("w0", (128, 784), "weights/w0.bin"),
            TensorSpec("b0", (128,), "weights/b0.bin"),
            TensorSpec("w1", (10, 128), "weights/w1.bin"),
            TensorSpec("b1", (10,), "weights/b1.bin"),
        ),
        labels=FASHION_MNIST_LABELS,
        output_shape=(1, 10),
    ),
    "cifar10": ModelConfig(
        name="cifar10",
        artifact="./libtvm_model.so",
        arguments=(TensorSpec("input_img", (1, 3, 32, 32)),),
        labels=CIFAR10_LABELS,
        output_shape=(1, 10),
    ),
}


def get_preset(name: str) -> ModelConfig:
    try:
        return PRESETS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown preset '{name}' (available: {', '.join(sorted(PRESETS))})",
            config_key="preset",
            config_value=name,
        ) from None


def load_config(path) -> ModelConfig:
    """
    Read a JSON model description.

    Raises:
        ConfigurationError: If the file is unreadable or malformed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e.strerror or e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    data.setdefault("name", Path(path).stem)
    return ModelConfig.from_dict(data).validate()
