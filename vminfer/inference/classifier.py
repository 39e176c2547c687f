# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
Arg-max classification of an output vector against a label table.
"""

from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np


def argmax(values: Sequence[float]) -> int:
    """
    Index of the largest value, scanning left to right.

    The pick changes only when a strictly larger value is seen, so the
    first index wins on ties and a NaN after the first element is never
    chosen. Values are compared at their own precision.

    Raises:
        ValueError: If ``values`` is empty
    """
    array = np.asarray(values).reshape(-1)
    if array.size == 0:
        raise ValueError("cannot take arg-max of an empty output vector")
    best = 0
    for i in range(1, array.size):
        if array[best] < array[i]:
            best = i
    return best


@dataclass
class ClassificationResult:
    """Predicted class for one output vector."""

    index: int
    value: float
    label: str
    scores: np.ndarray = field(repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "value": self.value,
            "label": self.label,
            "scores": [float(v) for v in self.scores],
        }


class Classifier:
    """
    Maps output vectors to labels.

    The label table is fixed at construction; its length is the number of
    output elements the classifier expects.
    """

    def __init__(self, labels: Sequence[str]):
        self.labels: tuple[str, ...] = tuple(labels)

    @property
    def num_classes(self) -> int:
        return len(self.labels)

    def classify(self, values: Sequence[float]) -> ClassificationResult:
        scores = np.asarray(values, dtype=np.float32).reshape(-1)
        index = argmax(scores)
        return ClassificationResult(
            index=index,
            value=float(scores[index]),
            label=self.labels[index],
            scores=scores,
        )
