"""Core typing contracts for ffnet."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Batch:
    """A single mini-batch of data."""

    inputs: Array
    targets: Array


@dataclass
class ForwardState:
    """Intermediate values captured during the forward pass.

    ``layer_inputs[i]`` is the bias-augmented input to weighted layer ``i``
    and ``pre_activations[i]`` is that layer's output before its activation.
    """

    layer_inputs: List[Array]
    pre_activations: List[Array]
    output: Array
