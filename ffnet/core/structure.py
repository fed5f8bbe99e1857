"""Topology description and validation for feed-forward networks."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..errors import StructureError
from .activations import Activation, is_activation


@dataclass(frozen=True)
class Topology:
    """Validated layer sizes, activations and training hyperparameters.

    Attributes
    ----------
    layer_node_counts:
        Node count per layer, input layer first and output layer last. Bias
        nodes are not included.
    hidden_activation, output_activation:
        Activation applied after every hidden layer and after the output
        layer respectively.
    batch_size, learning_rate, momentum:
        Hyperparameters consumed by :meth:`ffnet.core.network.NeuralNet.train`.
    """

    layer_node_counts: Tuple[int, ...]
    hidden_activation: Activation
    output_activation: Activation
    batch_size: int
    learning_rate: float
    momentum: float

    @property
    def num_weighted_layers(self) -> int:
        return len(self.layer_node_counts) - 1

    @property
    def layer_weight_shapes(self) -> List[Tuple[int, int]]:
        """``(fan_in + 1, fan_out)`` per weighted layer; the extra row is the bias."""

        counts = self.layer_node_counts
        return [(fan_in + 1, fan_out) for fan_in, fan_out in zip(counts[:-1], counts[1:])]

    @property
    def layer_weight_counts(self) -> List[int]:
        return [rows * cols for rows, cols in self.layer_weight_shapes]


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def build_topology(
    layer_node_counts: Sequence[int],
    hidden_activation: Activation,
    output_activation: Activation,
    batch_size: int,
    learning_rate: float,
    momentum: float,
) -> Topology:
    """Validate the arguments and return the corresponding :class:`Topology`."""

    counts = list(layer_node_counts)
    if len(counts) < 2:
        raise StructureError(
            f"at least 2 layers (input and output) are required, got {len(counts)}"
        )
    for idx, count in enumerate(counts):
        if not _is_int(count) or count < 1:
            raise StructureError(f"layer {idx} node count must be a positive integer, got {count!r}")
    if not is_activation(hidden_activation):
        raise StructureError(f"hidden activation must be an activation function, got {hidden_activation!r}")
    if not is_activation(output_activation):
        raise StructureError(f"output activation must be an activation function, got {output_activation!r}")
    if not _is_int(batch_size) or batch_size < 1:
        raise StructureError(f"batch size must be a positive integer, got {batch_size!r}")
    if not _is_real(learning_rate) or not math.isfinite(learning_rate) or learning_rate <= 0:
        raise StructureError(f"learning rate must be a finite number > 0, got {learning_rate!r}")
    if not _is_real(momentum) or not math.isfinite(momentum) or not 0.0 <= momentum <= 1.0:
        raise StructureError(f"momentum must be a number in [0, 1], got {momentum!r}")
    return Topology(
        layer_node_counts=tuple(counts),
        hidden_activation=hidden_activation,
        output_activation=output_activation,
        batch_size=batch_size,
        learning_rate=float(learning_rate),
        momentum=float(momentum),
    )


__all__ = ["Topology", "build_topology"]
