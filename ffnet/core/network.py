"""Fully connected feed-forward network with bias-folded weight matrices."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import List, Sequence

import numpy as np

from ..errors import WeightShapeError
from .activations import Activation, NamedActivation, is_activation
from .structure import Topology
from .types import Array, Batch, ForwardState


def _augment(x: Array) -> Array:
    ones = np.ones((x.shape[0], 1), dtype=np.float64)
    return np.hstack([x, ones])


class NeuralNet:
    """Feed-forward network described by a :class:`Topology`.

    Each weighted layer ``i`` owns a ``(fan_in + 1, fan_out)`` matrix whose
    last row holds the bias terms. The flattened form of a layer (see
    :meth:`all_weights`) is the row-major ravel of that matrix.
    """

    def __init__(
        self,
        topology: Topology,
        weights: Sequence[Sequence[float]] | None = None,
        *,
        seed: int = 0,
    ) -> None:
        self.topology = topology
        if weights is None:
            self.weights = self._init_weights(seed)
        else:
            self.weights = _reshape_weights(topology, weights)
        self._velocity: List[Array] = [np.zeros_like(W) for W in self.weights]

    def _init_weights(self, seed: int) -> List[Array]:
        rng = np.random.default_rng(seed)
        weights: List[Array] = []
        for rows, cols in self.topology.layer_weight_shapes:
            bound = 1.0 / np.sqrt(rows - 1)
            weights.append(rng.uniform(-bound, bound, size=(rows, cols)))
        return weights

    # ------------------------------------------------------------------
    # Topology accessors

    @property
    def layer_node_counts(self) -> List[int]:
        return list(self.topology.layer_node_counts)

    @property
    def batch_size(self) -> int:
        return self.topology.batch_size

    @property
    def learning_rate(self) -> float:
        return self.topology.learning_rate

    @property
    def momentum(self) -> float:
        return self.topology.momentum

    @property
    def hidden_activation(self) -> Activation:
        return self.topology.hidden_activation

    @hidden_activation.setter
    def hidden_activation(self, activation: Activation) -> None:
        if not is_activation(activation):
            raise TypeError(f"Expected an activation function, got {activation!r}")
        self.topology = replace(self.topology, hidden_activation=activation)

    @property
    def output_activation(self) -> Activation:
        return self.topology.output_activation

    @output_activation.setter
    def output_activation(self, activation: Activation) -> None:
        if not is_activation(activation):
            raise TypeError(f"Expected an activation function, got {activation!r}")
        self.topology = replace(self.topology, output_activation=activation)

    def all_weights(self) -> List[List[float]]:
        """Return one flat, row-major list of floats per weighted layer."""

        return [W.ravel().tolist() for W in self.weights]

    def parameter_count(self) -> int:
        return int(sum(int(W.size) for W in self.weights))

    # ------------------------------------------------------------------
    # Inference and training

    def forward(self, inputs: Array) -> ForwardState:
        x = np.atleast_2d(np.asarray(inputs, dtype=np.float64))
        if x.shape[1] != self.topology.layer_node_counts[0]:
            raise ValueError(
                f"Expected {self.topology.layer_node_counts[0]} input features, got {x.shape[1]}"
            )
        layer_inputs: List[Array] = []
        pre_activations: List[Array] = []
        last_idx = len(self.weights) - 1
        for idx, W in enumerate(self.weights):
            augmented = _augment(x)
            z = augmented @ W
            layer_inputs.append(augmented)
            pre_activations.append(z)
            activation = self.output_activation if idx == last_idx else self.hidden_activation
            x = activation(z)
        return ForwardState(layer_inputs=layer_inputs, pre_activations=pre_activations, output=x)

    def infer(self, inputs: Array) -> Array:
        """Run a forward pass on one sample (1-D) or a batch of samples (2-D)."""

        single = np.ndim(inputs) == 1
        output = self.forward(inputs).output
        return output[0] if single else output

    def _output_delta(self, state: ForwardState, targets: Array) -> Array:
        error = state.output - targets
        activation = self.output_activation
        if isinstance(activation, NamedActivation) and activation.name == "softmax":
            return error
        return error * activation.derivative(state.pre_activations[-1])

    def train_batch(self, batch: Batch) -> float:
        """Apply one momentum SGD step on ``batch`` and return its mean squared error."""

        targets = np.atleast_2d(np.asarray(batch.targets, dtype=np.float64))
        state = self.forward(batch.inputs)
        n = targets.shape[0]
        loss = float(np.mean(np.square(state.output - targets)))

        delta = self._output_delta(state, targets)
        grads: List[Array] = [np.empty(0)] * len(self.weights)
        for idx in reversed(range(len(self.weights))):
            grads[idx] = state.layer_inputs[idx].T @ delta / n
            if idx > 0:
                back = delta @ self.weights[idx][:-1].T
                delta = back * self.hidden_activation.derivative(state.pre_activations[idx - 1])

        for idx, grad in enumerate(grads):
            self._velocity[idx] = self.momentum * self._velocity[idx] - self.learning_rate * grad
            self.weights[idx] = self.weights[idx] + self._velocity[idx]
        return loss

    def train(self, inputs: Array, targets: Array, epochs: int = 1) -> float:
        """Train for ``epochs`` passes in mini-batches of :attr:`batch_size`.

        Returns the sample-weighted mean squared error of the final epoch.
        """

        x = np.atleast_2d(np.asarray(inputs, dtype=np.float64))
        y = np.atleast_2d(np.asarray(targets, dtype=np.float64))
        if x.shape[0] != y.shape[0]:
            raise ValueError(f"Got {x.shape[0]} input samples but {y.shape[0]} targets")
        epoch_loss = 0.0
        for _ in range(max(1, epochs)):
            total = 0.0
            for start in range(0, x.shape[0], self.batch_size):
                end = start + self.batch_size
                batch = Batch(inputs=x[start:end], targets=y[start:end])
                total += self.train_batch(batch) * batch.inputs.shape[0]
            epoch_loss = total / x.shape[0]
        return epoch_loss

    # ------------------------------------------------------------------
    # Persistence

    def save(self, path: str | Path) -> None:
        """Persist the network to a JSON model file at ``path``."""

        from ..storage import save_model

        save_model(self, path)

    @classmethod
    def load(cls, path: str | Path) -> "NeuralNet":
        """Load a network from ``path``; custom activations fall back to sigmoid."""

        from ..storage import load_model

        return load_model(path).network


def _reshape_weights(topology: Topology, weights: Sequence[Sequence[float]]) -> List[Array]:
    layers = list(weights)
    if len(layers) != topology.num_weighted_layers:
        raise WeightShapeError(
            f"expected {topology.num_weighted_layers} weighted layers for "
            f"{list(topology.layer_node_counts)}, got {len(layers)}",
            expected=topology.num_weighted_layers,
            actual=len(layers),
        )
    matrices: List[Array] = []
    for idx, (layer, shape) in enumerate(zip(layers, topology.layer_weight_shapes)):
        flat = np.asarray(layer, dtype=np.float64)
        expected = shape[0] * shape[1]
        if flat.ndim != 1 or flat.size != expected:
            raise WeightShapeError(
                f"layer {idx} expects {expected} values for a {shape[0] - 1}->{shape[1]} "
                f"layer with bias, got {flat.size}",
                layer=idx,
                expected=expected,
                actual=int(flat.size),
            )
        matrices.append(flat.reshape(shape).copy())
    return matrices


def build_network(topology: Topology, flattened_weights: Sequence[Sequence[float]]) -> NeuralNet:
    """Create a :class:`NeuralNet` from ``topology`` and per-layer flat weights."""

    return NeuralNet(topology, weights=flattened_weights)


__all__ = ["NeuralNet", "build_network"]
