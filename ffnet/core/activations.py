"""Activation functions and the hidden/output activation registries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Union

import numpy as np

from .types import Array

ActivationFn = Callable[[Array], Array]

DEFAULT_ACTIVATION_NAME = "sigmoid"


def linear(x: Array) -> Array:
    """Return ``x`` unchanged."""

    return np.asarray(x, dtype=np.float64)


def linear_deriv(x: Array) -> Array:
    return np.ones_like(x, dtype=np.float64)


def sigmoid(x: Array) -> Array:
    """Return the logistic sigmoid of ``x``."""

    return 1.0 / (1.0 + np.exp(-x))


def sigmoid_deriv(x: Array) -> Array:
    s = sigmoid(x)
    return s * (1.0 - s)


def rational_sigmoid(x: Array) -> Array:
    """Sigmoid-shaped ``x / (1 + sqrt(1 + x^2))`` without exponentials."""

    return x / (1.0 + np.sqrt(1.0 + x * x))


def rational_sigmoid_deriv(x: Array) -> Array:
    root = np.sqrt(1.0 + x * x)
    return 1.0 / (root * (1.0 + root))


def tanh(x: Array) -> Array:
    return np.tanh(x)


def tanh_deriv(x: Array) -> Array:
    return 1.0 - np.tanh(x) ** 2


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def relu_deriv(x: Array) -> Array:
    return (x > 0).astype(np.float64)


def softmax(x: Array) -> Array:
    """Row-wise softmax over the last axis."""

    shifted = x - np.max(x, axis=-1, keepdims=True)
    exp = np.exp(shifted)
    return exp / np.sum(exp, axis=-1, keepdims=True)


def softmax_deriv(x: Array) -> Array:
    # Diagonal of the Jacobian; training pairs softmax with cross-entropy instead.
    s = softmax(x)
    return s * (1.0 - s)


@dataclass(frozen=True)
class NamedActivation:
    """Activation function with a canonical identifier in a registry."""

    name: str
    function: ActivationFn
    derivative: ActivationFn

    def __call__(self, x: Array) -> Array:
        return self.function(x)


@dataclass(frozen=True)
class CustomActivation:
    """Activation function supplied at runtime with no registry entry.

    Custom activations are stored as the ``"custom"`` sentinel and can not be
    restored from a model file; after loading, assign the original function
    back onto the network.
    """

    function: ActivationFn
    derivative: ActivationFn
    label: str = "custom"

    def __call__(self, x: Array) -> Array:
        return self.function(x)


Activation = Union[NamedActivation, CustomActivation]


def is_activation(value: object) -> bool:
    return isinstance(value, (NamedActivation, CustomActivation))


def is_custom(activation: Activation) -> bool:
    return isinstance(activation, CustomActivation)


class ActivationRegistry:
    """Registry of named activation functions for one side of the network."""

    def __init__(self, side: str) -> None:
        self.side = side
        self._registry: Dict[str, NamedActivation] = {}

    def register(self, name: str, function: ActivationFn, derivative: ActivationFn) -> NamedActivation:
        activation = NamedActivation(name, function, derivative)
        self._registry[name] = activation
        return activation

    def get(self, name: str) -> NamedActivation:
        if name not in self._registry:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown {self.side} activation {name!r}. Available activations: {available}")
        return self._registry[name]

    def resolve(self, name: str) -> NamedActivation | None:
        """Return the activation registered as ``name`` or ``None``."""

        return self._registry.get(name)

    def name_of(self, activation: Activation) -> str | None:
        """Return the canonical name of ``activation`` or ``None`` if unregistered."""

        if not isinstance(activation, NamedActivation):
            return None
        registered = self._registry.get(activation.name)
        if registered is None or registered != activation:
            return None
        return activation.name

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def __contains__(self, name: object) -> bool:
        return name in self._registry


HIDDEN = ActivationRegistry("hidden")
OUTPUT = ActivationRegistry("output")

for _registry in (HIDDEN, OUTPUT):
    _registry.register("linear", linear, linear_deriv)
    _registry.register("sigmoid", sigmoid, sigmoid_deriv)
    _registry.register("rationalSigmoid", rational_sigmoid, rational_sigmoid_deriv)
    _registry.register("hyperbolicTangent", tanh, tanh_deriv)
HIDDEN.register("reLU", relu, relu_deriv)
OUTPUT.register("softmax", softmax, softmax_deriv)


def hidden(name: str) -> NamedActivation:
    """Return the registered hidden-layer activation called ``name``."""

    return HIDDEN.get(name)


def output(name: str) -> NamedActivation:
    """Return the registered output-layer activation called ``name``."""

    return OUTPUT.get(name)


__all__ = [
    "DEFAULT_ACTIVATION_NAME",
    "HIDDEN",
    "OUTPUT",
    "Activation",
    "ActivationRegistry",
    "CustomActivation",
    "NamedActivation",
    "hidden",
    "is_activation",
    "is_custom",
    "linear",
    "output",
    "rational_sigmoid",
    "relu",
    "sigmoid",
    "softmax",
    "tanh",
]
