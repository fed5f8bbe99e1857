"""Rebuild networks from persisted fields and extract fields from networks."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Tuple

from ..core.activations import (
    DEFAULT_ACTIVATION_NAME,
    HIDDEN,
    OUTPUT,
    Activation,
    ActivationRegistry,
)
from ..core.network import NeuralNet, build_network
from ..core.structure import build_topology
from ..errors import UnrecognizedActivationError
from .codec import PersistedModel, load_from_path, save_to_path

CUSTOM_SENTINEL = "custom"


class CustomActivationWarning(UserWarning):
    """Emitted when a stored ``"custom"`` activation is replaced by sigmoid."""


@dataclass(frozen=True)
class Diagnostic:
    """Informational message produced while loading a model."""

    side: str
    message: str


@dataclass(frozen=True)
class LoadedModel:
    """A reconstructed network together with the diagnostics raised on load."""

    network: NeuralNet
    diagnostics: Tuple[Diagnostic, ...] = ()


DiagnosticSink = Callable[[Diagnostic], None]


def _custom_message(side: str) -> str:
    layer = "hidden layer" if side == "hidden" else "output"
    return (
        f"custom {layer} activation function detected in stored network; "
        f"defaulting to {DEFAULT_ACTIVATION_NAME}. Reassign the network's "
        f"{side}_activation to the original function before using it."
    )


def resolve_activation(
    name: str, side: str, registry: ActivationRegistry
) -> tuple[Activation, Diagnostic | None]:
    """Map a stored activation name to a function for ``side``.

    ``"custom"`` resolves to the default sigmoid and yields a diagnostic.
    Any other unregistered name raises :class:`UnrecognizedActivationError`.
    """

    if name == CUSTOM_SENTINEL:
        return registry.get(DEFAULT_ACTIVATION_NAME), Diagnostic(side, _custom_message(side))
    activation = registry.resolve(name)
    if activation is None:
        raise UnrecognizedActivationError(name, side, available=list(registry.names()))
    return activation, None


def from_persisted(model: PersistedModel) -> LoadedModel:
    """Rebuild a validated :class:`NeuralNet` from decoded fields.

    Raises ``UnrecognizedActivationError``, ``StructureError`` or
    ``WeightShapeError`` depending on which step rejects the data.
    """

    diagnostics: List[Diagnostic] = []
    hidden, note = resolve_activation(model.hidden_activation, "hidden", HIDDEN)
    if note is not None:
        diagnostics.append(note)
    output, note = resolve_activation(model.output_activation, "output", OUTPUT)
    if note is not None:
        diagnostics.append(note)

    topology = build_topology(
        model.layer_node_counts,
        hidden_activation=hidden,
        output_activation=output,
        batch_size=model.batch_size,
        learning_rate=model.learning_rate,
        momentum=model.momentum,
    )
    network = build_network(topology, model.weights)
    return LoadedModel(network=network, diagnostics=tuple(diagnostics))


def to_persisted(network: NeuralNet) -> PersistedModel:
    """Extract the storable fields of ``network``."""

    hidden_name = HIDDEN.name_of(network.hidden_activation) or CUSTOM_SENTINEL
    output_name = OUTPUT.name_of(network.output_activation) or CUSTOM_SENTINEL
    return PersistedModel(
        layer_node_counts=tuple(network.layer_node_counts),
        momentum=network.momentum,
        learning_rate=network.learning_rate,
        batch_size=network.batch_size,
        hidden_activation=hidden_name,
        output_activation=output_name,
        weights=tuple(tuple(layer) for layer in network.all_weights()),
    )


def load_model(
    path: str | Path,
    *,
    warn: bool = True,
    on_diagnostic: DiagnosticSink | None = None,
) -> LoadedModel:
    """Load the model file at ``path``.

    Diagnostics are returned on the result, forwarded to ``on_diagnostic`` and,
    unless ``warn`` is false, emitted once per affected side as a
    :class:`CustomActivationWarning`.
    """

    loaded = from_persisted(load_from_path(path))
    for diagnostic in loaded.diagnostics:
        if on_diagnostic is not None:
            on_diagnostic(diagnostic)
        if warn:
            warnings.warn(diagnostic.message, CustomActivationWarning, stacklevel=2)
    return loaded


def save_model(network: NeuralNet, path: str | Path, *, indent: int | None = None) -> str:
    """Write ``network`` to ``path`` as a JSON model file, replacing any existing file."""

    return save_to_path(to_persisted(network), path, indent=indent)


__all__ = [
    "CUSTOM_SENTINEL",
    "CustomActivationWarning",
    "Diagnostic",
    "LoadedModel",
    "from_persisted",
    "load_model",
    "resolve_activation",
    "save_model",
    "to_persisted",
]
