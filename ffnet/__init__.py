"""ffnet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.activations import CustomActivation, NamedActivation
from .core.network import NeuralNet, build_network
from .core.structure import Topology, build_topology
from .errors import (
    FFNetError,
    FormatError,
    StructureError,
    UnrecognizedActivationError,
    WeightShapeError,
)
from .storage import CustomActivationWarning, Diagnostic, LoadedModel, load_model, save_model

__all__ = [
    "CustomActivation",
    "CustomActivationWarning",
    "Diagnostic",
    "FFNetError",
    "FormatError",
    "LoadedModel",
    "NamedActivation",
    "NeuralNet",
    "StructureError",
    "Topology",
    "UnrecognizedActivationError",
    "WeightShapeError",
    "activations",
    "build_network",
    "build_topology",
    "load_model",
    "save_model",
    "types",
]
