"""Core numerical primitives for ffnet."""

from . import activations, network, structure, types

__all__ = ["activations", "network", "structure", "types"]
