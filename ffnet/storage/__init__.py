"""Model file persistence for ffnet."""

from .codec import PersistedModel, decode, encode, load_from_path, save_to_path
from .reconstruct import (
    CUSTOM_SENTINEL,
    CustomActivationWarning,
    Diagnostic,
    LoadedModel,
    from_persisted,
    load_model,
    resolve_activation,
    save_model,
    to_persisted,
)

__all__ = [
    "CUSTOM_SENTINEL",
    "CustomActivationWarning",
    "Diagnostic",
    "LoadedModel",
    "PersistedModel",
    "decode",
    "encode",
    "from_persisted",
    "load_from_path",
    "load_model",
    "resolve_activation",
    "save_model",
    "save_to_path",
    "to_persisted",
]
