"""Exception taxonomy for ffnet model loading and saving."""

from __future__ import annotations

from typing import Sequence


class FFNetError(Exception):
    """Base class for all errors raised by ffnet."""


class FormatError(FFNetError, ValueError):
    """Raised when a model file is not well-formed or a field is missing/mistyped."""

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.reason = reason
        self.field = field
        if field is None:
            message = f"Malformed model file: {reason}"
        else:
            message = f"Malformed model file: field {field!r} {reason}"
        super().__init__(message)


class UnrecognizedActivationError(FFNetError, ValueError):
    """Raised when a stored activation name is neither registered nor ``"custom"``."""

    def __init__(self, name: str, side: str, available: Sequence[str] = ()) -> None:
        self.name = name
        self.side = side
        message = f"Unrecognized {side} activation function in file: {name!r}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


class StructureError(FFNetError, ValueError):
    """Raised when topology validation rejects layer counts or hyperparameters."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid network structure: {reason}")


class WeightShapeError(FFNetError, ValueError):
    """Raised when flattened weights do not match the shape implied by the topology."""

    def __init__(
        self,
        reason: str,
        *,
        layer: int | None = None,
        expected: int | None = None,
        actual: int | None = None,
    ) -> None:
        self.reason = reason
        self.layer = layer
        self.expected = expected
        self.actual = actual
        super().__init__(f"Weight shape mismatch: {reason}")


__all__ = [
    "FFNetError",
    "FormatError",
    "StructureError",
    "UnrecognizedActivationError",
    "WeightShapeError",
]
