"""JSON model file schema and structural encode/decode.

The codec only checks that each field is present and has the right JSON type.
Semantic validation (layer counts, hyperparameter ranges, weight shapes,
activation names) happens when the network is rebuilt, see
:mod:`ffnet.storage.reconstruct`.
"""

from __future__ import annotations

import json
import math
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Tuple

from ..errors import FormatError

# Attribute name -> JSON key, in on-disk order.
FIELDS: Dict[str, str] = {
    "layer_node_counts": "layerNodeCounts",
    "momentum": "momentum",
    "learning_rate": "learningRate",
    "batch_size": "batchSize",
    "hidden_activation": "hiddenActivation",
    "output_activation": "outputActivation",
    "weights": "weights",
}


@dataclass(frozen=True)
class PersistedModel:
    """Primitive field values of a stored network snapshot."""

    layer_node_counts: Tuple[int, ...]
    momentum: float
    learning_rate: float
    batch_size: int
    hidden_activation: str
    output_activation: str
    weights: Tuple[Tuple[float, ...], ...]

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-ready mapping in schema order."""

        payload: Dict[str, Any] = {}
        for attr, key in FIELDS.items():
            value = getattr(self, attr)
            if attr == "layer_node_counts":
                value = list(value)
            elif attr == "weights":
                value = [list(layer) for layer in value]
            payload[key] = value
        return payload


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _as_int(value: object, key: str) -> int:
    if not _is_int(value):
        raise FormatError(f"must be an integer, got {type(value).__name__}", field=key)
    return value  # type: ignore[return-value]


def _as_float(value: object, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FormatError(f"must be a number, got {type(value).__name__}", field=key)
    try:
        number = float(value)
    except OverflowError:
        raise FormatError("must be a finite number", field=key) from None
    if not math.isfinite(number):
        raise FormatError("must be a finite number", field=key)
    return number


def _as_str(value: object, key: str) -> str:
    if not isinstance(value, str):
        raise FormatError(f"must be a string, got {type(value).__name__}", field=key)
    return value


def _as_int_list(value: object, key: str) -> Tuple[int, ...]:
    if not isinstance(value, list):
        raise FormatError(f"must be a list of integers, got {type(value).__name__}", field=key)
    return tuple(_as_int(item, key) for item in value)


def _as_matrix(value: object, key: str) -> Tuple[Tuple[float, ...], ...]:
    if not isinstance(value, list):
        raise FormatError(f"must be a list of number lists, got {type(value).__name__}", field=key)
    layers = []
    for layer in value:
        if not isinstance(layer, list):
            raise FormatError(
                f"must be a list of number lists, found {type(layer).__name__} entry", field=key
            )
        layers.append(tuple(_as_float(item, key) for item in layer))
    return tuple(layers)


_DECODERS: Dict[str, Callable[[object, str], Any]] = {
    "layer_node_counts": _as_int_list,
    "momentum": _as_float,
    "learning_rate": _as_float,
    "batch_size": _as_int,
    "hidden_activation": _as_str,
    "output_activation": _as_str,
    "weights": _as_matrix,
}


def _reject_constant(token: str) -> float:
    raise FormatError(f"non-standard JSON constant {token}")


def from_dict(raw: Mapping[str, object]) -> PersistedModel:
    """Build a :class:`PersistedModel` from an already parsed JSON object."""

    values: Dict[str, Any] = {}
    for attr, key in FIELDS.items():
        if key not in raw:
            raise FormatError("is missing", field=key)
        values[attr] = _DECODERS[attr](raw[key], key)
    return PersistedModel(**values)


def decode(data: bytes | str) -> PersistedModel:
    """Parse model file contents into a :class:`PersistedModel`."""

    if isinstance(data, (bytes, bytearray)):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FormatError(f"not valid UTF-8 ({exc.reason})") from exc
    else:
        text = data
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except FormatError:
        raise
    except json.JSONDecodeError as exc:
        raise FormatError(f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc
    except ValueError as exc:
        raise FormatError(f"unreadable JSON value: {exc}") from exc
    except RecursionError as exc:
        raise FormatError("JSON nesting is too deep") from exc
    if not isinstance(raw, dict):
        raise FormatError(f"top-level value must be an object, got {type(raw).__name__}")
    return from_dict(raw)


def encode(model: PersistedModel, *, indent: int | None = None) -> bytes:
    """Serialise ``model`` to UTF-8 JSON bytes in schema order.

    Floats are written with ``repr`` precision so every float64 value is read
    back bit-for-bit. The same model always encodes to the same bytes.
    """

    separators: Tuple[str, str] | None = (",", ":") if indent is None else None
    text = json.dumps(model.to_dict(), indent=indent, separators=separators, allow_nan=False)
    return text.encode("utf-8")


def load_from_path(path: str | Path) -> PersistedModel:
    """Read and decode the model file at ``path``.

    ``OSError`` subclasses (missing file, permissions) propagate unchanged.
    """

    return decode(Path(path).read_bytes())


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_to_path(model: PersistedModel, path: str | Path, *, indent: int | None = None) -> str:
    """Encode ``model`` and atomically replace the file at ``path``.

    The bytes are written to a temporary file in the destination directory,
    flushed to disk and renamed over ``path``; an interrupted save leaves any
    previous file untouched. An existing file keeps its permission bits; a new
    file gets the usual umask-derived mode.
    """

    path = Path(path)
    payload = encode(model, indent=indent)
    directory = path.parent if str(path.parent) else Path(".")
    mode = _target_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return str(path)


__all__ = [
    "FIELDS",
    "PersistedModel",
    "decode",
    "encode",
    "from_dict",
    "load_from_path",
    "save_to_path",
]
