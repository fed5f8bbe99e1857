"""Storage configuration from environment variables and JSON/YAML files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping

ENV_INDENT = "FFNET_JSON_INDENT"
ENV_WARN_ON_CUSTOM = "FFNET_WARN_ON_CUSTOM"


@dataclass(frozen=True)
class StorageConfig:
    """Options applied by the CLI when reading and writing model files.

    Attributes
    ----------
    indent:
        JSON indentation for written files; ``None`` writes compact JSON.
    warn_on_custom:
        Emit a :class:`~ffnet.storage.CustomActivationWarning` when a stored
        ``"custom"`` activation is replaced on load.
    """

    indent: int | None = None
    warn_on_custom: bool = True

    @classmethod
    def from_env(cls) -> "StorageConfig":
        indent_raw = os.environ.get(ENV_INDENT, "").strip()
        try:
            indent = int(indent_raw) if indent_raw else None
        except ValueError:
            raise ValueError(f"{ENV_INDENT} must be an integer, got {indent_raw!r}") from None
        warn = os.environ.get(ENV_WARN_ON_CUSTOM, "1").strip() != "0"
        return cls(indent=indent, warn_on_custom=warn)


def _read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML config files") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def load_config(path: str | Path | None = None) -> StorageConfig:
    """Return the environment config, overridden by the file at ``path`` if given."""

    config = StorageConfig.from_env()
    if path is None:
        return config
    overrides = dict(_read_config_file(Path(path)))
    known = {f.name for f in fields(StorageConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise KeyError(f"Unknown config keys: {', '.join(unknown)}")
    indent = overrides.get("indent", config.indent)
    if indent is not None and (not isinstance(indent, int) or isinstance(indent, bool)):
        raise ValueError(f"Config indent must be an integer or null, got {indent!r}")
    if not isinstance(overrides.get("warn_on_custom", True), bool):
        raise ValueError(
            f"Config warn_on_custom must be a boolean, got {overrides['warn_on_custom']!r}"
        )
    return replace(config, **overrides)


__all__ = ["ENV_INDENT", "ENV_WARN_ON_CUSTOM", "StorageConfig", "load_config"]
