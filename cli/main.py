"""Command line entry point for inspecting and creating ffnet model files."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from ffnet.config import StorageConfig, load_config
from ffnet.core.activations import DEFAULT_ACTIVATION_NAME, HIDDEN, OUTPUT
from ffnet.core.network import NeuralNet
from ffnet.core.structure import build_topology
from ffnet.errors import FFNetError
from ffnet.storage import load_model, save_model
from ffnet.storage.reconstruct import LoadedModel, to_persisted


def _summary(path: Path, loaded: LoadedModel) -> dict:
    network = loaded.network
    stored = to_persisted(network)
    return {
        "path": str(path),
        "layerNodeCounts": network.layer_node_counts,
        "hiddenActivation": stored.hidden_activation,
        "outputActivation": stored.output_activation,
        "batchSize": network.batch_size,
        "learningRate": network.learning_rate,
        "momentum": network.momentum,
        "parameters": network.parameter_count(),
        "diagnostics": [
            {"side": diag.side, "message": diag.message} for diag in loaded.diagnostics
        ],
    }


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML storage config file"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="Print a JSON summary of a model file")
    inspect.add_argument("path", type=Path)

    check = sub.add_parser("check", help="Validate that a model file loads")
    check.add_argument("path", type=Path)

    init = sub.add_parser("init", help="Write a freshly initialised network")
    init.add_argument("--layers", type=int, nargs="+", required=True, help="Node count per layer")
    init.add_argument("--out", type=Path, required=True, help="Destination model file")
    init.add_argument(
        "--hidden",
        choices=sorted(HIDDEN.names()),
        default=DEFAULT_ACTIVATION_NAME,
        help="Hidden layer activation",
    )
    init.add_argument(
        "--output",
        choices=sorted(OUTPUT.names()),
        default=DEFAULT_ACTIVATION_NAME,
        help="Output layer activation",
    )
    init.add_argument("--batch-size", type=int, default=1)
    init.add_argument("--learning-rate", type=float, default=0.5)
    init.add_argument("--momentum", type=float, default=0.9)
    init.add_argument("--seed", type=int, default=0, help="Weight initialisation seed")
    return parser.parse_args(argv)


def _load(path: Path, config: StorageConfig) -> LoadedModel:
    try:
        return load_model(path, warn=config.warn_on_custom)
    except (FFNetError, OSError) as exc:
        raise SystemExit(f"error: {exc}") from None


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    config = load_config(args.config)

    if args.command == "inspect":
        loaded = _load(args.path, config)
        print(json.dumps(_summary(args.path, loaded), sort_keys=True))
        return

    if args.command == "check":
        loaded = _load(args.path, config)
        print(f"ok: {args.path} ({len(loaded.diagnostics)} diagnostics)")
        return

    if args.command == "init":
        try:
            topology = build_topology(
                args.layers,
                hidden_activation=HIDDEN.get(args.hidden),
                output_activation=OUTPUT.get(args.output),
                batch_size=args.batch_size,
                learning_rate=args.learning_rate,
                momentum=args.momentum,
            )
        except FFNetError as exc:
            raise SystemExit(f"error: {exc}") from None
        network = NeuralNet(topology, seed=args.seed)
        try:
            written = save_model(network, args.out, indent=config.indent)
        except OSError as exc:
            raise SystemExit(f"error: {exc}") from None
        print(json.dumps({"path": written, "parameters": network.parameter_count()}, sort_keys=True))


if __name__ == "__main__":
    main()
