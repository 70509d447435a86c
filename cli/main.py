"""Command line entry point for neurograph training runs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Iterable

from neurograph.training import pipelines


def _format_result(result) -> str:
    payload = {
        "iterations": result.iterations,
        "total_error": result.total_error,
        "state": result.state,
        "metrics": result.metrics_path,
        "summary": result.summary_path,
        "weights": result.weights_path,
    }
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor-backprop",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--learning-rate", type=float, help="Override the learning rate")
    parser.add_argument("--max-iterations", type=int, help="Override the iteration limit")
    parser.add_argument("--max-error", type=float, help="Override the error threshold")
    parser.add_argument(
        "--batch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Apply weight changes once per epoch instead of after every pattern",
    )
    parser.add_argument("--seed", type=int, help="Seed for the initial weights")
    parser.add_argument("--run-dir", help="Directory receiving the run artifacts")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = json.loads(json.dumps(pipelines.read_config_file(args.config)))
        if {"network", "data", "train"} <= set(override.keys()):
            config = override
        else:
            config = _merge(config, override)

    train_cfg = config.setdefault("train", {})
    if args.learning_rate is not None:
        train_cfg["learning_rate"] = float(args.learning_rate)
    if args.max_iterations is not None:
        train_cfg["max_iterations"] = int(args.max_iterations)
    if args.max_error is not None:
        train_cfg["max_error"] = float(args.max_error)
    if args.batch is not None:
        train_cfg["batch_mode"] = bool(args.batch)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.seed is not None:
        config.setdefault("network", {})["seed"] = int(args.seed)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
