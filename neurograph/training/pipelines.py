"""Config-driven training runs and named presets."""

from __future__ import annotations

import json
import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import yaml

from ..core.errors import ConfigurationError, DimensionMismatchError
from ..core.network import NeuralNetwork, multilayer_perceptron, perceptron
from ..core.types import DataSet, RunResult
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.summary import write_summary
from .config import LearningConfig
from .losses import REGISTRY as ERROR_REGISTRY
from .rules import (
    LMS,
    BackPropagation,
    BinaryDeltaRule,
    MomentumBackpropagation,
    ResilientPropagation,
)
from .supervised import SupervisedLearning

logger = logging.getLogger(__name__)

_TRUTH_TABLES: Dict[str, List[List[List[float]]]] = {
    "xor": [[[0, 0], [0]], [[0, 1], [1]], [[1, 0], [1]], [[1, 1], [0]]],
    "and": [[[0, 0], [0]], [[0, 1], [0]], [[1, 0], [0]], [[1, 1], [1]]],
    "or": [[[0, 0], [0]], [[0, 1], [1]], [[1, 0], [1]], [[1, 1], [1]]],
}

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-backprop": {
        "network": {"layers": [2, 3, 1], "transfer": "sigmoid", "use_bias": True, "seed": 123},
        "data": {"name": "xor"},
        "train": {
            "rule": "backprop",
            "learning_rate": 0.5,
            "max_error": 0.01,
            "max_iterations": 20000,
            "run_dir": "runs/xor-backprop",
        },
    },
    "xor-momentum": {
        "network": {"layers": [2, 3, 1], "transfer": "sigmoid", "use_bias": True, "seed": 123},
        "data": {"name": "xor"},
        "train": {
            "rule": "momentum",
            "learning_rate": 0.3,
            "momentum": 0.6,
            "max_error": 0.01,
            "max_iterations": 20000,
            "run_dir": "runs/xor-momentum",
        },
    },
    "xor-batch": {
        "network": {"layers": [2, 4, 1], "transfer": "sigmoid", "use_bias": True, "seed": 7},
        "data": {"name": "xor"},
        "train": {
            "rule": "backprop",
            "learning_rate": 0.9,
            "batch_mode": True,
            "max_error": 0.01,
            "max_iterations": 5000,
            "min_error_change": 1e-9,
            "min_error_change_iterations_limit": 200,
            "run_dir": "runs/xor-batch",
        },
    },
    "xor-rprop": {
        "network": {"layers": [2, 4, 1], "transfer": "sigmoid", "use_bias": True, "seed": 7},
        "data": {"name": "xor"},
        "train": {
            "rule": "rprop",
            "learning_rate": 0.1,
            "batch_mode": True,
            "max_error": 0.01,
            "max_iterations": 2000,
            "run_dir": "runs/xor-rprop",
        },
    },
    "and-lms": {
        "network": {"layers": [2, 1], "transfer": "linear", "use_bias": True, "seed": 1},
        "data": {"name": "and"},
        "train": {
            "rule": "lms",
            "learning_rate": 0.1,
            "max_error": 0.05,
            "max_iterations": 500,
            "run_dir": "runs/and-lms",
        },
    },
    "or-perceptron": {
        "network": {"type": "perceptron", "layers": [2, 1], "use_bias": True, "seed": 123},
        "data": {"name": "or"},
        "train": {
            "rule": "binary_delta",
            "learning_rate": 0.1,
            "max_error": 0.0,
            "max_iterations": 1000,
            "run_dir": "runs/or-perceptron",
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Load a JSON or YAML run configuration."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix == ".json":
        data = json.loads(text or "{}")
    else:
        data = yaml.safe_load(text) or {}

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"network", "data", "train"} - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def build_dataset(data_cfg: Mapping[str, object]) -> DataSet:
    """Build an in-memory data set from a truth-table name or inline rows."""

    if "rows" in data_cfg:
        rows = data_cfg["rows"]
    else:
        name = str(data_cfg.get("name", "xor")).lower()
        if name not in _TRUTH_TABLES:
            available = ", ".join(sorted(_TRUTH_TABLES))
            raise KeyError(f"Unknown data set {name!r}. Available: {available}")
        rows = _TRUTH_TABLES[name]
    rows = list(rows)  # type: ignore[arg-type]
    if not rows:
        raise ConfigurationError("Data set configuration has no rows")
    first_in, first_out = rows[0]
    dataset = DataSet(input_size=len(first_in), output_size=len(first_out))
    for inputs, targets in rows:
        dataset.add_row(inputs, targets)
    return dataset


def build_rule(train_cfg: Mapping[str, object]):
    name = str(train_cfg.get("rule", "backprop")).lower()
    if name == "backprop":
        return BackPropagation()
    if name == "momentum":
        return MomentumBackpropagation(momentum=float(train_cfg.get("momentum", 0.25)))
    if name == "rprop":
        return ResilientPropagation()
    if name == "lms":
        return LMS()
    if name == "binary_delta":
        return BinaryDeltaRule()
    raise ValueError(f"Unknown learning rule: {name}")


def build_network(network_cfg: Mapping[str, object], dataset: DataSet) -> NeuralNetwork:
    layers = [int(size) for size in network_cfg.get("layers", [])]  # type: ignore[union-attr]
    if not layers:
        layers = [dataset.input_size, int(network_cfg.get("hidden", 3)), dataset.output_size]
    if layers[0] != dataset.input_size:
        raise DimensionMismatchError(
            f"Configured {layers[0]} inputs but data set rows have {dataset.input_size}"
        )
    if layers[-1] != dataset.output_size:
        raise DimensionMismatchError(
            f"Configured {layers[-1]} outputs but data set rows have {dataset.output_size}"
        )
    seed = network_cfg.get("seed")
    if network_cfg.get("type") == "perceptron":
        if len(layers) != 2:
            raise ConfigurationError(f"A perceptron has exactly two layers, got {layers}")
        return perceptron(
            layers[0],
            layers[1],
            use_bias=bool(network_cfg.get("use_bias", True)),
            seed=int(seed) if seed is not None else None,
        )
    return multilayer_perceptron(
        *layers,
        transfer=str(network_cfg.get("transfer", "sigmoid")),
        use_bias=bool(network_cfg.get("use_bias", True)),
        seed=int(seed) if seed is not None else None,
    )


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    network_cfg = dict(config.get("network", {}))  # type: ignore[arg-type]
    data_cfg = dict(config.get("data", {}))  # type: ignore[arg-type]
    train_cfg = dict(config.get("train", {}))  # type: ignore[arg-type]

    dataset = build_dataset(data_cfg)
    network = build_network(network_cfg, dataset)
    rule = build_rule(train_cfg)
    learning_cfg = LearningConfig.from_mapping(train_cfg)
    error_function = ERROR_REGISTRY.create(str(train_cfg.get("error_function", "mse")))

    run_dir = _resolve_run_dir(train_cfg, str(data_cfg.get("name", "inline")), rule.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    seed = network_cfg.get("seed")
    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=int(seed) if seed is not None else None)
    csv_sink = CsvSink(run_dir / "metrics.csv")
    learning = SupervisedLearning(
        rule=rule,
        config=learning_cfg,
        error_function=error_function,
        listeners=[jsonl, csv_sink],
    )
    network.set_learning_rule(learning)

    _print_startup_summary(
        dataset_name=str(data_cfg.get("name", "inline")),
        layers=[len(layer) for layer in network.layers],
        rule=rule.name,
        error_function=error_function.name,
        config=learning_cfg,
        param_count=network.parameter_count(),
    )

    final = network.learn(dataset)

    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(
        jsonl.path, run_dir / "summary.json", tail=summary_tail, final_state=final.state.value
    )
    (run_dir / "config.json").write_text(json.dumps(json.loads(json.dumps(config)), indent=2))
    weights_path = run_dir / "weights.json"
    weights_path.write_text(json.dumps({"weights": network.weights().tolist()}, indent=2))

    return RunResult(
        iterations=final.iteration,
        total_error=final.total_error,
        state=final.state.value,
        metrics_path=str(jsonl.path),
        summary_path=summary_path,
        weights_path=str(weights_path),
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str, rule: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset / rule


def _print_startup_summary(
    *,
    dataset_name: str,
    layers: Sequence[int],
    rule: str,
    error_function: str,
    config: LearningConfig,
    param_count: int,
) -> None:
    print("=== neurograph run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Layers        : {list(layers)}")
    print(f"Rule          : {rule}")
    print(f"Error         : {error_function}")
    print(f"Learning rate : {config.learning_rate}")
    print(f"Batch mode    : {config.batch_mode}")
    print(f"Parameters    : {param_count}")
    print("======================")


__all__ = [
    "run_pipeline",
    "load_preset",
    "presets",
    "read_config_file",
    "build_dataset",
    "build_network",
    "build_rule",
]
