import json

import pytest

from neurograph.core.errors import ConfigurationError, DimensionMismatchError
from neurograph.reporting.summary import compute_auc, summarize_curve
from neurograph.training import pipelines
from neurograph.training.rules import BinaryDeltaRule


def _config(tmp_path, name="xor-backprop", **train):
    cfg = pipelines.load_preset(name)
    cfg["train"]["run_dir"] = str(tmp_path)
    cfg["train"].update(train)
    return cfg


def test_run_pipeline_writes_artifacts(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path, max_iterations=25, max_error=0.0))
    assert result.iterations == 25
    assert result.state == "stopped"
    for name in ("metrics.jsonl", "metrics.csv", "summary.json", "config.json", "weights.json"):
        assert (tmp_path / name).exists()

    records = [json.loads(line) for line in (tmp_path / "metrics.jsonl").read_text().splitlines()]
    assert [record["epoch"] for record in records] == list(range(1, 26))
    assert all(record["seed"] == 123 for record in records)

    csv_lines = (tmp_path / "metrics.csv").read_text().splitlines()
    assert csv_lines[0] == "epoch,total_error,state"
    assert len(csv_lines) == 26

    summary = json.loads((tmp_path / "summary.json").read_text())
    assert summary["epochs"] == 25
    assert summary["final_state"] == "stopped"
    assert summary["total_error"]["last"] == pytest.approx(result.total_error)

    weights = json.loads((tmp_path / "weights.json").read_text())["weights"]
    assert len(weights) == 13


def test_pipeline_metrics_are_deterministic(tmp_path):
    first = tmp_path / "a"
    second = tmp_path / "b"
    pipelines.run_pipeline(_config(first, max_iterations=15))
    pipelines.run_pipeline(_config(second, max_iterations=15))
    for name in ("metrics.jsonl", "summary.json", "weights.json"):
        assert (first / name).read_bytes() == (second / name).read_bytes()


@pytest.mark.parametrize(
    "name", ["xor-momentum", "xor-batch", "xor-rprop", "and-lms", "xor-tanh", "or-perceptron"]
)
def test_presets_run(tmp_path, name):
    result = pipelines.run_pipeline(_config(tmp_path, name, max_iterations=5))
    assert 1 <= result.iterations <= 5


def test_preset_listing_includes_file_presets():
    names = set(pipelines.presets())
    assert {"xor-backprop", "xor-batch", "xor-rprop", "and-lms", "xor-tanh"} <= names
    assert pipelines.load_preset("xor-tanh")["network"]["transfer"] == "tanh"
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")


def test_load_preset_returns_copies():
    cfg = pipelines.load_preset("xor-backprop")
    cfg["train"]["learning_rate"] = 99.0
    assert pipelines.load_preset("xor-backprop")["train"]["learning_rate"] == 0.5


def test_inline_rows_and_dimension_check():
    data = pipelines.build_dataset({"rows": [[[0.0], [1.0]], [[1.0], [0.0]]]})
    assert len(data) == 2
    assert data.input_size == 1
    with pytest.raises(DimensionMismatchError):
        pipelines.build_network({"layers": [2, 1]}, data)
    with pytest.raises(KeyError):
        pipelines.build_dataset({"name": "nand"})


def test_read_config_file(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("train:\n  learning_rate: 0.3\n")
    assert pipelines.read_config_file(path) == {"train": {"learning_rate": 0.3}}
    with pytest.raises(ValueError):
        pipelines.read_config_file(tmp_path / "run.toml")


def test_unknown_rule():
    with pytest.raises(ValueError):
        pipelines.build_rule({"rule": "quickprop"})


def test_read_config_file_checks_suffix_before_reading(tmp_path):
    with pytest.raises(ValueError, match="Unsupported"):
        pipelines.read_config_file(tmp_path / "missing.ini")
    path = tmp_path / "run.json"
    path.write_text('{"data": {"name": "or"}}')
    assert pipelines.read_config_file(path) == {"data": {"name": "or"}}


def test_perceptron_preset_converges(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path, "or-perceptron"))
    assert result.state == "converged"
    assert result.total_error == 0.0
    weights = json.loads((tmp_path / "weights.json").read_text())["weights"]
    assert len(weights) == 3


def test_perceptron_network_shape_checked():
    data = pipelines.build_dataset({"name": "or"})
    with pytest.raises(ConfigurationError):
        pipelines.build_network({"type": "perceptron", "layers": [2, 2, 1]}, data)
    assert isinstance(pipelines.build_rule({"rule": "binary_delta"}), BinaryDeltaRule)


def test_curve_summary():
    assert compute_auc([]) == 0.0
    assert compute_auc([3.0]) == 0.0
    assert compute_auc([1.0, 3.0, 1.0]) == pytest.approx(4.0)
    summary = summarize_curve([4.0, 2.0, 1.0, 1.0], tail=2)
    assert summary["tail_window"] == 2
    assert summary["total_error"] == {
        "min": 1.0,
        "max": 4.0,
        "mean": 2.0,
        "last": 1.0,
        "tail_auc": 1.0,
    }
    assert summarize_curve([]) == {"tail_window": 0}
