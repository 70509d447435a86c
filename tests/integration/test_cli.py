import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_runs_preset(tmp_path, capsys):
    main(
        [
            "--preset",
            "xor-backprop",
            "--max-iterations",
            "20",
            "--max-error",
            "0",
            "--run-dir",
            str(tmp_path),
        ]
    )
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["iterations"] == 20
    assert payload["state"] == "stopped"
    assert (tmp_path / "metrics.jsonl").exists()
    assert payload["summary"] == str(tmp_path / "summary.json")


def test_cli_overrides_and_dump(tmp_path, capsys):
    dump = tmp_path / "resolved.json"
    override = tmp_path / "override.yaml"
    override.write_text("network:\n  seed: 5\n")
    main(
        [
            "--preset",
            "xor-batch",
            "--config",
            str(override),
            "--no-batch",
            "--learning-rate",
            "0.2",
            "--max-iterations",
            "3",
            "--run-dir",
            str(tmp_path / "run"),
            "--dump-config",
            str(dump),
        ]
    )
    resolved = json.loads(dump.read_text())
    assert resolved["network"]["seed"] == 5
    assert resolved["network"]["layers"] == [2, 4, 1]
    assert resolved["train"]["batch_mode"] is False
    assert resolved["train"]["learning_rate"] == 0.2
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["iterations"] <= 3


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert "xor-backprop" in names
    assert "xor-tanh" in names


def test_cli_default_run_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "and-lms", "--max-iterations", "4"])
    run_dir = Path("runs/and-lms")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "weights.json").exists()
