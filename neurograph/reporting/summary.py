"""Error-curve summaries written next to the epoch metrics."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np


def compute_auc(errors: Sequence[float]) -> float:
    """Trapezoidal area under ``errors``, one unit per epoch."""

    curve = np.asarray(errors, dtype=np.float64)
    if curve.size < 2:
        return 0.0
    return float(np.sum(curve[1:] + curve[:-1]) * 0.5)


def summarize_curve(errors: Sequence[float], tail: int = 32) -> Dict[str, object]:
    """Statistics of a training-error curve; the AUC covers the last ``tail`` epochs."""

    if not errors:
        return {"tail_window": 0}
    curve = np.asarray(errors, dtype=np.float64)
    window = min(tail, curve.size)
    return {
        "tail_window": window,
        "total_error": {
            "min": float(curve.min()),
            "max": float(curve.max()),
            "mean": float(curve.mean()),
            "last": float(curve[-1]),
            "tail_auc": compute_auc(curve[-window:]),
        },
    }


def _read_epochs(metrics_jsonl: Path) -> List[Mapping[str, object]]:
    if not metrics_jsonl.exists():
        return []
    with metrics_jsonl.open(encoding="utf-8") as handle:
        return [json.loads(line) for line in handle if line.strip()]


def write_summary(
    metrics_jsonl: str | Path,
    out_summary_json: str | Path,
    *,
    tail: int = 32,
    final_state: Optional[str] = None,
) -> str:
    """Summarise the epochs in ``metrics_jsonl`` into ``out_summary_json``.

    Keys are sorted so identical runs produce identical bytes.
    """

    epochs = _read_epochs(Path(metrics_jsonl))
    errors = [float(epoch["total_error"]) for epoch in epochs if "total_error" in epoch]
    if final_state is None and epochs:
        final_state = str(epochs[-1].get("state"))

    summary: Dict[str, object] = {"version": 1, "epochs": len(epochs), "final_state": final_state}
    summary.update(summarize_curve(errors, tail))

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "summarize_curve", "write_summary"]
