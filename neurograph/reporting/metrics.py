"""Epoch listeners that persist the training curve."""

from __future__ import annotations

import csv
import json
from pathlib import Path

from ..core.types import EpochEvent


class JsonlSink:
    """Append-only JSONL writer for epoch events."""

    def __init__(self, path: str | Path, *, seed: int | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed

    def on_epoch(self, event: EpochEvent) -> None:
        record = {
            "epoch": int(event.iteration),
            "total_error": float(event.total_error),
            "state": event.state.value,
            "seed": self.seed,
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch


class CsvSink:
    """Write epoch events to CSV with a stable schema."""

    fieldnames = ("epoch", "total_error", "state")

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def on_epoch(self, event: EpochEvent) -> None:
        row = {
            "epoch": int(event.iteration),
            "total_error": float(event.total_error),
            "state": event.state.value,
        }
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


class HistoryCapture:
    """Keep epoch events in memory."""

    def __init__(self) -> None:
        self.history: list[EpochEvent] = []

    def on_epoch(self, event: EpochEvent) -> None:
        self.history.append(event)

    @property
    def errors(self) -> list[float]:
        return [event.total_error for event in self.history]


__all__ = ["JsonlSink", "CsvSink", "HistoryCapture"]
