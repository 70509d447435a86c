"""Core typing contracts for neurograph."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Sequence

import numpy as np

from .errors import DimensionMismatchError

Array = np.ndarray


def as_vector(values: Iterable[float] | Array) -> Array:
    """Return ``values`` as a flat float64 vector."""

    return np.asarray(values, dtype=np.float64).reshape(-1)


@dataclass(frozen=True)
class DataSetRow:
    """A single (input, desired output) training pattern."""

    input: Array
    desired_output: Array

    def __post_init__(self) -> None:
        object.__setattr__(self, "input", as_vector(self.input))
        object.__setattr__(self, "desired_output", as_vector(self.desired_output))


@dataclass
class DataSet:
    """Ordered, fixed-width collection of :class:`DataSetRow` objects."""

    input_size: int
    output_size: int
    rows: List[DataSetRow] = field(default_factory=list)

    def __post_init__(self) -> None:
        rows, self.rows = list(self.rows), []
        for row in rows:
            self.add_row(row)

    def add_row(
        self,
        row: DataSetRow | Sequence[float],
        desired_output: Sequence[float] | None = None,
    ) -> None:
        if not isinstance(row, DataSetRow):
            row = DataSetRow(row, desired_output if desired_output is not None else [])
        if row.input.shape[0] != self.input_size:
            raise DimensionMismatchError(
                f"Row input has {row.input.shape[0]} values, data set expects {self.input_size}"
            )
        if row.desired_output.shape[0] != self.output_size:
            raise DimensionMismatchError(
                f"Row desired output has {row.desired_output.shape[0]} values, "
                f"data set expects {self.output_size}"
            )
        self.rows.append(row)

    @classmethod
    def from_arrays(cls, inputs: Array, targets: Array) -> "DataSet":
        inputs = np.atleast_2d(np.asarray(inputs, dtype=np.float64))
        targets = np.atleast_2d(np.asarray(targets, dtype=np.float64))
        if inputs.shape[0] != targets.shape[0]:
            raise DimensionMismatchError(
                f"Got {inputs.shape[0]} inputs but {targets.shape[0]} targets"
            )
        dataset = cls(input_size=inputs.shape[1], output_size=targets.shape[1])
        for x, y in zip(inputs, targets):
            dataset.add_row(DataSetRow(x, y))
        return dataset

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[DataSetRow]:
        return iter(self.rows)

    def __getitem__(self, idx: int) -> DataSetRow:
        return self.rows[idx]


class LearningState(enum.Enum):
    """Lifecycle of an iterative learning run."""

    READY = "ready"
    RUNNING = "running"
    STOPPED = "stopped"
    CONVERGED = "converged"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class EpochEvent:
    """Notification emitted once per completed epoch."""

    iteration: int
    total_error: float
    state: LearningState = LearningState.RUNNING


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`neurograph.training.pipelines.run_pipeline`."""

    iterations: int
    total_error: float
    state: str
    metrics_path: str = ""
    summary_path: str = ""
    weights_path: str = ""


__all__ = [
    "Array",
    "as_vector",
    "DataSetRow",
    "DataSet",
    "LearningState",
    "EpochEvent",
    "RunResult",
]
