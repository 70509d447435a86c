"""Seeded weight initialisation for neurograph networks."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .network import NeuralNetwork


@dataclass
class WeightsRandomizer:
    """Uniform weights in ``[-0.5, 0.5)``."""

    seed: int | None = None
    rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)

    def next_weight(self) -> float:
        return float(self.rng.random() - 0.5)

    def randomize(self, network: "NeuralNetwork") -> None:
        for connection in network.connections():
            connection.weight.value = self.next_weight()
            connection.weight.pending_change = 0.0


@dataclass
class RangeRandomizer(WeightsRandomizer):
    """Uniform weights in ``[min_weight, max_weight)``."""

    min_weight: float = -1.0
    max_weight: float = 1.0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.max_weight < self.min_weight:
            raise ValueError("max_weight must be >= min_weight")

    def next_weight(self) -> float:
        return float(self.rng.uniform(self.min_weight, self.max_weight))


@dataclass
class GaussianRandomizer(WeightsRandomizer):
    mean: float = 0.0
    std: float = 0.1

    def next_weight(self) -> float:
        return float(self.rng.normal(self.mean, self.std))


__all__ = ["WeightsRandomizer", "RangeRandomizer", "GaussianRandomizer"]
