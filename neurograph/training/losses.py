"""Error functions accumulating per-pattern error over an epoch."""

from __future__ import annotations

import abc
from typing import Callable, Dict, Iterable

import numpy as np

from ..core.errors import DimensionMismatchError
from ..core.types import Array, as_vector


class ErrorFunction(abc.ABC):
    """Running total of pattern errors.

    Subclasses define how one pattern's error vector contributes to
    ``total_error`` and how the total is reported. The accumulator is reset
    once at the start of every epoch.
    """

    name = "error"
    averaged = True

    def __init__(self) -> None:
        self._total = 0.0
        self.pattern_count = 0

    def add_pattern_error(self, actual: Array, desired: Array) -> Array:
        actual = as_vector(actual)
        desired = as_vector(desired)
        if actual.shape != desired.shape:
            raise DimensionMismatchError(
                f"Output has {actual.shape[0]} values, desired output has {desired.shape[0]}"
            )
        error = desired - actual
        self._total += self._pattern_contribution(error, actual, desired)
        self.pattern_count += 1
        return error

    @abc.abstractmethod
    def _pattern_contribution(self, error: Array, actual: Array, desired: Array) -> float:
        """Amount one pattern adds to the running total."""

    def _report(self, total: float, count: int) -> float:
        return total / count if self.averaged else total

    @property
    def accumulated_error(self) -> float:
        """Raw sum of pattern contributions; never decreases within an epoch."""

        return self._total

    @property
    def total_error(self) -> float:
        if self.pattern_count == 0:
            return 0.0
        return self._report(self._total, self.pattern_count)

    def get_total_error(self) -> float:
        return self.total_error

    def reset(self) -> None:
        self._total = 0.0
        self.pattern_count = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(total_error={self.total_error!r}, patterns={self.pattern_count})"


class MeanSquaredError(ErrorFunction):
    """``Σ e² / (2 · patterns)``."""

    name = "mse"

    def _pattern_contribution(self, error: Array, actual: Array, desired: Array) -> float:
        return float(np.dot(error, error))

    def _report(self, total: float, count: int) -> float:
        return total / (2.0 * count)


class SumSquaredError(ErrorFunction):
    """``½ Σ e²`` summed over all patterns of the epoch."""

    name = "sse"
    averaged = False

    def _pattern_contribution(self, error: Array, actual: Array, desired: Array) -> float:
        return 0.5 * float(np.dot(error, error))


class MeanAbsoluteError(ErrorFunction):
    name = "mae"

    def _pattern_contribution(self, error: Array, actual: Array, desired: Array) -> float:
        return float(np.sum(np.abs(error)))


class CrossEntropyError(ErrorFunction):
    """``-Σ d · log(a)`` per pattern; outputs are clipped away from zero."""

    name = "cross_entropy"
    eps = 1e-9

    def _pattern_contribution(self, error: Array, actual: Array, desired: Array) -> float:
        probs = np.clip(actual, self.eps, 1.0)
        return float(-np.sum(desired * np.log(probs)))


class ErrorFunctionRegistry:
    """Central registry for error functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Callable[[], ErrorFunction]] = {}

    def register(self, name: str, factory: Callable[[], ErrorFunction]) -> None:
        self._registry[name] = factory

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def create(self, name: str) -> ErrorFunction:
        if name not in self._registry:
            available = ", ".join(sorted(self._registry))
            raise KeyError(f"Unknown error function {name!r}. Available: {available}")
        return self._registry[name]()


REGISTRY = ErrorFunctionRegistry()
REGISTRY.register("mse", MeanSquaredError)
REGISTRY.register("sse", SumSquaredError)
REGISTRY.register("mae", MeanAbsoluteError)
REGISTRY.register("cross_entropy", CrossEntropyError)
# Alias for parity with the common "ce" shorthand
REGISTRY.register("ce", CrossEntropyError)

__all__ = [
    "ErrorFunction",
    "MeanSquaredError",
    "SumSquaredError",
    "MeanAbsoluteError",
    "CrossEntropyError",
    "ErrorFunctionRegistry",
    "REGISTRY",
]
