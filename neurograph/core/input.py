"""Input functions reducing a neuron's incoming connections to a net input."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .graph import Connection


class InputFunction(abc.ABC):
    name = "input"

    @abc.abstractmethod
    def net_input(self, connections: Sequence["Connection"]) -> float:
        """Reduce ``connections`` to a scalar net input."""


class WeightedSum(InputFunction):
    """Σ weight · source output, summed in connection order."""

    name = "weighted_sum"

    def net_input(self, connections: Sequence["Connection"]) -> float:
        total = 0.0
        for connection in connections:
            total += connection.weighted_input
        return total


class Sum(InputFunction):
    name = "sum"

    def net_input(self, connections: Sequence["Connection"]) -> float:
        total = 0.0
        for connection in connections:
            total += connection.input
        return total


class SumSqr(InputFunction):
    name = "sum_sqr"

    def net_input(self, connections: Sequence["Connection"]) -> float:
        total = 0.0
        for connection in connections:
            value = connection.weighted_input
            total += value * value
        return total


class Max(InputFunction):
    name = "max"

    def net_input(self, connections: Sequence["Connection"]) -> float:
        if not connections:
            return 0.0
        return max(connection.weighted_input for connection in connections)


class Min(InputFunction):
    name = "min"

    def net_input(self, connections: Sequence["Connection"]) -> float:
        if not connections:
            return 0.0
        return min(connection.weighted_input for connection in connections)


WEIGHTED_SUM = WeightedSum()

__all__ = ["InputFunction", "WeightedSum", "Sum", "SumSqr", "Max", "Min", "WEIGHTED_SUM"]
