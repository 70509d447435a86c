"""Stop conditions evaluated after every learning epoch."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from .iterative import IterativeLearning


class StopCondition(Protocol):
    """Predicate consulted once per epoch; ``True`` ends training."""

    converges: ClassVar[bool]

    def is_reached(self, learning: "IterativeLearning") -> bool:
        """Return whether training should end after the current epoch."""


@dataclass(frozen=True)
class MaxIterationsStop:
    max_iterations: int
    converges: ClassVar[bool] = False

    def is_reached(self, learning: "IterativeLearning") -> bool:
        return learning.current_iteration >= self.max_iterations


@dataclass(frozen=True)
class MaxErrorStop:
    """Reached once the total network error is at or below ``max_error``."""

    max_error: float
    converges: ClassVar[bool] = True

    def is_reached(self, learning: "IterativeLearning") -> bool:
        return learning.total_error <= self.max_error


@dataclass(frozen=True)
class SmallErrorChangeStop:
    """Reached after ``iterations_limit`` consecutive epochs of small error change."""

    iterations_limit: int
    converges: ClassVar[bool] = False

    def is_reached(self, learning: "IterativeLearning") -> bool:
        count = getattr(learning, "min_error_change_iterations_count", 0)
        return count >= self.iterations_limit


__all__ = ["StopCondition", "MaxIterationsStop", "MaxErrorStop", "SmallErrorChangeStop"]
