"""Epoch-driven learning loop shared by every learning rule."""

from __future__ import annotations

import abc
import logging
import math
from typing import Callable, List, Optional, Sequence, Union

from ..core.errors import ConfigurationError
from ..core.network import NeuralNetwork
from ..core.types import DataSet, EpochEvent, LearningState
from .stop import StopCondition

logger = logging.getLogger(__name__)

Listener = Union[Callable[[EpochEvent], None], object]


class IterativeLearning(abc.ABC):
    """Run epochs over a data set until a stop condition is reached.

    Each iteration calls :meth:`before_epoch`, :meth:`do_learning_epoch` and
    :meth:`after_epoch`, notifies the registered listeners with one
    :class:`EpochEvent`, then evaluates the stop conditions. The loop is
    synchronous; :meth:`stop` only raises a flag that the epoch checks before
    every pattern.
    """

    def __init__(
        self,
        stop_conditions: Sequence[StopCondition] | None = None,
        listeners: Sequence[Listener] | None = None,
    ) -> None:
        self.network: Optional[NeuralNetwork] = None
        self.stop_conditions: List[StopCondition] = list(stop_conditions or [])
        self.listeners: List[Listener] = list(listeners or [])
        self.training_set: Optional[DataSet] = None
        self.current_iteration = 0
        self.state = LearningState.READY
        self._stop_requested = False

    # ------------------------------------------------------------------
    # Wiring

    def attach(self, network: NeuralNetwork) -> None:
        previous = self.network
        if previous is not None and previous is not network and previous.learning_rule is self:
            previous.learning_rule = None
        self.network = network

    def detach(self) -> None:
        self.network = None

    def add_listener(self, listener: Listener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self.listeners = [item for item in self.listeners if item is not listener]

    def add_stop_condition(self, condition: StopCondition) -> None:
        self.stop_conditions.append(condition)

    # ------------------------------------------------------------------
    # Loop

    @property
    @abc.abstractmethod
    def total_error(self) -> float:
        """Network error of the most recent epoch."""

    @property
    def is_stopped(self) -> bool:
        return self._stop_requested

    def stop(self) -> None:
        self._stop_requested = True

    def require_network(self) -> NeuralNetwork:
        if self.network is None:
            raise ConfigurationError("Learning rule is not attached to a network")
        return self.network

    def learn(self, dataset: DataSet) -> EpochEvent:
        network = self.require_network()
        self.validate(dataset)
        self.training_set = dataset
        self.on_start()
        logger.info(
            "Training %r on %d patterns with %s", network, len(dataset), type(self).__name__
        )

        while True:
            self.current_iteration += 1
            self.before_epoch()
            self.do_learning_epoch(dataset)
            self.after_epoch()
            total = self.total_error
            self._emit_epoch(EpochEvent(self.current_iteration, total, self.state))
            logger.debug("Epoch %d total error %.10g", self.current_iteration, total)

            if not math.isfinite(total):
                self.state = LearningState.DIVERGED
                logger.warning(
                    "Training diverged at epoch %d: total error is %r", self.current_iteration, total
                )
            elif self._stop_requested:
                self.state = LearningState.STOPPED
            else:
                reached = self._reached_condition()
                if reached is not None:
                    self.state = (
                        LearningState.CONVERGED if reached.converges else LearningState.STOPPED
                    )
            if self.state is not LearningState.RUNNING:
                break

        self.on_stop()
        logger.info(
            "Training %s after %d epochs, total error %.10g",
            self.state.value,
            self.current_iteration,
            self.total_error,
        )
        return EpochEvent(self.current_iteration, self.total_error, self.state)

    def _reached_condition(self) -> Optional[StopCondition]:
        for condition in self.stop_conditions:
            if condition.is_reached(self):
                return condition
        return None

    def _emit_epoch(self, event: EpochEvent) -> None:
        for listener in list(self.listeners):
            if hasattr(listener, "on_epoch"):
                listener.on_epoch(event)  # type: ignore[attr-defined]
            elif callable(listener):
                listener(event)

    # ------------------------------------------------------------------
    # Hooks

    def validate(self, dataset: DataSet) -> None:
        """Reject data sets the network cannot consume."""

    def on_start(self) -> None:
        self.current_iteration = 0
        self._stop_requested = False
        self.state = LearningState.RUNNING

    def on_stop(self) -> None:
        """Called once after the loop exits."""

    def before_epoch(self) -> None:
        """Called before every epoch."""

    def after_epoch(self) -> None:
        """Called after every epoch, before listeners are notified."""

    @abc.abstractmethod
    def do_learning_epoch(self, dataset: DataSet) -> None:
        """Run one pass over ``dataset``."""


__all__ = ["IterativeLearning", "Listener"]
