"""Supervised training driver composing an error function and an update rule."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence, Tuple

from ..core.errors import ConfigurationError, DimensionMismatchError
from ..core.graph import Connection
from ..core.types import DataSet, DataSetRow
from .config import LearningConfig
from .iterative import IterativeLearning, Listener
from .losses import ErrorFunction, MeanSquaredError
from .rules import BackPropagation, RuleState, WeightUpdateRule
from .stop import MaxErrorStop, MaxIterationsStop, SmallErrorChangeStop, StopCondition

logger = logging.getLogger(__name__)


class SupervisedLearning(IterativeLearning):
    """Error-driven training over (input, desired output) patterns.

    For every pattern the network is propagated forward, the error function
    records the pattern error and the update rule accumulates pending weight
    changes. In online mode the changes are applied after each pattern; in
    batch mode they are applied once per epoch, divided by the training-set
    size.
    """

    def __init__(
        self,
        rule: WeightUpdateRule | None = None,
        config: LearningConfig | None = None,
        error_function: ErrorFunction | None = None,
        listeners: Sequence[Listener] | None = None,
        extra_stop_conditions: Sequence[StopCondition] | None = None,
    ) -> None:
        super().__init__(listeners=listeners)
        self.rule: WeightUpdateRule = rule if rule is not None else BackPropagation()
        self.error_function = error_function or MeanSquaredError()
        self._extra_stop_conditions = list(extra_stop_conditions or [])
        self.config = config or LearningConfig()
        self.previous_epoch_error = 0.0
        self.min_error_change_iterations_count = 0
        self.rule_state: Optional[RuleState] = None
        self._apply_plan: List[Tuple[int, Connection]] = []
        self._apply_config(self.config)

    # ------------------------------------------------------------------
    # Configuration

    def _apply_config(self, config: LearningConfig) -> None:
        if self.rule.batch_only and not config.batch_mode:
            raise ConfigurationError(f"{type(self.rule).__name__} only supports batch mode")
        self.config = config
        conditions: List[StopCondition] = [MaxErrorStop(config.max_error)]
        if config.max_iterations is not None:
            conditions.append(MaxIterationsStop(int(config.max_iterations)))
        if config.min_error_change_iterations_limit is not None:
            conditions.append(
                SmallErrorChangeStop(int(config.min_error_change_iterations_limit))
            )
        self.stop_conditions = conditions + self._extra_stop_conditions

    def configure(self, **changes: object) -> LearningConfig:
        """Replace individual :class:`LearningConfig` fields and rebuild stop conditions."""

        self._apply_config(dataclasses.replace(self.config, **changes))
        return self.config

    def add_stop_condition(self, condition: StopCondition) -> None:
        self._extra_stop_conditions.append(condition)
        self.stop_conditions.append(condition)

    @property
    def learning_rate(self) -> float:
        return self.config.learning_rate

    @property
    def batch_mode(self) -> bool:
        return self.config.batch_mode

    @property
    def total_error(self) -> float:
        return self.error_function.total_error

    # ------------------------------------------------------------------
    # Loop hooks

    def validate(self, dataset: DataSet) -> None:
        network = self.require_network()
        if len(dataset) == 0:
            raise ConfigurationError("Cannot train on an empty data set")
        n_in = len(network.input_neurons)
        n_out = len(network.output_neurons)
        if isinstance(dataset, DataSet):
            sizes = {(dataset.input_size, dataset.output_size)}
        else:
            sizes = {(row.input.shape[0], row.desired_output.shape[0]) for row in dataset}
        for in_size, out_size in sizes:
            if (in_size, out_size) != (n_in, n_out):
                raise DimensionMismatchError(
                    f"Data set rows are {in_size}->{out_size}, network is {n_in}->{n_out}"
                )

    def on_start(self) -> None:
        super().on_start()
        self.min_error_change_iterations_count = 0
        self.previous_epoch_error = 0.0
        self.error_function.reset()
        self.rule_state = self.rule.init(self.require_network(), self.config.learning_rate)
        self._apply_plan = self._build_apply_plan(self.rule_state.connections)
        for connection in self.rule_state.connections:
            connection.weight.pending_change = 0.0

    def _build_apply_plan(self, connections: List[Connection]) -> List[Tuple[int, Connection]]:
        index = {id(connection): idx for idx, connection in enumerate(connections)}
        return [
            (index[id(connection)], connection)
            for layer in reversed(self.require_network().layers)
            for neuron in layer
            for connection in neuron.input_connections
        ]

    def before_epoch(self) -> None:
        self.previous_epoch_error = self.error_function.total_error
        self.error_function.reset()

    def do_learning_epoch(self, dataset: DataSet) -> None:
        for row in dataset:
            if self.is_stopped:
                break
            self.learn_pattern(row)

    def learn_pattern(self, row: DataSetRow) -> None:
        network = self.require_network()
        state = self._require_rule_state()
        network.set_input(row.input)
        network.calculate()
        pattern_error = self.error_function.add_pattern_error(
            network.get_output(), row.desired_output
        )
        self.rule.calculate_weight_changes(network, pattern_error, state)
        if not self.config.batch_mode:
            self.apply_weight_changes()

    def after_epoch(self) -> None:
        change = abs(self.previous_epoch_error - self.error_function.total_error)
        if change <= self.config.min_error_change:
            self.min_error_change_iterations_count += 1
        else:
            self.min_error_change_iterations_count = 0
        if self.config.batch_mode:
            if not self.training_set:
                raise ConfigurationError("Batch update needs the current training set")
            self.apply_weight_changes(scale=1.0 / len(self.training_set))

    def _require_rule_state(self) -> RuleState:
        if self.rule_state is None:
            raise ConfigurationError("Rule state is only available while learning")
        return self.rule_state

    def apply_weight_changes(self, scale: float = 1.0) -> None:
        """Apply every pending change (times ``scale``) and clear it."""

        state = self._require_rule_state()
        for index, connection in self._apply_plan:
            weight = connection.weight
            self.rule.apply_update(index, weight, weight.pending_change * scale, state)
            weight.pending_change = 0.0


__all__ = ["SupervisedLearning"]
