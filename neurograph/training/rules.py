"""Weight-update rules: backpropagation and its variants."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Protocol

import numpy as np

from ..core.errors import ConfigurationError, DimensionMismatchError
from ..core.graph import Connection, Neuron, Weight
from ..core.network import NeuralNetwork
from ..core.types import Array


@dataclass
class RuleState:
    """Per-run state of a weight-update rule, indexed like ``connections``."""

    learning_rate: float
    connections: List[Connection]
    previous_change: Array
    previous_gradient: Array
    step_sizes: Array
    metadata: Dict[str, object] = field(default_factory=dict)


class WeightUpdateRule(Protocol):
    """Protocol implemented by the gradient/update strategies."""

    name: ClassVar[str]
    batch_only: ClassVar[bool]

    def init(self, network: NeuralNetwork, learning_rate: float) -> RuleState:
        """Initialise per-connection state for ``network``."""

    def calculate_weight_changes(
        self, network: NeuralNetwork, output_error: Array, state: RuleState
    ) -> None:
        """Accumulate this pattern's weight changes into ``Weight.pending_change``."""

    def apply_update(self, index: int, weight: Weight, change: float, state: RuleState) -> None:
        """Apply ``change`` (already batch-normalised) to ``weight``."""


def _new_state(network: NeuralNetwork, learning_rate: float, initial_step: float = 0.0) -> RuleState:
    connections = network.connections()
    size = len(connections)
    return RuleState(
        learning_rate=float(learning_rate),
        connections=connections,
        previous_change=np.zeros(size, dtype=np.float64),
        previous_gradient=np.zeros(size, dtype=np.float64),
        step_sizes=np.full(size, initial_step, dtype=np.float64),
    )


def _check_error_size(network: NeuralNetwork, output_error: Array) -> None:
    if len(output_error) != len(network.output_neurons):
        raise DimensionMismatchError(
            f"Output error has {len(output_error)} values, "
            f"network has {len(network.output_neurons)} output neurons"
        )


@dataclass
class BackPropagation:
    """Plain gradient-descent backpropagation.

    Output deltas are ``e_i * f'(net)``; hidden deltas are computed layer by
    layer from the output side so every downstream delta is final before it
    is read. Each connection then accumulates
    ``learning_rate * target.delta * source.output``.
    """

    name: ClassVar[str] = "backprop"
    batch_only: ClassVar[bool] = False

    def init(self, network: NeuralNetwork, learning_rate: float) -> RuleState:
        return _new_state(network, learning_rate)

    def calculate_weight_changes(
        self, network: NeuralNetwork, output_error: Array, state: RuleState
    ) -> None:
        self.calculate_output_deltas(network, output_error)
        self.calculate_hidden_deltas(network)
        self.accumulate_weight_changes(state)

    def calculate_output_deltas(self, network: NeuralNetwork, output_error: Array) -> None:
        _check_error_size(network, output_error)
        for neuron, error in zip(network.output_neurons, output_error):
            neuron.delta = float(error) * neuron.transfer_function.derivative(neuron.net_input)

    def calculate_hidden_deltas(self, network: NeuralNetwork) -> None:
        outputs = {id(neuron) for neuron in network.output_neurons}
        for layer in reversed(network.layers[1:-1]):
            for neuron in layer:
                if id(neuron) in outputs:
                    continue
                neuron.delta = self.hidden_neuron_delta(neuron)

    @staticmethod
    def hidden_neuron_delta(neuron: Neuron) -> float:
        downstream = 0.0
        for connection in neuron.output_connections:
            downstream += connection.weight.value * connection.target.delta
        return neuron.transfer_function.derivative(neuron.net_input) * downstream

    def accumulate_weight_changes(self, state: RuleState) -> None:
        lr = state.learning_rate
        for connection in state.connections:
            connection.weight.pending_change += (
                lr * connection.target.delta * connection.source.output
            )

    def apply_update(self, index: int, weight: Weight, change: float, state: RuleState) -> None:
        weight.value += change
        state.previous_change[index] = change


@dataclass
class MomentumBackpropagation(BackPropagation):
    """Backpropagation adding ``momentum`` times the previous applied change."""

    momentum: float = 0.25
    name: ClassVar[str] = "momentum"

    def __post_init__(self) -> None:
        if not 0.0 <= self.momentum < 1.0:
            raise ConfigurationError(f"momentum must be in [0, 1), got {self.momentum!r}")

    def accumulate_weight_changes(self, state: RuleState) -> None:
        lr = state.learning_rate
        previous = state.previous_change
        for idx, connection in enumerate(state.connections):
            connection.weight.pending_change += (
                lr * connection.target.delta * connection.source.output
                + self.momentum * previous[idx]
            )


@dataclass
class ResilientPropagation(BackPropagation):
    """Rprop: per-weight step sizes driven only by the gradient's sign.

    Pending changes hold the raw (negated) gradient, so the learning rate is
    not used. A sign flip shrinks the step and undoes the previous change.
    """

    increase_factor: float = 1.2
    decrease_factor: float = 0.5
    initial_delta: float = 0.1
    max_delta: float = 1.0
    min_delta: float = 1e-6
    name: ClassVar[str] = "rprop"
    batch_only: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if not (self.increase_factor > 1.0 and 0.0 < self.decrease_factor < 1.0):
            raise ConfigurationError("Rprop needs increase_factor > 1 and 0 < decrease_factor < 1")
        if not 0.0 < self.min_delta <= self.initial_delta <= self.max_delta:
            raise ConfigurationError("Rprop needs 0 < min_delta <= initial_delta <= max_delta")

    def init(self, network: NeuralNetwork, learning_rate: float) -> RuleState:
        return _new_state(network, learning_rate, initial_step=self.initial_delta)

    def accumulate_weight_changes(self, state: RuleState) -> None:
        for connection in state.connections:
            connection.weight.pending_change += connection.target.delta * connection.source.output

    def apply_update(self, index: int, weight: Weight, change: float, state: RuleState) -> None:
        gradient = change
        step = float(state.step_sizes[index])
        product = gradient * state.previous_gradient[index]
        if product > 0.0:
            step = min(step * self.increase_factor, self.max_delta)
            applied = float(np.sign(gradient)) * step
            state.previous_gradient[index] = gradient
        elif product < 0.0:
            step = max(step * self.decrease_factor, self.min_delta)
            applied = -float(state.previous_change[index])
            state.previous_gradient[index] = 0.0
        else:
            applied = float(np.sign(gradient)) * step
            state.previous_gradient[index] = gradient
        weight.value += applied
        state.previous_change[index] = applied
        state.step_sizes[index] = step


@dataclass
class LMS(BackPropagation):
    """Least-mean-squares delta rule for single-layer networks.

    Only connections into output neurons are trained and the output delta is
    the raw error (no transfer derivative).
    """

    name: ClassVar[str] = "lms"

    def calculate_weight_changes(
        self, network: NeuralNetwork, output_error: Array, state: RuleState
    ) -> None:
        _check_error_size(network, output_error)
        lr = state.learning_rate
        for neuron, error in zip(network.output_neurons, output_error):
            neuron.delta = float(error)
            for connection in neuron.input_connections:
                connection.weight.pending_change += lr * neuron.delta * connection.source.output


@dataclass
class BinaryDeltaRule(LMS):
    """Perceptron delta rule for threshold outputs.

    The neuron output is read as binary (``1`` above ``threshold``, else
    ``0``) and the delta is ``desired - binary_output``, so a correctly
    classified pattern leaves the weights alone.
    """

    threshold: float = 0.5
    name: ClassVar[str] = "binary_delta"

    def calculate_weight_changes(
        self, network: NeuralNetwork, output_error: Array, state: RuleState
    ) -> None:
        _check_error_size(network, output_error)
        lr = state.learning_rate
        for neuron, error in zip(network.output_neurons, output_error):
            desired = neuron.output + float(error)
            binary_output = 1.0 if neuron.output > self.threshold else 0.0
            neuron.delta = desired - binary_output
            if neuron.delta == 0.0:
                continue
            for connection in neuron.input_connections:
                connection.weight.pending_change += lr * neuron.delta * connection.source.output


__all__ = [
    "RuleState",
    "WeightUpdateRule",
    "BackPropagation",
    "MomentumBackpropagation",
    "ResilientPropagation",
    "LMS",
    "BinaryDeltaRule",
]
