"""Layered feedforward network plus the perceptron and multilayer-perceptron builders."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

import numpy as np

from .errors import ConfigurationError, DimensionMismatchError, TopologyError
from .graph import BiasNeuron, Connection, InputNeuron, Layer, Neuron, Weight
from .randomize import WeightsRandomizer
from .transfer import Step, TransferFunction, resolve
from .types import Array, as_vector

if TYPE_CHECKING:  # pragma: no cover
    from ..training.iterative import IterativeLearning
    from .types import DataSet

logger = logging.getLogger(__name__)


class NeuralNetwork:
    """Ordered layers plus the neurons that form the network's boundary.

    Layers are stored input first and output last; :meth:`calculate` walks
    them in that order. Connections only ever run from an earlier layer to a
    later one, which is what makes a single forward sweep sufficient.
    """

    def __init__(self, label: str | None = None) -> None:
        self.label = label
        self.layers: List[Layer] = []
        self.input_neurons: List[Neuron] = []
        self.output_neurons: List[Neuron] = []
        self.learning_rule: Optional["IterativeLearning"] = None

    # ------------------------------------------------------------------
    # Structure

    def add_layer(self, layer: Layer, index: int | None = None) -> Layer:
        """Insert ``layer`` at ``index`` (appended by default).

        Connections its neurons already have must keep running forward from
        the new position; otherwise the network is left untouched.
        """

        if layer.parent_network is not None:
            raise TopologyError("Layer already belongs to a network")
        position = len(self.layers) if index is None else index
        if not 0 <= position <= len(self.layers):
            raise TopologyError(f"Layer index {index} is out of range")
        self._check_edges(layer, layer.neurons, position, inserting=True)
        layer.parent_network = self
        self.layers.insert(position, layer)
        return layer

    def check_layer_edges(self, layer: Layer, neurons: Iterable[Neuron]) -> None:
        """Reject ``neurons`` joining ``layer`` if any of their connections would not run forward."""

        self._check_edges(layer, neurons, self.layer_index(layer), inserting=False)

    def _check_edges(
        self, layer: Layer, neurons: Iterable[Neuron], position: int, inserting: bool
    ) -> None:
        for neuron in neurons:
            for connection in neuron.input_connections:
                self._check_edge_end(connection.source, layer, position, inserting, upstream=True)
            for connection in neuron.output_connections:
                self._check_edge_end(connection.target, layer, position, inserting, upstream=False)

    def _check_edge_end(
        self, other: Neuron, layer: Layer, position: int, inserting: bool, upstream: bool
    ) -> None:
        other_layer = other.parent_layer
        if other_layer is layer:
            raise TopologyError("Connections cannot join neurons of the same layer")
        # still being assembled; checked again when it joins a network
        if other_layer is None or other_layer.parent_network is None:
            return
        if other_layer.parent_network is not self:
            raise TopologyError("Cannot connect neurons that belong to different networks")
        other_index = self.layer_index(other_layer)
        if inserting and other_index >= position:
            other_index += 1
        forward = other_index < position if upstream else other_index > position
        if not forward:
            raise TopologyError("Connections must run from an earlier layer to a later one")

    def layer_index(self, layer: Layer) -> int:
        for idx, candidate in enumerate(self.layers):
            if candidate is layer:
                return idx
        raise TopologyError("Layer is not part of this network")

    def contains(self, neuron: Neuron) -> bool:
        layer = neuron.parent_layer
        return layer is not None and layer.parent_network is self

    def connect(
        self, source: Neuron, target: Neuron, weight: float | Weight = 0.0
    ) -> Connection:
        if not (self.contains(source) and self.contains(target)):
            raise TopologyError("Both neurons must belong to this network before connecting them")
        return target.connect_from(source, weight)

    def connect_layers(self, source: Layer, target: Layer) -> None:
        """Fully connect ``source`` to every non-bias neuron of ``target``."""

        for dst in target:
            if isinstance(dst, BiasNeuron):
                continue
            for src in source:
                self.connect(src, dst)

    def set_input_neurons(self, neurons: Iterable[Neuron]) -> None:
        self.input_neurons = list(neurons)

    def set_output_neurons(self, neurons: Iterable[Neuron]) -> None:
        self.output_neurons = list(neurons)

    def discard_io_neuron(self, neuron: Neuron) -> None:
        self.input_neurons = [n for n in self.input_neurons if n is not neuron]
        self.output_neurons = [n for n in self.output_neurons if n is not neuron]

    def set_default_io(self) -> None:
        if not self.layers:
            raise TopologyError("Network has no layers")
        self.input_neurons = [n for n in self.layers[0] if not isinstance(n, BiasNeuron)]
        self.output_neurons = [n for n in self.layers[-1] if not isinstance(n, BiasNeuron)]

    def neurons(self) -> List[Neuron]:
        return [neuron for layer in self.layers for neuron in layer]

    def connections(self) -> List[Connection]:
        """All connections, input layer to output layer, in neuron input order."""

        return [
            connection
            for layer in self.layers
            for neuron in layer
            for connection in neuron.input_connections
        ]

    # ------------------------------------------------------------------
    # Signal

    def set_input(self, values: Sequence[float] | Array) -> None:
        vector = as_vector(values)
        if vector.shape[0] != len(self.input_neurons):
            raise DimensionMismatchError(
                f"Network has {len(self.input_neurons)} input neurons, got {vector.shape[0]} values"
            )
        for neuron, value in zip(self.input_neurons, vector):
            neuron.set_input(float(value))

    def calculate(self) -> None:
        for layer in self.layers:
            layer.calculate()

    def get_output(self) -> Array:
        return np.array([neuron.output for neuron in self.output_neurons], dtype=np.float64)

    def predict(self, values: Sequence[float] | Array) -> Array:
        """Forward-only inference: set input, calculate, read output."""

        self.set_input(values)
        self.calculate()
        return self.get_output()

    def reset(self) -> None:
        for layer in self.layers:
            layer.reset()

    # ------------------------------------------------------------------
    # Weights

    def weights(self) -> Array:
        return np.array([c.weight.value for c in self.connections()], dtype=np.float64)

    def set_weights(self, values: Sequence[float] | Array) -> None:
        vector = as_vector(values)
        connections = self.connections()
        if vector.shape[0] != len(connections):
            raise DimensionMismatchError(
                f"Network has {len(connections)} weights, got {vector.shape[0]} values"
            )
        for connection, value in zip(connections, vector):
            connection.weight.value = float(value)
            connection.weight.pending_change = 0.0

    def randomize_weights(self, randomizer: WeightsRandomizer | None = None) -> None:
        (randomizer or WeightsRandomizer()).randomize(self)

    def parameter_count(self) -> int:
        return len(self.connections())

    # ------------------------------------------------------------------
    # Learning

    def set_learning_rule(self, rule: Optional["IterativeLearning"]) -> None:
        previous = self.learning_rule
        if previous is rule:
            return
        self.learning_rule = None
        if previous is not None:
            previous.detach()
        if rule is not None:
            rule.attach(self)
            self.learning_rule = rule

    def learn(self, dataset: "DataSet"):
        if self.learning_rule is None:
            raise ConfigurationError("No learning rule attached to the network")
        return self.learning_rule.learn(dataset)

    def stop_learning(self) -> None:
        if self.learning_rule is not None:
            self.learning_rule.stop()

    def __repr__(self) -> str:
        sizes = [len(layer) for layer in self.layers]
        return f"NeuralNetwork(label={self.label!r}, layers={sizes})"


def multilayer_perceptron(
    *layer_sizes: int,
    transfer: TransferFunction | str = "sigmoid",
    use_bias: bool = True,
    seed: int | None = None,
    randomizer: WeightsRandomizer | None = None,
) -> NeuralNetwork:
    """Build a fully connected feedforward network.

    ``layer_sizes`` lists neuron counts from input to output. Every layer but
    the output one gets an extra :class:`BiasNeuron` when ``use_bias`` is set.
    """

    if len(layer_sizes) < 2:
        raise TopologyError("A perceptron needs at least an input and an output layer")
    if any(int(size) < 1 for size in layer_sizes):
        raise TopologyError(f"Layer sizes must be positive, got {list(layer_sizes)}")
    transfer_fn = resolve(transfer)
    network = NeuralNetwork(label="mlp-" + "-".join(str(s) for s in layer_sizes))

    input_layer = Layer([InputNeuron() for _ in range(layer_sizes[0])], label="input")
    if use_bias:
        input_layer.add_neuron(BiasNeuron())
    network.add_layer(input_layer)

    previous = input_layer
    last = len(layer_sizes) - 1
    for idx, size in enumerate(layer_sizes[1:], start=1):
        label = "output" if idx == last else f"hidden{idx}"
        layer = Layer([Neuron(transfer_fn) for _ in range(size)], label=label)
        if use_bias and idx != last:
            layer.add_neuron(BiasNeuron())
        network.add_layer(layer)
        network.connect_layers(previous, layer)
        previous = layer

    network.set_default_io()
    network.randomize_weights(randomizer or WeightsRandomizer(seed))
    logger.debug("Built %r with %d weights", network, network.parameter_count())
    return network



def perceptron(
    input_size: int,
    output_size: int,
    *,
    use_bias: bool = True,
    seed: int | None = None,
    randomizer: WeightsRandomizer | None = None,
) -> NeuralNetwork:
    """Single-layer threshold network: inputs (plus bias) fully connected to step outputs."""

    network = multilayer_perceptron(
        input_size,
        output_size,
        transfer=Step(),
        use_bias=use_bias,
        seed=seed,
        randomizer=randomizer,
    )
    network.label = f"perceptron-{input_size}-{output_size}"
    return network


__all__ = ["NeuralNetwork", "multilayer_perceptron", "perceptron"]
