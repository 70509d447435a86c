"""Neuron graph primitives: weights, connections, neurons and layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator, List, Optional

from .errors import TopologyError
from .input import WEIGHTED_SUM, InputFunction
from .transfer import LINEAR, STEP, TransferFunction, resolve

if TYPE_CHECKING:  # pragma: no cover
    from .network import NeuralNetwork


@dataclass(eq=False)
class Weight:
    """A trainable scalar plus the change waiting to be applied to it."""

    value: float = 0.0
    pending_change: float = 0.0

    def __float__(self) -> float:
        return float(self.value)


class Connection:
    """Directed edge ``source -> target`` owning one :class:`Weight`."""

    __slots__ = ("source", "target", "weight")

    def __init__(self, source: "Neuron", target: "Neuron", weight: float | Weight = 0.0) -> None:
        self.source = source
        self.target = target
        self.weight = weight if isinstance(weight, Weight) else Weight(float(weight))

    @property
    def input(self) -> float:
        return self.source.output

    @property
    def weighted_input(self) -> float:
        return self.source.output * self.weight.value

    def __repr__(self) -> str:
        return f"Connection(weight={self.weight.value!r})"


class Neuron:
    """Computational unit with ordered input connections.

    ``input_connections`` are owned by the neuron and their order fixes the
    summation order of :meth:`calculate`. ``output_connections`` are the
    same connection objects seen from the source side; they exist only for
    backward traversal.
    """

    def __init__(
        self,
        transfer_function: TransferFunction | str = STEP,
        input_function: InputFunction = WEIGHTED_SUM,
        label: str | None = None,
    ) -> None:
        self.transfer_function = resolve(transfer_function)
        self.input_function = input_function
        self.label = label
        self.input_connections: List[Connection] = []
        self.output_connections: List[Connection] = []
        self.parent_layer: Optional[Layer] = None
        self.input = 0.0
        self.net_input = 0.0
        self.output = 0.0
        self.delta = 0.0

    # ------------------------------------------------------------------
    # Signal

    def set_input(self, value: float) -> None:
        self.input = float(value)

    def calculate(self) -> None:
        if self.input_connections:
            self.net_input = self.input_function.net_input(self.input_connections)
        else:
            self.net_input = self.input
        self.output = self.transfer_function.value(self.net_input)

    def reset(self) -> None:
        self.input = 0.0
        self.net_input = 0.0
        self.output = 0.0
        self.delta = 0.0

    # ------------------------------------------------------------------
    # Topology

    def has_input_connections(self) -> bool:
        return bool(self.input_connections)

    def has_output_connections(self) -> bool:
        return bool(self.output_connections)

    def get_connection_from(self, source: "Neuron") -> Optional[Connection]:
        for connection in self.input_connections:
            if connection.source is source:
                return connection
        return None

    def add_input_connection(self, connection: Connection) -> Connection:
        if connection.target is not self:
            raise TopologyError("Connection target must be the neuron it is added to")
        if self.get_connection_from(connection.source) is not None:
            raise TopologyError("Neuron already has an input connection from this source")
        _check_forward_edge(connection.source, self)
        self.input_connections.append(connection)
        connection.source.output_connections.append(connection)
        return connection

    def connect_from(self, source: "Neuron", weight: float | Weight = 0.0) -> Connection:
        return self.add_input_connection(Connection(source, self, weight))

    def remove_input_connection_from(self, source: "Neuron") -> None:
        connection = self.get_connection_from(source)
        if connection is None:
            return
        self.input_connections.remove(connection)
        source.output_connections.remove(connection)

    def remove_all_connections(self) -> None:
        for connection in list(self.input_connections):
            self.remove_input_connection_from(connection.source)
        for connection in list(self.output_connections):
            connection.target.remove_input_connection_from(self)

    @property
    def weights(self) -> List[Weight]:
        return [connection.weight for connection in self.input_connections]

    def __repr__(self) -> str:
        name = self.label or type(self).__name__
        return f"<{name} net={self.net_input:.6g} out={self.output:.6g}>"


class InputNeuron(Neuron):
    """Network entry point: the externally set input passes straight through."""

    def __init__(self, label: str | None = None) -> None:
        super().__init__(transfer_function=LINEAR, label=label)

    def calculate(self) -> None:
        self.net_input = self.input
        self.output = self.input


class BiasNeuron(Neuron):
    """Neuron whose output is always ``1.0``."""

    def __init__(self, label: str | None = None) -> None:
        super().__init__(transfer_function=LINEAR, label=label)
        self.output = 1.0

    def calculate(self) -> None:
        self.net_input = 1.0
        self.output = 1.0

    def reset(self) -> None:
        super().reset()
        self.output = 1.0

    def add_input_connection(self, connection: Connection) -> Connection:
        raise TopologyError("Bias neurons cannot have input connections")


class Layer:
    """Ordered group of neurons evaluated at the same propagation stage."""

    def __init__(self, neurons: Optional[List[Neuron]] = None, label: str | None = None) -> None:
        self.label = label
        self.neurons: List[Neuron] = []
        self.parent_network: Optional["NeuralNetwork"] = None
        for neuron in neurons or []:
            self.add_neuron(neuron)

    def add_neuron(self, neuron: Neuron) -> Neuron:
        if neuron.parent_layer is not None:
            raise TopologyError("Neuron already belongs to a layer")
        if self.parent_network is not None:
            self.parent_network.check_layer_edges(self, [neuron])
        neuron.parent_layer = self
        self.neurons.append(neuron)
        return neuron

    def remove_neuron(self, neuron: Neuron) -> None:
        """Detach ``neuron`` with all its connections, including from the network's IO lists."""

        if neuron not in self:
            raise TopologyError("Neuron is not part of this layer")
        neuron.remove_all_connections()
        self.neurons = [n for n in self.neurons if n is not neuron]
        neuron.parent_layer = None
        if self.parent_network is not None:
            self.parent_network.discard_io_neuron(neuron)

    def calculate(self) -> None:
        for neuron in self.neurons:
            neuron.calculate()

    def reset(self) -> None:
        for neuron in self.neurons:
            neuron.reset()

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self.neurons)

    def __len__(self) -> int:
        return len(self.neurons)

    def __getitem__(self, idx: int) -> Neuron:
        return self.neurons[idx]

    def __contains__(self, neuron: object) -> bool:
        return any(n is neuron for n in self.neurons)


def _network_of(neuron: Neuron) -> Optional["NeuralNetwork"]:
    layer = neuron.parent_layer
    return layer.parent_network if layer is not None else None


def _check_forward_edge(source: Neuron, target: Neuron) -> None:
    src_net, dst_net = _network_of(source), _network_of(target)
    if src_net is None and dst_net is None:
        return
    if src_net is None or dst_net is None:
        raise TopologyError("Cannot connect a neuron inside a network to one outside it")
    if src_net is not dst_net:
        raise TopologyError("Cannot connect neurons that belong to different networks")
    if src_net.layer_index(source.parent_layer) >= src_net.layer_index(target.parent_layer):
        raise TopologyError("Connections must run from an earlier layer to a later one")


__all__ = [
    "Weight",
    "Connection",
    "Neuron",
    "InputNeuron",
    "BiasNeuron",
    "Layer",
]
