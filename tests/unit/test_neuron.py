import math

import pytest

from neurograph.core.errors import TopologyError
from neurograph.core.graph import BiasNeuron, Connection, InputNeuron, Neuron
from neurograph.core.input import SumSqr
from neurograph.core.transfer import Linear, Sigmoid, Step


@pytest.fixture()
def grid():
    n1, n2, n3, n4 = Neuron(), Neuron(), Neuron(), Neuron()
    c13 = n3.connect_from(n1, 0.9)
    c14 = n4.connect_from(n1, 0.6)
    c23 = n3.connect_from(n2, 0.7)
    c24 = n4.connect_from(n2, 0.8)
    return (n1, n2, n3, n4), (c13, c14, c23, c24)


def test_calculate_uses_weighted_sum_and_step(grid):
    (n1, n2, n3, _), _ = grid
    n1.output = 0.6
    n2.output = 0.8
    n3.calculate()
    assert n3.net_input == pytest.approx(0.6 * 0.9 + 0.8 * 0.7)
    assert n3.output == pytest.approx(1.0)


def test_calculate_from_input_neuron():
    source = InputNeuron()
    neuron = Neuron()
    neuron.add_input_connection(Connection(source, neuron, 5.0))
    source.set_input(1.0)
    source.calculate()
    neuron.calculate()
    assert neuron.output == pytest.approx(Step().value(5.0))
    neuron.transfer_function = Sigmoid()
    neuron.calculate()
    assert neuron.output == pytest.approx(1.0 / (1.0 + math.exp(-5.0)))


def test_two_input_forward_pass():
    a, b = InputNeuron(), InputNeuron()
    neuron = Neuron(Sigmoid())
    neuron.connect_from(a, 0.3)
    neuron.connect_from(b, -1.2)
    a.set_input(2.0)
    b.set_input(0.5)
    a.calculate()
    b.calculate()
    neuron.calculate()
    expected_net = 2.0 * 0.3 + 0.5 * -1.2
    assert neuron.net_input == pytest.approx(expected_net)
    assert neuron.output == pytest.approx(1.0 / (1.0 + math.exp(-expected_net)))


def test_neuron_without_inputs_uses_external_input():
    neuron = Neuron(Linear(slope=2.0))
    neuron.set_input(0.25)
    neuron.calculate()
    assert neuron.net_input == 0.25
    assert neuron.output == 0.5


def test_reset(grid):
    (n1, *_), _ = grid
    n1.set_input(0.5)
    n1.output = 0.3
    n1.reset()
    assert n1.output == 0.0
    assert n1.net_input == 0.0
    assert n1.input == 0.0


def test_has_input_connections(grid):
    (n1, n2, n3, n4), _ = grid
    assert n3.has_input_connections()
    assert n4.has_input_connections()
    assert not n1.has_input_connections()
    assert not n2.has_input_connections()


def test_input_connection_order(grid):
    (_, _, n3, _), (c13, _, c23, _) = grid
    assert n3.input_connections == [c13, c23]


def test_remove_input_connection_detaches_both_sides(grid):
    (n1, _, n3, _), (c13, c14, c23, _) = grid
    n3.remove_input_connection_from(n1)
    assert c13 not in n3.input_connections
    assert c23 in n3.input_connections
    assert c13 not in n1.output_connections
    assert n1.output_connections == [c14]


def test_get_connection_from(grid):
    (n1, n2, n3, n4), (c13, _, c23, _) = grid
    assert n3.get_connection_from(n1) is c13
    assert n3.get_connection_from(n2) is c23
    assert n1.get_connection_from(n4) is None


def test_weights(grid):
    (_, _, n3, _), (c13, c14, c23, _) = grid
    weights = n3.weights
    assert weights[0] is c13.weight
    assert weights[1] is c23.weight
    assert c14.weight not in weights
    assert [w.value for w in weights] == pytest.approx([0.9, 0.7])


def test_duplicate_source_rejected(grid):
    (n1, _, n3, _), _ = grid
    with pytest.raises(TopologyError):
        n3.connect_from(n1, 0.1)


def test_connection_target_must_match():
    a, b, c = Neuron(), Neuron(), Neuron()
    with pytest.raises(TopologyError):
        c.add_input_connection(Connection(a, b, 1.0))


def test_bias_neuron_is_constant():
    bias = BiasNeuron()
    assert bias.output == 1.0
    bias.calculate()
    assert bias.output == 1.0
    bias.reset()
    assert bias.output == 1.0
    with pytest.raises(TopologyError):
        bias.connect_from(Neuron(), 1.0)


@pytest.mark.parametrize(
    "inputs, expected",
    [([0.1, 0.4, 0.7, 0.9], 1.47), ([0.1, -0.4, 0.7, -0.9], 1.47)],
)
def test_sum_sqr_input_function(inputs, expected):
    sources = [InputNeuron() for _ in inputs]
    target = Neuron(Linear(), input_function=SumSqr())
    for source, value in zip(sources, inputs):
        target.connect_from(source, 1.0)
        source.set_input(value)
        source.calculate()
    target.calculate()
    assert target.net_input == pytest.approx(expected)
