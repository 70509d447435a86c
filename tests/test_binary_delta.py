import pytest

from neurograph.core.network import perceptron
from neurograph.core.types import DataSet, LearningState
from neurograph.training.config import LearningConfig
from neurograph.training.losses import MeanSquaredError
from neurograph.training.rules import BinaryDeltaRule
from neurograph.training.supervised import SupervisedLearning

MAX_ERROR = 0.4


def _xor() -> DataSet:
    return DataSet.from_arrays([[0, 0], [0, 1], [1, 0], [1, 1]], [[0], [1], [1], [0]])


def _train(seed: int = 123):
    net = perceptron(2, 1, seed=seed)
    learning = SupervisedLearning(
        BinaryDeltaRule(), LearningConfig(max_error=MAX_ERROR, max_iterations=1000)
    )
    net.set_learning_rule(learning)
    final = net.learn(_xor())
    return net, learning, final


def test_reaches_max_error():
    _, learning, final = _train()
    assert final.state is LearningState.CONVERGED
    assert learning.total_error < MAX_ERROR


def test_trained_network_error():
    net, _, _ = _train()
    mse = MeanSquaredError()
    for row in _xor():
        mse.add_pattern_error(net.predict(row.input), row.desired_output)
    assert mse.total_error < MAX_ERROR


def test_iterations_repeat_for_same_seed():
    _, _, first = _train()
    for _ in range(5):
        _, _, again = _train()
        assert again.iteration == first.iteration


def test_learns_or_exactly():
    net = perceptron(2, 1, seed=123)
    data = DataSet.from_arrays([[0, 0], [0, 1], [1, 0], [1, 1]], [[0], [1], [1], [1]])
    learning = SupervisedLearning(
        BinaryDeltaRule(), LearningConfig(max_error=0.0, max_iterations=1000)
    )
    net.set_learning_rule(learning)
    final = net.learn(data)
    assert final.state is LearningState.CONVERGED
    assert [net.predict(row.input)[0] for row in data] == pytest.approx([0.0, 1.0, 1.0, 1.0])
