import math

import pytest

from neurograph.core import transfer


def _numeric_derivative(fn, x, eps=1e-6):
    return (fn.value(x + eps) - fn.value(x - eps)) / (2 * eps)


@pytest.mark.parametrize(
    "fn",
    [
        transfer.Linear(slope=0.7),
        transfer.Sigmoid(),
        transfer.Sigmoid(slope=2.0),
        transfer.Tanh(),
        transfer.Gaussian(sigma=0.8),
        transfer.Sin(),
        transfer.SoftPlus(),
    ],
)
@pytest.mark.parametrize("x", [-1.3, -0.2, 0.4, 2.1])
def test_derivative_matches_finite_difference(fn, x):
    assert fn.derivative(x) == pytest.approx(_numeric_derivative(fn, x), rel=1e-5, abs=1e-8)


def test_sigmoid_values():
    sig = transfer.Sigmoid()
    assert sig.value(0.0) == 0.5
    assert sig.value(3.0) == pytest.approx(1.0 / (1.0 + math.exp(-3.0)))
    assert sig.value(-1000.0) == pytest.approx(0.0)
    assert sig.value(1000.0) == pytest.approx(1.0)


def test_step_and_sgn():
    step = transfer.Step(y_high=1.0, y_low=-1.0, threshold=0.5)
    assert step.value(0.6) == 1.0
    assert step.value(0.5) == -1.0
    assert step.derivative(0.0) == 1.0
    assert transfer.Sgn().value(-0.1) == -1.0
    assert transfer.Sgn().value(0.1) == 1.0


def test_ramp_clamps():
    ramp = transfer.Ramp(x_low=-1.0, x_high=1.0, y_low=0.0, y_high=1.0)
    assert ramp.value(-2.0) == 0.0
    assert ramp.value(2.0) == 1.0
    assert ramp.value(0.0) == pytest.approx(0.5)
    assert ramp.derivative(0.0) == pytest.approx(0.5)
    assert ramp.derivative(5.0) == 0.0


def test_relu_and_log():
    relu = transfer.RectifiedLinear()
    assert relu.value(-3.0) == 0.0
    assert relu.derivative(2.0) == 1.0
    assert transfer.Log().value(math.e) == pytest.approx(1.0)


def test_registry_and_resolve():
    assert isinstance(transfer.resolve("sigmoid"), transfer.Sigmoid)
    assert isinstance(transfer.REGISTRY.create("TANH", slope=2.0), transfer.Tanh)
    shared = transfer.Sigmoid()
    assert transfer.resolve(shared) is shared
    with pytest.raises(KeyError):
        transfer.resolve("nope")


def test_transfer_functions_are_immutable():
    sig = transfer.Sigmoid(slope=1.5)
    with pytest.raises(AttributeError):
        sig.slope = 2.0  # type: ignore[misc]
    assert sig == transfer.Sigmoid(slope=1.5)
