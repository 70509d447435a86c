import math

import pytest

from neurograph.core.errors import DimensionMismatchError
from neurograph.training import losses


def test_mse_reports_half_mean_squared_error():
    fn = losses.MeanSquaredError()
    error = fn.add_pattern_error([0.2, 0.5], [1.0, 0.0])
    assert error == pytest.approx([0.8, -0.5])
    fn.add_pattern_error([1.0, 1.0], [1.0, 0.0])
    expected = (0.8**2 + 0.5**2 + 1.0) / (2 * 2)
    assert fn.total_error == pytest.approx(expected)
    assert fn.get_total_error() == fn.total_error
    assert fn.pattern_count == 2


def test_accumulated_error_never_decreases():
    fn = losses.MeanSquaredError()
    seen = [fn.accumulated_error]
    for actual, desired in [([0.1], [0.0]), ([0.5], [0.5]), ([0.0], [1.0]), ([0.3], [0.2])]:
        fn.add_pattern_error(actual, desired)
        seen.append(fn.accumulated_error)
        assert fn.total_error >= 0.0
    assert seen == sorted(seen)


def test_reset_returns_exactly_zero():
    fn = losses.MeanSquaredError()
    fn.add_pattern_error([0.3], [0.9])
    fn.reset()
    assert fn.total_error == 0.0
    assert fn.accumulated_error == 0.0
    assert fn.pattern_count == 0


def test_sse_mae_and_cross_entropy():
    sse = losses.SumSquaredError()
    mae = losses.MeanAbsoluteError()
    ce = losses.CrossEntropyError()
    for fn in (sse, mae):
        fn.add_pattern_error([0.0, 1.0], [1.0, 0.0])
        fn.add_pattern_error([0.5, 0.5], [1.0, 0.0])
    assert sse.total_error == pytest.approx(0.5 * (2.0 + 0.5))
    assert mae.total_error == pytest.approx((2.0 + 1.0) / 2)
    ce.add_pattern_error([0.25, 0.75], [0.0, 1.0])
    assert ce.total_error == pytest.approx(-math.log(0.75))


def test_length_mismatch():
    fn = losses.MeanSquaredError()
    with pytest.raises(DimensionMismatchError):
        fn.add_pattern_error([0.1, 0.2], [1.0])
    assert fn.pattern_count == 0


def test_registry():
    assert isinstance(losses.REGISTRY.create("mse"), losses.MeanSquaredError)
    assert isinstance(losses.REGISTRY.create("ce"), losses.CrossEntropyError)
    assert "sse" in losses.REGISTRY.names()
    with pytest.raises(KeyError):
        losses.REGISTRY.create("hinge")
