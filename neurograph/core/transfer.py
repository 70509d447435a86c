"""Transfer (activation) functions for neurograph neurons.

Each transfer function is an immutable value object exposing ``value(x)`` and
``derivative(net_input)``. Instances carry no state, so a single instance is
shared by every neuron that uses it.
"""

from __future__ import annotations

import abc
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable


class TransferFunction(abc.ABC):
    """Base class for scalar transfer functions."""

    name = "transfer"

    @abc.abstractmethod
    def value(self, x: float) -> float:
        """Output for net input ``x``."""

    def derivative(self, net_input: float) -> float:
        """Return ``d value / d x`` at ``net_input``.

        Threshold-style functions have no useful derivative; they report ``1.0``
        so delta-rule style learning can still move their weights.
        """

        return 1.0

    def __call__(self, x: float) -> float:
        return self.value(x)


def _logistic(x: float) -> float:
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


@dataclass(frozen=True)
class Linear(TransferFunction):
    slope: float = 1.0
    name = "linear"

    def value(self, x: float) -> float:
        return self.slope * x

    def derivative(self, net_input: float) -> float:
        return self.slope


@dataclass(frozen=True)
class Sigmoid(TransferFunction):
    """Logistic sigmoid ``1 / (1 + e^(-slope * x))``."""

    slope: float = 1.0
    name = "sigmoid"

    def value(self, x: float) -> float:
        return _logistic(self.slope * x)

    def derivative(self, net_input: float) -> float:
        y = _logistic(self.slope * net_input)
        return self.slope * y * (1.0 - y)


@dataclass(frozen=True)
class Tanh(TransferFunction):
    slope: float = 1.0
    name = "tanh"

    def value(self, x: float) -> float:
        return math.tanh(self.slope * x)

    def derivative(self, net_input: float) -> float:
        y = math.tanh(self.slope * net_input)
        return self.slope * (1.0 - y * y)


@dataclass(frozen=True)
class Step(TransferFunction):
    y_high: float = 1.0
    y_low: float = 0.0
    threshold: float = 0.0
    name = "step"

    def value(self, x: float) -> float:
        return self.y_high if x > self.threshold else self.y_low


@dataclass(frozen=True)
class Sgn(TransferFunction):
    name = "sgn"

    def value(self, x: float) -> float:
        return 1.0 if x > 0.0 else -1.0


@dataclass(frozen=True)
class Ramp(TransferFunction):
    """Linear between ``x_low`` and ``x_high``, clamped outside."""

    x_low: float = 0.0
    x_high: float = 1.0
    y_low: float = 0.0
    y_high: float = 1.0
    name = "ramp"

    @property
    def slope(self) -> float:
        return (self.y_high - self.y_low) / (self.x_high - self.x_low)

    def value(self, x: float) -> float:
        if x <= self.x_low:
            return self.y_low
        if x >= self.x_high:
            return self.y_high
        return self.y_low + self.slope * (x - self.x_low)

    def derivative(self, net_input: float) -> float:
        if self.x_low < net_input < self.x_high:
            return self.slope
        return 0.0


@dataclass(frozen=True)
class Gaussian(TransferFunction):
    sigma: float = 0.5
    name = "gaussian"

    def value(self, x: float) -> float:
        return math.exp(-(x * x) / (2.0 * self.sigma * self.sigma))

    def derivative(self, net_input: float) -> float:
        return -net_input / (self.sigma * self.sigma) * self.value(net_input)


@dataclass(frozen=True)
class Sin(TransferFunction):
    name = "sin"

    def value(self, x: float) -> float:
        return math.sin(x)

    def derivative(self, net_input: float) -> float:
        return math.cos(net_input)


@dataclass(frozen=True)
class Log(TransferFunction):
    """Natural logarithm; only meaningful for positive net input."""

    name = "log"

    def value(self, x: float) -> float:
        return math.log(x)

    def derivative(self, net_input: float) -> float:
        return 1.0 / net_input


@dataclass(frozen=True)
class RectifiedLinear(TransferFunction):
    name = "relu"

    def value(self, x: float) -> float:
        return max(0.0, x)

    def derivative(self, net_input: float) -> float:
        return 1.0 if net_input > 0.0 else 0.0


@dataclass(frozen=True)
class SoftPlus(TransferFunction):
    name = "softplus"

    def value(self, x: float) -> float:
        # log(1 + e^x) without overflow for large x
        return max(x, 0.0) + math.log1p(math.exp(-abs(x)))

    def derivative(self, net_input: float) -> float:
        return _logistic(net_input)


class TransferRegistry:
    """Name -> factory lookup for transfer functions."""

    def __init__(self) -> None:
        self._registry: Dict[str, Callable[..., TransferFunction]] = {}

    def register(self, name: str, factory: Callable[..., TransferFunction]) -> None:
        self._registry[name] = factory

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def create(self, name: str, **params: float) -> TransferFunction:
        key = name.lower()
        if key not in self._registry:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown transfer function {name!r}. Available: {available}")
        return self._registry[key](**params)


REGISTRY = TransferRegistry()
for _cls in (Linear, Sigmoid, Tanh, Step, Sgn, Ramp, Gaussian, Sin, Log, RectifiedLinear, SoftPlus):
    REGISTRY.register(_cls.name, _cls)
REGISTRY.register("rectified_linear", RectifiedLinear)

LINEAR = Linear()
SIGMOID = Sigmoid()
STEP = Step()


def resolve(transfer: TransferFunction | str) -> TransferFunction:
    """Return ``transfer`` unchanged or build it by registry name."""

    if isinstance(transfer, TransferFunction):
        return transfer
    return REGISTRY.create(str(transfer))


__all__ = [
    "TransferFunction",
    "Linear",
    "Sigmoid",
    "Tanh",
    "Step",
    "Sgn",
    "Ramp",
    "Gaussian",
    "Sin",
    "Log",
    "RectifiedLinear",
    "SoftPlus",
    "TransferRegistry",
    "REGISTRY",
    "LINEAR",
    "SIGMOID",
    "STEP",
    "resolve",
]
