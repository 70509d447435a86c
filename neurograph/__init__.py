"""neurograph public API."""

from .core import transfer  # noqa: F401
from .core.errors import (
    ConfigurationError,
    DimensionMismatchError,
    NeurographError,
    TopologyError,
)
from .core.graph import BiasNeuron, Connection, InputNeuron, Layer, Neuron, Weight
from .core.network import NeuralNetwork, multilayer_perceptron, perceptron
from .core.randomize import GaussianRandomizer, RangeRandomizer, WeightsRandomizer
from .core.types import DataSet, DataSetRow, EpochEvent, LearningState, RunResult
from .training.config import LearningConfig
from .training.losses import (
    CrossEntropyError,
    ErrorFunction,
    MeanAbsoluteError,
    MeanSquaredError,
    SumSquaredError,
)
from .training.pipelines import load_preset, presets, run_pipeline
from .training.rules import (
    LMS,
    BackPropagation,
    BinaryDeltaRule,
    MomentumBackpropagation,
    ResilientPropagation,
)
from .training.stop import MaxErrorStop, MaxIterationsStop, SmallErrorChangeStop
from .training.supervised import SupervisedLearning

__all__ = [
    "transfer",
    "NeurographError",
    "TopologyError",
    "DimensionMismatchError",
    "ConfigurationError",
    "Weight",
    "Connection",
    "Neuron",
    "InputNeuron",
    "BiasNeuron",
    "Layer",
    "NeuralNetwork",
    "multilayer_perceptron",
    "perceptron",
    "WeightsRandomizer",
    "RangeRandomizer",
    "GaussianRandomizer",
    "DataSet",
    "DataSetRow",
    "EpochEvent",
    "LearningState",
    "RunResult",
    "LearningConfig",
    "ErrorFunction",
    "MeanSquaredError",
    "SumSquaredError",
    "MeanAbsoluteError",
    "CrossEntropyError",
    "BackPropagation",
    "MomentumBackpropagation",
    "ResilientPropagation",
    "LMS",
    "BinaryDeltaRule",
    "MaxErrorStop",
    "MaxIterationsStop",
    "SmallErrorChangeStop",
    "SupervisedLearning",
    "load_preset",
    "presets",
    "run_pipeline",
]
