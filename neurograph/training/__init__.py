"""Learning loops, update rules and error functions."""

from .config import LearningConfig
from .iterative import IterativeLearning
from .losses import ErrorFunction, MeanSquaredError
from .rules import BackPropagation, MomentumBackpropagation, ResilientPropagation
from .supervised import SupervisedLearning

__all__ = [
    "LearningConfig",
    "IterativeLearning",
    "ErrorFunction",
    "MeanSquaredError",
    "BackPropagation",
    "MomentumBackpropagation",
    "ResilientPropagation",
    "SupervisedLearning",
]
