"""Exception hierarchy for neurograph."""

from __future__ import annotations


class NeurographError(Exception):
    """Base class for every error raised by the engine."""


class TopologyError(NeurographError, ValueError):
    """A mutation would break the layered, forward-only network graph."""


class DimensionMismatchError(NeurographError, ValueError):
    """A vector or dataset does not match the network's input/output size."""


class ConfigurationError(NeurographError, ValueError):
    """A learning parameter can never lead to a valid training run."""


__all__ = [
    "NeurographError",
    "TopologyError",
    "DimensionMismatchError",
    "ConfigurationError",
]
