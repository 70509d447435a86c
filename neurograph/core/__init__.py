"""Core network model for neurograph."""

from . import errors, graph, input, network, randomize, transfer, types

__all__ = ["errors", "graph", "input", "network", "randomize", "transfer", "types"]
