"""Core numerical primitives for ffbpnet."""

from . import activations, errors, network, persistence, types

__all__ = ["activations", "errors", "network", "persistence", "types"]
