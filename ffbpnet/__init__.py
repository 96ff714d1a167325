"""ffbpnet public API."""

from .core import activations  # noqa: F401
from .core import persistence  # noqa: F401
from .core.errors import InvalidArgumentError
from .core.network import Network
from .core.types import NetworkConfig, RunResult, TrainingHistory
from .training.pipelines import load_config, load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "InvalidArgumentError",
    "Network",
    "NetworkConfig",
    "RunResult",
    "Trainer",
    "TrainingHistory",
    "activations",
    "load_config",
    "load_preset",
    "persistence",
    "presets",
    "run_pipeline",
]
