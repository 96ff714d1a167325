"""Core typing contracts for ffbpnet."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import List, Mapping

import numpy as np

from .errors import InvalidArgumentError

Array = np.ndarray


@dataclass(frozen=True)
class NetworkConfig:
    """Construction parameters of a :class:`~ffbpnet.core.network.Network`.

    Parameters
    ----------
    input_count:
        Number of input neurons.
    hidden_count:
        Number of neurons in the single hidden layer.
    output_count:
        Number of output neurons.
    learn_rate:
        Step size applied to the accumulated gradient by ``learn``. Typically
        in ``(0, 1]``.
    momentum:
        Fraction of the previous update step added to the current one.
        Typically in ``[0, 1)``.
    seed:
        Seed for the generator that draws the initial weights when no
        explicit generator is handed to the network.
    """

    input_count: int
    hidden_count: int
    output_count: int
    learn_rate: float = 0.7
    momentum: float = 0.9
    seed: int | None = None

    def __post_init__(self) -> None:
        for name in ("input_count", "hidden_count", "output_count"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidArgumentError(f"{name} must be positive, got {value}")

    @property
    def neuron_count(self) -> int:
        return int(self.input_count + self.hidden_count + self.output_count)

    @property
    def weight_count(self) -> int:
        return int(
            self.input_count * self.hidden_count + self.hidden_count * self.output_count
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "NetworkConfig":
        """Build a config from a ``network`` section of a run config."""

        known = {f.name for f in fields(cls)}
        unknown = set(mapping) - known
        if unknown:
            raise InvalidArgumentError(
                f"Unknown network config keys: {', '.join(sorted(unknown))}"
            )
        missing = {"input_count", "hidden_count", "output_count"} - set(mapping)
        if missing:
            raise InvalidArgumentError(
                f"Missing network config keys: {', '.join(sorted(missing))}"
            )
        kwargs = dict(mapping)
        coercions = {
            "input_count": int,
            "hidden_count": int,
            "output_count": int,
            "learn_rate": float,
            "momentum": float,
            "seed": int,
        }
        for name, kind in coercions.items():
            value = kwargs.get(name)
            if value is None:
                if kind is float:
                    kwargs.pop(name, None)
                continue
            try:
                kwargs[name] = kind(value)  # type: ignore[operator]
            except (TypeError, ValueError) as exc:
                raise InvalidArgumentError(
                    f"{name} must be {kind.__name__}-like, got {value!r}"
                ) from exc
        return cls(**kwargs)  # type: ignore[arg-type]

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`ffbpnet.training.pipelines.run_pipeline`."""

    epochs: int
    final_error: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""
    checkpoint_path: str = ""


@dataclass
class TrainingHistory:
    """Per-epoch RMS errors collected by :class:`~ffbpnet.training.trainer.Trainer`."""

    errors: List[float] = field(default_factory=list)
    stopped_early: bool = False

    @property
    def epochs(self) -> int:
        return len(self.errors)

    @property
    def final_error(self) -> float:
        return self.errors[-1] if self.errors else float("nan")
