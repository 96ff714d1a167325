"""Evaluation metrics over network outputs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping

import numpy as np

from ..core.network import Network
from ..core.types import Array

DEFAULT_METRICS: List[str] = ["rmse", "mae", "accuracy"]


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def compute_metric(name: str, predictions: Array, targets: Array) -> MetricResult:
    key = name.lower()
    if key == "rmse":
        value = float(np.sqrt(np.mean((predictions - targets) ** 2)))
    elif key == "mae":
        value = float(np.mean(np.abs(predictions - targets)))
    elif key == "accuracy":
        # sigmoid outputs are read as class probabilities
        value = float(np.mean((predictions >= 0.5) == (targets >= 0.5)))
    elif key == "max_error":
        value = float(np.max(np.abs(predictions - targets)))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(names: Iterable[str], predictions: Array, targets: Array) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, targets)
        results[metric.name] = metric.value
    return results


def predict_all(network: Network, inputs: Array) -> Array:
    """Run ``predict`` row by row and stack the outputs."""

    return np.vstack([network.predict(row) for row in inputs])


__all__ = ["DEFAULT_METRICS", "MetricResult", "compute_metric", "compute_metrics", "predict_all"]
