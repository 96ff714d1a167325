"""In-memory truth-table datasets used by presets and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, MutableMapping

import numpy as np

from ..core.types import Array


@dataclass(frozen=True)
class Dataset:
    """A fixed set of ``(input, ideal)`` pairs.

    Attributes
    ----------
    name:
        Registry identifier of the dataset.
    inputs:
        Array of shape ``(n_samples, input_count)``.
    targets:
        Array of shape ``(n_samples, output_count)`` with values in ``[0, 1]``.
    provenance:
        Free-form metadata recorded in run manifests.
    """

    name: str
    inputs: Array
    targets: Array
    provenance: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.inputs.ndim != 2 or self.targets.ndim != 2:
            raise ValueError("inputs and targets must be two-dimensional")
        if self.inputs.shape[0] != self.targets.shape[0]:
            raise ValueError("inputs and targets must have the same number of samples")
        if self.inputs.shape[0] == 0:
            raise ValueError(f"Dataset {self.name!r} has no samples")

    def __len__(self) -> int:
        return int(self.inputs.shape[0])

    @property
    def input_count(self) -> int:
        return int(self.inputs.shape[1])

    @property
    def output_count(self) -> int:
        return int(self.targets.shape[1])

    def iter_samples(self, rng: np.random.Generator | None = None) -> Iterator[tuple[Array, Array]]:
        """Yield samples in order, or in a permutation drawn from ``rng``."""

        order = np.arange(len(self)) if rng is None else rng.permutation(len(self))
        for idx in order:
            yield self.inputs[idx], self.targets[idx]


DatasetFactory = Callable[..., Dataset]

_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(name: str, factory: DatasetFactory) -> DatasetFactory:
    _REGISTRY[name] = factory
    return factory


def get_dataset(name: str, **options: Any) -> Dataset:
    """Return the dataset registered under ``name``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise ValueError(f"Unknown dataset {name!r}. Available datasets: {available}")
    return _REGISTRY[name](**options)


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


_GATES: Dict[str, Callable[[Array, Array], Array]] = {
    "xor": np.logical_xor,
    "and": np.logical_and,
    "or": np.logical_or,
    "nand": lambda a, b: np.logical_not(np.logical_and(a, b)),
}


def _truth_table(gate: str, low: float = 0.0, high: float = 1.0, **_: object) -> Dataset:
    bits = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=bool)
    out = _GATES[gate](bits[:, 0], bits[:, 1]).reshape(-1, 1)
    inputs = np.where(bits, high, low).astype(np.float64)
    targets = out.astype(np.float64)
    return Dataset(
        name=gate,
        inputs=inputs,
        targets=targets,
        provenance={"type": "truth_table", "gate": gate, "low": low, "high": high},
    )


for _gate in _GATES:
    register_dataset(_gate, lambda _g=_gate, **opts: _truth_table(_g, **opts))


__all__ = ["Dataset", "available_datasets", "get_dataset", "register_dataset"]
