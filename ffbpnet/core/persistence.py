"""Parameter export/import and on-disk checkpoints.

The persisted form of a network is the weight ``matrix`` followed by the
``thresholds``: one flat sequence of ``weight_count + neuron_count`` values.
Raw dumps encode it as little-endian IEEE-754 doubles; checkpoints wrap it in
an ``.npz`` archive together with the topology.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .errors import InvalidArgumentError
from .network import Network
from .types import Array, NetworkConfig

_DTYPE = np.dtype("<f8")


def export_parameters(network: Network) -> Array:
    """Return ``matrix`` followed by ``thresholds`` as a new float64 array."""

    return network._export_parameters()


def import_parameters(network: Network, flat: Array) -> None:
    """Load a flat ``matrix + thresholds`` sequence into ``network``.

    Momentum state and gradient accumulators are left untouched.
    """

    values = np.asarray(flat, dtype=np.float64)
    if values.ndim != 1 or values.shape[0] != network.parameter_count:
        raise InvalidArgumentError(
            f"Expected {network.parameter_count} parameters, got shape {values.shape}"
        )
    network._import_parameters(values)


def to_bytes(network: Network) -> bytes:
    return export_parameters(network).astype(_DTYPE).tobytes()


def from_bytes(network: Network, data: bytes) -> None:
    if len(data) != network.parameter_count * _DTYPE.itemsize:
        raise InvalidArgumentError(
            f"Expected {network.parameter_count * _DTYPE.itemsize} bytes, got {len(data)}"
        )
    import_parameters(network, np.frombuffer(data, dtype=_DTYPE))


def save(network: Network, path: str | Path) -> str:
    """Write an ``.npz`` checkpoint of ``network`` and return its path."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    config = network.config
    with path.open("wb") as handle:
        np.savez_compressed(
            handle,
            topology=np.array(
                [config.input_count, config.hidden_count, config.output_count],
                dtype=np.int64,
            ),
            rates=np.array([config.learn_rate, config.momentum], dtype=np.float64),
            params=export_parameters(network).astype(_DTYPE),
        )
    return str(path)


def load(path: str | Path, rng: np.random.Generator | None = None) -> Network:
    """Build a fresh network from a checkpoint written by :func:`save`."""

    with np.load(Path(path)) as payload:
        for key in ("topology", "rates", "params"):
            if key not in payload.files:
                raise KeyError(f"Missing {key} in checkpoint {path}")
        topology = payload["topology"]
        rates = payload["rates"]
        params = payload["params"]
    config = NetworkConfig(
        input_count=int(topology[0]),
        hidden_count=int(topology[1]),
        output_count=int(topology[2]),
        learn_rate=float(rates[0]),
        momentum=float(rates[1]),
    )
    network = Network(config, rng=rng)
    import_parameters(network, params)
    return network


__all__ = [
    "export_parameters",
    "import_parameters",
    "to_bytes",
    "from_bytes",
    "save",
    "load",
]
