"""Deterministic online training loops for ffbpnet."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core import persistence
from ..core.network import Network
from ..core.types import TrainingHistory
from .datasets import Dataset
from .metrics import compute_metrics, predict_all


class Trainer:
    """Run epochs of per-example ``train`` calls over a dataset.

    One epoch trains on every sample once, then reads the RMS error of the
    epoch through ``Network.get_error``. Callbacks exposing
    ``on_epoch(epoch, metrics)`` (or plain callables) receive the metrics of
    every epoch.
    """

    def __init__(self, network: Network, callbacks: Sequence[object] | None = None) -> None:
        self.network = network
        self.callbacks = list(callbacks or [])

    def run(
        self,
        dataset: Dataset,
        epochs: int,
        *,
        seed: int | None = None,
        shuffle: bool = False,
        target_error: float | None = None,
        metric_names: Sequence[str] = (),
        eval_every: int = 1,
        checkpoint_dir: str | Path | None = None,
        checkpoint_every: int = 0,
    ) -> TrainingHistory:
        if epochs <= 0:
            raise ValueError(f"epochs must be positive, got {epochs}")
        if dataset.input_count != self.network.input_count:
            raise ValueError(
                f"Dataset has {dataset.input_count} inputs but the network expects "
                f"{self.network.input_count}"
            )
        if dataset.output_count != self.network.output_count:
            raise ValueError(
                f"Dataset has {dataset.output_count} outputs but the network expects "
                f"{self.network.output_count}"
            )

        rng = np.random.default_rng(seed) if shuffle else None
        history = TrainingHistory()
        best_error = float("inf")
        ckpt_dir = Path(checkpoint_dir) if checkpoint_dir is not None else None

        for epoch in range(1, epochs + 1):
            for inputs, ideal in dataset.iter_samples(rng):
                self.network.train(inputs, ideal)
            error = self.network.get_error(len(dataset))
            history.errors.append(error)

            metrics = {"error": error}
            if metric_names and epoch % max(1, eval_every) == 0:
                predictions = predict_all(self.network, dataset.inputs)
                metrics.update(compute_metrics(metric_names, predictions, dataset.targets))
            self._emit_epoch(epoch, metrics)

            if ckpt_dir is not None:
                if error < best_error:
                    best_error = error
                    persistence.save(self.network, ckpt_dir / "best.npz")
                if checkpoint_every and epoch % checkpoint_every == 0:
                    persistence.save(self.network, ckpt_dir / f"epoch-{epoch:05d}.npz")

            if target_error is not None and error < target_error:
                history.stopped_early = True
                break

        if ckpt_dir is not None:
            persistence.save(self.network, ckpt_dir / "last.npz")
        return history

    def _emit_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)


__all__ = ["Trainer"]
