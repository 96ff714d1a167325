"""Per-epoch training log."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping

from .artifacts import git_sha


class EpochLog:
    """Record the error and evaluation metrics of every epoch.

    Each ``on_epoch`` call keeps the record in memory and, when ``path`` is
    given, appends it as one JSON line. Records look like
    ``{"epoch": 3, "error": 0.41, "rmse": 0.39, "seed": 7, "sha": "..."}``.
    """

    def __init__(
        self,
        path: str | Path | None = None,
        *,
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("")
        self.seed = seed
        self.sha = sha if sha is not None else git_sha()
        self.records: List[Dict[str, object]] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record: Dict[str, object] = {"epoch": int(epoch)}
        record.update({name: float(value) for name, value in metrics.items()})
        record["seed"] = self.seed
        record["sha"] = self.sha
        self.records.append(record)
        if self.path is not None:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch

    @property
    def errors(self) -> List[float]:
        return [float(record["error"]) for record in self.records]  # type: ignore[arg-type]

    @classmethod
    def read(cls, path: str | Path) -> "EpochLog":
        """Load a log previously written to ``path`` without truncating it."""

        log = cls.__new__(cls)
        log.path = Path(path)
        log.seed = None
        log.sha = None
        log.records = [
            json.loads(line) for line in log.path.read_text().splitlines() if line.strip()
        ]
        if log.records:
            log.seed = log.records[0].get("seed")  # type: ignore[assignment]
            log.sha = log.records[0].get("sha")  # type: ignore[assignment]
        return log


__all__ = ["EpochLog"]
