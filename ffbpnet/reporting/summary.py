"""Reduce an epoch log to the figures that describe a training run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Sequence

import numpy as np

from .metrics import EpochLog

_RESERVED = {"epoch", "error", "seed", "sha"}


def moving_average(values: Sequence[float], window: int) -> np.ndarray:
    """Trailing mean of ``values`` over ``window`` consecutive entries.

    Returns ``len(values) - window + 1`` points, or an empty array when there
    are fewer values than ``window``.
    """

    if window <= 0:
        raise ValueError("window must be positive")
    arr = np.asarray(values, dtype=np.float64)
    if arr.size < window:
        return arr[:0]
    kernel = np.ones(window, dtype=np.float64) / window
    return np.convolve(arr, kernel, mode="valid")


def summarize(log: EpochLog, *, window: int = 100) -> Dict[str, object]:
    """Describe how the RMS error of a run evolved.

    The smoothed start and end values are the first and last points of the
    ``window``-epoch moving average; runs shorter than ``window`` are
    smoothed over their full length instead.
    """

    errors = log.errors
    if not errors:
        return {"epochs": 0}

    best = int(np.argmin(errors))
    smoothed = moving_average(errors, min(window, len(errors)))
    summary: Dict[str, object] = {
        "epochs": len(errors),
        "first_error": errors[0],
        "final_error": errors[-1],
        "best_error": errors[best],
        "best_epoch": int(log.records[best]["epoch"]),  # type: ignore[arg-type]
        "window": min(window, len(errors)),
        "smoothed_start": float(smoothed[0]),
        "smoothed_end": float(smoothed[-1]),
        "improved": bool(smoothed[-1] < smoothed[0]),
    }
    # evaluation metrics only appear on evaluated epochs
    for record in reversed(log.records):
        extra = {k: v for k, v in record.items() if k not in _RESERVED}
        if extra:
            summary["final_metrics"] = extra
            break
    return summary


def write_summary(log: EpochLog, path: str | Path, *, window: int = 100) -> str:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summarize(log, window=window), sort_keys=True, indent=2))
    return str(path)


__all__ = ["moving_average", "summarize", "write_summary"]
