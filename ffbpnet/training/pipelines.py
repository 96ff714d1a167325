"""Pipeline assembly for ffbpnet training runs."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping

from ..core import persistence
from ..core.network import Network
from ..core.types import NetworkConfig, RunResult
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import EpochLog
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .datasets import get_dataset
from .metrics import DEFAULT_METRICS
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {}},
        "network": {"hidden_count": 3, "learn_rate": 0.7, "momentum": 0.9},
        "train": {
            "epochs": 5000,
            "seed": 42,
            "target_error": 0.1,
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "and": {
        "data": {"name": "and", "options": {}},
        "network": {"hidden_count": 2, "learn_rate": 0.5, "momentum": 0.7},
        "train": {
            "epochs": 1000,
            "seed": 7,
            "target_error": 0.05,
            "run_dir": "runs/and",
            "enable_plots": False,
        },
    },
    "or-shuffled": {
        "data": {"name": "or", "options": {}},
        "network": {"hidden_count": 2, "learn_rate": 0.5, "momentum": 0.7},
        "train": {
            "epochs": 1000,
            "seed": 11,
            "shuffle": True,
            "run_dir": "runs/or-shuffled",
            "enable_plots": False,
        },
    },
}

_REQUIRED_SECTIONS = {"data", "network", "train"}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def load_config(path: str | Path) -> Mapping[str, object]:
    """Read a run config from a JSON or YAML file."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load config files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def merge_config(base: Mapping[str, object], override: Mapping[str, object]) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)  # type: ignore[arg-type]
        else:
            merged[key] = value
    return merged


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")

    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    network_cfg = dict(config["network"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))

    seed = _int_option(train_cfg, "seed", 0)
    network_cfg.setdefault("input_count", dataset.input_count)
    network_cfg.setdefault("output_count", dataset.output_count)
    network_cfg.setdefault("seed", seed)
    net_config = NetworkConfig.from_mapping(network_cfg)
    if net_config.input_count != dataset.input_count:
        raise ValueError(
            f"Configured input_count={net_config.input_count} but dataset has "
            f"{dataset.input_count}"
        )
    if net_config.output_count != dataset.output_count:
        raise ValueError(
            f"Configured output_count={net_config.output_count} but dataset has "
            f"{dataset.output_count}"
        )

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    epochs = _int_option(train_cfg, "epochs", 1000)
    target_error = train_cfg.get("target_error")
    metric_names = train_cfg.get("metrics", DEFAULT_METRICS)
    if isinstance(metric_names, str):
        metric_names = [m.strip() for m in metric_names.split(",") if m.strip()]

    network = Network(net_config)
    if train_cfg.get("verbose", False):
        _print_startup_summary(
            dataset_name=dataset.name,
            network=network,
            epochs=epochs,
            target_error=target_error,
        )

    log = EpochLog(run_dir / "metrics.jsonl", seed=seed)
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    trainer = Trainer(network, callbacks=[log, plots])
    history = trainer.run(
        dataset,
        epochs,
        seed=seed,
        shuffle=bool(train_cfg.get("shuffle", False)),
        target_error=float(target_error) if target_error is not None else None,
        metric_names=list(metric_names),
        eval_every=_int_option(train_cfg, "eval_every", 1),
        checkpoint_dir=run_dir / "checkpoints",
        checkpoint_every=_int_option(train_cfg, "checkpoint_every", 0),
    )
    plots.close()

    safe_config = json.loads(json.dumps(config))
    safe_config["network"] = net_config.to_dict()
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        network={
            "neuron_count": network.neuron_count,
            "weight_count": network.weight_count,
            "epochs_run": history.epochs,
            "stopped_early": history.stopped_early,
        },
    )
    summary_path = write_summary(
        log, run_dir / "summary.json", window=_int_option(train_cfg, "summary_window", 100)
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))
    checkpoint = persistence.save(network, run_dir / "network.npz")

    return RunResult(
        epochs=history.epochs,
        final_error=history.final_error,
        metrics_path=str(log.path),
        manifest_path=manifest,
        summary_path=summary_path,
        checkpoint_path=checkpoint,
    )


def _int_option(section: Mapping[str, object], key: str, default: int) -> int:
    value = section.get(key)
    if value is None:
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"train.{key} must be an integer, got {value!r}") from exc


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    network: Network,
    epochs: int,
    target_error: object,
) -> None:
    print("=== ffbpnet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Topology      : {[network.input_count, network.hidden_count, network.output_count]}")
    print(f"Learn rate    : {network.learn_rate}")
    print(f"Momentum      : {network.momentum}")
    print(f"Epochs        : {epochs}")
    print(f"Target error  : {target_error}")
    print(f"Parameters    : {network.parameter_count}")
    print("===================")


__all__ = ["load_config", "load_preset", "merge_config", "presets", "run_pipeline"]
