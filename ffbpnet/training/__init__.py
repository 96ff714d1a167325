"""Training loops, datasets and run pipelines."""

from .datasets import Dataset, available_datasets, get_dataset
from .pipelines import load_config, load_preset, merge_config, presets, run_pipeline
from .trainer import Trainer

__all__ = [
    "Dataset",
    "Trainer",
    "available_datasets",
    "get_dataset",
    "load_config",
    "load_preset",
    "merge_config",
    "presets",
    "run_pipeline",
]
