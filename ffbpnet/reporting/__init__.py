"""Reporting utilities for ffbpnet."""

from .artifacts import write_manifest
from .metrics import EpochLog
from .plots import PlotAdapter
from .summary import summarize, write_summary

__all__ = ["EpochLog", "PlotAdapter", "summarize", "write_manifest", "write_summary"]
