"""Evaluation: metrics, export, presets, plots."""

from eval.metrics import (
    GroupMetrics,
    RunMetrics,
    group_metrics,
    summarize,
)

__all__ = [
    "GroupMetrics",
    "RunMetrics",
    "group_metrics",
    "summarize",
]
