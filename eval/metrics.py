"""Performance metrics: wait, satisfaction, zero-wait counts, span and utilization."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

if TYPE_CHECKING:
    from sim.entities import ServedRecord

# Waits below this count as "no wait" (floating-point accumulation)
ZERO_WAIT_TOLERANCE = 1e-6


@dataclass(frozen=True)
class GroupMetrics:
    count: int = 0
    mean_wait: float = 0.0
    mean_satisfaction_pct: float = 0.0
    zero_wait_count: int = 0

    def to_display_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "mean_wait": round(self.mean_wait, 2),
            "mean_satisfaction_pct": int(round(self.mean_satisfaction_pct)),
            "zero_wait_count": self.zero_wait_count,
        }


@dataclass(frozen=True)
class RunMetrics:
    overall: GroupMetrics
    total_span: float
    utilization_pct: float
    vip: GroupMetrics | None = None  # only when split by class
    regular: GroupMetrics | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_display_dict(self) -> dict[str, Any]:
        """Reporting rounding: waits to 2 decimals, percentages to integers."""
        out: dict[str, Any] = {
            "general": self.overall.to_display_dict(),
            "utilization_pct": int(round(self.utilization_pct)),
            "total_span": round(self.total_span, 2),
        }
        if self.vip is not None:
            out["vip"] = self.vip.to_display_dict()
        if self.regular is not None:
            out["regular"] = self.regular.to_display_dict()
        return out


def group_metrics(records: Sequence[ServedRecord]) -> GroupMetrics:
    """Reduce one group of served records. An empty group reports zeros."""
    if not records:
        return GroupMetrics()
    waits = np.array([r.wait_time for r in records], dtype=float)
    satisfaction = np.array([r.satisfaction for r in records], dtype=float)
    return GroupMetrics(
        count=len(records),
        mean_wait=float(np.mean(waits)),
        mean_satisfaction_pct=float(np.mean(satisfaction) * 100.0),
        zero_wait_count=int(np.sum(waits < ZERO_WAIT_TOLERANCE)),
    )


def total_span(records: Sequence[ServedRecord]) -> float:
    """Latest moment any server is busy until (the last service end)."""
    return max((r.service_end for r in records), default=0.0)


def utilization_pct(records: Sequence[ServedRecord], server_count: int) -> float:
    span = total_span(records)
    if span <= 0 or server_count <= 0:
        return 0.0
    busy = float(np.sum([r.service_duration for r in records]))
    return busy / (server_count * span) * 100.0


def summarize(
    records: Sequence[ServedRecord],
    server_count: int,
    split_by_class: bool = False,
) -> RunMetrics:
    """Pure reduction over served records; safe to recompute."""
    vip = regular = None
    if split_by_class:
        vip = group_metrics([r for r in records if r.is_vip])
        regular = group_metrics([r for r in records if not r.is_vip])
    return RunMetrics(
        overall=group_metrics(records),
        total_span=total_span(records),
        utilization_pct=utilization_pct(records, server_count),
        vip=vip,
        regular=regular,
    )
