"""Tabular projection of a run and its CSV export."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sim.runner import SimulationResult

# Column order is part of the output contract
EXPORT_COLUMNS = [
    "Client",
    "Class",
    "Arrival",
    "Service Duration",
    "Server",
    "Service Start",
    "Service End",
    "Wait",
]


def to_rows(result: SimulationResult) -> list[dict[str, Any]]:
    """One row per client, ordered by id, values rounded to one decimal."""
    rows = []
    for rec in result.records:
        shown = rec.rounded()
        rows.append(
            {
                "Client": rec.id,
                "Class": rec.priority_class.label,
                "Arrival": shown["arrival"],
                "Service Duration": shown["service"],
                "Server": rec.server_id,
                "Service Start": shown["start"],
                "Service End": shown["end"],
                "Wait": shown["wait"],
            }
        )
    return rows


def write_results_csv(result: SimulationResult, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="") as f:
        w = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS)
        w.writeheader()
        w.writerows(to_rows(result))
    return path


def read_results_csv(path: str | Path) -> list[dict[str, Any]]:
    """Read an exported table back, restoring numeric types."""
    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    for row in rows:
        for col in ("Client", "Server"):
            row[col] = int(row[col])
        for col in ("Arrival", "Service Duration", "Service Start", "Service End", "Wait"):
            row[col] = float(row[col])
    return rows
