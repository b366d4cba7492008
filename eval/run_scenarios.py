"""Load scenario files and run them."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from scenarios.models import parse_scenario
from sim.config import Configuration, SampleSet
from sim.runner import SimulationResult, simulate

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


def _default_scenario() -> tuple[Configuration, SampleSet]:
    from presets.definitions import get_preset_by_name

    preset = get_preset_by_name("multi_server_vip")
    return preset["config"], preset["samples"]


def load_raw(config_path: str | Path) -> dict[str, Any]:
    """Read a scenario mapping from YAML (or JSON, by suffix)."""
    path = Path(config_path)
    with open(path) as f:
        if path.suffix.lower() == ".json":
            return json.load(f) or {}
        return yaml.safe_load(f) or {}


def load_config(config_path: str | Path | None = None) -> tuple[Configuration, SampleSet]:
    """Load a scenario file into (Configuration, SampleSet); default preset if the file is missing."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    path = Path(config_path)
    if not path.exists():
        return _default_scenario()
    return parse_scenario(load_raw(path))


def run_scenario(
    config_path: str | Path | None = None,
    seed: int | None = None,
) -> SimulationResult:
    """Load and simulate one scenario. `seed` overrides the file's seed for internal draws."""
    config, samples = load_config(config_path)
    if seed is not None:
        config = Configuration.from_dict({**config.to_dict(), "seed": seed})
    return simulate(config, samples)


def result_summary(result: SimulationResult) -> dict[str, Any]:
    """JSON-serializable summary: configuration, metrics (raw and rounded), warnings."""
    return {
        "config": result.config.to_dict(),
        "metrics": result.metrics.to_dict(),
        "metrics_display": result.metrics.to_display_dict(),
        "served": len(result.records),
        "warnings": list(result.warnings),
    }
