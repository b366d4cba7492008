"""Three preset configurations of the one engine (the former UI variants)."""

from typing import Any

from sim.config import Configuration, SampleSet, validate_configuration
from sim.processes import DIST_NORMAL, DIST_UNIFORM

# 1. Fixed five-client, single-attraction walkthrough with hand-picked samples.
# Exponential arrivals (mean 7) and uniform(2, 6) ride times.
PRESET_1: dict[str, Any] = {
    "config": Configuration(
        client_count=5,
        server_count=1,
        use_sampled_arrivals=True,
        arrival_mean=7.0,
        use_sampled_service=True,
        service_distribution=DIST_UNIFORM,
        service_min=2.0,
        service_max=6.0,
        use_vip=False,
    ),
    "samples": SampleSet.of(
        arrivals=[0.8, 0.3, 0.6, 0.1, 0.9],
        service=[0.5, 0.7, 0.2, 0.9, 0.4],
    ),
}

# 2. Configurable single attraction, one FIFO queue, normal ride times.
# Samples are drawn internally from a fixed seed.
PRESET_2: dict[str, Any] = {
    "config": Configuration(
        client_count=20,
        server_count=1,
        use_sampled_arrivals=True,
        arrival_mean=12.0,
        use_sampled_service=True,
        service_distribution=DIST_NORMAL,
        service_mean=10.0,
        service_stddev=2.0,
        use_vip=False,
        seed=7,
    ),
    "samples": SampleSet(),
}

# 3. Several attractions in parallel with a VIP pass (20% of clients).
PRESET_3: dict[str, Any] = {
    "config": Configuration(
        client_count=20,
        server_count=2,
        use_sampled_arrivals=True,
        arrival_mean=2.0,
        use_sampled_service=True,
        service_distribution=DIST_NORMAL,
        service_mean=10.0,
        service_stddev=2.0,
        use_vip=True,
        vip_fraction=0.2,
        seed=11,
    ),
    "samples": SampleSet(),
}

PRESETS: list[dict[str, Any]] = [PRESET_1, PRESET_2, PRESET_3]

# Validate all presets
for i, preset in enumerate(PRESETS):
    valid, errors = validate_configuration(preset["config"], preset["samples"])
    if not valid:
        raise ValueError(f"Preset {i} invalid: {errors}")

PRESET_NAMES = [
    "demo_five_clients",
    "single_server_fifo",
    "multi_server_vip",
]


def get_preset(index: int) -> dict[str, Any]:
    """Return preset by index (0..2)."""
    if 0 <= index < len(PRESETS):
        return PRESETS[index]
    return PRESETS[0]


def get_preset_name(index: int) -> str:
    if 0 <= index < len(PRESET_NAMES):
        return PRESET_NAMES[index]
    return f"preset_{index}"


def get_preset_by_name(name: str) -> dict[str, Any]:
    if name not in PRESET_NAMES:
        raise KeyError(f"unknown preset {name!r}; choose from {PRESET_NAMES}")
    return PRESETS[PRESET_NAMES.index(name)]
