"""Run configuration, raw sample set, and validation."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any

from sim.generator import fit_samples
from sim.processes import (
    DIST_EXPONENTIAL,
    DIST_NORMAL,
    DIST_UNIFORM,
    SERVICE_DISTRIBUTIONS,
    UNIFORMS_PER_SAMPLE,
)

# Sample axes, in the order they are reported
AXIS_ARRIVALS = "arrivals"
AXIS_SERVICE = "service"
AXIS_VIP = "vip"
SAMPLE_AXES = (AXIS_ARRIVALS, AXIS_SERVICE, AXIS_VIP)

_AXIS_LABEL = {AXIS_ARRIVALS: "arrival", AXIS_SERVICE: "service", AXIS_VIP: "vip"}


@dataclass(frozen=True)
class Configuration:
    """Immutable run configuration. Defaults match the multi-server VIP setup."""

    client_count: int = 20
    server_count: int = 2
    # Arrivals: exponential inter-arrival samples, or a fixed interval
    use_sampled_arrivals: bool = True
    arrival_mean: float = 2.0
    fixed_arrival_interval: float = 2.0
    fixed_initial_arrival: float = 2.0
    # Service: sampled from service_distribution, or a fixed duration
    use_sampled_service: bool = True
    service_distribution: str = DIST_NORMAL
    service_mean: float = 10.0
    service_stddev: float = 2.0
    service_min: float = 2.0
    service_max: float = 6.0
    fixed_service_duration: float = 10.0
    # Priority
    use_vip: bool = True
    vip_fraction: float = 0.2
    seed: int | None = None  # only used when samples are drawn internally

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Configuration:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in d.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SampleSet:
    """Raw uniform(0, 1) samples per axis. None means "draw internally"."""

    arrivals: tuple[float, ...] | None = None
    service: tuple[float, ...] | None = None
    vip: tuple[float, ...] | None = None

    @classmethod
    def of(
        cls,
        arrivals: list[float] | tuple[float, ...] | None = None,
        service: list[float] | tuple[float, ...] | None = None,
        vip: list[float] | tuple[float, ...] | None = None,
    ) -> SampleSet:
        return cls(
            arrivals=None if arrivals is None else tuple(arrivals),
            service=None if service is None else tuple(service),
            vip=None if vip is None else tuple(vip),
        )

    def get(self, axis: str) -> tuple[float, ...] | None:
        return getattr(self, axis)

    def to_dict(self) -> dict[str, list[float] | None]:
        return {axis: None if self.get(axis) is None else list(self.get(axis)) for axis in SAMPLE_AXES}


def sample_requirements(config: Configuration) -> dict[str, int]:
    """Number of uniforms each active sampled axis needs."""
    n = config.client_count
    req: dict[str, int] = {}
    if config.use_sampled_arrivals:
        req[AXIS_ARRIVALS] = n
    if config.use_sampled_service:
        req[AXIS_SERVICE] = n * UNIFORMS_PER_SAMPLE.get(config.service_distribution, 1)
    if config.use_vip:
        req[AXIS_VIP] = n
    return req


def _client_index(axis: str, sample_index: int, config: Configuration) -> int:
    """1-based client index owning the 0-based sample index."""
    if axis == AXIS_SERVICE:
        per = UNIFORMS_PER_SAMPLE.get(config.service_distribution, 1)
        return sample_index // per + 1
    return sample_index + 1


def _check_sample(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"value {value!r} is not a number"
    if math.isnan(value):
        return "value is NaN"
    if not 0.0 < value < 1.0:
        return f"value {value} is outside (0, 1)"
    return None


def validate_samples(config: Configuration, samples: SampleSet) -> list[str]:
    """Check every sample that the run will actually use."""
    errors: list[str] = []
    for axis, length in sample_requirements(config).items():
        raw = samples.get(axis)
        if raw is None:
            continue
        used, _ = fit_samples(raw, length)
        for i, value in enumerate(used):
            problem = _check_sample(value)
            if problem:
                errors.append(
                    f"{_AXIS_LABEL[axis]} sample {i + 1} "
                    f"(client {_client_index(axis, i, config)}): {problem}"
                )
    return errors


def _is_number(value: Any) -> bool:
    """Finite int or float; NaN and infinities are rejected."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_configuration(
    config: Configuration, samples: SampleSet | None = None
) -> tuple[bool, list[str]]:
    """
    Validate configuration and samples. Returns (valid, list of error messages).
    Every violation is collected; nothing stops at the first.
    """
    errors: list[str] = []

    if not isinstance(config.client_count, int) or config.client_count < 1:
        errors.append(f"client_count must be an integer >= 1 (got {config.client_count!r})")
    if not isinstance(config.server_count, int) or config.server_count < 1:
        errors.append(f"server_count must be an integer >= 1 (got {config.server_count!r})")

    # Arrivals
    if config.use_sampled_arrivals:
        if not _is_number(config.arrival_mean) or config.arrival_mean <= 0:
            errors.append(f"arrival_mean must be > 0 (got {config.arrival_mean!r})")
    else:
        if not _is_number(config.fixed_arrival_interval) or config.fixed_arrival_interval < 0:
            errors.append(
                f"fixed_arrival_interval must be >= 0 (got {config.fixed_arrival_interval!r})"
            )
        if not _is_number(config.fixed_initial_arrival) or config.fixed_initial_arrival < 0:
            errors.append(
                f"fixed_initial_arrival must be >= 0 (got {config.fixed_initial_arrival!r})"
            )

    # Service
    if config.use_sampled_service:
        dist = config.service_distribution
        if dist not in SERVICE_DISTRIBUTIONS:
            errors.append(f"service_distribution must be one of {SERVICE_DISTRIBUTIONS} (got {dist!r})")
        if dist in (DIST_NORMAL, DIST_EXPONENTIAL):
            if not _is_number(config.service_mean) or config.service_mean <= 0:
                errors.append(f"service_mean must be > 0 (got {config.service_mean!r})")
        if dist == DIST_NORMAL:
            if not _is_number(config.service_stddev) or config.service_stddev <= 0:
                errors.append(f"service_stddev must be > 0 (got {config.service_stddev!r})")
        if dist == DIST_UNIFORM:
            lo, hi = config.service_min, config.service_max
            if not _is_number(lo) or lo < 0:
                errors.append(f"service_min must be >= 0 (got {lo!r})")
            if not (_is_number(lo) and _is_number(hi)) or hi <= lo:
                errors.append(f"service_max must be > service_min (got min={lo!r}, max={hi!r})")
    else:
        if not _is_number(config.fixed_service_duration) or config.fixed_service_duration < 0:
            errors.append(
                f"fixed_service_duration must be >= 0 (got {config.fixed_service_duration!r})"
            )

    # Priority
    if config.use_vip:
        if not _is_number(config.vip_fraction) or not 0.0 <= config.vip_fraction <= 1.0:
            errors.append(f"vip_fraction must be in [0, 1] (got {config.vip_fraction!r})")

    # Sample sizes depend on client_count; skip them when it is unusable
    if samples is not None and isinstance(config.client_count, int) and config.client_count >= 1:
        errors.extend(validate_samples(config, samples))

    return len(errors) == 0, errors


def describe(config: Configuration) -> str:
    """One-line summary used in logs and reports."""
    arrivals = (
        f"exp(mean={config.arrival_mean})"
        if config.use_sampled_arrivals
        else f"fixed(first={config.fixed_initial_arrival}, every={config.fixed_arrival_interval})"
    )
    if not config.use_sampled_service:
        service = f"fixed({config.fixed_service_duration})"
    elif config.service_distribution == DIST_UNIFORM:
        service = f"uniform({config.service_min}, {config.service_max})"
    elif config.service_distribution == DIST_NORMAL:
        service = f"normal({config.service_mean}, {config.service_stddev})"
    else:
        service = f"exp(mean={config.service_mean})"
    vip = f"vip={config.vip_fraction:.0%}" if config.use_vip else "fifo"
    return (
        f"n={config.client_count} servers={config.server_count} "
        f"arrivals={arrivals} service={service} {vip}"
    )
